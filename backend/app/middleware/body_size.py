from fastapi import HTTPException
from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

MAX_BODY_SIZE = 1_048_576  # 1 MiB


class BodySizeLimitMiddleware:
    """
    Middleware to reject request bodies larger than ``max_body_size``.

    A declared Content-Length is checked up front. Bodies without one
    (chunked uploads) are counted as they are read, and the read fails with
    413 once the limit is passed.
    """

    def __init__(self, app: ASGIApp, max_body_size: int = MAX_BODY_SIZE):
        self.app = app
        self.max_body_size = max_body_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit():
            if int(content_length) > self.max_body_size:
                response = JSONResponse(
                    status_code=413, content={"detail": "Payload too large"}
                )
                await response(scope, receive, send)
                return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_size:
                    raise HTTPException(status_code=413, detail="Payload too large")
            return message

        await self.app(scope, limited_receive, send)
