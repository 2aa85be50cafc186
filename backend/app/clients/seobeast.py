import logging
from typing import Any

import httpx
from app.core.config import Settings
from app.schemas.content import Category, Post, PostsResponse, Tag
from pydantic import TypeAdapter

logger = logging.getLogger(__name__)

USER_AGENT = "SEOBeast-Python-Client/1.0"

_categories = TypeAdapter(list[Category])
_tags = TypeAdapter(list[Tag])


class SEOBeastAPIError(Exception):
    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"SEOBeast API error: {status_code} {reason}".rstrip())


class SEOBeastClient:
    """Read-only client for the SEOBeast public content API."""

    def __init__(
        self,
        base_url: str,
        website_slug: str,
        http: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.website_slug = website_slug
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SEOBeastClient":
        if not settings.seobeast_website_slug:
            logger.warning("SEOBEAST_WEBSITE_SLUG is not set. API calls will fail.")
        return cls(
            settings.seobeast_api_url,
            settings.seobeast_website_slug,
            timeout=settings.http_timeout_seconds,
        )

    async def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"GET {url} params={params}")
        r = await self._http.get(
            url,
            params=params,
            headers={"Content-Type": "application/json", "User-Agent": USER_AGENT},
        )
        if not r.is_success:
            logger.warning(f"SEOBeast API returned {r.status_code} for {url}")
            raise SEOBeastAPIError(r.status_code, r.reason_phrase)
        return r.json()

    def _site_path(self, suffix: str) -> str:
        return f"/public/v1/{self.website_slug}{suffix}"

    async def get_posts(
        self,
        page: int | None = None,
        limit: int | None = None,
        category: str | None = None,
        tag: str | None = None,
    ) -> PostsResponse:
        params = {
            k: str(v)
            for k, v in (
                ("page", page),
                ("limit", limit),
                ("category", category),
                ("tag", tag),
            )
            if v
        }
        data = await self._get(self._site_path("/posts"), params or None)
        return PostsResponse.model_validate(data)

    async def get_post_by_slug(self, slug: str) -> Post:
        data = await self._get(self._site_path(f"/posts/{slug}"))
        return Post.model_validate(data)

    async def get_categories(self) -> list[Category]:
        return _categories.validate_python(
            await self._get(self._site_path("/categories"))
        )

    async def get_tags(self) -> list[Tag]:
        return _tags.validate_python(await self._get(self._site_path("/tags")))

    def feed_url(self) -> str:
        return f"{self.base_url}{self._site_path('/feed')}"

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "SEOBeastClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
