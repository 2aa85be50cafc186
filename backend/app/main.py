import logging
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, TypeVar
from urllib.parse import urlencode

import httpx
from app.clients.seobeast import SEOBeastAPIError, SEOBeastClient
from app.core.config import Settings, get_settings
from app.middleware.body_size import BodySizeLimitMiddleware
from app.middleware.security_headers import SecurityHeadersMiddleware
from app.schemas.content import Category, Post, Tag
from app.services import webhook
from app.services.signature import SIGNATURE_HEADER
from app.storage.page_cache import PageCache
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware

logger = logging.getLogger(__name__)

T = TypeVar("T")

router = APIRouter()


# ---------- dependencies ----------
def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_page_cache(request: Request) -> PageCache:
    return request.app.state.page_cache


def get_seobeast_client(request: Request) -> SEOBeastClient:
    return request.app.state.seobeast


async def _load(
    cache: PageCache,
    path: str,
    loader: Callable[[], Awaitable[T]],
    not_found: str = "Not Found",
) -> T:
    try:
        return await cache.get_or_load(path, loader)
    except SEOBeastAPIError as e:
        if e.status_code == status.HTTP_404_NOT_FOUND:
            raise HTTPException(status_code=404, detail=not_found)
        logger.error(f"Failed to load {path}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Upstream content API error",
        )
    except httpx.HTTPError as e:
        logger.error(f"Failed to reach content API for {path}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Upstream content API error",
        )


@router.get("/health", include_in_schema=False)
async def health(settings: Settings = Depends(get_app_settings)):
    return {
        "status": "ok",
        "settings": {
            "seobeast_api_url": settings.seobeast_api_url,
            "seobeast_website_slug": settings.seobeast_website_slug,
            "webhook_configured": settings.webhook_configured,
        },
    }


# ---------- webhook ----------
@router.post("/api/webhook")
async def receive_webhook(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    cache: PageCache = Depends(get_page_cache),
):
    sig = request.headers.get(SIGNATURE_HEADER)
    raw = await request.body()

    try:
        payload = webhook.ingest(raw, sig, settings.seobeast_webhook_secret)
    except webhook.WebhookConfigurationError:
        logger.error("SEOBEAST_WEBHOOK_SECRET is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Webhook not configured",
        )
    except webhook.WebhookAuthenticationError as e:
        if sig:
            logger.warning("Invalid signature received")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except webhook.WebhookPayloadError:
        raise HTTPException(status_code=400, detail="Invalid payload")

    logger.info(f"Received event: {payload.event} for post: {payload.data.slug}")
    webhook.handle_event(payload, cache)

    return {"success": True}


@router.get("/api/webhook")
async def webhook_status():
    return {"message": "SEOBeast webhook endpoint", "status": "active"}


# ---------- content ----------
@router.get("/blog")
async def list_posts(
    page: int | None = Query(None, ge=1),
    limit: int | None = Query(None, ge=1, le=100),
    category: str | None = None,
    tag: str | None = None,
    settings: Settings = Depends(get_app_settings),
    cache: PageCache = Depends(get_page_cache),
    client: SEOBeastClient = Depends(get_seobeast_client),
):
    if limit == settings.posts_page_size:
        limit = None
    key_params = {
        k: v
        for k, v in (("page", page), ("limit", limit), ("category", category), ("tag", tag))
        if v
    }
    path = webhook.BLOG_LISTING_PATH
    if key_params:
        path = f"{path}?{urlencode(key_params)}"

    params = {**key_params, "limit": limit or settings.posts_page_size}
    posts = await _load(cache, path, lambda: client.get_posts(**params))
    return {**posts.model_dump(mode="json", by_alias=True), "feedUrl": client.feed_url()}


@router.get("/categories", response_model=list[Category])
async def list_categories(
    cache: PageCache = Depends(get_page_cache),
    client: SEOBeastClient = Depends(get_seobeast_client),
):
    return await _load(cache, "/categories", client.get_categories)


@router.get("/tags", response_model=list[Tag])
async def list_tags(
    cache: PageCache = Depends(get_page_cache),
    client: SEOBeastClient = Depends(get_seobeast_client),
):
    return await _load(cache, "/tags", client.get_tags)


@router.get("/blog/{slug}", response_model=Post)
async def get_post(
    slug: str,
    cache: PageCache = Depends(get_page_cache),
    client: SEOBeastClient = Depends(get_seobeast_client),
):
    return await _load(
        cache,
        webhook.post_path(slug),
        lambda: client.get_post_by_slug(slug),
        not_found="Post not found",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.seobeast.aclose()

    app = FastAPI(
        title="SEOBeast Blog Service",
        description="Serves SEOBeast blog content and revalidates it on webhooks",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.page_cache = PageCache(
        ttl=settings.cache_ttl_seconds, max_entries=settings.cache_max_entries
    )
    app.state.seobeast = SEOBeastClient.from_settings(settings)

    app.add_middleware(BodySizeLimitMiddleware, max_body_size=settings.max_body_size)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins.split(","),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    app.include_router(router)
    return app


app = create_app()
