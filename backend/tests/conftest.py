import json
import logging
import os
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

# Set test environment variables
os.environ.update(
    {
        "SEOBEAST_WEBHOOK_SECRET": "whsec_test",
        "SEOBEAST_API_URL": "http://cms.test/",
        "SEOBEAST_WEBSITE_SLUG": "demo",
        "ALLOWED_ORIGINS": "http://localhost:3000",
    }
)

# Import app modules after setting environment variables
from app.core.config import Settings, get_settings
from app.main import create_app
from app.services.signature import SIGNATURE_HEADER, compute_signature

logger = logging.getLogger(__name__)

CMS_URL = "http://cms.test"
WEBHOOK_SECRET = "whsec_test"


@pytest.fixture
def settings() -> Settings:
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        logger.info("Test client created")
        yield test_client
    logger.info("Test client closed")


@pytest.fixture
def page_cache(app):
    return app.state.page_cache


def make_body(event: str = "post.updated", **data) -> bytes:
    payload = {
        "event": event,
        "timestamp": "2024-01-01T00:00:00Z",
        "data": {
            "postId": "42",
            "slug": "hello-world",
            "websiteSlug": "demo",
            "status": "published",
            **data,
        },
    }
    return json.dumps(payload).encode()


def signed_headers(body: bytes, secret: str = WEBHOOK_SECRET) -> dict[str, str]:
    return {
        SIGNATURE_HEADER: compute_signature(body, secret),
        "Content-Type": "application/json",
    }


def post_json(slug: str = "hello-world", title: str = "Hello World") -> dict:
    return {
        "id": "p1",
        "slug": slug,
        "title": title,
        "content": "<p>Hi</p>",
        "excerpt": "Hi",
        "status": "published",
        "publishedAt": "2024-01-01T00:00:00Z",
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-01-01T00:00:00Z",
        "author": {"name": "Ada"},
        "categories": [{"id": "c1", "name": "News", "slug": "news"}],
        "tags": [],
    }


def posts_json(*posts: dict) -> dict:
    return {
        "posts": list(posts),
        "total": len(posts),
        "page": 1,
        "limit": 10,
        "hasMore": False,
    }
