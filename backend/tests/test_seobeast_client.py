import httpx
import pytest
from app.clients.seobeast import USER_AGENT, SEOBeastAPIError, SEOBeastClient
from app.core.config import Settings

from conftest import CMS_URL, post_json, posts_json

BASE = f"{CMS_URL}/public/v1/demo"


@pytest.fixture
async def cms():
    async with SEOBeastClient(f"{CMS_URL}/", "demo") as client:
        yield client


def test_base_url_trailing_slash_stripped():
    client = SEOBeastClient("http://cms.test/", "demo")
    assert client.base_url == "http://cms.test"
    assert client.feed_url() == "http://cms.test/public/v1/demo/feed"


async def test_get_posts(cms, respx_mock):
    route = respx_mock.get(f"{BASE}/posts").mock(
        return_value=httpx.Response(200, json=posts_json(post_json()))
    )

    result = await cms.get_posts()

    assert route.called
    request = route.calls.last.request
    assert request.url.query == b""
    assert request.headers["User-Agent"] == USER_AGENT
    assert request.headers["Content-Type"] == "application/json"
    assert result.total == 1
    assert result.has_more is False
    assert result.posts[0].slug == "hello-world"
    assert result.posts[0].author.name == "Ada"
    assert result.posts[0].categories[0].slug == "news"


async def test_get_posts_passes_only_set_filters(cms, respx_mock):
    route = respx_mock.get(f"{BASE}/posts").mock(
        return_value=httpx.Response(200, json=posts_json())
    )

    await cms.get_posts(page=2, limit=5, tag="python")

    params = route.calls.last.request.url.params
    assert dict(params) == {"page": "2", "limit": "5", "tag": "python"}


async def test_get_post_by_slug(cms, respx_mock):
    respx_mock.get(f"{BASE}/posts/hello-world").mock(
        return_value=httpx.Response(200, json=post_json())
    )

    post = await cms.get_post_by_slug("hello-world")

    assert post.title == "Hello World"
    assert post.status == "published"
    assert post.published_at is not None


async def test_get_categories_and_tags(cms, respx_mock):
    respx_mock.get(f"{BASE}/categories").mock(
        return_value=httpx.Response(
            200, json=[{"id": "c1", "name": "News", "slug": "news"}]
        )
    )
    respx_mock.get(f"{BASE}/tags").mock(
        return_value=httpx.Response(200, json=[{"id": "t1", "name": "Py", "slug": "py"}])
    )

    categories = await cms.get_categories()
    tags = await cms.get_tags()

    assert [c.slug for c in categories] == ["news"]
    assert categories[0].description is None
    assert [t.slug for t in tags] == ["py"]


async def test_error_status_raises(cms, respx_mock):
    respx_mock.get(f"{BASE}/posts/missing").mock(return_value=httpx.Response(404))

    with pytest.raises(SEOBeastAPIError) as exc_info:
        await cms.get_post_by_slug("missing")

    assert exc_info.value.status_code == 404
    assert str(exc_info.value) == "SEOBeast API error: 404 Not Found"


async def test_injected_http_client_is_not_closed(respx_mock):
    http = httpx.AsyncClient()
    client = SEOBeastClient(CMS_URL, "demo", http=http)
    await client.aclose()
    assert not http.is_closed
    await http.aclose()


def test_from_settings_warns_without_slug(caplog):
    settings = Settings(seobeast_website_slug="", seobeast_api_url="http://cms.test")
    with caplog.at_level("WARNING"):
        client = SEOBeastClient.from_settings(settings)
    assert client.website_slug == ""
    assert "SEOBEAST_WEBSITE_SLUG is not set" in caplog.text
