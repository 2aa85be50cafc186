import logging
from enum import Enum

from app.schemas.webhook import WebhookEvent, WebhookPayload
from app.services import signature
from app.storage.page_cache import PageCache
from pydantic import ValidationError

logger = logging.getLogger(__name__)

BLOG_LISTING_PATH = "/blog"

UPDATE_EVENTS = frozenset(
    e.value
    for e in (
        WebhookEvent.POST_CREATED,
        WebhookEvent.POST_UPDATED,
        WebhookEvent.POST_PUBLISHED,
    )
)
REMOVAL_EVENTS = frozenset(
    e.value for e in (WebhookEvent.POST_DELETED, WebhookEvent.POST_UNPUBLISHED)
)


class WebhookError(Exception):
    pass


class WebhookConfigurationError(WebhookError):
    pass


class WebhookAuthenticationError(WebhookError):
    pass


class WebhookPayloadError(WebhookError):
    pass


class EventKind(str, Enum):
    UPDATE = "update"
    REMOVAL = "removal"
    UNKNOWN = "unknown"


def parse_payload(raw: bytes | str) -> WebhookPayload | None:
    """
    Parse and validate a webhook body.

    Returns None when the body is not JSON or lacks a required field.
    """
    try:
        return WebhookPayload.model_validate_json(raw)
    except ValidationError as ve:
        logger.debug(f"Rejected webhook payload: {ve.error_count()} errors")
        return None


def classify(event: str | WebhookEvent) -> EventKind:
    if isinstance(event, WebhookEvent):
        event = event.value
    if event in UPDATE_EVENTS:
        return EventKind.UPDATE
    if event in REMOVAL_EVENTS:
        return EventKind.REMOVAL
    return EventKind.UNKNOWN


def is_content_update_event(event: str) -> bool:
    return classify(event) is EventKind.UPDATE


def is_content_removal_event(event: str) -> bool:
    return classify(event) is EventKind.REMOVAL


def post_path(slug: str) -> str:
    return f"{BLOG_LISTING_PATH}/{slug}"


def paths_to_revalidate(payload: WebhookPayload) -> list[str]:
    kind = classify(payload.event)
    if kind is EventKind.UPDATE:
        return [post_path(payload.data.slug), BLOG_LISTING_PATH]
    if kind is EventKind.REMOVAL:
        # The post page itself goes stale on its own; only the listing changes.
        return [BLOG_LISTING_PATH]
    return []


def ingest(raw: bytes, sig: str | None, secret: str | None) -> WebhookPayload:
    """
    Authenticate and parse an inbound webhook.

    Raises WebhookConfigurationError, WebhookAuthenticationError or
    WebhookPayloadError. The body is only parsed once the signature checks out.
    """
    if not secret:
        raise WebhookConfigurationError("Webhook not configured")

    if not sig:
        raise WebhookAuthenticationError("Missing signature")

    if not signature.verify(raw, sig, secret):
        raise WebhookAuthenticationError("Invalid signature")

    payload = parse_payload(raw)
    if payload is None:
        raise WebhookPayloadError("Invalid payload")
    return payload


def handle_event(payload: WebhookPayload, cache: PageCache) -> list[str]:
    paths = paths_to_revalidate(payload)
    for path in paths:
        cache.revalidate(path)

    kind = classify(payload.event)
    if kind is EventKind.UPDATE:
        logger.info(f"Revalidated paths for: {payload.data.slug}")
    elif kind is EventKind.REMOVAL:
        logger.info(f"Revalidated blog listing after removal: {payload.data.slug}")
    else:
        logger.info(f"No cache action for event: {payload.event}")
    return paths
