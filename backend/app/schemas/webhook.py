from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class WebhookEvent(str, Enum):
    POST_CREATED = "post.created"
    POST_UPDATED = "post.updated"
    POST_DELETED = "post.deleted"
    POST_PUBLISHED = "post.published"
    POST_UNPUBLISHED = "post.unpublished"


class WebhookData(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True, coerce_numbers_to_str=True, frozen=True
    )

    post_id: str = Field(..., alias="postId", min_length=1)
    slug: str = Field(..., min_length=1)
    website_slug: str = Field(..., alias="websiteSlug", min_length=1)
    status: str = ""
    title: str | None = None


class WebhookPayload(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True, frozen=True)

    # Kept as a plain string so new event kinds from SEOBeast still parse.
    event: str = Field(..., min_length=1, description="Event type / name")
    timestamp: str = Field(..., min_length=1)
    data: WebhookData
