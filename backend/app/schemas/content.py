from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ContentModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class Author(ContentModel):
    name: str
    avatar: Optional[str] = None


class Category(ContentModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None


class Tag(ContentModel):
    id: str
    name: str
    slug: str


class Post(ContentModel):
    id: str
    slug: str
    title: str
    content: str
    excerpt: Optional[str] = None
    status: Literal["draft", "published", "scheduled"]
    featured_image: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    author: Optional[Author] = None
    categories: Optional[list[Category]] = None
    tags: Optional[list[Tag]] = None


class PostsResponse(ContentModel):
    posts: list[Post]
    total: int
    page: int
    limit: int
    has_more: bool
