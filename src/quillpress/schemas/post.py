"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from quillpress.db.time import ensure_utc
from quillpress.models.post import PostStatus

from .comment import CommentResponse


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field("", max_length=300)
    content: str = Field("", description="Rich-text (HTML) body")
    tags: list[str] = Field(default_factory=list)
    status: PostStatus = PostStatus.DRAFT
    image_url: str | None = None


class PostUpdate(BaseModel):
    """Sparse update; fields that are not sent are left untouched."""

    title: str | None = Field(None, max_length=300)
    content: str | None = None
    tags: list[str] | None = None
    status: PostStatus | None = None
    image_url: str | None = None


class PostOwner(BaseModel):
    """Minimal owner information embedded in post payloads."""

    id: int
    username: str

    model_config = ConfigDict(from_attributes=True)


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    title: str
    content: str
    tags: list[str]
    image_url: str | None
    status: PostStatus
    owner: PostOwner
    views: int
    likes: list[int]
    dislikes: list[int]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return ensure_utc(value).isoformat()


class PostDetail(PostResponse):
    """A single post together with its comments, newest first."""

    comments: list[CommentResponse] = Field(default_factory=list)


class ReactionResponse(BaseModel):
    """Membership of both reaction sets after a toggle."""

    likes: list[int]
    dislikes: list[int]
    is_liked: bool
    is_disliked: bool
