"""Comment Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from quillpress.db.time import ensure_utc


class CommentCreate(BaseModel):
    """Schema for adding a comment to a post."""

    content: str = Field("", max_length=5000)


class CommentAuthor(BaseModel):
    """Minimal author information embedded in comments."""

    id: int
    username: str

    model_config = ConfigDict(from_attributes=True)


class CommentResponse(BaseModel):
    """Schema for comments returned by the API."""

    id: int
    content: str
    post_id: int
    author: CommentAuthor
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return ensure_utc(value).isoformat()
