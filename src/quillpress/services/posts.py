"""Post lifecycle: draft/published transitions, ownership and view counting."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import desc, update
from sqlalchemy.orm import Session

from quillpress.core.errors import Forbidden, NotFound, ValidationFailed
from quillpress.db.time import utcnow
from quillpress.models import Comment, Post, PostStatus
from quillpress.utils.markup import has_text, normalize_tags

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "content", "tags", "status", "image_url")


@dataclass
class PostView:
    """A post as returned by a single read, with its comments newest first."""

    post: Post
    comments: list[Comment]


def parse_id(raw: str | int, *, detail: str = "Post not found") -> int:
    """Turn a path identifier into an int; malformed ids read as missing."""
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    if not text.isdigit():
        raise NotFound(detail)
    return int(text)


def _coerce_status(value: Any) -> str:
    try:
        return PostStatus(value).value
    except ValueError as err:
        raise ValidationFailed("Status must be 'draft' or 'published'") from err


def _validate_body(title: str | None, content: str | None) -> None:
    if not title or not title.strip():
        raise ValidationFailed("Title and content are required")
    if not has_text(content):
        raise ValidationFailed("Title and content are required")


class PostService:
    """Create, read, update, publish, delete and list posts."""

    def __init__(self, db: Session) -> None:
        self.db = db

    @staticmethod
    def _touch(post: Post) -> None:
        post.updated_at = utcnow()

    def get_or_404(self, post_id: str | int) -> Post:
        post = self.db.get(Post, parse_id(post_id))
        if post is None:
            raise NotFound("Post not found")
        return post

    def _owned_or_raise(self, post_id: str | int, actor_id: int, verb: str) -> Post:
        post = self.get_or_404(post_id)
        if post.owner_id != actor_id:
            raise Forbidden(f"Not authorized to {verb} this post")
        return post

    def create(self, owner_id: int, data: Mapping[str, Any]) -> Post:
        """Create a post owned by `owner_id`; status defaults to draft."""
        title = data.get("title")
        content = data.get("content")
        _validate_body(title, content)

        status = _coerce_status(data.get("status") or PostStatus.DRAFT)
        post = Post(
            title=title.strip(),  # type: ignore[union-attr]
            content=content,
            tags=normalize_tags(data.get("tags")),
            image_url=data.get("image_url") or None,
            status=status,
            owner_id=owner_id,
            views=0,
        )
        now = utcnow()
        post.created_at = now
        post.updated_at = now
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)
        logger.info("Account %s created %s post %s", owner_id, status, post.id)
        return post

    def update(self, post_id: str | int, actor_id: int, changes: Mapping[str, Any]) -> Post:
        """Apply a sparse update; only the owner may change a post.

        Fields absent from `changes` are left untouched. A present
        `image_url` that is empty or None clears the image.
        """
        post = self._owned_or_raise(post_id, actor_id, "update")

        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationFailed(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        title = changes.get("title", post.title)
        content = changes.get("content", post.content)
        _validate_body(title, content)

        previous_status = post.status
        if "title" in changes:
            post.title = title.strip()
        if "content" in changes:
            post.content = content
        if "tags" in changes:
            post.tags = normalize_tags(changes["tags"])
        if "image_url" in changes:
            post.image_url = changes["image_url"] or None
        if "status" in changes and changes["status"] is not None:
            post.status = _coerce_status(changes["status"])

        self._touch(post)
        self.db.commit()
        self.db.refresh(post)

        if post.status != previous_status:
            logger.info("Post %s moved from %s to %s", post.id, previous_status, post.status)
        return post

    def publish(
        self,
        post_id: str | int,
        actor_id: int,
        changes: Mapping[str, Any] | None = None,
    ) -> Post:
        """Update and set the status to published; idempotent for published posts."""
        merged = dict(changes or {})
        merged["status"] = PostStatus.PUBLISHED
        return self.update(post_id, actor_id, merged)

    def delete(self, post_id: str | int, actor_id: int) -> None:
        """Remove a post together with its comments and reactions."""
        post = self._owned_or_raise(post_id, actor_id, "delete")
        self.db.delete(post)
        self.db.commit()
        logger.info("Account %s deleted post %s", actor_id, post_id)

    def read(self, post_id: str | int) -> PostView:
        """Return a post with its comments and count the view.

        Every read increments the counter by one, regardless of who reads.
        """
        pid = parse_id(post_id)
        result = self.db.execute(
            update(Post).where(Post.id == pid).values(views=Post.views + 1)
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise NotFound("Post not found")
        self.db.commit()

        post = self.get_or_404(pid)
        self.db.refresh(post)
        comments = (
            self.db.query(Comment)
            .filter(Comment.post_id == pid)
            .order_by(desc(Comment.created_at), desc(Comment.id))
            .all()
        )
        return PostView(post=post, comments=comments)

    def list_posts(
        self,
        *,
        status: PostStatus | str | None = None,
        owner_id: int | None = None,
    ) -> list[Post]:
        """List posts newest first; no filter means every post."""
        query = self.db.query(Post)
        if status is not None:
            query = query.filter(Post.status == _coerce_status(status))
        if owner_id is not None:
            query = query.filter(Post.owner_id == owner_id)
        return query.order_by(desc(Post.created_at), desc(Post.id)).all()

    def recent_published(self, owner_id: int, limit: int) -> list[Post]:
        """Return the owner's latest published posts."""
        return (
            self.db.query(Post)
            .filter(Post.owner_id == owner_id, Post.status == PostStatus.PUBLISHED.value)
            .order_by(desc(Post.created_at), desc(Post.id))
            .limit(limit)
            .all()
        )
