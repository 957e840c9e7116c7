"""SQLAlchemy models for blog posts."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quillpress.db.session import Base
from quillpress.db.time import utcnow

from .reaction import REACTION_DISLIKE, REACTION_LIKE

if TYPE_CHECKING:
    from .comment import Comment
    from .reaction import PostReaction
    from .user import Account


class PostStatus(str, Enum):
    """Visibility state of a post."""

    DRAFT = "draft"
    PUBLISHED = "published"


class Post(Base):
    """A blog post owned by exactly one account.

    Posts move between draft and published; only the owner may change the
    content or status. Engagement (views, reactions, comments) is open to
    any authenticated account.
    """

    __tablename__ = "post"
    __table_args__ = (
        CheckConstraint("status IN ('draft', 'published')", name="ck_post_status"),
        CheckConstraint("views >= 0", name="ck_post_views_non_negative"),
        Index("ix_post_owner_status", "owner_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    # Rich text (HTML) as produced by the editor.
    content: Mapped[str] = mapped_column(Text, nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=PostStatus.DRAFT.value,
    )

    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("account.id"),
        nullable=False,
        index=True,
    )

    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    owner: Mapped[Account] = relationship("Account", back_populates="posts")
    reactions: Mapped[list[PostReaction]] = relationship(
        "PostReaction",
        cascade="all, delete-orphan",
        order_by="PostReaction.account_id",
    )
    comments: Mapped[list[Comment]] = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
    )

    @property
    def likes(self) -> list[int]:
        """Return the ids of accounts that like this post."""
        return [r.account_id for r in self.reactions if r.kind == REACTION_LIKE]

    @property
    def dislikes(self) -> list[int]:
        """Return the ids of accounts that dislike this post."""
        return [r.account_id for r in self.reactions if r.kind == REACTION_DISLIKE]
