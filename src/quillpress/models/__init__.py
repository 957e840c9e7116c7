# src/quillpress/models/__init__.py
"""SQLAlchemy models for the QuillPress application."""

from .comment import Comment
from .post import Post, PostStatus
from .reaction import REACTION_DISLIKE, REACTION_LIKE, PostReaction
from .user import Account, follow_table

__all__ = [
    "Account", "follow_table",
    "Comment",
    "Post", "PostStatus",
    "PostReaction", "REACTION_LIKE", "REACTION_DISLIKE",
]
