"""Social graph: follows, reactions and comments."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quillpress.core.errors import InvalidOperation, NotFound, ValidationFailed
from quillpress.db.time import utcnow
from quillpress.models import (
    REACTION_DISLIKE,
    REACTION_LIKE,
    Account,
    Comment,
    Post,
    PostReaction,
)
from quillpress.services.posts import parse_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FollowState:
    """Outcome of a follow toggle, seen from the actor."""

    is_following: bool
    followers: list[int]
    following: list[int]


@dataclass(frozen=True)
class ReactionState:
    """Full reaction membership of a post after a toggle."""

    likes: list[int]
    dislikes: list[int]
    is_liked: bool
    is_disliked: bool


class SocialService:
    """Follow/unfollow, like/dislike and comment operations."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _account_or_404(self, account_id: str | int) -> Account:
        account = self.db.get(Account, parse_id(account_id, detail="User not found"))
        if account is None:
            raise NotFound("User not found")
        return account

    def _post_or_404(self, post_id: str | int) -> Post:
        post = self.db.get(Post, parse_id(post_id))
        if post is None:
            raise NotFound("Post not found")
        return post

    def followers(self, account_id: str | int) -> list[Account]:
        return list(self._account_or_404(account_id).followers)

    def following(self, account_id: str | int) -> list[Account]:
        return list(self._account_or_404(account_id).following)

    def is_following(self, actor_id: int, target_id: int) -> bool:
        actor = self.db.get(Account, actor_id)
        return actor is not None and any(a.id == target_id for a in actor.following)

    def toggle_follow(self, actor_id: int, target_id: str | int) -> FollowState:
        """Follow `target_id`, or unfollow it if already followed.

        Both directions of the edge live in a single row, so followers and
        following cannot diverge. Concurrent toggles by the same actor race;
        the last write wins.
        """
        target_key = parse_id(target_id, detail="User not found")
        if target_key == actor_id:
            raise InvalidOperation("Cannot follow yourself")

        target = self._account_or_404(target_key)
        actor = self._account_or_404(actor_id)

        if target in actor.following:
            actor.following.remove(target)
            now_following = False
        else:
            actor.following.append(target)
            now_following = True

        try:
            self.db.commit()
        except IntegrityError:
            # Another request inserted the same edge first; re-read it.
            self.db.rollback()
            now_following = self.is_following(actor_id, target_key)

        self.db.refresh(actor)
        logger.info(
            "Account %s %s account %s",
            actor_id,
            "followed" if now_following else "unfollowed",
            target_key,
        )
        return FollowState(
            is_following=now_following,
            followers=actor.follower_ids,
            following=actor.following_ids,
        )

    def _toggle_reaction(self, actor_id: int, post_id: str | int, kind: int) -> ReactionState:
        post = self._post_or_404(post_id)
        existing = self.db.get(PostReaction, (post.id, actor_id))

        if existing is not None and existing.kind == kind:
            self.db.delete(existing)
        elif existing is not None:
            existing.kind = kind
        else:
            self.db.add(PostReaction(post_id=post.id, account_id=actor_id, kind=kind))

        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent toggle already stored a reaction; keep it.
            self.db.rollback()

        self.db.refresh(post)
        likes = post.likes
        dislikes = post.dislikes
        return ReactionState(
            likes=likes,
            dislikes=dislikes,
            is_liked=actor_id in likes,
            is_disliked=actor_id in dislikes,
        )

    def toggle_like(self, actor_id: int, post_id: str | int) -> ReactionState:
        """Like the post, or remove the like; liking clears a dislike."""
        return self._toggle_reaction(actor_id, post_id, REACTION_LIKE)

    def toggle_dislike(self, actor_id: int, post_id: str | int) -> ReactionState:
        """Dislike the post, or remove the dislike; disliking clears a like."""
        return self._toggle_reaction(actor_id, post_id, REACTION_DISLIKE)

    def add_comment(self, actor_id: int, post_id: str | int, content: str | None) -> Comment:
        """Attach a comment from any authenticated account to an existing post."""
        post = self._post_or_404(post_id)
        text = (content or "").strip()
        if not text:
            raise ValidationFailed("Comment content is required")

        now = utcnow()
        comment = Comment(
            content=text,
            post_id=post.id,
            author_id=actor_id,
            created_at=now,
            updated_at=now,
        )
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def list_comments(self, post_id: str | int) -> list[Comment]:
        """Return the post's comments, newest first."""
        post = self._post_or_404(post_id)
        return (
            self.db.query(Comment)
            .filter(Comment.post_id == post.id)
            .order_by(desc(Comment.created_at), desc(Comment.id))
            .all()
        )
