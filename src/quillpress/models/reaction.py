"""Models capturing like/dislike reactions on posts."""

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, SmallInteger
from sqlalchemy.orm import Mapped, mapped_column

from quillpress.db.session import Base

REACTION_LIKE = 1
REACTION_DISLIKE = -1


class PostReaction(Base):
    """Per-account reaction on a post.

    The composite primary key allows a single reaction per (post, account),
    which keeps the like and dislike sets disjoint.
    """

    __tablename__ = "post_reaction"
    __table_args__ = (
        CheckConstraint("kind IN (1, -1)", name="ck_post_reaction_kind"),
        Index("ix_post_reaction_post_id", "post_id"),
    )

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )

    account_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("account.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # 1 = like, -1 = dislike.
    kind: Mapped[int] = mapped_column(SmallInteger, nullable=False)
