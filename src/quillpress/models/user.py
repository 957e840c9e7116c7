"""SQLAlchemy models for accounts and the follow graph."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quillpress.db.session import Base

if TYPE_CHECKING:
    from .post import Post

# One row per directed edge. Both `followers` and `following` are views of the
# same row, so the two sides of an edge cannot disagree.
follow_table = Table(
    "follow",
    Base.metadata,
    Column(
        "follower_id",
        Integer,
        ForeignKey("account.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "followee_id",
        Integer,
        ForeignKey("account.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    CheckConstraint("follower_id <> followee_id", name="ck_follow_not_self"),
)


class Account(Base):
    """Registered author or reader."""

    __tablename__ = "account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    # Always a bcrypt hash once flushed through the credential store.
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    following: Mapped[list[Account]] = relationship(
        "Account",
        secondary=follow_table,
        primaryjoin=lambda: Account.id == follow_table.c.follower_id,
        secondaryjoin=lambda: Account.id == follow_table.c.followee_id,
        back_populates="followers",
        order_by=lambda: Account.id,
    )
    followers: Mapped[list[Account]] = relationship(
        "Account",
        secondary=follow_table,
        primaryjoin=lambda: Account.id == follow_table.c.followee_id,
        secondaryjoin=lambda: Account.id == follow_table.c.follower_id,
        back_populates="following",
        order_by=lambda: Account.id,
    )

    posts: Mapped[list[Post]] = relationship("Post", back_populates="owner")

    @property
    def follower_ids(self) -> list[int]:
        """Return the ids of accounts following this one."""
        return [account.id for account in self.followers]

    @property
    def following_ids(self) -> list[int]:
        """Return the ids of accounts this one follows."""
        return [account.id for account in self.following]

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, username='{self.username}')>"
