"""
Twitter Clone Backend - User and Follower Models
=================================================

What:  ORM models for the `user` and `follower` tables.
Who:   Used by UserService (registration, login, follow lists) and by
       TweetService to scope queries to the caller's follow graph.

Table names and column names match the v1 SQLite database
(`twitterClone.db`) so an existing file can be served as-is.
"""

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from twitter_clone.database import Base


class User(Base):
    """
    A registered account.

    Lifecycle:
        Created by POST /register/. Never updated or deleted by this service.

    `password` holds the bcrypt hash. It is read only by the login check and
    never appears in any response model.
    """

    __tablename__ = "user"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(250), nullable=False)
    username: Mapped[str] = mapped_column(String(250), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(String(250), nullable=False)
    gender: Mapped[str] = mapped_column(String(250), nullable=False, default="")

    def __repr__(self) -> str:
        return f"<User(user_id={self.user_id}, username='{self.username}')>"


class Follower(Base):
    """
    A directed follow edge: `follower_user_id` sees the tweets of
    `following_user_id`.

    Edges are seeded outside this service; no endpoint creates or removes
    them. Self-follow is not prevented at the schema level.
    """

    __tablename__ = "follower"

    follower_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    follower_user_id: Mapped[int] = mapped_column(
        ForeignKey("user.user_id"), nullable=False
    )
    following_user_id: Mapped[int] = mapped_column(
        ForeignKey("user.user_id"), nullable=False
    )

    # Both directions are queried: "whom do I follow" and "who follows me"
    __table_args__ = (
        Index("idx_follower_follower_user_id", "follower_user_id"),
        Index("idx_follower_following_user_id", "following_user_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Follower(follower_user_id={self.follower_user_id}, "
            f"following_user_id={self.following_user_id})>"
        )
