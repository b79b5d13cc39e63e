"""
Twitter Clone Backend - Tweet, Like and Reply Models
=====================================================

What:  ORM models for the `tweet`, `like` and `reply` tables.
Who:   Used by TweetService for the feed, detail, engagement and
       own-tweet queries.

Timestamps:
    `date_time` is naive UTC assigned by the server at insert time, the same
    value SQLite's `datetime('now')` produces for rows written by v1.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from twitter_clone.database import Base


def utc_now() -> datetime:
    """Current UTC time without tzinfo, truncated to whole seconds."""
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


class Tweet(Base):
    """
    A short message owned by its author.

    Lifecycle:
        1. Created by POST /user/tweets/ with the caller as owner
        2. Deleted by DELETE /tweets/{id}/, by its owner only

    Query Patterns:
        - Feed: WHERE user_id IN (followed ids) ORDER BY date_time DESC LIMIT 4
        - Own tweets: WHERE user_id = :caller
    """

    __tablename__ = "tweet"

    tweet_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tweet: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.user_id"), nullable=False)
    date_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utc_now)

    __table_args__ = (
        Index("idx_tweet_user_id_date_time", "user_id", "date_time"),
    )

    def __repr__(self) -> str:
        return f"<Tweet(tweet_id={self.tweet_id}, user_id={self.user_id})>"


class Like(Base):
    """A user liking a tweet. Append-only from the API surface."""

    __tablename__ = "like"

    like_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tweet_id: Mapped[int] = mapped_column(ForeignKey("tweet.tweet_id"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.user_id"), nullable=False)
    date_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utc_now)

    __table_args__ = (Index("idx_like_tweet_id", "tweet_id"),)


class Reply(Base):
    """A text reply to a tweet. Append-only from the API surface."""

    __tablename__ = "reply"

    reply_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tweet_id: Mapped[int] = mapped_column(ForeignKey("tweet.tweet_id"), nullable=False)
    reply: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.user_id"), nullable=False)
    date_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utc_now)

    __table_args__ = (Index("idx_reply_tweet_id", "tweet_id"),)
