"""
Twitter Clone Backend - Tweet Schemas
======================================

What:  Pydantic models for the tweet endpoints.
How:   Fields use snake_case in Python and the v1 camelCase name on the
       wire via aliases (`date_time` ↔ `dateTime`). FastAPI serialises
       response models by alias, so clients see exactly the v1 keys.

Field order follows the v1 JSON payloads.
"""

from typing import List

from pydantic import BaseModel, Field


class CreateTweetRequest(BaseModel):
    """Body of POST /user/tweets/. No length limit is applied."""
    tweet: str = Field(description="Tweet text")


class FeedItem(BaseModel):
    """One entry of GET /user/tweets/feed/."""
    username: str = Field(description="Author's username")
    tweet: str
    date_time: str = Field(alias="dateTime", description="YYYY-MM-DD HH:MM:SS (UTC)")

    model_config = {"populate_by_name": True}


class TweetDetail(BaseModel):
    """GET /tweets/{id}/ for a tweet whose author the caller follows."""
    tweet: str
    date_time: str = Field(alias="dateTime")
    likes: int = Field(ge=0, description="Total like count")
    replies: int = Field(ge=0, description="Total reply count")

    model_config = {"populate_by_name": True}


class TweetLikes(BaseModel):
    """GET /tweets/{id}/likes/: usernames of the users who liked the tweet."""
    likes: List[str]


class ReplyItem(BaseModel):
    name: str = Field(description="Display name of the replying user")
    reply: str


class TweetReplies(BaseModel):
    """GET /tweets/{id}/replies/."""
    replies: List[ReplyItem]


class OwnTweet(BaseModel):
    """One entry of GET /user/tweets/."""
    tweet: str
    likes: int = Field(ge=0)
    replies: int = Field(ge=0)
    date_time: str = Field(alias="dateTime")

    model_config = {"populate_by_name": True}
