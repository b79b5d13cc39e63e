"""
Twitter Clone Backend - Tweet Routes
=====================================

What:  Endpoints addressing a single tweet by id.

Route Inventory:
    GET    /tweets/{tweet_id}/          text, timestamp, like/reply counts
    GET    /tweets/{tweet_id}/likes/    usernames of likers
    GET    /tweets/{tweet_id}/replies/  replies with replier display names
    DELETE /tweets/{tweet_id}/          delete an own tweet

All four answer 401 "Invalid Request" when the tweet is not visible, not
owned, missing, or (likes/replies) has no engagement yet.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from twitter_clone.auth import require_user
from twitter_clone.database import get_db_session
from twitter_clone.schemas.common import ErrorResponse
from twitter_clone.schemas.tweet import TweetDetail, TweetLikes, TweetReplies
from twitter_clone.services.tweet_service import tweet_service

router = APIRouter(
    prefix="/tweets",
    tags=["Tweets"],
    dependencies=[Depends(require_user)],
    responses={401: {"description": "Invalid token or request", "model": ErrorResponse}},
)


@router.get("/{tweet_id}/", response_model=TweetDetail, summary="Tweet detail with counts")
async def get_tweet(
    tweet_id: int,
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> TweetDetail:
    return await tweet_service.get_tweet(db, user_id, tweet_id)


@router.get("/{tweet_id}/likes/", response_model=TweetLikes, summary="Users who liked a tweet")
async def get_tweet_likes(
    tweet_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> TweetLikes:
    return await tweet_service.list_likes(db, tweet_id)


@router.get("/{tweet_id}/replies/", response_model=TweetReplies, summary="Replies to a tweet")
async def get_tweet_replies(
    tweet_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> TweetReplies:
    return await tweet_service.list_replies(db, tweet_id)


@router.delete(
    "/{tweet_id}/",
    response_class=PlainTextResponse,
    responses={200: {"description": "Tweet deleted", "content": {"text/plain": {}}}},
    summary="Delete one of the caller's tweets",
)
async def delete_tweet(
    tweet_id: int,
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> str:
    await tweet_service.delete(db, user_id, tweet_id)
    return "Tweet Removed"
