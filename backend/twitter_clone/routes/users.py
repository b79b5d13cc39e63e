"""
Twitter Clone Backend - Caller-Scoped Routes
=============================================

What:  Endpoints under /user/ that act on the authenticated caller:
       feed, follow lists, own tweets and tweet creation.
How:   The router-level auth dependency rejects unauthenticated requests
       before any handler runs; handlers receive the caller's id from the
       same (cached) dependency.

Route Inventory:
    GET  /user/tweets/feed/   latest 4 tweets of followed accounts
    GET  /user/following/     display names the caller follows
    GET  /user/followers/     display names following the caller
    GET  /user/tweets/        caller's tweets with like/reply counts
    POST /user/tweets/        create a tweet
"""

from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from twitter_clone.auth import require_user
from twitter_clone.database import get_db_session
from twitter_clone.schemas.common import ErrorResponse
from twitter_clone.schemas.tweet import CreateTweetRequest, FeedItem, OwnTweet
from twitter_clone.schemas.user import UserName
from twitter_clone.services.tweet_service import tweet_service
from twitter_clone.services.user_service import user_service

router = APIRouter(
    prefix="/user",
    tags=["User"],
    dependencies=[Depends(require_user)],
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
)


@router.get(
    "/tweets/feed/",
    response_model=List[FeedItem],
    summary="Latest tweets from followed accounts",
)
async def get_feed(
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[FeedItem]:
    return await tweet_service.feed(db, user_id)


@router.get("/following/", response_model=List[UserName], summary="Accounts the caller follows")
async def get_following(
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[UserName]:
    return await user_service.list_following(db, user_id)


@router.get("/followers/", response_model=List[UserName], summary="Accounts following the caller")
async def get_followers(
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[UserName]:
    return await user_service.list_followers(db, user_id)


@router.get(
    "/tweets/",
    response_model=List[OwnTweet],
    summary="The caller's tweets with like and reply counts",
)
async def get_own_tweets(
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[OwnTweet]:
    return await tweet_service.list_own(db, user_id)


@router.post(
    "/tweets/",
    response_class=PlainTextResponse,
    responses={200: {"description": "Tweet created", "content": {"text/plain": {}}}},
    summary="Post a new tweet",
)
async def create_tweet(
    payload: CreateTweetRequest,
    user_id: int = Depends(require_user),
    db: AsyncSession = Depends(get_db_session),
) -> str:
    await tweet_service.create(db, user_id, payload.tweet)
    return "Created a Tweet"
