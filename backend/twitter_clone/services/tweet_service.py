"""
Twitter Clone Backend - Tweet Service
======================================

What:  Feed, tweet detail, engagement lists, own tweets, create and delete.
How:   Every query is scoped either to the caller (`user_id`) or to the set of
       accounts the caller follows (`followed_user_ids`). All statements of a
       call share the request's session and therefore its transaction.
Who:   Called by the users and tweets routers.

Visibility Rules:
    ┌──────────────────────┬──────────────────────────────────────────────┐
    │ Operation            │ Visible when                                 │
    ├──────────────────────┼──────────────────────────────────────────────┤
    │ feed                 │ author is followed by the caller             │
    │ get_tweet            │ author is followed by the caller             │
    │ list_likes/replies   │ at least one like/reply exists (no follow    │
    │                      │ check, as in the v1 API)                     │
    │ list_own / delete    │ caller owns the tweet                        │
    └──────────────────────┴──────────────────────────────────────────────┘

    Anything not visible raises AuthorizationError ("Invalid Request"), the
    same error as a missing tweet.
"""

import logging
from typing import List

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from twitter_clone.exceptions import AuthorizationError, DatabaseError
from twitter_clone.models import Like, Reply, Tweet, User
from twitter_clone.models.tweet import utc_now
from twitter_clone.schemas.common import format_datetime
from twitter_clone.schemas.tweet import (
    FeedItem,
    OwnTweet,
    ReplyItem,
    TweetDetail,
    TweetLikes,
    TweetReplies,
)
from twitter_clone.services.user_service import followed_user_ids

logger = logging.getLogger(__name__)

# The feed is a fixed-size window; there is no pagination.
FEED_LIMIT = 4


class TweetService:
    """
    Business logic for tweets and their likes/replies.

    Error Handling Strategy:
        Visibility failures raise AuthorizationError. SQLAlchemy errors are
        logged and wrapped in DatabaseError so driver details never reach
        the client.
    """

    async def feed(self, db: AsyncSession, user_id: int) -> List[FeedItem]:
        """
        Latest tweets from followed accounts, newest first, at most FEED_LIMIT.

        Ties on `date_time` are broken by `tweet_id` (higher id first).
        """
        query = (
            select(User.username, Tweet.tweet, Tweet.date_time)
            .join(User, Tweet.user_id == User.user_id)
            .where(Tweet.user_id.in_(followed_user_ids(user_id)))
            .order_by(Tweet.date_time.desc(), Tweet.tweet_id.desc())
            .limit(FEED_LIMIT)
        )
        try:
            rows = (await db.execute(query)).all()
        except SQLAlchemyError as e:
            logger.error("Database error loading feed for user %s: %s", user_id, str(e))
            raise DatabaseError(context={"operation": "feed"})

        return [
            FeedItem(
                username=row.username,
                tweet=row.tweet,
                date_time=format_datetime(row.date_time),
            )
            for row in rows
        ]

    async def get_tweet(self, db: AsyncSession, user_id: int, tweet_id: int) -> TweetDetail:
        """
        Text, timestamp and engagement counts of a followed author's tweet.

        Query plan:
            1. SELECT tweet WHERE tweet_id = :id AND user_id IN (followed ids)
            2. SELECT COUNT(*) FROM like  WHERE tweet_id = :id
            3. SELECT COUNT(*) FROM reply WHERE tweet_id = :id

            COUNT(*) always yields a row, so a tweet without engagement
            reports 0 rather than nothing.

        Raises:
            AuthorizationError: tweet missing or author not followed
        """
        try:
            result = await db.execute(
                select(Tweet.tweet, Tweet.date_time).where(
                    Tweet.tweet_id == tweet_id,
                    Tweet.user_id.in_(followed_user_ids(user_id)),
                )
            )
            row = result.one_or_none()
            if row is None:
                raise AuthorizationError(context={"tweet_id": tweet_id})

            likes = await db.execute(
                select(func.count()).select_from(Like).where(Like.tweet_id == tweet_id)
            )
            replies = await db.execute(
                select(func.count()).select_from(Reply).where(Reply.tweet_id == tweet_id)
            )
            return TweetDetail(
                tweet=row.tweet,
                date_time=format_datetime(row.date_time),
                likes=likes.scalar_one(),
                replies=replies.scalar_one(),
            )
        except SQLAlchemyError as e:
            logger.error("Database error fetching tweet %s: %s", tweet_id, str(e))
            raise DatabaseError(context={"operation": "get_tweet", "tweet_id": tweet_id})

    async def list_likes(self, db: AsyncSession, tweet_id: int) -> TweetLikes:
        """
        Usernames of the users who liked `tweet_id`, ordered by user id.

        Raises:
            AuthorizationError: nobody liked the tweet (or it does not exist)
        """
        try:
            result = await db.execute(
                select(User.username)
                .where(User.user_id.in_(select(Like.user_id).where(Like.tweet_id == tweet_id)))
                .order_by(User.user_id)
            )
            usernames = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing likes of tweet %s: %s", tweet_id, str(e))
            raise DatabaseError(context={"operation": "list_likes", "tweet_id": tweet_id})

        if not usernames:
            raise AuthorizationError(context={"tweet_id": tweet_id})
        return TweetLikes(likes=usernames)

    async def list_replies(self, db: AsyncSession, tweet_id: int) -> TweetReplies:
        """
        Replies to `tweet_id` with the replier's display name, oldest first.

        Raises:
            AuthorizationError: the tweet has no replies (or does not exist)
        """
        try:
            result = await db.execute(
                select(User.name, Reply.reply)
                .join(Reply, User.user_id == Reply.user_id)
                .where(Reply.tweet_id == tweet_id)
                .order_by(Reply.reply_id)
            )
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Database error listing replies of tweet %s: %s", tweet_id, str(e))
            raise DatabaseError(context={"operation": "list_replies", "tweet_id": tweet_id})

        if not rows:
            raise AuthorizationError(context={"tweet_id": tweet_id})
        return TweetReplies(replies=[ReplyItem(name=row.name, reply=row.reply) for row in rows])

    async def list_own(self, db: AsyncSession, user_id: int) -> List[OwnTweet]:
        """
        All tweets of `user_id` with like and reply counts, oldest first.

        The two counts come from separate grouped subqueries joined onto
        `tweet`, so likes and replies do not multiply each other; tweets
        without engagement get 0 through COALESCE.
        """
        like_counts = (
            select(Like.tweet_id, func.count(Like.like_id).label("likes"))
            .group_by(Like.tweet_id)
            .subquery()
        )
        reply_counts = (
            select(Reply.tweet_id, func.count(Reply.reply_id).label("replies"))
            .group_by(Reply.tweet_id)
            .subquery()
        )
        query = (
            select(
                Tweet.tweet,
                func.coalesce(like_counts.c.likes, 0).label("likes"),
                func.coalesce(reply_counts.c.replies, 0).label("replies"),
                Tweet.date_time,
            )
            .select_from(Tweet)
            .outerjoin(like_counts, like_counts.c.tweet_id == Tweet.tweet_id)
            .outerjoin(reply_counts, reply_counts.c.tweet_id == Tweet.tweet_id)
            .where(Tweet.user_id == user_id)
            .order_by(Tweet.date_time, Tweet.tweet_id)
        )
        try:
            rows = (await db.execute(query)).all()
        except SQLAlchemyError as e:
            logger.error("Database error listing tweets of user %s: %s", user_id, str(e))
            raise DatabaseError(context={"operation": "list_own"})

        return [
            OwnTweet(
                tweet=row.tweet,
                likes=row.likes,
                replies=row.replies,
                date_time=format_datetime(row.date_time),
            )
            for row in rows
        ]

    async def create(self, db: AsyncSession, user_id: int, text: str) -> Tweet:
        """Stores a new tweet owned by `user_id`, stamped with the current UTC time."""
        tweet = Tweet(tweet=text, user_id=user_id, date_time=utc_now())
        try:
            db.add(tweet)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating tweet for user %s: %s", user_id, str(e))
            raise DatabaseError(context={"operation": "create_tweet"})

        logger.info("Tweet %s created by user %s", tweet.tweet_id, user_id)
        return tweet

    async def delete(self, db: AsyncSession, user_id: int, tweet_id: int) -> None:
        """
        Deletes a tweet owned by `user_id` along with its likes and replies.

        Raises:
            AuthorizationError: tweet missing or owned by someone else; nothing
                is deleted in that case
        """
        try:
            result = await db.execute(
                select(Tweet).where(Tweet.tweet_id == tweet_id, Tweet.user_id == user_id)
            )
            tweet = result.scalar_one_or_none()
            if tweet is None:
                raise AuthorizationError(context={"tweet_id": tweet_id})

            await db.execute(delete(Like).where(Like.tweet_id == tweet_id))
            await db.execute(delete(Reply).where(Reply.tweet_id == tweet_id))
            await db.delete(tweet)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting tweet %s: %s", tweet_id, str(e))
            raise DatabaseError(context={"operation": "delete_tweet", "tweet_id": tweet_id})

        logger.info("Tweet %s deleted by user %s", tweet_id, user_id)


# ── Singleton Instance ────────────────────────────────────────────────────
tweet_service = TweetService()
