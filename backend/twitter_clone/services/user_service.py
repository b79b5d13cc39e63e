"""
Twitter Clone Backend - User Service
=====================================

What:  Account operations: registration, login, and the two follow lists.
How:   Each method issues one or two parameterised queries through the
       request's AsyncSession; commit/rollback is left to get_db_session.
Who:   Called by the auth and users routers.

Registration rules, checked in this order:
    1. username already taken      → ConflictError   ("User already exists")
    2. password shorter than 6     → ValidationError ("Password is too short")
    3. password over 72 bytes      → ValidationError ("Password is too long")

    The existence check runs first, so a duplicate username with a short
    password reports the duplicate. Both outcomes are HTTP 400.
"""

import logging
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from twitter_clone.exceptions import (
    ConflictError,
    DatabaseError,
    InvalidCredentialsError,
    ValidationError,
)
from twitter_clone.models import Follower, User
from twitter_clone.schemas.user import LoginRequest, LoginResponse, RegisterRequest, UserName
from twitter_clone.security import (
    BCRYPT_MAX_PASSWORD_BYTES,
    PasswordHasher,
    TokenService,
    password_hasher,
    token_service,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def followed_user_ids(user_id: int) -> Select:
    """Subquery: ids of the accounts `user_id` follows."""
    return select(Follower.following_user_id).where(Follower.follower_user_id == user_id)


def follower_user_ids(user_id: int) -> Select:
    """Subquery: ids of the accounts that follow `user_id`."""
    return select(Follower.follower_user_id).where(Follower.following_user_id == user_id)


class UserService:
    """
    Business logic for accounts and the follow graph.

    Stateless apart from its two collaborators, which tests may replace.
    """

    def __init__(
        self,
        hasher: Optional[PasswordHasher] = None,
        tokens: Optional[TokenService] = None,
    ):
        self.hasher = hasher or password_hasher
        self.tokens = tokens or token_service

    async def register(self, db: AsyncSession, payload: RegisterRequest) -> None:
        """
        Creates a new account.

        Raises:
            ConflictError: username already exists (also on a concurrent
                insert caught by the unique constraint)
            ValidationError: password too short or too long
            DatabaseError: query execution failed
        """
        try:
            result = await db.execute(
                select(User.user_id).where(User.username == payload.username)
            )
            if result.scalar_one_or_none() is not None:
                raise ConflictError(context={"username": payload.username})

            if len(payload.password) < MIN_PASSWORD_LENGTH:
                raise ValidationError(message="Password is too short", field="password")
            if len(payload.password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
                raise ValidationError(message="Password is too long", field="password")

            hashed = await run_in_threadpool(self.hasher.hash, payload.password)

            user = User(
                name=payload.name,
                username=payload.username,
                password=hashed,
                gender=payload.gender,
            )
            db.add(user)
            await db.flush()
            logger.info("User registered: user_id=%s", user.user_id)

        except IntegrityError:
            raise ConflictError(context={"username": payload.username})
        except SQLAlchemyError as e:
            logger.error("Database error during registration: %s", str(e))
            raise DatabaseError(context={"operation": "register"})

    async def login(self, db: AsyncSession, payload: LoginRequest) -> LoginResponse:
        """
        Checks credentials and issues a bearer token.

        Raises:
            InvalidCredentialsError: "Invalid user" or "Invalid password"
            DatabaseError: query execution failed
        """
        try:
            result = await db.execute(select(User).where(User.username == payload.username))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e))
            raise DatabaseError(context={"operation": "login"})

        if user is None:
            raise InvalidCredentialsError(message="Invalid user")

        matches = await run_in_threadpool(self.hasher.verify, payload.password, user.password)
        if not matches:
            logger.info("Failed login for user_id=%s", user.user_id)
            raise InvalidCredentialsError(message="Invalid password")

        return LoginResponse(jwt_token=self.tokens.issue(user.user_id))

    async def list_following(self, db: AsyncSession, user_id: int) -> List[UserName]:
        """Display names of the accounts `user_id` follows."""
        return await self._names_of(db, followed_user_ids(user_id), "following")

    async def list_followers(self, db: AsyncSession, user_id: int) -> List[UserName]:
        """Display names of the accounts following `user_id`."""
        return await self._names_of(db, follower_user_ids(user_id), "followers")

    async def _names_of(self, db: AsyncSession, ids: Select, operation: str) -> List[UserName]:
        try:
            result = await db.execute(
                select(User.name).where(User.user_id.in_(ids)).order_by(User.user_id)
            )
            return [UserName(name=name) for name in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing %s: %s", operation, str(e))
            raise DatabaseError(context={"operation": operation})


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
