"""
Twitter Clone Backend - Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test that touches the database gets its own SQLite file under
       pytest's tmp_path, created with the application's metadata. The HTTP
       client talks to the real FastAPI app with `get_db_session` overridden
       to use that file.

Fixture Hierarchy (all function-scoped):
    ├── db_engine / session_factory: per-test SQLite database
    ├── db_session: one AsyncSession for service-level tests
    ├── seeded: the social graph described in SEED below
    ├── mock_db_session: AsyncMock session for error-path tests
    └── test_client: HTTPX AsyncClient bound to the app

Seeded graph:
    alice(1) follows bob(2) and carol(3); bob follows alice; dave(4) follows
    nobody. Tweets 1-7 have strictly increasing timestamps; tweet 1 (bob) has
    two likes and two replies, tweet 6 (alice) has one like.
"""

import os

# Settings are read at import time, so the environment must be prepared
# before anything from twitter_clone is imported.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-key-with-at-least-32-bytes!!"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from twitter_clone.database import create_tables, dispose_engine, get_db_session
from twitter_clone.models import Follower, Like, Reply, Tweet, User
from twitter_clone.security import password_hasher, token_service

SEED_PASSWORD = "secret123"

SEED_USERS = [
    # user_id, username, name, gender
    (1, "alice", "Alice Smith", "female"),
    (2, "bob", "Bob Jones", "male"),
    (3, "carol", "Carol White", "female"),
    (4, "dave", "Dave Brown", "male"),
]

SEED_FOLLOWS = [(1, 2), (1, 3), (2, 1)]

SEED_TWEETS = [
    # tweet_id, user_id, text, date_time
    (1, 2, "Bob tweet 1", datetime(2021, 4, 7, 14, 50, 0)),
    (2, 2, "Bob tweet 2", datetime(2021, 4, 7, 15, 0, 0)),
    (3, 3, "Carol tweet 1", datetime(2021, 4, 7, 15, 10, 0)),
    (4, 3, "Carol tweet 2", datetime(2021, 4, 7, 15, 20, 0)),
    (5, 2, "Bob tweet 3", datetime(2021, 4, 7, 15, 30, 0)),
    (6, 1, "Alice tweet 1", datetime(2021, 4, 7, 15, 40, 0)),
    (7, 4, "Dave tweet 1", datetime(2021, 4, 7, 15, 50, 0)),
]

SEED_LIKES = [(1, 1), (1, 3), (6, 2)]  # (tweet_id, user_id)

SEED_REPLIES = [(1, 1, "Nice one Bob"), (1, 3, "Agreed")]  # (tweet_id, user_id, reply)


def bearer(user_id: int) -> dict:
    """Authorization header for `user_id`, signed with the test secret."""
    return {"Authorization": f"Bearer {token_service.issue(user_id)}"}


@pytest.fixture
def auth_headers():
    """The `bearer` helper as a fixture, for test modules."""
    return bearer


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """A session for calling services directly; rolled back at teardown."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def seeded(session_factory):
    """Inserts the seed graph and commits it."""
    hashed = password_hasher.hash(SEED_PASSWORD)
    async with session_factory() as session:
        session.add_all(
            User(user_id=uid, username=username, name=name, gender=gender, password=hashed)
            for uid, username, name, gender in SEED_USERS
        )
        await session.flush()
        session.add_all(
            Follower(follower_user_id=a, following_user_id=b) for a, b in SEED_FOLLOWS
        )
        session.add_all(
            Tweet(tweet_id=tid, user_id=uid, tweet=text, date_time=ts)
            for tid, uid, text, ts in SEED_TWEETS
        )
        await session.flush()
        session.add_all(Like(tweet_id=tid, user_id=uid) for tid, uid in SEED_LIKES)
        session.add_all(
            Reply(tweet_id=tid, user_id=uid, reply=text) for tid, uid, text in SEED_REPLIES
        )
        await session.commit()
    return {"alice": 1, "bob": 2, "carol": 3, "dave": 4}


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession for exercising error paths without a database.

    Usage:
        mock_db_session.execute.side_effect = SQLAlchemyError("boom")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient routed straight into the FastAPI app.

    The lifespan is not run (ASGITransport does not send lifespan events),
    so only /health reaches the module-level engine (in-memory SQLite);
    it is disposed at teardown.
    """
    from twitter_clone.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
    await dispose_engine()
