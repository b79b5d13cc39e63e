"""
Twitter Clone Backend - HTTP API Tests
=======================================

End-to-end requests against the FastAPI app with a per-test SQLite database.

Tests cover:
    1. Register / login status codes and bodies
    2. Caller-scoped routes under /user/
    3. Tweet routes under /tweets/{id}/
    4. Error body shape, request IDs and the health probe
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from twitter_clone.database import get_db_session
from twitter_clone.models import Like, Reply, Tweet
from twitter_clone.security import token_service

NEW_USER = {
    "username": "erin",
    "password": "erin-pass",
    "name": "Erin Green",
    "gender": "female",
}


class TestRegistration:

    @pytest.mark.asyncio
    async def test_register_then_login(self, test_client):
        response = await test_client.post("/register/", json=NEW_USER)
        assert response.status_code == 200
        assert response.text == "User created successfully"
        assert response.headers["content-type"].startswith("text/plain")

        response = await test_client.post(
            "/login/", json={"username": "erin", "password": "erin-pass"}
        )
        assert response.status_code == 200
        token = response.json()["jwtToken"]
        assert isinstance(token_service.decode(token), int)

    @pytest.mark.asyncio
    async def test_duplicate_username(self, test_client, seeded):
        response = await test_client.post("/register/", json={**NEW_USER, "username": "alice"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "conflict"
        assert body["message"] == "User already exists"

    @pytest.mark.asyncio
    async def test_short_password(self, test_client):
        response = await test_client.post("/register/", json={**NEW_USER, "password": "abc"})

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Password is too short"
        assert body["details"] == {"field": "password"}

    @pytest.mark.asyncio
    async def test_missing_field_is_unprocessable(self, test_client):
        response = await test_client.post("/register/", json={"username": "erin"})
        assert response.status_code == 422


class TestLogin:

    @pytest.mark.asyncio
    async def test_unknown_user(self, test_client, seeded):
        response = await test_client.post(
            "/login/", json={"username": "mallory", "password": "secret123"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid user"

    @pytest.mark.asyncio
    async def test_wrong_password(self, test_client, seeded):
        response = await test_client.post(
            "/login/", json={"username": "alice", "password": "not-it"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid password"

    @pytest.mark.asyncio
    async def test_token_opens_protected_routes(self, test_client, seeded):
        response = await test_client.post(
            "/login/", json={"username": "alice", "password": "secret123"}
        )
        token = response.json()["jwtToken"]

        response = await test_client.get(
            "/user/followers/", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 200
        assert response.json() == [{"name": "Bob Jones"}]


class TestUserRoutes:

    @pytest.mark.asyncio
    async def test_feed(self, test_client, seeded, auth_headers):
        response = await test_client.get("/user/tweets/feed/", headers=auth_headers(1))

        assert response.status_code == 200
        feed = response.json()
        assert len(feed) == 4
        assert feed[0] == {
            "username": "bob",
            "tweet": "Bob tweet 3",
            "dateTime": "2021-04-07 15:30:00",
        }
        assert "Dave tweet 1" not in [item["tweet"] for item in feed]

    @pytest.mark.asyncio
    async def test_feed_of_user_following_nobody(self, test_client, seeded, auth_headers):
        response = await test_client.get("/user/tweets/feed/", headers=auth_headers(4))
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_following(self, test_client, seeded, auth_headers):
        response = await test_client.get("/user/following/", headers=auth_headers(1))
        assert response.json() == [{"name": "Bob Jones"}, {"name": "Carol White"}]

    @pytest.mark.asyncio
    async def test_own_tweets(self, test_client, seeded, auth_headers):
        response = await test_client.get("/user/tweets/", headers=auth_headers(2))

        assert response.status_code == 200
        assert response.json() == [
            {"tweet": "Bob tweet 1", "likes": 2, "replies": 2, "dateTime": "2021-04-07 14:50:00"},
            {"tweet": "Bob tweet 2", "likes": 0, "replies": 0, "dateTime": "2021-04-07 15:00:00"},
            {"tweet": "Bob tweet 3", "likes": 0, "replies": 0, "dateTime": "2021-04-07 15:30:00"},
        ]

    @pytest.mark.asyncio
    async def test_create_tweet(self, test_client, seeded, auth_headers):
        response = await test_client.post(
            "/user/tweets/", json={"tweet": "Posted over HTTP"}, headers=auth_headers(4)
        )
        assert response.status_code == 200
        assert response.text == "Created a Tweet"

        response = await test_client.get("/user/tweets/", headers=auth_headers(4))
        tweets = response.json()
        assert [t["tweet"] for t in tweets] == ["Dave tweet 1", "Posted over HTTP"]
        assert (tweets[-1]["likes"], tweets[-1]["replies"]) == (0, 0)

    @pytest.mark.asyncio
    async def test_create_tweet_requires_text(self, test_client, seeded, auth_headers):
        response = await test_client.post("/user/tweets/", json={}, headers=auth_headers(4))
        assert response.status_code == 422


class TestTweetRoutes:

    @pytest.mark.asyncio
    async def test_detail(self, test_client, seeded, auth_headers):
        response = await test_client.get("/tweets/1/", headers=auth_headers(1))

        assert response.status_code == 200
        assert response.json() == {
            "tweet": "Bob tweet 1",
            "likes": 2,
            "replies": 2,
            "dateTime": "2021-04-07 14:50:00",
        }

    @pytest.mark.asyncio
    async def test_detail_of_unfollowed_author(self, test_client, seeded, auth_headers):
        response = await test_client.get("/tweets/7/", headers=auth_headers(1))

        assert response.status_code == 401
        body = response.json()
        assert body["error"] == "invalid_request"
        assert body["message"] == "Invalid Request"

    @pytest.mark.asyncio
    async def test_non_integer_id(self, test_client, seeded, auth_headers):
        response = await test_client.get("/tweets/abc/", headers=auth_headers(1))
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_likes(self, test_client, seeded, auth_headers):
        response = await test_client.get("/tweets/1/likes/", headers=auth_headers(1))
        assert response.status_code == 200
        assert response.json() == {"likes": ["alice", "carol"]}

    @pytest.mark.asyncio
    async def test_likes_empty(self, test_client, seeded, auth_headers):
        response = await test_client.get("/tweets/2/likes/", headers=auth_headers(1))
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid Request"

    @pytest.mark.asyncio
    async def test_replies(self, test_client, seeded, auth_headers):
        response = await test_client.get("/tweets/1/replies/", headers=auth_headers(1))
        assert response.status_code == 200
        assert response.json() == {
            "replies": [
                {"name": "Alice Smith", "reply": "Nice one Bob"},
                {"name": "Carol White", "reply": "Agreed"},
            ]
        }

    @pytest.mark.asyncio
    async def test_replies_empty(self, test_client, seeded, auth_headers):
        response = await test_client.get("/tweets/5/replies/", headers=auth_headers(1))
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_delete_own_tweet(self, test_client, seeded, auth_headers, session_factory):
        response = await test_client.delete("/tweets/1/", headers=auth_headers(2))

        assert response.status_code == 200
        assert response.text == "Tweet Removed"
        async with session_factory() as session:
            for model in (Tweet, Like, Reply):
                count = await session.execute(
                    select(func.count()).select_from(model).where(model.tweet_id == 1)
                )
                assert count.scalar_one() == 0

        response = await test_client.get("/tweets/1/", headers=auth_headers(1))
        assert response.status_code == 401

        response = await test_client.delete("/tweets/1/", headers=auth_headers(2))
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid Request"

    @pytest.mark.asyncio
    async def test_delete_someone_elses_tweet(self, test_client, seeded, auth_headers):
        response = await test_client.delete("/tweets/1/", headers=auth_headers(1))
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid Request"

        response = await test_client.get("/tweets/1/", headers=auth_headers(1))
        assert response.status_code == 200


class TestPlumbing:

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, test_client):
        response = await test_client.post("/login/", json={"username": "x", "password": "y"})
        assert len(response.headers["X-Request-ID"]) == 8
        assert response.json()["request_id"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "supplied",
        ["x" * 65, "id with spaces", "<script>", "line\tbreak"],
        ids=["too-long", "spaces", "markup", "control-char"],
    )
    async def test_malformed_client_request_id_is_replaced(self, test_client, supplied):
        response = await test_client.post(
            "/login/",
            json={"username": "x", "password": "y"},
            headers={"X-Request-ID": supplied},
        )

        rid = response.headers["X-Request-ID"]
        assert rid != supplied
        assert len(rid) == 8
        assert response.json()["request_id"] == rid

    @pytest.mark.asyncio
    async def test_unexpected_error_keeps_request_id(
        self, test_client, mock_db_session, auth_headers
    ):
        from twitter_clone.main import app

        mock_db_session.execute.side_effect = RuntimeError("driver exploded")

        async def broken_session():
            yield mock_db_session

        app.dependency_overrides[get_db_session] = broken_session
        # The server-error middleware re-raises after replying; keep the reply
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get(
                "/user/following/",
                headers={**auth_headers(1), "X-Request-ID": "crash-42"},
            )

        assert response.status_code == 500
        assert response.headers["X-Request-ID"] == "crash-42"
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert body["request_id"] == "crash-42"
        assert "exploded" not in body["message"]

    @pytest.mark.asyncio
    async def test_database_error_is_generic_500(self, test_client, mock_db_session, auth_headers):
        from twitter_clone.main import app

        mock_db_session.execute.side_effect = SQLAlchemyError("relation does not exist")

        async def broken_session():
            yield mock_db_session

        app.dependency_overrides[get_db_session] = broken_session
        response = await test_client.get("/user/following/", headers=auth_headers(1))

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "relation" not in body["message"]

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
