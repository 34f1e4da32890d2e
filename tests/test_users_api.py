"""
Tests for registration, login, logout and session expiry.
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from config.settings import config
from conftest import TEST_USER_1, login
from database.models import LoginSession


class TestRegister:
    @pytest.mark.asyncio
    async def test_returns_user_without_hash(self, client):
        res = await client.post("/api/v1/users", json=TEST_USER_1)
        assert res.status_code == 200
        body = res.json()
        assert body["email"] == TEST_USER_1["email"]
        assert isinstance(body["id"], int)
        assert "password_hash" not in body
        assert "password" not in body

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, client):
        assert (await client.post("/api/v1/users", json=TEST_USER_1)).status_code == 200
        res = await client.post(
            "/api/v1/users",
            json={"email": TEST_USER_1["email"].upper(), "password": "another1"},
        )
        assert res.status_code == 409
        assert res.json() == {"status": 409, "message": "Email already registered"}

    @pytest.mark.asyncio
    async def test_invalid_body_is_400(self, client):
        res = await client.post("/api/v1/users", json={"email": "nobody", "password": "123456"})
        assert res.status_code == 400
        res = await client.post("/api/v1/users", json={"email": "a@b.co", "password": "123"})
        assert res.status_code == 400


class TestLogin:
    @pytest.mark.asyncio
    async def test_sets_session_cookie(self, client, seed):
        user = await seed.user(TEST_USER_1)
        res = await login(client, TEST_USER_1)

        assert res.status_code == 200
        assert res.json()["user"] == {"id": user.id, "email": user.email}
        set_cookie = res.headers["set-cookie"]
        assert set_cookie.startswith(f"{config.session_cookie_name}=")
        assert "httponly" in set_cookie.lower()

    @pytest.mark.asyncio
    async def test_wrong_password_is_401(self, client, seed):
        await seed.user(TEST_USER_1)
        res = await login(client, {"email": TEST_USER_1["email"], "password": "wrong-password"})
        assert res.status_code == 401
        assert res.json()["message"] == "Invalid email or password"
        assert "set-cookie" not in res.headers

    @pytest.mark.asyncio
    async def test_unknown_email_is_401(self, client):
        res = await login(client, {"email": "ghost@test.com", "password": "123456"})
        assert res.status_code == 401
        assert res.json()["message"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_malformed_credentials_are_401(self, client, seed):
        await seed.user(TEST_USER_1)
        for body in (
            {"email": "a@b.co", "password": "123"},
            {"email": "not-an-email", "password": "123456"},
            {"email": TEST_USER_1["email"], "password": ""},
        ):
            res = await login(client, body)
            assert res.status_code == 401, body
            assert res.json()["message"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_missing_field_is_400(self, client):
        res = await login(client, {"email": "a@b.co"})
        assert res.status_code == 400


class TestSessionLifecycle:
    @pytest.mark.asyncio
    async def test_me_returns_signed_in_user(self, register_and_login):
        agent, user = await register_and_login()
        res = await agent.get("/api/v1/users/me")
        assert res.status_code == 200
        assert res.json() == {"id": user.id, "email": user.email}

    @pytest.mark.asyncio
    async def test_me_requires_authentication(self, client):
        assert (await client.get("/api/v1/users/me")).status_code == 401

    @pytest.mark.asyncio
    async def test_logout_invalidates_token(self, register_and_login, session_factory):
        agent, _ = await register_and_login()
        token = agent.cookies.get(config.session_cookie_name)
        assert token

        res = await agent.delete("/api/v1/users/sessions")
        assert res.status_code == 200
        assert res.json()["success"] is True

        async with session_factory() as session:
            assert await session.get(LoginSession, token) is None

        # Replaying the old token does not authenticate.
        agent.cookies.set(config.session_cookie_name, token)
        assert (await agent.get("/api/v1/todos/")).status_code == 401

    @pytest.mark.asyncio
    async def test_expired_session_is_401(self, register_and_login, session_factory):
        agent, user = await register_and_login()

        async with session_factory() as session:
            result = await session.execute(select(LoginSession).where(LoginSession.user_id == user.id))
            row = result.scalar_one()
            token = row.token
            row.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
            await session.commit()

        assert (await agent.get("/api/v1/todos/")).status_code == 401

        async with session_factory() as session:
            assert await session.get(LoginSession, token) is None

    @pytest.mark.asyncio
    async def test_garbage_cookie_is_401(self, client):
        client.cookies.set(config.session_cookie_name, "not-a-real-token")
        assert (await client.get("/api/v1/todos/")).status_code == 401


class TestErrors:
    @pytest.mark.asyncio
    async def test_unknown_route_is_json_404(self, client):
        res = await client.get("/api/v1/nope")
        assert res.status_code == 404
        assert res.json() == {"status": 404, "message": "Not Found"}

    @pytest.mark.asyncio
    async def test_health(self, client):
        res = await client.get("/health")
        assert res.status_code == 200
        assert res.json() == {"status": "ok"}


class TestAccessLog:
    @pytest.mark.asyncio
    async def test_request_id_is_generated_and_echoed(self, client):
        res = await client.get("/health")
        assert res.headers["x-request-id"]
        assert "x-process-time" in res.headers

        res = await client.get("/health", headers={"X-Request-ID": "abc123"})
        assert res.headers["x-request-id"] == "abc123"

    @pytest.mark.asyncio
    async def test_log_line_names_the_signed_in_user(self, register_and_login, caplog):
        agent, user = await register_and_login()

        with caplog.at_level(logging.INFO, logger="api.middleware"):
            await agent.get("/api/v1/todos/", headers={"X-Request-ID": "req-1"})

        lines = [r.getMessage() for r in caplog.records if r.name == "api.middleware"]
        assert any(
            line.startswith(f"[req-1] user={user.id} GET /api/v1/todos/ 200")
            for line in lines
        ), lines

    @pytest.mark.asyncio
    async def test_anonymous_requests_log_a_dash(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="api.middleware"):
            await client.get("/api/v1/todos/", headers={"X-Request-ID": "req-2"})

        lines = [r.getMessage() for r in caplog.records if r.name == "api.middleware"]
        assert any(line.startswith("[req-2] user=- GET /api/v1/todos/ 401") for line in lines), lines
