# tests/test_auth.py

from __future__ import annotations

from datetime import timedelta

from httpx import AsyncClient

from task_manager.core.security import create_access_token, decode_access_token

from .helpers import signup


async def test_login_returns_raw_token_with_email_subject(client: AsyncClient) -> None:
    await signup(client, "alice@example.com")

    resp = await client.post("/api/login", json={"username": "alice@example.com", "password": "secret"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert decode_access_token(resp.text)["sub"] == "alice@example.com"


async def test_login_failures_do_not_reveal_account(client: AsyncClient) -> None:
    await signup(client, "alice@example.com")

    wrong_pw = await client.post("/api/login", json={"username": "alice@example.com", "password": "nope"})
    unknown = await client.post("/api/login", json={"username": "ghost@example.com", "password": "secret"})

    assert wrong_pw.status_code == 401
    assert unknown.status_code == 401
    assert wrong_pw.json() == unknown.json() == {"detail": "Invalid username or password"}


async def test_login_validation(client: AsyncClient) -> None:
    resp = await client.post("/api/login", json={"username": "", "password": "secret"})
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "username"


async def test_protected_routes_need_valid_token(client: AsyncClient) -> None:
    assert (await client.get("/api/tasks")).status_code == 401
    assert (await client.get("/api/tasks", headers={"Authorization": "Bearer garbage"})).status_code == 401

    # well-formed token for a user that does not exist
    orphan = create_access_token("ghost@example.com")
    resp = await client.get("/api/labels", headers={"Authorization": f"Bearer {orphan}"})
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


async def test_root_is_public(client: AsyncClient) -> None:
    resp = await client.get("/")
    assert resp.status_code == 200
    assert "message" in resp.json()


async def test_login_with_mixed_case_domain(client: AsyncClient) -> None:
    user = await signup(client, "Bob@Example.COM")
    assert user["email"] == "Bob@example.com"

    for username in ("Bob@Example.COM", "Bob@example.com"):
        resp = await client.post("/api/login", json={"username": username, "password": "secret"})
        assert resp.status_code == 200
        assert decode_access_token(resp.text)["sub"] == "Bob@example.com"

    # the local part stays case-sensitive
    resp = await client.post("/api/login", json={"username": "bob@example.com", "password": "secret"})
    assert resp.status_code == 401


async def test_expired_token_is_rejected(client: AsyncClient) -> None:
    await signup(client, "alice@example.com")

    expired = create_access_token("alice@example.com", expires_delta=timedelta(minutes=-1))
    resp = await client.get("/api/users", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401

    fresh = create_access_token("alice@example.com", expires_delta=timedelta(minutes=5))
    resp = await client.get("/api/users", headers={"Authorization": f"Bearer {fresh}"})
    assert resp.status_code == 200
