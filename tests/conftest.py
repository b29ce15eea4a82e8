# tests/conftest.py

from __future__ import annotations

import os
import tempfile
from collections.abc import AsyncIterator
from pathlib import Path

# Settings are read at import time, so the environment must be ready first.
_TMP_DIR = Path(tempfile.mkdtemp(prefix="task_manager_tests_"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR / 'test.sqlite3'}"
os.environ["SEED_DEFAULT_DATA"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["SQL_ECHO"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from task_manager.database import AsyncSessionLocal, Base, engine
from task_manager.main import app

from .helpers import auth_headers, signup


@pytest.fixture()
async def database() -> AsyncIterator[None]:
    """
    Fresh tables for every test.

    The engine is disposed at the end so no pooled connection outlives
    the event loop of the test that opened it.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture()
async def db(database: None) -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture()
async def client(database: None) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
async def owner(client: AsyncClient) -> dict:
    """A registered user plus ready-to-use auth headers."""
    user = await signup(client, "owner@example.com")
    return {"user": user, "headers": await auth_headers(client, "owner@example.com")}


@pytest.fixture()
async def stranger(client: AsyncClient) -> dict:
    user = await signup(client, "stranger@example.com", first_name="Other")
    return {"user": user, "headers": await auth_headers(client, "stranger@example.com")}


@pytest.fixture()
async def new_status(client: AsyncClient, owner: dict) -> dict:
    resp = await client.post(
        "/api/task_statuses", json={"name": "New", "slug": "new"}, headers=owner["headers"]
    )
    assert resp.status_code == 201, resp.text
    return resp.json()
