# tests/helpers.py

from __future__ import annotations

from httpx import AsyncClient

PASSWORD = "secret"


async def signup(
    client: AsyncClient,
    email: str,
    password: str = PASSWORD,
    first_name: str = "Test",
    last_name: str = "User",
) -> dict:
    resp = await client.post(
        "/api/users",
        json={"email": email, "password": password, "firstName": first_name, "lastName": last_name},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def auth_headers(client: AsyncClient, email: str, password: str = PASSWORD) -> dict:
    resp = await client.post("/api/login", json={"username": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.text}"}


async def create_label(client: AsyncClient, name: str, headers: dict) -> dict:
    resp = await client.post("/api/labels", json={"name": name}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def create_task(client: AsyncClient, headers: dict, **fields) -> dict:
    payload = {"title": "Task", "status": "new", **fields}
    resp = await client.post("/api/tasks", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()
