# tests/test_services.py

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from task_manager.core.exceptions import ForbiddenError, NotFoundError
from task_manager.core.permissions import Principal
from task_manager.schemas.task import TaskCreate, TaskUpdate
from task_manager.schemas.user import UserCreate
from task_manager.services import label as label_service
from task_manager.services import task as task_service
from task_manager.services import task_status as task_status_service
from task_manager.services import user as user_service
from task_manager.services.seed import seed_default_data


async def test_seed_is_idempotent(db: AsyncSession) -> None:
    await seed_default_data(db)
    await seed_default_data(db)

    assert [l.name for l in await label_service.list_labels(db)] == ["feature", "bug"]
    assert [s.slug for s in await task_status_service.list_statuses(db)] == ["new", "in_progress", "done"]
    users = await user_service.list_users(db)
    assert [u.email for u in users] == ["hexlet@example.com"]


async def test_system_caller_bypasses_ownership(db: AsyncSession) -> None:
    await seed_default_data(db)
    hexlet = (await user_service.list_users(db))[0]
    task = await task_service.create_task(
        db, TaskCreate(title="Seeded", status="new", assignee_id=hexlet.id), principal=None
    )

    updated = await task_service.update_task(db, task.id, TaskUpdate(title="Renamed"), principal=None)
    assert updated.title == "Renamed"

    intruder = Principal(id=999, email="intruder@example.com")
    with pytest.raises(ForbiddenError):
        await task_service.delete_task(db, task.id, intruder)
    await task_service.delete_task(db, task.id, principal=None)

    with pytest.raises(NotFoundError):
        await task_service.get_task(db, task.id)


async def test_filter_without_criteria_equals_list(db: AsyncSession) -> None:
    await seed_default_data(db)
    user = await user_service.create_user(db, UserCreate(email="bob@example.com", password="secret"))
    for title in ("a", "b", "c"):
        await task_service.create_task(db, TaskCreate(title=title, status="new", assignee_id=user.id), None)

    assert await task_service.filter_tasks(db) == await task_service.list_tasks(db)


async def test_get_label_by_name(db: AsyncSession) -> None:
    await seed_default_data(db)
    assert (await label_service.get_label_by_name(db, "bug")).name == "bug"
    with pytest.raises(NotFoundError, match="Label not found with name: nope"):
        await label_service.get_label_by_name(db, "nope")
