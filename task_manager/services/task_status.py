import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from task_manager.core.exceptions import BadRequestError, ConflictError, NotFoundError
from task_manager.models.task import Task
from task_manager.models.task_status import TaskStatus
from task_manager.schemas.task_status import TaskStatusCreate, TaskStatusResponse, TaskStatusUpdate

logger = logging.getLogger(__name__)


def to_status_response(task_status: TaskStatus) -> TaskStatusResponse:
    return TaskStatusResponse(
        id=task_status.id,
        name=task_status.name,
        slug=task_status.slug,
        created_at=task_status.created_at,
    )


async def _get_status_row(db: AsyncSession, status_id: int) -> TaskStatus:
    result = await db.execute(select(TaskStatus).where(TaskStatus.id == status_id))
    task_status = result.scalar_one_or_none()
    if not task_status:
        raise NotFoundError(f"Task status not found with id: {status_id}")
    return task_status


async def _ensure_slug_free(db: AsyncSession, slug: str, exclude_id: Optional[int] = None) -> None:
    query = select(TaskStatus.id).where(TaskStatus.slug == slug)
    if exclude_id is not None:
        query = query.where(TaskStatus.id != exclude_id)
    result = await db.execute(query)
    if result.first() is not None:
        raise BadRequestError(f"Task status with slug '{slug}' already exists")


async def list_statuses(db: AsyncSession) -> list[TaskStatusResponse]:
    result = await db.execute(select(TaskStatus).order_by(TaskStatus.id))
    return [to_status_response(s) for s in result.scalars().all()]


async def get_status(db: AsyncSession, status_id: int) -> TaskStatusResponse:
    return to_status_response(await _get_status_row(db, status_id))


async def get_status_by_slug(db: AsyncSession, slug: str) -> TaskStatusResponse:
    result = await db.execute(select(TaskStatus).where(TaskStatus.slug == slug))
    task_status = result.scalar_one_or_none()
    if not task_status:
        raise NotFoundError(f"Task status not found with slug: {slug}")
    return to_status_response(task_status)


async def create_status(db: AsyncSession, status_in: TaskStatusCreate) -> TaskStatusResponse:
    await _ensure_slug_free(db, status_in.slug)

    task_status = TaskStatus(
        name=status_in.name,
        slug=status_in.slug,
        created_at=datetime.now(timezone.utc),
    )
    db.add(task_status)
    await db.commit()
    await db.refresh(task_status)

    logger.info("Task status %r created", task_status.slug)
    return to_status_response(task_status)


async def update_status(db: AsyncSession, status_id: int, status_in: TaskStatusUpdate) -> TaskStatusResponse:
    task_status = await _get_status_row(db, status_id)
    changes = status_in.changes()

    if "name" in changes:
        task_status.name = changes["name"]
    if "slug" in changes and changes["slug"] != task_status.slug:
        await _ensure_slug_free(db, changes["slug"], exclude_id=task_status.id)
        task_status.slug = changes["slug"]

    db.add(task_status)
    await db.commit()
    await db.refresh(task_status)
    return to_status_response(task_status)


async def delete_status(db: AsyncSession, status_id: int) -> None:
    task_status = await _get_status_row(db, status_id)

    in_use = await db.execute(select(func.count(Task.id)).where(Task.task_status_id == task_status.id))
    if in_use.scalar_one() > 0:
        raise ConflictError("Cannot delete task status that is used by tasks")

    await db.delete(task_status)
    await db.commit()
    logger.info("Task status %s deleted", status_id)
