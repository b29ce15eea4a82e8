import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from task_manager.core.exceptions import NotFoundError
from task_manager.core.permissions import Principal, authorize
from task_manager.models.label import Label
from task_manager.models.task import Task, task_labels
from task_manager.models.task_status import TaskStatus
from task_manager.models.user import User
from task_manager.schemas.task import TaskCreate, TaskResponse, TaskUpdate

logger = logging.getLogger(__name__)


async def _get_task_row(db: AsyncSession, task_id: int) -> Task:
    result = await db.execute(select(Task).where(Task.id == task_id))
    task = result.scalar_one_or_none()
    if not task:
        raise NotFoundError(f"Task not found with id: {task_id}")
    return task


async def _resolve_status(db: AsyncSession, slug: str) -> TaskStatus:
    result = await db.execute(select(TaskStatus).where(TaskStatus.slug == slug))
    task_status = result.scalar_one_or_none()
    if not task_status:
        raise NotFoundError(f"Task status not found with slug: {slug}")
    return task_status


async def _resolve_assignee(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError(f"User not found with id: {user_id}")
    return user


async def _resolve_label_ids(db: AsyncSession, label_ids: Iterable[int]) -> list[int]:
    wanted = sorted(set(label_ids))
    if not wanted:
        return []
    result = await db.execute(select(Label.id).where(Label.id.in_(wanted)))
    found = set(result.scalars().all())
    for label_id in wanted:
        if label_id not in found:
            raise NotFoundError(f"Label not found with id: {label_id}")
    return wanted


async def _replace_labels(db: AsyncSession, task_id: int, label_ids: list[int]) -> None:
    await db.execute(delete(task_labels).where(task_labels.c.task_id == task_id))
    if label_ids:
        await db.execute(
            insert(task_labels),
            [{"task_id": task_id, "label_id": label_id} for label_id in label_ids],
        )


async def _to_responses(db: AsyncSession, tasks: list[Task]) -> list[TaskResponse]:
    """Materialise status slugs and label ids for a batch of tasks."""
    if not tasks:
        return []

    status_ids = {t.task_status_id for t in tasks}
    result = await db.execute(select(TaskStatus.id, TaskStatus.slug).where(TaskStatus.id.in_(status_ids)))
    slugs = {row.id: row.slug for row in result}

    result = await db.execute(
        select(task_labels.c.task_id, task_labels.c.label_id)
        .where(task_labels.c.task_id.in_([t.id for t in tasks]))
    )
    labels_by_task: dict[int, list[int]] = {}
    for task_id, label_id in result:
        labels_by_task.setdefault(task_id, []).append(label_id)

    return [
        TaskResponse(
            id=t.id,
            index=t.index,
            title=t.name,
            content=t.description,
            status=slugs[t.task_status_id],
            assignee_id=t.assignee_id,
            label_ids=sorted(labels_by_task.get(t.id, [])),
            created_at=t.created_at,
        )
        for t in tasks
    ]


async def list_tasks(db: AsyncSession) -> list[TaskResponse]:
    result = await db.execute(select(Task).order_by(Task.id))
    return await _to_responses(db, list(result.scalars().all()))


async def filter_tasks(
    db: AsyncSession,
    title_cont: Optional[str] = None,
    assignee_id: Optional[int] = None,
    status: Optional[str] = None,
    label_id: Optional[int] = None,
) -> list[TaskResponse]:
    """Every given filter must match; blank strings count as not given."""
    query = select(Task)

    if title_cont and title_cont.strip():
        query = query.where(Task.name.icontains(title_cont, autoescape=True))

    if assignee_id is not None:
        query = query.where(Task.assignee_id == assignee_id)

    if status and status.strip():
        query = query.join(TaskStatus, TaskStatus.id == Task.task_status_id).where(TaskStatus.slug == status)

    if label_id is not None:
        # Subquery rather than a join so a task is listed once
        query = query.where(
            Task.id.in_(select(task_labels.c.task_id).where(task_labels.c.label_id == label_id))
        )

    result = await db.execute(query.order_by(Task.id))
    return await _to_responses(db, list(result.scalars().all()))


async def get_task(db: AsyncSession, task_id: int) -> TaskResponse:
    task = await _get_task_row(db, task_id)
    return (await _to_responses(db, [task]))[0]


async def create_task(db: AsyncSession, task_in: TaskCreate, principal: Optional[Principal]) -> TaskResponse:
    task_status = await _resolve_status(db, task_in.status)

    if task_in.assignee_id is not None:
        await _resolve_assignee(db, task_in.assignee_id)

    label_ids = await _resolve_label_ids(db, task_in.label_ids or [])

    task = Task(
        name=task_in.title,
        index=task_in.index,
        description=task_in.content,
        task_status_id=task_status.id,
        assignee_id=task_in.assignee_id,
        created_at=datetime.now(timezone.utc),
    )
    db.add(task)
    await db.flush()
    await _replace_labels(db, task.id, label_ids)
    await db.commit()
    await db.refresh(task)

    logger.info("Task %s created by %s", task.id, principal.email if principal else "system")
    return (await _to_responses(db, [task]))[0]


async def _check_assignee(db: AsyncSession, task: Task, principal: Optional[Principal], action: str) -> None:
    # Unassigned tasks are open to everyone
    if task.assignee_id is None:
        return
    assignee = await _resolve_assignee(db, task.assignee_id)
    authorize(principal, assignee.email, f"You are not authorized to {action} this task")


async def update_task(db: AsyncSession, task_id: int, task_in: TaskUpdate, principal: Optional[Principal]) -> TaskResponse:
    task = await _get_task_row(db, task_id)
    await _check_assignee(db, task, principal, "update")

    changes = task_in.changes()

    if "title" in changes:
        task.name = changes["title"]
    if "content" in changes:
        task.description = changes["content"]
    if "index" in changes:
        task.index = changes["index"]
    if "status" in changes:
        task.task_status_id = (await _resolve_status(db, changes["status"])).id
    if "assignee_id" in changes:
        if changes["assignee_id"] is not None:
            await _resolve_assignee(db, changes["assignee_id"])
        task.assignee_id = changes["assignee_id"]
    if "label_ids" in changes:
        label_ids = await _resolve_label_ids(db, changes["label_ids"] or [])
        await _replace_labels(db, task.id, label_ids)

    db.add(task)
    await db.commit()
    await db.refresh(task)

    logger.info("Task %s updated by %s", task.id, principal.email if principal else "system")
    return (await _to_responses(db, [task]))[0]


async def delete_task(db: AsyncSession, task_id: int, principal: Optional[Principal]) -> None:
    task = await _get_task_row(db, task_id)
    await _check_assignee(db, task, principal, "delete")

    await db.execute(delete(task_labels).where(task_labels.c.task_id == task.id))
    await db.delete(task)
    await db.commit()

    logger.info("Task %s deleted by %s", task_id, principal.email if principal else "system")
