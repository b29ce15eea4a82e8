import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from task_manager.core.exceptions import BadRequestError, ConflictError, NotFoundError
from task_manager.core.permissions import Principal, authorize, authorize_label_change
from task_manager.models.label import Label
from task_manager.models.task import task_labels
from task_manager.schemas.label import LabelResponse

logger = logging.getLogger(__name__)


def to_label_response(label: Label) -> LabelResponse:
    return LabelResponse(id=label.id, name=label.name, created_at=label.created_at)


async def _get_label_row(db: AsyncSession, label_id: int) -> Label:
    result = await db.execute(select(Label).where(Label.id == label_id))
    label = result.scalar_one_or_none()
    if not label:
        raise NotFoundError(f"Label not found with id: {label_id}")
    return label


async def _ensure_name_free(db: AsyncSession, name: str, exclude_id: Optional[int] = None) -> None:
    query = select(Label.id).where(Label.name == name)
    if exclude_id is not None:
        query = query.where(Label.id != exclude_id)
    result = await db.execute(query)
    if result.first() is not None:
        raise BadRequestError(f"Label with name '{name}' already exists")


async def list_labels(db: AsyncSession) -> list[LabelResponse]:
    result = await db.execute(select(Label).order_by(Label.id))
    return [to_label_response(label) for label in result.scalars().all()]


async def get_label(db: AsyncSession, label_id: int) -> LabelResponse:
    return to_label_response(await _get_label_row(db, label_id))


async def get_label_by_name(db: AsyncSession, name: str) -> LabelResponse:
    result = await db.execute(select(Label).where(Label.name == name))
    label = result.scalar_one_or_none()
    if not label:
        raise NotFoundError(f"Label not found with name: {name}")
    return to_label_response(label)


async def create_label(db: AsyncSession, name: str, principal: Optional[Principal]) -> LabelResponse:
    # Labels belong to whoever creates them; only anonymous callers skip this
    authorize(principal, principal.email if principal else None)
    await _ensure_name_free(db, name)

    label = Label(name=name, created_at=datetime.now(timezone.utc))
    db.add(label)
    await db.commit()
    await db.refresh(label)

    logger.info("Label %s (%r) created by %s", label.id, label.name, principal.email if principal else "system")
    return to_label_response(label)


async def update_label(db: AsyncSession, label_id: int, name: str, principal: Optional[Principal]) -> LabelResponse:
    label = await _get_label_row(db, label_id)
    authorize_label_change(principal, label.name, "update")
    await _ensure_name_free(db, name, exclude_id=label.id)

    label.name = name
    db.add(label)
    await db.commit()
    await db.refresh(label)
    return to_label_response(label)


async def delete_label(db: AsyncSession, label_id: int, principal: Optional[Principal]) -> None:
    label = await _get_label_row(db, label_id)
    authorize_label_change(principal, label.name, "delete")

    in_use = await db.execute(
        select(func.count()).select_from(task_labels).where(task_labels.c.label_id == label.id)
    )
    if in_use.scalar_one() > 0:
        raise ConflictError("Cannot delete label that is associated with tasks")

    await db.delete(label)
    await db.commit()
    logger.info("Label %s deleted by %s", label_id, principal.email if principal else "system")
