import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from task_manager.models.label import Label
from task_manager.models.task_status import TaskStatus
from task_manager.schemas.task_status import TaskStatusCreate
from task_manager.schemas.user import UserCreate
from task_manager.services import label as label_service
from task_manager.services import task_status as task_status_service
from task_manager.services import user as user_service

logger = logging.getLogger(__name__)

DEFAULT_LABELS = ["feature", "bug"]
DEFAULT_STATUSES = [
    ("New", "new"),
    ("In Progress", "in_progress"),
    ("Done", "done"),
]
DEFAULT_USER = {
    "email": "hexlet@example.com",
    "first_name": "Hexlet",
    "last_name": "User",
    "password": "qwerty",
}


async def seed_default_data(db: AsyncSession) -> None:
    """Create the default labels, statuses and user if they are missing."""
    for name in DEFAULT_LABELS:
        existing = await db.execute(select(Label.id).where(Label.name == name))
        if existing.first() is None:
            await label_service.create_label(db, name, principal=None)

    for name, slug in DEFAULT_STATUSES:
        existing = await db.execute(select(TaskStatus.id).where(TaskStatus.slug == slug))
        if existing.first() is None:
            await task_status_service.create_status(db, TaskStatusCreate(name=name, slug=slug))

    if await user_service.get_user_by_email(db, DEFAULT_USER["email"]) is None:
        await user_service.create_user(db, UserCreate(**DEFAULT_USER))

    logger.info("Default data seeded")
