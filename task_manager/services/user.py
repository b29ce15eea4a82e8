import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from task_manager.core.exceptions import BadRequestError, ConflictError, NotFoundError
from task_manager.core.permissions import Principal, authorize
from task_manager.models.task import Task
from task_manager.models.user import User
from task_manager.schemas.user import UserCreate, UserResponse, UserUpdate
from task_manager.utils.password import hash_password

logger = logging.getLogger(__name__)


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        created_at=user.created_at,
    )


async def _get_user_row(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError(f"User not found with id: {user_id}")
    return user


async def _ensure_email_free(db: AsyncSession, email: str, exclude_id: Optional[int] = None) -> None:
    query = select(User.id).where(User.email == email)
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    result = await db.execute(query)
    if result.first() is not None:
        raise BadRequestError("Email already registered")


async def list_users(db: AsyncSession) -> list[UserResponse]:
    result = await db.execute(select(User).order_by(User.id))
    return [to_user_response(u) for u in result.scalars().all()]


async def get_user(db: AsyncSession, user_id: int) -> UserResponse:
    return to_user_response(await _get_user_row(db, user_id))


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, user_in: UserCreate) -> UserResponse:
    await _ensure_email_free(db, user_in.email)

    now = datetime.now(timezone.utc)
    user = User(
        email=user_in.email,
        first_name=user_in.first_name,
        last_name=user_in.last_name,
        hashed_password=hash_password(user_in.password),
        created_at=now,
        updated_at=now,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info("User %s registered", user.id)
    return to_user_response(user)


async def update_user(db: AsyncSession, user_id: int, user_in: UserUpdate, principal: Optional[Principal]) -> UserResponse:
    user = await _get_user_row(db, user_id)
    # Checked against the stored email, before anything changes
    authorize(principal, user.email, "You are not authorized to perform this operation on this user")

    changes = user_in.changes()

    if "email" in changes and changes["email"] != user.email:
        await _ensure_email_free(db, changes["email"], exclude_id=user.id)
        user.email = changes["email"]
    if "first_name" in changes:
        user.first_name = changes["first_name"]
    if "last_name" in changes:
        user.last_name = changes["last_name"]
    if "password" in changes:
        user.hashed_password = hash_password(changes["password"])

    user.updated_at = datetime.now(timezone.utc)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return to_user_response(user)


async def delete_user(db: AsyncSession, user_id: int, principal: Optional[Principal]) -> None:
    user = await _get_user_row(db, user_id)
    authorize(principal, user.email, "You are not authorized to perform this operation on this user")

    assigned = await db.execute(select(func.count(Task.id)).where(Task.assignee_id == user.id))
    if assigned.scalar_one() > 0:
        raise ConflictError("Cannot delete user because they are assigned to one or more tasks")

    await db.delete(user)
    await db.commit()
    logger.info("User %s deleted", user_id)
