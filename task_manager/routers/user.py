from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from task_manager.database import get_db
from task_manager.core.auth import get_current_principal
from task_manager.core.permissions import Principal
from task_manager.schemas.user import UserCreate, UserUpdate, UserResponse
from task_manager.services import user as user_service

router = APIRouter(prefix="/users", tags=["users"])

@router.get("", response_model=list[UserResponse])
async def list_users(
    response: Response,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    users = await user_service.list_users(db)
    response.headers["X-Total-Count"] = str(len(users))
    return users


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return await user_service.get_user(db, user_id)


# Signup, no token needed
@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user_in: UserCreate, db: AsyncSession = Depends(get_db)):
    return await user_service.create_user(db, user_in)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_in: UserUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return await user_service.update_user(db, user_id, user_in, principal)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    await user_service.delete_user(db, user_id, principal)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
