from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from task_manager.database import get_db
from task_manager.core.auth import get_current_principal
from task_manager.core.permissions import Principal
from task_manager.schemas.task_status import TaskStatusCreate, TaskStatusUpdate, TaskStatusResponse
from task_manager.services import task_status as task_status_service

router = APIRouter(prefix="/task_statuses", tags=["task_statuses"])

# Reads are public; changes need a logged-in user

@router.get("", response_model=list[TaskStatusResponse])
async def list_statuses(response: Response, db: AsyncSession = Depends(get_db)):
    statuses = await task_status_service.list_statuses(db)
    response.headers["X-Total-Count"] = str(len(statuses))
    return statuses


@router.get("/slug/{slug}", response_model=TaskStatusResponse)
async def get_status_by_slug(slug: str, db: AsyncSession = Depends(get_db)):
    return await task_status_service.get_status_by_slug(db, slug)


@router.get("/{status_id}", response_model=TaskStatusResponse)
async def get_status(status_id: int, db: AsyncSession = Depends(get_db)):
    return await task_status_service.get_status(db, status_id)


@router.post("", response_model=TaskStatusResponse, status_code=status.HTTP_201_CREATED)
async def create_status(
    status_in: TaskStatusCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return await task_status_service.create_status(db, status_in)


@router.put("/{status_id}", response_model=TaskStatusResponse)
async def update_status(
    status_id: int,
    status_in: TaskStatusUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return await task_status_service.update_status(db, status_id, status_in)


@router.delete("/{status_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_status(
    status_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    await task_status_service.delete_status(db, status_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
