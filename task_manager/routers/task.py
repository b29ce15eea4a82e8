from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from task_manager.database import get_db
from task_manager.core.auth import get_current_principal
from task_manager.core.permissions import Principal
from task_manager.schemas.task import TaskCreate, TaskUpdate, TaskResponse
from task_manager.services import task as task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])

@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    response: Response,
    title_cont: Optional[str] = Query(None, alias="titleCont"),
    assignee_id: Optional[int] = Query(None, alias="assigneeId"),
    task_status: Optional[str] = Query(None, alias="status"),
    label_id: Optional[int] = Query(None, alias="labelId"),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    if title_cont is not None or assignee_id is not None or task_status is not None or label_id is not None:
        tasks = await task_service.filter_tasks(db, title_cont, assignee_id, task_status, label_id)
    else:
        tasks = await task_service.list_tasks(db)

    response.headers["X-Total-Count"] = str(len(tasks))
    return tasks


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return await task_service.get_task(db, task_id)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_in: TaskCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return await task_service.create_task(db, task_in, principal)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    task_in: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return await task_service.update_task(db, task_id, task_in, principal)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    await task_service.delete_task(db, task_id, principal)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
