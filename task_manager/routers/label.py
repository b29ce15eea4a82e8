from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from task_manager.database import get_db
from task_manager.core.auth import get_current_principal
from task_manager.core.permissions import Principal
from task_manager.schemas.label import LabelCreate, LabelResponse
from task_manager.services import label as label_service

router = APIRouter(prefix="/labels", tags=["labels"])

@router.get("", response_model=list[LabelResponse])
async def list_labels(
    response: Response,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    labels = await label_service.list_labels(db)
    response.headers["X-Total-Count"] = str(len(labels))
    return labels


@router.get("/{label_id}", response_model=LabelResponse)
async def get_label(
    label_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return await label_service.get_label(db, label_id)


@router.post("", response_model=LabelResponse, status_code=status.HTTP_201_CREATED)
async def create_label(
    label_in: LabelCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return await label_service.create_label(db, label_in.name, principal)


@router.put("/{label_id}", response_model=LabelResponse)
async def update_label(
    label_id: int,
    label_in: LabelCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    return await label_service.update_label(db, label_id, label_in.name, principal)


@router.delete("/{label_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_label(
    label_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal)
):
    await label_service.delete_label(db, label_id, principal)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
