# task_manager/routers/auth.py
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from task_manager.schemas.user import LoginRequest
from task_manager.database import get_db
from task_manager.core.auth import authenticate
from task_manager.core.security import create_access_token


router = APIRouter(tags=["auth"])


@router.post("/login", response_class=PlainTextResponse)
async def login(login_in: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await authenticate(db, login_in.username, login_in.password)

    # Raw token in the body; clients send it back as "Authorization: Bearer <token>"
    return create_access_token(user.email)
