from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from task_manager.database import get_db
from task_manager.models.user import User
from task_manager.core.exceptions import AuthenticationError
from task_manager.core.permissions import Principal
from task_manager.core.security import decode_access_token
from task_manager.utils.password import verify_password

# auto_error=False so a missing header is a 401, not FastAPI's default 403
reusable_oauth2 = HTTPBearer(auto_error=False)


async def authenticate(db: AsyncSession, username: str, password: str) -> User:
    result = await db.execute(select(User).where(User.email == username))
    user = result.scalar_one_or_none()

    # Same message whether the account exists or not
    if not user or not verify_password(password, user.hashed_password):
        raise AuthenticationError("Invalid username or password")
    return user


async def get_current_principal(
    db: AsyncSession = Depends(get_db),
    token: Optional[HTTPAuthorizationCredentials] = Depends(reusable_oauth2)
) -> Principal:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if token is None:
        raise credentials_exception
    try:
        payload = decode_access_token(token.credentials)
        email: Optional[str] = payload.get("sub")
        if email is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is None:
        raise credentials_exception
    return Principal(id=user.id, email=user.email)
