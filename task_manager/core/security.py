from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt

from task_manager.config import settings


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a token whose ``sub`` claim is the user's email."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {"sub": subject, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
