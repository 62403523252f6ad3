# app/auth/jwt.py
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError

from app.core.config import settings
from app.core import ErrorReason
from app.core.errors import unauthorized

def create_access_token(*, subject: str, expires_minutes: int | None = None) -> str:
    minutes = expires_minutes or settings.JWT_ACCESS_TOKEN_EXPIRES_MINUTES
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "exp": now + timedelta(minutes=minutes),
        "iat": now,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise unauthorized("Invalid or expired token", reason=ErrorReason.AUTH_INVALID)
