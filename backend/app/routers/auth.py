# app/routers/auth.py
import secrets

from pydantic import BaseModel
from fastapi import APIRouter

from app.core.config import settings
from app.auth.jwt import create_access_token
from app.core import ErrorReason
from app.core.errors import config_error, unauthorized

router = APIRouter(prefix="/auth", tags=["auth"])

class LoginRequest(BaseModel):
    username: str
    password: str

class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in_minutes: int

@router.post("/login", response_model=LoginResponse)
def login(req: LoginRequest) -> LoginResponse:
    if not settings.ADMIN_USERNAME or not settings.ADMIN_PASSWORD:
        raise config_error("Admin credentials are not configured")

    user_ok = secrets.compare_digest(req.username.encode(), settings.ADMIN_USERNAME.encode())
    pass_ok = secrets.compare_digest(req.password.encode(), settings.ADMIN_PASSWORD.encode())
    if not (user_ok and pass_ok):
        raise unauthorized("Invalid credentials", reason=ErrorReason.AUTH_INVALID)

    token = create_access_token(subject=settings.ADMIN_USERNAME)
    return LoginResponse(
        access_token=token,
        expires_in_minutes=settings.JWT_ACCESS_TOKEN_EXPIRES_MINUTES,
    )
