# app/auth/deps.py
import logging
import secrets

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.auth.jwt import decode_access_token
from app.core.config import settings
from app.core import AppError
from app.core.errors import config_error, forbidden, unauthorized

logger = logging.getLogger("app.auth")

bearer = HTTPBearer(auto_error=False)


def _bearer_token(creds: HTTPAuthorizationCredentials | None) -> str | None:
    if not creds or creds.scheme.lower() != "bearer" or not creds.credentials:
        return None
    return creds.credentials


def require_admin(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> str:
    """Returns the admin principal (token subject) allowed to control generation."""
    token = _bearer_token(creds)
    if not token:
        raise unauthorized("Missing Authorization: Bearer token")

    payload = decode_access_token(token)

    sub = str(payload.get("sub") or "")
    if not sub or sub.lower() not in settings.admin_principals:
        raise forbidden("Access denied")

    return sub


def optional_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> str | None:
    """Subject of a valid token if one was sent; anonymous otherwise."""
    token = _bearer_token(creds)
    if not token:
        return None
    try:
        return decode_access_token(token).get("sub")
    except AppError:
        # public endpoints: a stale token just means an anonymous caller
        logger.info("auth.optional_token_ignored")
        return None


def require_cron_secret(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> None:
    expected = settings.CRON_SECRET
    if not expected:
        # fail closed: an unconfigured secret must not open the endpoint
        logger.error("cron.secret_missing")
        raise config_error("CRON_SECRET is not configured")

    token = _bearer_token(creds)
    if not token or not secrets.compare_digest(token.encode(), expected.encode()):
        logger.warning("cron.unauthorized", extra={"has_auth_header": creds is not None})
        raise unauthorized("Invalid cron credentials")
