"""
errors.py
- Purpose: AppError used across services/repos for consistent errors.
- Pattern: raise AppError(...) in service/repo, handler converts to JSON response.
"""

from dataclasses import dataclass
from typing import Any

from fastapi import status as http_status
from app.core.error_codes import ErrorCode
from app.core.error_reasons import ErrorReason


@dataclass
class AppError(Exception):
    code: ErrorCode
    reason: str
    status_code: int = http_status.HTTP_400_BAD_REQUEST
    details: dict[str, Any] | None = None
    message: str | None = None  # Optional human-readable message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message or self.reason}"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": {
                "code": self.code,
                "reason": self.reason,
                "message": self.message if self.message else self.reason,
            }
        }
        if self.details:
            payload["error"]["details"] = self.details
        return payload


# Convenience constructors
def bad_request(reason: str = ErrorReason.INVALID_INPUT, *, code: ErrorCode = ErrorCode.VALIDATION_ERROR, details: dict | None = None, message: str | None = None) -> AppError:
    return AppError(code=code, reason=str(reason.value if isinstance(reason, ErrorReason) else reason), status_code=http_status.HTTP_400_BAD_REQUEST, details=details, message=message)


def unauthorized(message: str, *, reason: ErrorReason = ErrorReason.AUTH_REQUIRED) -> AppError:
    return AppError(code=ErrorCode.UNAUTHORIZED, reason=reason.value, status_code=http_status.HTTP_401_UNAUTHORIZED, message=message)


def forbidden(message: str = "Not authorized") -> AppError:
    return AppError(code=ErrorCode.FORBIDDEN, reason=ErrorReason.AUTH_FORBIDDEN.value, status_code=http_status.HTTP_403_FORBIDDEN, message=message)


def not_found(reason: str = ErrorReason.RESOURCE_NOT_FOUND, *, details: dict | None = None, message: str | None = None) -> AppError:
    return AppError(code=ErrorCode.NOT_FOUND, reason=str(reason.value if isinstance(reason, ErrorReason) else reason), status_code=http_status.HTTP_404_NOT_FOUND, details=details, message=message)


def config_error(message: str) -> AppError:
    return AppError(code=ErrorCode.CONFIG_ERROR, reason=ErrorReason.MISCONFIGURED.value, status_code=http_status.HTTP_503_SERVICE_UNAVAILABLE, message=message)


def internal_error(reason: str = ErrorReason.UNKNOWN, *, details: dict | None = None) -> AppError:
    return AppError(code=ErrorCode.INTERNAL_ERROR, reason=str(reason.value if isinstance(reason, ErrorReason) else reason), status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR, details=details)
