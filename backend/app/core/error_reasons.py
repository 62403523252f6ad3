"""
error_reasons.py
- Purpose: Human-friendly "reason" strings.
- Keep these stable; they may be surfaced in the admin UI.
"""

from enum import Enum


class ErrorReason(str, Enum):
    UNKNOWN = "Unknown error"

    INVALID_INPUT = "Invalid input"
    RESOURCE_NOT_FOUND = "Resource not found"
    ALREADY_EXISTS = "Resource already exists"
    TOO_MANY_REQUESTS = "Too many requests"

    DATABASE_UNAVAILABLE = "Database unavailable"
    LLM_FAILED = "LLM request failed"
    INTERNAL_ERROR = "Internal server error"
    MISCONFIGURED = "Server misconfigured"
    AUTH_REQUIRED = "Authentication required"
    AUTH_INVALID = "Invalid authentication"
    AUTH_FORBIDDEN = "Authentication forbidden"

    GENERATION_ALREADY_RUNNING = "Generation already running"
    GENERATION_NOT_RUNNING = "No generation running"
    DAILY_LIMIT_REACHED = "Daily limit reached"
