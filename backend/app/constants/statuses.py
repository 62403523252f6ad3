"""
statuses.py
- Purpose: Outcome of one question inside a generation tick.
- Design: Keep API-facing values stable and explicit.
"""

from enum import Enum


class ItemStatus(str, Enum):
    SAVED = "saved"
    SKIPPED = "skipped"     # duplicate of an already answered question
    FAILED = "failed"
