"""
base.py
- Purpose: Declarative Base shared by all ORM models + small column helpers.
"""

from datetime import datetime

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    return datetime.utcnow()


# JSONB on Postgres, plain JSON elsewhere (sqlite for local runs/tests)
JsonType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    pass
