"""
db/base.py
- Purpose: Single import point for the metadata (Alembic env, test schema setup).
- Importing app.models registers every table on Base.metadata.
"""

from app.models.base import Base
import app.models  # noqa: F401  (ensures models are imported)

metadata = Base.metadata

__all__ = ["Base", "metadata"]
