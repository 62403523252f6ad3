"""
models package
- Purpose: Import all ORM models so Alembic autogenerate discovers them.
- Important: Alembic only sees models that are imported somewhere.
"""

from app.models.question_record import QuestionRecord
from app.models.generation_status import GenerationStatus

__all__ = [
    "QuestionRecord",
    "GenerationStatus",
]
