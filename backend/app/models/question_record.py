"""
question_record.py
- Purpose: One asked/generated question and (once answered) its study payload.
- result IS NULL means a tracking row: the question was seen but not answered yet.
- Uniqueness of the query text is logical only (normalized lookup), not a DB constraint.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, JsonType, utcnow

# Owner recorded for rows produced by the generation run with no admin on record
SYSTEM_USER_ID = "system"


class QuestionRecord(Base):
    __tablename__ = "searches"

    __table_args__ = (
        Index("ix_searches_slug", "slug"),
        Index("ix_searches_created_at", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    query: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str | None] = mapped_column(Text, nullable=True)
    result: Mapped[dict | None] = mapped_column(JsonType, nullable=True)
    user_id: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utcnow, nullable=False)

    @property
    def is_complete(self) -> bool:
        return self.result is not None


# Dedup / cache lookups go through lower(trim(query))
Index("ix_searches_query_normalized", func.lower(func.trim(QuestionRecord.query)))
