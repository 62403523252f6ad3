"""
generation_status.py
- Purpose: Singleton row holding the state of the automated question generation run.
- Exactly one row (key=STATUS_KEY). Mutations are conditional UPDATEs in
  repos/generation_status/write.py, never full-row overwrites.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base

STATUS_KEY = "generation_status"


class GenerationStatus(Base):
    __tablename__ = "generation_status"

    key: Mapped[str] = mapped_column(String(64), primary_key=True, default=STATUS_KEY)

    is_generating: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    target: Mapped[int] = mapped_column(Integer, nullable=False, default=500)

    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    last_run_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    owner_user_id: Mapped[str | None] = mapped_column(Text, nullable=True)
