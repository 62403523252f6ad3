"""
generation_status/write.py
- Purpose: Mutations of the generation status singleton.
- Design: every transition is ONE conditional UPDATE (compare-and-set / increment-by-delta),
  so overlapping ticks and admin calls cannot lose each other's writes.
  Each method returns True when the row matched its guard. Callers commit.
"""

from datetime import datetime

from sqlalchemy.orm import Session

from app.models.generation_status import GenerationStatus, STATUS_KEY


class GenerationStatusWriteRepo:
    def __init__(self, db: Session):
        self.db = db

    def _row(self):
        return self.db.query(GenerationStatus).filter(GenerationStatus.key == STATUS_KEY)

    def ensure_status(self, default_target: int) -> GenerationStatus:
        """Provisioning helper: create the singleton if missing (no-op otherwise)."""
        existing = self._row().first()
        if existing:
            return existing
        row = GenerationStatus(key=STATUS_KEY, is_generating=False, progress=0, target=default_target)
        self.db.add(row)
        self.db.flush()
        return row

    def try_start(self, *, target: int, owner_user_id: str | None, now: datetime) -> bool:
        updated = (
            self._row()
            .filter(GenerationStatus.is_generating.is_(False))
            .update(
                {
                    "is_generating": True,
                    "target": target,
                    "started_at": now,
                    "owner_user_id": owner_user_id,
                },
                synchronize_session=False,
            )
        )
        return updated == 1

    def try_stop(self) -> bool:
        updated = (
            self._row()
            .filter(GenerationStatus.is_generating.is_(True))
            .update({"is_generating": False}, synchronize_session=False)
        )
        return updated == 1

    def reset(self, *, default_target: int) -> bool:
        updated = self._row().update(
            {
                "is_generating": False,
                "progress": 0,
                "target": default_target,
                "started_at": None,
                "last_run_at": None,
                "owner_user_id": None,
            },
            synchronize_session=False,
        )
        return updated == 1

    def add_progress(self, delta: int, *, now: datetime) -> bool:
        updated = self._row().update(
            {
                "progress": GenerationStatus.progress + delta,
                "last_run_at": now,
            },
            synchronize_session=False,
        )
        return updated == 1

    def finish_if_target_reached(self) -> bool:
        updated = (
            self._row()
            .filter(
                GenerationStatus.is_generating.is_(True),
                GenerationStatus.progress >= GenerationStatus.target,
            )
            .update({"is_generating": False}, synchronize_session=False)
        )
        return updated == 1
