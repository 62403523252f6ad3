"""
question/write.py
- Purpose: Write-side DB operations for QuestionRecord.
- Design: No business logic; persistence only. Callers own commit/rollback.
"""

from dataclasses import dataclass
from typing import Callable

from sqlalchemy.orm import Session

from app.models.question_record import QuestionRecord
from app.repos.question.read import QuestionReadRepo


@dataclass(frozen=True)
class CompleteResult:
    record: QuestionRecord
    created: bool    # False when an already-complete record was returned untouched


class QuestionWriteRepo:
    def __init__(self, db: Session):
        self.db = db
        self.read = QuestionReadRepo(db)

    def insert_tracking(self, query: str, slug: str | None, user_id: str | None) -> QuestionRecord:
        rec = QuestionRecord(query=query, slug=slug, result=None, user_id=user_id)
        self.db.add(rec)
        self.db.flush()
        self.db.refresh(rec)
        return rec

    def complete_record(
        self,
        query: str,
        result: dict,
        *,
        user_id: str | None,
        slug_factory: Callable[[], str],
    ) -> CompleteResult:
        """
        Idempotent upsert keyed by normalized query text.

        1. A complete record already exists -> returned as-is (created=False).
        2. A tracking record exists -> its result is filled in; slug and created_at kept.
        3. Otherwise a new complete record is inserted with slug_factory().
        """
        existing = self.read.find_complete_by_query(query)
        if existing:
            return CompleteResult(record=existing, created=False)

        tracking = self.read.find_latest_tracking(query)
        if tracking:
            tracking.result = result
            if not tracking.slug:
                tracking.slug = slug_factory()
            if tracking.user_id is None and user_id is not None:
                tracking.user_id = user_id
            self.db.flush()
            self.db.refresh(tracking)
            return CompleteResult(record=tracking, created=True)

        rec = QuestionRecord(query=query, slug=slug_factory(), result=result, user_id=user_id)
        self.db.add(rec)
        self.db.flush()
        self.db.refresh(rec)
        return CompleteResult(record=rec, created=True)
