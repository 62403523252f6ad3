"""
question/read.py
- Purpose: Read-side DB operations for QuestionRecord.
- Design: Keeps query access patterns (normalized lookup, slug lookup, counts) centralized.
"""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.question_record import QuestionRecord


def normalize_query(query: str) -> str:
    """Key used for dedup: trimmed + lowercased. Mirrors lower(trim(query)) in SQL."""
    return (query or "").strip().lower()


def _normalized_column():
    return func.lower(func.trim(QuestionRecord.query))


class QuestionReadRepo:
    def __init__(self, db: Session):
        self.db = db

    def find_complete_by_query(self, query: str) -> QuestionRecord | None:
        return (
            self.db.query(QuestionRecord)
            .filter(
                _normalized_column() == normalize_query(query),
                QuestionRecord.result.is_not(None),
            )
            .order_by(QuestionRecord.created_at.desc())
            .first()
        )

    def find_latest_tracking(self, query: str) -> QuestionRecord | None:
        return (
            self.db.query(QuestionRecord)
            .filter(
                _normalized_column() == normalize_query(query),
                QuestionRecord.result.is_(None),
            )
            .order_by(QuestionRecord.created_at.desc())
            .first()
        )

    def get_by_slug(self, slug: str) -> QuestionRecord | None:
        return (
            self.db.query(QuestionRecord)
            .filter(QuestionRecord.slug == slug)
            .order_by(QuestionRecord.created_at.asc())
            .first()
        )

    def list_slugs_with_prefix(self, base_slug: str) -> set[str]:
        """Slugs that could collide with `base_slug` or one of its suffixed variants."""
        rows = (
            self.db.query(QuestionRecord.slug)
            .filter(QuestionRecord.slug.is_not(None), QuestionRecord.slug.startswith(base_slug, autoescape=True))
            .all()
        )
        return {r[0] for r in rows}

    def list_recent(self, limit: int = 50) -> list[QuestionRecord]:
        return (
            self.db.query(QuestionRecord)
            .order_by(QuestionRecord.created_at.desc())
            .limit(limit)
            .all()
        )

    def count_complete(self, since: datetime | None = None) -> int:
        q = self.db.query(func.count(QuestionRecord.id)).filter(QuestionRecord.result.is_not(None))
        if since is not None:
            q = q.filter(QuestionRecord.created_at >= since)
        return int(q.scalar() or 0)

    def list_complete_excluding(self, query: str, limit: int = 100) -> list[QuestionRecord]:
        """Newest complete records other than `query` (normalized); candidate pool for related topics."""
        return (
            self.db.query(QuestionRecord)
            .filter(
                QuestionRecord.result.is_not(None),
                _normalized_column() != normalize_query(query),
            )
            .order_by(QuestionRecord.created_at.desc())
            .limit(limit)
            .all()
        )
