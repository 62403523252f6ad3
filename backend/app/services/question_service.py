"""
question_service.py
- Purpose: Question records: dedup guard, slug allocation, tracking + completion, cached search.
- Design: Thin over the repos; owns the transaction (commit/rollback) for each operation.
"""

import logging
from typing import Callable

from sqlalchemy.orm import Session

from app.core import AppError, ErrorCode, ErrorReason
from app.core.errors import bad_request, not_found
from app.llm.errors import LLMError
from app.models.question_record import QuestionRecord
from app.repos.question.read import QuestionReadRepo
from app.repos.question.write import CompleteResult, QuestionWriteRepo
from app.schemas.study import StudyResponse
from app.models.base import utcnow
from app.services.answer_generator import generate_answer
from app.services.similar_topics import CANDIDATE_POOL, ScoredTopic, rank_similar
from app.utils.slugify import generate_slug, generate_unique_slug

logger = logging.getLogger("app.services.question_service")


class QuestionService:
    def __init__(self, db: Session, *, answer_fn: Callable[[str], StudyResponse] = generate_answer):
        self.db = db
        self.read = QuestionReadRepo(db)
        self.write = QuestionWriteRepo(db)
        self.answer_fn = answer_fn

    # ----------------------------
    # Dedup / slugs
    # ----------------------------
    def is_duplicate(self, question: str) -> bool:
        return self.read.find_complete_by_query(question) is not None

    def allocate_slug(self, question: str) -> str:
        existing = self.read.list_slugs_with_prefix(generate_slug(question))
        return generate_unique_slug(question, existing)

    # ----------------------------
    # Writes
    # ----------------------------
    def track(self, query: str, user_id: str | None) -> QuestionRecord:
        query = (query or "").strip()
        if not query:
            raise bad_request(message="Query is required")
        try:
            rec = self.write.insert_tracking(query, self.allocate_slug(query), user_id)
            self.db.commit()
            return rec
        except Exception:
            self.db.rollback()
            raise

    def save_result(self, query: str, result: dict, user_id: str | None) -> CompleteResult:
        try:
            out = self.write.complete_record(
                query,
                result,
                user_id=user_id,
                slug_factory=lambda: self.allocate_slug(query),
            )
            self.db.commit()
            return out
        except Exception:
            self.db.rollback()
            raise

    # ----------------------------
    # Reads
    # ----------------------------
    def get_page(self, slug: str) -> QuestionRecord:
        rec = self.read.get_by_slug(slug)
        if not rec or not rec.is_complete:
            raise not_found(message="Question not found")
        return rec

    def list_recent(self, limit: int = 50) -> list[QuestionRecord]:
        return self.read.list_recent(limit=max(1, min(limit, 200)))

    def similar_topics(
        self,
        query: str,
        *,
        search_topic: str | None = None,
        key_terms: list[str] | None = None,
    ) -> list[ScoredTopic]:
        query = (query or "").strip()
        if not query:
            raise bad_request(message="Query is required")
        candidates = self.read.list_complete_excluding(query, limit=CANDIDATE_POOL)
        return rank_similar(query, candidates, search_topic=search_topic, key_terms=key_terms or [], now=utcnow())

    # ----------------------------
    # Search (cache-first)
    # ----------------------------
    def search(self, query: str, user_id: str | None = None) -> dict:
        query = (query or "").strip()
        if not query:
            raise bad_request(message="Query is required")

        cached = self.read.find_complete_by_query(query)
        if cached:
            logger.info("search.cache_hit", extra={"slug": cached.slug})
            return cached.result

        try:
            study = self.answer_fn(query)
        except LLMError as e:
            raise AppError(
                code=ErrorCode.LLM_ERROR,
                reason=ErrorReason.LLM_FAILED.value,
                status_code=502,
                message=str(e),
            ) from e

        result = study.to_record()
        if not study.is_relevant:
            # refusals are returned but not cached as study pages
            return result

        try:
            saved = self.save_result(query, result, user_id)
            logger.info("search.saved", extra={"slug": saved.record.slug, "new_record": saved.created})
        except Exception:
            logger.exception("search.save_failed")

        return result
