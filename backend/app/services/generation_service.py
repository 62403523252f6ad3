# app/services/generation_service.py
"""
Automated question generation run.

State lives only in the generation_status row:
  start  : STOPPED -> RUNNING   (guard: not running, daily quota left)
  stop   : RUNNING -> STOPPED
  reset  : any     -> STOPPED, zeroed
  tick   : one small batch per call; auto-stops once progress >= target

Ticks are driven from outside (cron endpoint / Celery beat). A tick never loops.
Items inside a tick run concurrently on worker threads, each with its own DB
session, and one item's failure never aborts its siblings.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.constants.statuses import ItemStatus
from app.core import AppError, ErrorCode, ErrorReason
from app.core.config import settings
from app.core.request_context import set_context
from app.db.session import SessionLocal
from app.llm.errors import LLMError
from app.models.base import utcnow
from app.models.generation_status import GenerationStatus
from app.models.question_record import SYSTEM_USER_ID
from app.repos.generation_status.read import GenerationStatusReadRepo
from app.repos.generation_status.write import GenerationStatusWriteRepo
from app.repos.question.read import QuestionReadRepo
from app.schemas.generation_schema import GenerationStatusOut
from app.schemas.study import StudyResponse
from app.services.answer_generator import generate_answer
from app.services.question_generator import generate_questions
from app.services.question_service import QuestionService

logger = logging.getLogger("app.services.generation")


def local_day_start_utc(now: datetime | None = None) -> datetime:
    """Server-local midnight expressed as naive UTC (the timezone created_at is stored in)."""
    local_now = (now or datetime.now(timezone.utc)).astimezone()
    midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(timezone.utc).replace(tzinfo=None)


def _short(text: str, n: int = 60) -> str:
    return text if len(text) <= n else text[:n] + "..."


def _snapshot(row: GenerationStatus) -> GenerationStatusOut:
    return GenerationStatusOut(
        is_generating=row.is_generating,
        progress=row.progress,
        target=row.target,
        started_at=row.started_at,
        last_run_at=row.last_run_at,
    )


@dataclass(frozen=True)
class ItemOutcome:
    question: str
    status: ItemStatus
    message: str
    slug: str | None = None


@dataclass
class TickReport:
    ok: bool = True
    skipped: bool = False
    completed: bool = False
    message: str = ""
    progress: int = 0
    target: int = 0
    duration_ms: int = 0
    outcomes: list[ItemOutcome] = field(default_factory=list)

    def _count(self, status: ItemStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def saved_count(self) -> int:
        return self._count(ItemStatus.SAVED)

    @property
    def skipped_count(self) -> int:
        return self._count(ItemStatus.SKIPPED)

    @property
    def failed_count(self) -> int:
        return self._count(ItemStatus.FAILED)

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "skipped": self.skipped,
            "completed": self.completed,
            "message": self.message,
            "saved_count": self.saved_count,
            "skipped_count": self.skipped_count,
            "failed_count": self.failed_count,
            "progress": self.progress,
            "target": self.target,
            "duration_ms": self.duration_ms,
        }


class GenerationService:
    def __init__(
        self,
        db: Session,
        *,
        session_factory: Callable[[], Session] = SessionLocal,
        question_fn: Callable[[int], list[str]] = generate_questions,
        answer_fn: Callable[[str], StudyResponse | None] = generate_answer,
    ):
        self.db = db
        self.session_factory = session_factory
        self.question_fn = question_fn
        self.answer_fn = answer_fn

    # ----------------------------
    # Status helpers
    # ----------------------------
    def _status_row(self, db: Session) -> GenerationStatus:
        row = GenerationStatusReadRepo(db).get()
        if row is None:
            # first access on a fresh database
            row = GenerationStatusWriteRepo(db).ensure_status(settings.DEFAULT_GENERATION_TARGET)
            db.commit()
            logger.info("generation.status_provisioned")
        return row

    def status(self) -> GenerationStatusOut:
        return _snapshot(self._status_row(self.db))

    def stats(self) -> dict:
        reads = QuestionReadRepo(self.db)
        snap = self.status()
        return {
            "total_questions": reads.count_complete(),
            "today_generated": reads.count_complete(since=local_day_start_utc()),
            "daily_limit": settings.DAILY_GENERATION_LIMIT,
            "is_running": snap.is_generating,
            "progress": snap.progress,
            "target": snap.target,
            "started_at": snap.started_at,
            "last_run_at": snap.last_run_at,
        }

    def check_setup(self) -> dict:
        """Admin diagnostic. Reports configuration and DB state; never provisions anything."""
        database: dict = {"connected": False, "status_row_exists": False, "generation_status": None}
        try:
            self.db.execute(text("select 1"))
            database["connected"] = True
            row = GenerationStatusReadRepo(self.db).get()
            if row is not None:
                database["status_row_exists"] = True
                database["generation_status"] = _snapshot(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning("generation.check_setup.db_error", extra={"error": str(e)})
            database["error"] = str(e)

        return {
            "environment": {
                "has_cron_secret": bool(settings.CRON_SECRET),
                "has_gemini_key": bool(settings.GEMINI_API_KEY),
                "has_admin_credentials": bool(settings.ADMIN_USERNAME and settings.ADMIN_PASSWORD),
            },
            "database": database,
            "timestamp": datetime.now(timezone.utc),
        }

    def remaining_quota(self) -> tuple[int, int]:
        today = QuestionReadRepo(self.db).count_complete(since=local_day_start_utc())
        return settings.DAILY_GENERATION_LIMIT - today, today

    # ----------------------------
    # Control: start / stop / reset
    # ----------------------------
    def start(self, *, target: int, owner_user_id: str | None) -> tuple[int, GenerationStatusOut]:
        row = self._status_row(self.db)
        if row.is_generating:
            raise AppError(
                code=ErrorCode.ALREADY_RUNNING,
                reason=ErrorReason.GENERATION_ALREADY_RUNNING.value,
                status_code=400,
            )

        remaining, today = self.remaining_quota()
        if remaining <= 0:
            raise AppError(
                code=ErrorCode.QUOTA_EXCEEDED,
                reason=ErrorReason.DAILY_LIMIT_REACHED.value,
                status_code=400,
                details={"today_count": today, "limit": settings.DAILY_GENERATION_LIMIT},
            )

        claimed = GenerationStatusWriteRepo(self.db).try_start(
            target=target, owner_user_id=owner_user_id, now=utcnow()
        )
        if not claimed:
            # lost a race with another start
            self.db.rollback()
            raise AppError(
                code=ErrorCode.ALREADY_RUNNING,
                reason=ErrorReason.GENERATION_ALREADY_RUNNING.value,
                status_code=400,
            )
        self.db.commit()

        logger.info("generation.start", extra={"target": target, "owner_user_id": owner_user_id, "remaining": remaining})
        return remaining, self.status()

    def stop(self) -> GenerationStatusOut:
        self._status_row(self.db)
        if not GenerationStatusWriteRepo(self.db).try_stop():
            self.db.rollback()
            raise AppError(
                code=ErrorCode.NOT_RUNNING,
                reason=ErrorReason.GENERATION_NOT_RUNNING.value,
                status_code=400,
            )
        self.db.commit()
        logger.info("generation.stop")
        return self.status()

    def reset(self) -> GenerationStatusOut:
        self._status_row(self.db)
        GenerationStatusWriteRepo(self.db).reset(default_target=settings.DEFAULT_GENERATION_TARGET)
        self.db.commit()
        logger.info("generation.reset")
        return self.status()

    def preview_questions(self, count: int) -> list[str]:
        """Admin helper: generate questions without saving anything."""
        return self.question_fn(count)

    # ----------------------------
    # Per-item pipeline (runs on a worker thread)
    # ----------------------------
    def process_question(self, question: str, owner_user_id: str, deadline: float | None = None) -> ItemOutcome:
        """
        One item: dedup, answer, save. `deadline` is a time.monotonic() value; once it has
        passed the item has been reported as timed out, so nothing may be saved for it.
        """
        with self.session_factory() as db:
            svc = QuestionService(db)

            if svc.is_duplicate(question):
                return ItemOutcome(question, ItemStatus.SKIPPED, f"Skipping duplicate: {_short(question)}")

            try:
                study = self.answer_fn(question)
            except LLMError as e:
                return ItemOutcome(question, ItemStatus.FAILED, f"Failed to answer: {_short(question)} ({e})")

            if study is None:
                return ItemOutcome(question, ItemStatus.FAILED, f"Failed to answer: {_short(question)}")
            if not study.is_relevant or study.content is None:
                return ItemOutcome(question, ItemStatus.FAILED, f"Off-topic answer: {_short(question)}")

            if deadline is not None and time.monotonic() >= deadline:
                return ItemOutcome(question, ItemStatus.FAILED, f"Timed out before saving: {_short(question)}")

            try:
                saved = svc.save_result(question, study.to_record(), owner_user_id)
            except SQLAlchemyError as e:
                return ItemOutcome(question, ItemStatus.FAILED, f"Failed to save: {_short(question)} ({e})")

            if not saved.created:
                # answered concurrently by another pipeline
                return ItemOutcome(question, ItemStatus.SKIPPED, f"Skipping duplicate: {_short(question)}", saved.record.slug)

            slug = saved.record.slug
            return ItemOutcome(question, ItemStatus.SAVED, f"Saved: {_short(question, 50)} -> /question/{slug}", slug)

    async def _process_batch(self, questions: list[str], owner_user_id: str) -> list[ItemOutcome]:
        limit = asyncio.Semaphore(max(1, settings.GENERATION_BATCH_SIZE))

        async def run_one(question: str) -> ItemOutcome:
            async with limit:
                timeout = settings.GENERATION_ITEM_TIMEOUT_SECONDS
                # the worker thread cannot be cancelled; it checks the deadline before saving
                deadline = time.monotonic() + timeout
                return await asyncio.wait_for(
                    asyncio.to_thread(self.process_question, question, owner_user_id, deadline),
                    timeout=timeout,
                )

        results = await asyncio.gather(*(run_one(q) for q in questions), return_exceptions=True)

        outcomes: list[ItemOutcome] = []
        for question, res in zip(questions, results):
            if isinstance(res, BaseException):
                outcome = ItemOutcome(
                    question,
                    ItemStatus.FAILED,
                    f"Error processing {_short(question, 40)!r}: {type(res).__name__}: {res}",
                )
            else:
                outcome = res

            log = logger.warning if outcome.status == ItemStatus.FAILED else logger.info
            log(f"generation.item.{outcome.status.value}", extra={"detail": outcome.message, "slug": outcome.slug})
            outcomes.append(outcome)
        return outcomes

    # ----------------------------
    # Tick
    # ----------------------------
    def _read_snapshot(self) -> tuple[GenerationStatusOut, str | None]:
        with self.session_factory() as db:
            row = self._status_row(db)
            return _snapshot(row), row.owner_user_id

    def _finish(self) -> GenerationStatusOut:
        with self.session_factory() as db:
            GenerationStatusWriteRepo(db).finish_if_target_reached()
            db.commit()
            return _snapshot(self._status_row(db))

    def _record_progress(self, saved: int) -> tuple[GenerationStatusOut, bool]:
        with self.session_factory() as db:
            writes = GenerationStatusWriteRepo(db)
            writes.add_progress(saved, now=utcnow())
            finished = writes.finish_if_target_reached()
            db.commit()
            return _snapshot(self._status_row(db)), finished

    async def tick(self) -> TickReport:
        t0 = time.monotonic()
        set_context(tick_id=uuid.uuid4().hex[:12])

        def done(report: TickReport) -> TickReport:
            report.duration_ms = int((time.monotonic() - t0) * 1000)
            summary = report.to_dict()
            summary["detail"] = summary.pop("message")
            logger.info("generation.tick.done", extra=summary)
            return report

        snap, owner_user_id = await asyncio.to_thread(self._read_snapshot)

        if not snap.is_generating:
            return done(TickReport(skipped=True, message="Generation paused", progress=snap.progress, target=snap.target))

        if snap.progress >= snap.target:
            after = await asyncio.to_thread(self._finish)
            return done(TickReport(completed=True, message="Target reached", progress=after.progress, target=after.target))

        owner = owner_user_id or SYSTEM_USER_ID
        logger.info("generation.tick.start", extra={"progress": snap.progress, "target": snap.target})

        questions = await asyncio.to_thread(self.question_fn, settings.GENERATION_BATCH_SIZE)
        if not questions:
            return done(
                TickReport(ok=False, message="Failed to generate questions", progress=snap.progress, target=snap.target)
            )

        outcomes = await self._process_batch(questions, owner)
        saved = sum(1 for o in outcomes if o.status == ItemStatus.SAVED)

        after, finished = await asyncio.to_thread(self._record_progress, saved)
        return done(
            TickReport(
                completed=finished,
                message=f"Generated {saved} questions",
                progress=after.progress,
                target=after.target,
                outcomes=outcomes,
            )
        )
