from __future__ import annotations

import asyncio
import logging

from app.celery_app import celery_app
from app.core.request_context import clear_context, set_context
from app.db.session import SessionLocal

logger = logging.getLogger("app.tasks.generation")


@celery_app.task(
    name="app.tasks.generation.generation_tick_task",
    bind=True,
    max_retries=0,
)
def generation_tick_task(self):
    """
    Beat driver: runs one generation tick.
    No retries; the next scheduled tick picks up where this one left off.
    """
    set_context(task_id=getattr(self.request, "id", None))
    from app.services.generation_service import GenerationService

    db = SessionLocal()
    try:
        logger.info("task.start", extra={"task": "generation_tick_task"})
        report = asyncio.run(GenerationService(db=db).tick())
        return report.to_dict()
    except Exception:
        logger.exception("task.failed", extra={"task": "generation_tick_task"})
        raise
    finally:
        db.close()
        clear_context()
