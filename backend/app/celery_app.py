# app/celery_app.py
from celery import Celery

from app.core.config import settings
from app.core.logging_config import configure_logging

# Ensure logging is configured in worker processes as early as possible.
configure_logging()

BROKER_URL = settings.REDIS_BROKER_URL
BACKEND_URL = settings.CELERY_RESULT_BACKEND or BROKER_URL

celery_app = Celery(
    "question_generation",
    broker=BROKER_URL,
    backend=BACKEND_URL,
    include=["app.tasks.generation"],
)

# a tick is idempotent against the status row; late acks are safe
celery_app.conf.task_acks_late = True
celery_app.conf.worker_prefetch_multiplier = 1
celery_app.conf.task_reject_on_worker_lost = True

# prevent Celery from overriding our root logger
celery_app.conf.worker_hijack_root_logger = False

celery_app.conf.task_routes = {
    "app.tasks.generation.generation_tick_task": {"queue": "generate_q"},
}

# Beat drives the run when no external cron hits /api/cron/generate-questions
celery_app.conf.beat_schedule = {
    "generation-tick": {
        "task": "app.tasks.generation.generation_tick_task",
        "schedule": float(settings.GENERATION_TICK_INTERVAL_SECONDS),
        "options": {"queue": "generate_q", "expires": settings.GENERATION_TICK_INTERVAL_SECONDS},
    },
}
