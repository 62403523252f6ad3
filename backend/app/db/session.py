from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from app.core.config import settings


def _engine_kwargs(url: str) -> dict:
    kwargs: dict = {"pool_pre_ping": True}
    if make_url(url).get_backend_name() == "sqlite":
        # Generation ticks use sessions from worker threads
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
    return kwargs


# Sync engine; async callers hop onto threads (see services/generation_service.py)
engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
