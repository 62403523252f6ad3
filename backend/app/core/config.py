# app/core/config.py
import os
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).parent.parent.parent

class Settings(BaseSettings):
    app_name: str = "ScriptureStudy"
    env: str = "local"
    DATABASE_URL: str

    # =========================
    # LLM
    # =========================
    LLM_PROVIDER: str = "gemini"
    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # Runtime controls
    LLM_TIMEOUT_SECONDS: int = 60
    LLM_MAX_RETRIES: int = 2
    LLM_MAX_OUTPUT_TOKENS: int = 8192
    LLM_TEMPERATURE: float = 0.7

    # Observability
    LLM_LOG_PROMPTS: bool = False  # keep False by default (avoid leaking data)

    # =========================
    # Auth
    # =========================
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRES_MINUTES: int = 60 * 12
    ADMIN_USERNAME: str | None = None
    ADMIN_PASSWORD: str | None = None
    # Comma separated; extra principals allowed to control generation
    ALLOWED_ADMIN_EMAILS: str = ""

    # Shared secret for the scheduler hitting /api/cron/*
    CRON_SECRET: str | None = None

    # =========================
    # Generation run
    # =========================
    DAILY_GENERATION_LIMIT: int = 500
    DEFAULT_GENERATION_TARGET: int = 500
    GENERATION_BATCH_SIZE: int = 3
    GENERATION_ITEM_TIMEOUT_SECONDS: int = 180
    GENERATION_TICK_INTERVAL_SECONDS: int = 60

    # =========================
    # Celery
    # =========================
    REDIS_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str | None = None

    # =========================
    # HTTP
    # =========================
    CORS_ALLOW_ORIGINS: str | None = None
    CORS_ALLOW_VERCEL_PREVIEWS: bool = False

    model_config = SettingsConfigDict(
        env_file=os.path.join(PROJECT_ROOT, ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def admin_principals(self) -> set[str]:
        principals = {
            e.strip().lower() for e in (self.ALLOWED_ADMIN_EMAILS or "").split(",") if e.strip()
        }
        if self.ADMIN_USERNAME:
            principals.add(self.ADMIN_USERNAME.strip().lower())
        return principals

settings = Settings()
