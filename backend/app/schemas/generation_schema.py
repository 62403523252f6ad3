from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class GenerationStatusOut(BaseModel):
    is_generating: bool
    progress: int
    target: int
    started_at: datetime | None = None
    last_run_at: datetime | None = None


class StartGenerationRequest(BaseModel):
    target: int = Field(default=500, ge=1, le=100_000)


class StartGenerationResponse(BaseModel):
    ok: bool = True
    remaining: int
    status: GenerationStatusOut


class ControlResponse(BaseModel):
    ok: bool = True
    status: GenerationStatusOut


class TickResponse(BaseModel):
    ok: bool = True
    skipped: bool = False
    completed: bool = False
    message: str
    saved_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    progress: int
    target: int
    duration_ms: int


class GenerateQuestionsRequest(BaseModel):
    count: int = Field(default=10, ge=1, le=50)


class GenerateQuestionsResponse(BaseModel):
    ok: bool = True
    questions: List[str]
    count: int


class AdminStatsResponse(BaseModel):
    total_questions: int
    today_generated: int
    daily_limit: int
    is_running: bool
    progress: int
    target: int
    started_at: datetime | None = None
    last_run_at: datetime | None = None


class SetupEnvironment(BaseModel):
    has_cron_secret: bool
    has_gemini_key: bool
    has_admin_credentials: bool


class SetupDatabase(BaseModel):
    connected: bool = False
    status_row_exists: bool = False
    generation_status: GenerationStatusOut | None = None
    error: str | None = None


class CheckSetupResponse(BaseModel):
    environment: SetupEnvironment
    database: SetupDatabase
    timestamp: datetime
