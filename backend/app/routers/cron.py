# app/routers/cron.py
from fastapi import APIRouter, Depends

from app.api.deps import get_generation_service
from app.auth.deps import require_cron_secret
from app.schemas.generation_schema import TickResponse
from app.services.generation_service import GenerationService

router = APIRouter(prefix="/api/cron", tags=["cron"])


@router.get("/generate-questions", response_model=TickResponse)
async def generate_questions_tick(
    _: None = Depends(require_cron_secret),
    svc: GenerationService = Depends(get_generation_service),
):
    """One generation tick. Safe to call on any schedule; does nothing while paused."""
    report = await svc.tick()
    return TickResponse(**report.to_dict())
