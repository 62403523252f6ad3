# app/routers/admin.py
from fastapi import APIRouter, Depends

from app.api.deps import get_generation_service
from app.auth.deps import require_admin
from app.schemas.generation_schema import (
    AdminStatsResponse,
    CheckSetupResponse,
    ControlResponse,
    GenerateQuestionsRequest,
    GenerateQuestionsResponse,
    GenerationStatusOut,
    StartGenerationRequest,
    StartGenerationResponse,
)
from app.services.generation_service import GenerationService

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/check-access")
def check_access(principal: str = Depends(require_admin)):
    return {"is_admin": True, "user": principal}


@router.get("/check-setup", response_model=CheckSetupResponse)
def check_setup(
    _: str = Depends(require_admin),
    svc: GenerationService = Depends(get_generation_service),
):
    return CheckSetupResponse(**svc.check_setup())


@router.get("/stats", response_model=AdminStatsResponse)
def stats(
    _: str = Depends(require_admin),
    svc: GenerationService = Depends(get_generation_service),
):
    return AdminStatsResponse(**svc.stats())


@router.post("/generate-questions", response_model=GenerateQuestionsResponse)
def generate_questions(
    req: GenerateQuestionsRequest,
    _: str = Depends(require_admin),
    svc: GenerationService = Depends(get_generation_service),
):
    questions = svc.preview_questions(req.count)
    return GenerateQuestionsResponse(questions=questions, count=len(questions))


# ----------------------------
# Generation run control
# ----------------------------
@router.post("/generation/start", response_model=StartGenerationResponse)
def start_generation(
    req: StartGenerationRequest,
    principal: str = Depends(require_admin),
    svc: GenerationService = Depends(get_generation_service),
):
    remaining, status = svc.start(target=req.target, owner_user_id=principal)
    return StartGenerationResponse(remaining=remaining, status=status)


@router.post("/generation/stop", response_model=ControlResponse)
def stop_generation(
    _: str = Depends(require_admin),
    svc: GenerationService = Depends(get_generation_service),
):
    return ControlResponse(status=svc.stop())


@router.post("/generation/reset", response_model=ControlResponse)
def reset_generation(
    _: str = Depends(require_admin),
    svc: GenerationService = Depends(get_generation_service),
):
    return ControlResponse(status=svc.reset())


@router.get("/generation/status", response_model=GenerationStatusOut)
def generation_status(
    _: str = Depends(require_admin),
    svc: GenerationService = Depends(get_generation_service),
):
    return svc.status()
