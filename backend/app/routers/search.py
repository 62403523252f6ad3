# app/routers/search.py
from typing import List

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_question_service
from app.auth.deps import optional_principal
from app.core import AppError, ErrorCode, ErrorReason
from app.llm.errors import LLMError
from app.schemas.question import (
    InterlinearRequest,
    QuestionPage,
    SearchListItem,
    SearchListResponse,
    SearchRequest,
    SimilarTopic,
    SimilarTopicsRequest,
    TrackSearchResponse,
)
from app.services.answer_generator import generate_interlinear
from app.services.question_service import QuestionService

router = APIRouter(prefix="/api", tags=["search"])


@router.post("/search")
def search(
    req: SearchRequest,
    principal: str | None = Depends(optional_principal),
    svc: QuestionService = Depends(get_question_service),
):
    return svc.search(req.query, user_id=principal)


@router.post("/track-search", response_model=TrackSearchResponse)
def track_search(
    req: SearchRequest,
    principal: str | None = Depends(optional_principal),
    svc: QuestionService = Depends(get_question_service),
):
    rec = svc.track(req.query, principal)
    return TrackSearchResponse(id=str(rec.id), slug=rec.slug)


@router.get("/searches", response_model=SearchListResponse)
def list_searches(
    limit: int = Query(default=50, ge=1, le=200),
    svc: QuestionService = Depends(get_question_service),
):
    items = [SearchListItem(query=r.query, slug=r.slug, created_at=r.created_at) for r in svc.list_recent(limit)]
    return SearchListResponse(items=items)


@router.get("/questions/{slug}", response_model=QuestionPage)
def get_question(slug: str, svc: QuestionService = Depends(get_question_service)):
    rec = svc.get_page(slug)
    return QuestionPage(query=rec.query, slug=rec.slug, result=rec.result, created_at=rec.created_at)


@router.post("/interlinear")
def interlinear(req: InterlinearRequest):
    try:
        data = generate_interlinear(req.reference)
    except LLMError as e:
        raise AppError(
            code=ErrorCode.LLM_ERROR,
            reason=ErrorReason.LLM_FAILED.value,
            status_code=502,
            message=str(e),
        ) from e
    return data.model_dump(mode="json", by_alias=True, exclude_none=True)


@router.post("/similar-topics", response_model=List[SimilarTopic])
def similar_topics(req: SimilarTopicsRequest, svc: QuestionService = Depends(get_question_service)):
    ranked = svc.similar_topics(req.query, search_topic=req.search_topic, key_terms=req.key_terms)
    return [SimilarTopic(query=s.query, slug=s.slug, score=s.score, created_at=s.created_at) for s in ranked]
