from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from app.api.v1.deps import get_analysis_service
from app.core.rate_limit import rate_limit
from app.core.security import check_api_key
from app.features.edit_state import BulletNotFoundError
from app.features.keyword_extractor import extract_jd_keywords, rank_jd_keywords
from app.schemas.analysis import (
    AnalysisResponse,
    AnalyzeRequest,
    EditRequest,
    EditResponse,
    KeywordExtractRequest,
    KeywordExtractResponse,
    RecalculateRequest,
    RecalculateResponse,
)
from app.services.analysis_service import AnalysisService, apply_edit_request, recalculate_request
from app.services.resume_source import ResumeNotFoundError, ResumeSourceError
from app.services.suggestion_generator import AnalysisFailedError

router = APIRouter()


@router.post("/analysis", response_model=AnalysisResponse)
@rate_limit()
async def analyze_resume(
    request: Request,
    payload: AnalyzeRequest,
    service: AnalysisService = Depends(get_analysis_service),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
):
    _ = request
    check_api_key(x_api_key)
    try:
        return await service.analyze(payload.resume_key, payload.job_description)
    except ResumeNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ResumeSourceError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except AnalysisFailedError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"code": exc.code, "reason": exc.reason, "message": "Analysis failed. Please retry."},
        ) from exc


@router.post("/analysis/edit", response_model=EditResponse)
async def edit_analysis(payload: EditRequest):
    try:
        return apply_edit_request(payload)
    except BulletNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post("/analysis/recalculate", response_model=RecalculateResponse)
async def recalculate_analysis(payload: RecalculateRequest):
    return recalculate_request(payload)


@router.post("/keywords/extract", response_model=KeywordExtractResponse)
async def extract_keywords(payload: KeywordExtractRequest):
    return KeywordExtractResponse(
        keywords=extract_jd_keywords(payload.job_description, top_n=payload.top_n),
        ranked=rank_jd_keywords(payload.job_description),
    )
