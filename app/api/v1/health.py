from fastapi import APIRouter, Depends

from app.api.v1.deps import get_analysis_service
from app.services.analysis_service import AnalysisService

router = APIRouter()


@router.get("/health", summary="Health Check", description="Report service status and analysis cache size.")
async def health_check(service: AnalysisService = Depends(get_analysis_service)):
    return {"status": "healthy", "analysis_cache_entries": service.cache_size}
