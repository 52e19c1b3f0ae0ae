from contextlib import asynccontextmanager
import logging

from app.core.analysis_cache import AnalysisCache
from app.core.config import settings
from app.services.analysis_service import AnalysisService
from app.services.resume_source import LocalResumeSource
from app.services.suggestion_generator import SuggestionGenerator

logger = logging.getLogger(__name__)


def build_analysis_service() -> AnalysisService:
    cache = AnalysisCache(ttl_seconds=settings.analysis_cache_ttl_s) if settings.analysis_cache_enabled else None
    return AnalysisService(
        resume_source=LocalResumeSource(settings.resume_store_dir),
        generator=SuggestionGenerator(),
        cache=cache,
    )


@asynccontextmanager
async def lifespan(app):
    if getattr(app.state, "analysis_service", None) is None:
        app.state.analysis_service = build_analysis_service()
    logger.info(
        "analysis_service_ready cache_enabled=%s cache_ttl_s=%s resume_store=%s",
        settings.analysis_cache_enabled,
        settings.analysis_cache_ttl_s,
        settings.resume_store_dir,
    )
    yield
