from __future__ import annotations

import logging
import re
from datetime import datetime, timezone

from app.core.analysis_cache import AnalysisCache, make_cache_key
from app.features.edit_state import apply_edit
from app.features.keyword_extractor import classify_keyword, extract_jd_keywords
from app.features.recalculator import build_initial_analysis, document_match_text, recalculate
from app.features.keyword_matcher import match_keywords
from app.schemas.analysis import (
    AnalysisResponse,
    BulletPoint,
    EditRequest,
    EditResponse,
    RecalculateRequest,
    RecalculateResponse,
    ResumeDocument,
    Suggestion,
    SuggestionDraft,
)
from app.services.resume_render import render_resume_text
from app.services.resume_source import ResumeSource
from app.services.suggestion_generator import SuggestionGenerator

logger = logging.getLogger(__name__)


def _normalize_for_compare(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip().lower()


def build_keyword_suggestion(missing_keywords: list[str]) -> SuggestionDraft | None:
    technical = [keyword for keyword in missing_keywords if classify_keyword(keyword)]
    if not technical:
        return None
    return SuggestionDraft(
        type="keyword",
        original_text="",
        suggested_text=f"Highlight or add these JD keywords in relevant sections: {', '.join(technical)}",
        reason=(
            "These frequently used JD keywords are missing from the resume. "
            "Add them in context to boost ATS alignment."
        ),
        priority="medium",
    )


def number_suggestions(drafts: list[SuggestionDraft]) -> list[Suggestion]:
    return [
        Suggestion(id=f"suggestion-{index}", **draft.model_dump())
        for index, draft in enumerate(drafts, start=1)
    ]


def attach_improvements(document: ResumeDocument, suggestions: list[Suggestion]) -> ResumeDocument:
    """Give each bullet the first suggested rewrite whose original text matches it."""
    rewrites: dict[str, str] = {}
    for suggestion in suggestions:
        key = _normalize_for_compare(suggestion.original_text)
        if key and key not in rewrites and suggestion.suggested_text:
            rewrites[key] = suggestion.suggested_text

    if not rewrites:
        return document

    def _improve(bullets: list[BulletPoint]) -> list[BulletPoint]:
        improved: list[BulletPoint] = []
        for bullet in bullets:
            rewrite = rewrites.get(_normalize_for_compare(bullet.original))
            if rewrite and not bullet.improved:
                bullet = bullet.model_copy(update={"improved": rewrite})
            improved.append(bullet)
        return improved

    return document.model_copy(
        update={
            "experience": [
                entry.model_copy(update={"bullet_points": _improve(entry.bullet_points)})
                for entry in document.experience
            ],
            "projects": [
                entry.model_copy(update={"bullet_points": _improve(entry.bullet_points)})
                for entry in document.projects
            ],
        }
    )


class AnalysisService:
    def __init__(
        self,
        resume_source: ResumeSource,
        generator: SuggestionGenerator,
        cache: AnalysisCache | None = None,
        keyword_limit: int | None = None,
    ):
        self._resume_source = resume_source
        self._generator = generator
        self._cache = cache
        self._keyword_limit = keyword_limit

    @property
    def cache_size(self) -> int:
        return len(self._cache) if self._cache is not None else 0

    async def analyze(self, resume_key: str, job_description: str) -> AnalysisResponse:
        cache_key = make_cache_key(resume_key, job_description)
        if self._cache is not None:
            cached = self._cache.get(cache_key)
            if cached is not None:
                logger.info("analysis_cache_hit key=%s", cache_key[:12])
                return AnalysisResponse.model_validate_json(cached)

        loaded = self._resume_source.load(resume_key)
        jd_keywords = extract_jd_keywords(job_description, top_n=self._keyword_limit)
        _, missing = match_keywords(document_match_text(loaded.document, original=True), jd_keywords)

        generated = await self._generator.generate(loaded.text, job_description, missing)

        drafts = list(generated.suggestions)
        keyword_suggestion = build_keyword_suggestion(missing)
        if keyword_suggestion is not None:
            drafts.append(keyword_suggestion)
        suggestions = number_suggestions(drafts)

        document = attach_improvements(loaded.document, suggestions)
        analysis = build_initial_analysis(document, jd_keywords, generated)
        response = AnalysisResponse(
            resume_key=resume_key,
            resume_text=loaded.text,
            document=document,
            analysis=analysis,
            suggestions=suggestions,
            score=analysis.match_score,
            generated_at=datetime.now(timezone.utc),
        )

        payload = response.model_dump_json()
        if self._cache is not None:
            self._cache.set(cache_key, payload)
        logger.info(
            "analysis_completed key=%s keywords=%s matched=%s score=%s",
            cache_key[:12],
            len(jd_keywords),
            len(analysis.keyword_matches),
            analysis.match_score,
        )
        return AnalysisResponse.model_validate_json(payload)


def apply_edit_request(request: EditRequest) -> EditResponse:
    document = apply_edit(request.document, request.action, target=request.target, accepted=request.accepted)
    analysis = recalculate(request.analysis, document)
    return EditResponse(document=document, analysis=analysis, rendering=render_resume_text(document))


def recalculate_request(request: RecalculateRequest) -> RecalculateResponse:
    return RecalculateResponse(analysis=recalculate(request.analysis, request.document))
