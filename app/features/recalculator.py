from __future__ import annotations

from app.features.keyword_matcher import match_keywords
from app.schemas.analysis import AnalysisResult, BulletPoint, GeneratorResult, ResumeDocument


def _bullet_text(bullet: BulletPoint, *, original: bool) -> str:
    return bullet.original if original else bullet.effective_text


def document_match_text(document: ResumeDocument, *, original: bool = False) -> str:
    """Plain text that keywords are matched against.

    Static fields always come from the document as-is; only bullets switch
    between their original and improved variants. With ``original=True`` every
    bullet contributes its original text regardless of its accepted flag.
    """
    skills = document.skills
    parts: list[str] = [document.summary, skills.languages, skills.frameworks, skills.tools]
    for education in document.education:
        parts.extend([education.school, education.degree])
    for entry in document.experience:
        parts.extend([entry.title, entry.company, entry.summary])
        parts.extend(_bullet_text(bullet, original=original) for bullet in entry.bullet_points)
    for project in document.projects:
        parts.extend([project.title, project.summary])
        parts.extend(_bullet_text(bullet, original=original) for bullet in project.bullet_points)
    return "\n".join(part.strip() for part in parts if part and part.strip())


def compute_match_score(matched: int, total: int) -> int:
    if total <= 0:
        return 0
    # Integer half-up rounding of 100 * matched / total.
    score = (200 * matched + total) // (2 * total)
    return max(0, min(100, score))


def recalculate(analysis: AnalysisResult, document: ResumeDocument) -> AnalysisResult:
    """Re-derive matches, gaps, additions and score for the current document.

    Returns a new result; ``analysis`` is left untouched and its baseline is
    carried over unchanged.
    """
    jd_keywords = list(analysis.jd_keywords)
    current, missing = match_keywords(document_match_text(document), jd_keywords)
    baseline = {keyword.lower() for keyword in analysis.baseline_matches}
    added = [keyword for keyword in current if keyword.lower() not in baseline]
    match_score = compute_match_score(len(current), len(jd_keywords)) if jd_keywords else analysis.match_score
    return analysis.model_copy(
        update={
            "match_score": match_score,
            "keyword_matches": current,
            "missing_keywords": missing,
            "added_keywords": added,
        }
    )


def build_initial_analysis(
    document: ResumeDocument,
    jd_keywords: list[str],
    generated: GeneratorResult | None = None,
) -> AnalysisResult:
    """Snapshot the baseline from original bullets, then derive the current
    fields through ``recalculate`` so a document arriving with accepted
    bullets starts out consistent with every later recomputation."""
    baseline, _ = match_keywords(document_match_text(document, original=True), jd_keywords)
    oracle = generated or GeneratorResult()
    seed = AnalysisResult(
        match_score=oracle.match_score,
        strengths=list(oracle.strengths),
        weak_phrases=list(oracle.weak_phrases),
        jd_keywords=list(jd_keywords),
        baseline_matches=baseline,
    )
    return recalculate(seed, document)
