from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

SuggestionType = Literal[
    "keyword",
    "weak-phrase",
    "missing-metric",
    "reorder",
    "consolidate",
    "section",
    "bullet",
]
Priority = Literal["high", "medium", "low"]
BulletSection = Literal["experience", "projects"]
EditAction = Literal["toggle", "set", "accept_all", "reset_all"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class PersonalInfo(_Frozen):
    name: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    portfolio: str = ""


class Education(_Frozen):
    school: str = ""
    degree: str = ""
    date: str = ""
    gpa: str = ""


class Skills(_Frozen):
    languages: str = ""
    frameworks: str = ""
    tools: str = ""


class BulletPoint(_Frozen):
    original: str
    improved: str | None = None
    accepted: bool = False

    @property
    def effective_text(self) -> str:
        if self.accepted and self.improved:
            return self.improved
        return self.original


class ExperienceEntry(_Frozen):
    title: str = ""
    company: str = ""
    date: str = ""
    location: str = ""
    summary: str = ""
    bullet_points: list[BulletPoint] = Field(default_factory=list)


class ProjectEntry(_Frozen):
    title: str = ""
    link: str = ""
    date: str = ""
    location: str = ""
    summary: str = ""
    bullet_points: list[BulletPoint] = Field(default_factory=list)


class ResumeDocument(_Frozen):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    summary: str = ""
    education: list[Education] = Field(default_factory=list)
    skills: Skills = Field(default_factory=Skills)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    projects: list[ProjectEntry] = Field(default_factory=list)


class ExtractedKeyword(_Frozen):
    term: str
    frequency: int = Field(ge=1)
    technical: bool


class AnalysisResult(_Frozen):
    match_score: int = Field(default=0, ge=0, le=100)
    strengths: list[str] = Field(default_factory=list)
    weak_phrases: list[str] = Field(default_factory=list)
    jd_keywords: list[str] = Field(default_factory=list)
    keyword_matches: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    added_keywords: list[str] = Field(default_factory=list)
    baseline_matches: list[str] = Field(default_factory=list)


class SuggestionDraft(_Frozen):
    type: SuggestionType = "bullet"
    original_text: str = ""
    suggested_text: str
    start_index: int | None = None
    end_index: int | None = None
    reason: str = ""
    priority: Priority = "medium"


class Suggestion(SuggestionDraft):
    id: str


class GeneratorResult(_Frozen):
    match_score: int = Field(default=0, ge=0, le=100)
    strengths: list[str] = Field(default_factory=list)
    weak_phrases: list[str] = Field(default_factory=list)
    suggestions: list[SuggestionDraft] = Field(default_factory=list)


class AnalyzeRequest(BaseModel):
    resume_key: str = Field(min_length=1, max_length=500)
    job_description: str = Field(min_length=1, max_length=50000)


class AnalysisResponse(_Frozen):
    resume_key: str
    resume_text: str
    document: ResumeDocument
    analysis: AnalysisResult
    suggestions: list[Suggestion] = Field(default_factory=list)
    score: int = Field(ge=0, le=100)
    generated_at: datetime


class BulletRef(_Frozen):
    section: BulletSection
    entry_index: int = Field(ge=0)
    bullet_index: int = Field(ge=0)


class EditRequest(BaseModel):
    document: ResumeDocument
    analysis: AnalysisResult
    action: EditAction
    target: BulletRef | None = None
    accepted: bool | None = None

    @model_validator(mode="after")
    def _validate_action_inputs(self) -> "EditRequest":
        if self.action in {"toggle", "set"} and self.target is None:
            raise ValueError(f"action '{self.action}' requires a target bullet")
        if self.action == "set" and self.accepted is None:
            raise ValueError("action 'set' requires 'accepted'")
        return self


class EditResponse(_Frozen):
    document: ResumeDocument
    analysis: AnalysisResult
    rendering: str


class RecalculateRequest(BaseModel):
    document: ResumeDocument
    analysis: AnalysisResult


class RecalculateResponse(_Frozen):
    analysis: AnalysisResult


class KeywordExtractRequest(BaseModel):
    job_description: str = Field(min_length=1, max_length=50000)
    top_n: int = Field(default=20, ge=1, le=100)


class KeywordExtractResponse(_Frozen):
    keywords: list[str] = Field(default_factory=list)
    ranked: list[ExtractedKeyword] = Field(default_factory=list)
