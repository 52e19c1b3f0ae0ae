from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from app.normalize.normalize_resume import document_from_text
from app.schemas.analysis import ResumeDocument
from app.services.resume_render import render_resume_text

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = {".txt", ".md"}


class ResumeSourceError(RuntimeError):
    def __init__(self, message: str, *, code: str = "resume_unreadable"):
        super().__init__(message)
        self.code = code


class ResumeNotFoundError(ResumeSourceError):
    def __init__(self, resume_key: str):
        super().__init__(f"Resume '{resume_key}' was not found.", code="resume_not_found")
        self.resume_key = resume_key


@dataclass(frozen=True)
class LoadedResume:
    resume_key: str
    text: str
    document: ResumeDocument


class ResumeSource(Protocol):
    def load(self, resume_key: str) -> LoadedResume:
        """Resolve a resume reference into text plus a structured document."""


class LocalResumeSource:
    """Reads extracted resumes from a directory, keyed by relative file name.

    ``.json`` files hold a structured document, ``.txt``/``.md`` files hold
    text that was already extracted from the uploaded binary.
    """

    def __init__(self, root_dir: str | Path):
        self._root = Path(root_dir).resolve()

    def _resolve(self, resume_key: str) -> Path:
        key = resume_key.strip()
        if not key:
            raise ResumeNotFoundError(resume_key)
        candidate = (self._root / key).resolve()
        if self._root not in candidate.parents:
            logger.warning("resume_key_outside_store key=%s", resume_key)
            raise ResumeNotFoundError(resume_key)
        if not candidate.is_file():
            raise ResumeNotFoundError(resume_key)
        return candidate

    def load(self, resume_key: str) -> LoadedResume:
        path = self._resolve(resume_key)
        suffix = path.suffix.lower()
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ResumeSourceError(f"Failed to read resume '{resume_key}': {exc}") from exc

        if suffix == ".json":
            try:
                document = ResumeDocument.model_validate_json(raw)
            except ValidationError as exc:
                raise ResumeSourceError(f"Resume '{resume_key}' is not a valid resume document.") from exc
            return LoadedResume(resume_key=resume_key, text=render_resume_text(document), document=document)

        if suffix in TEXT_EXTENSIONS:
            return LoadedResume(resume_key=resume_key, text=raw, document=document_from_text(raw))

        raise ResumeSourceError(
            f"Unsupported resume type '{suffix or 'none'}'. Extract it to text first.",
            code="unsupported_resume_type",
        )
