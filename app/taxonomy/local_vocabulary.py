from __future__ import annotations

import json
import re
from pathlib import Path

from .provider import VocabularyProvider


class LocalVocabulary(VocabularyProvider):
    def __init__(self, vocabulary_path: str | Path | None = None) -> None:
        path = Path(vocabulary_path) if vocabulary_path else Path(__file__).with_name("tech_vocabulary.json")
        self._terms, self._patterns = self._load_vocabulary(path)

    @staticmethod
    def _load_vocabulary(path: Path) -> tuple[frozenset[str], tuple[re.Pattern[str], ...]]:
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        terms = frozenset(str(term).strip().lower() for term in raw.get("terms", []) if str(term).strip())
        patterns = tuple(re.compile(str(pattern)) for pattern in raw.get("patterns", []))
        return terms, patterns

    @classmethod
    def from_terms(cls, terms: list[str] | set[str], patterns: list[str] | None = None) -> "LocalVocabulary":
        vocabulary = cls.__new__(cls)
        vocabulary._terms = frozenset(term.strip().lower() for term in terms if term.strip())
        vocabulary._patterns = tuple(re.compile(pattern) for pattern in (patterns or []))
        return vocabulary

    @property
    def terms(self) -> frozenset[str]:
        return self._terms

    def is_technical(self, term: str) -> bool:
        normalized = term.strip().lower()
        if not normalized:
            return False
        if normalized in self._terms:
            return True
        # Any substring relation counts, so single-letter entries such as "r"
        # mark every token containing that letter as technical.
        if any(entry in normalized or normalized in entry for entry in self._terms):
            return True
        return any(pattern.match(normalized) for pattern in self._patterns)
