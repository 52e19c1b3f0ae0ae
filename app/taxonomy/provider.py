from __future__ import annotations

from typing import Protocol


class VocabularyProvider(Protocol):
    def is_technical(self, term: str) -> bool:
        """Return True when the term belongs to the curated technical vocabulary."""
