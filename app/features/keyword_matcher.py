from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable


def _is_plain_keyword(keyword: str) -> bool:
    return all(ch.isalnum() or ch == " " for ch in keyword)


@lru_cache(maxsize=2048)
def _boundary_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(r"(?<!\w)" + re.escape(keyword) + r"(?!\w)", re.IGNORECASE)


def keyword_in_text(text: str, keyword: str) -> bool:
    """Return True when ``keyword`` occurs in ``text``.

    Plain keywords (letters, digits and spaces) must stand as whole words, so
    "java" does not match inside "javascript". Keywords carrying punctuation
    such as "c++" or "ci/cd" fall back to case-insensitive containment.
    """
    needle = (keyword or "").strip()
    if not needle or not text:
        return False
    if _is_plain_keyword(needle):
        return _boundary_pattern(needle.lower()).search(text) is not None
    return needle.lower() in text.lower()


def match_keywords(text: str, keywords: Iterable[str]) -> tuple[list[str], list[str]]:
    matches: list[str] = []
    missing: list[str] = []
    for keyword in keywords:
        if keyword_in_text(text, keyword):
            matches.append(keyword)
        else:
            missing.append(keyword)
    return matches, missing
