from __future__ import annotations

import re

_BULLET_CHARS = "•◦▪▫●○■□◆◇▶►-–—*·"
_BULLET_PATTERN = re.compile(rf"^\s*(?:[{re.escape(_BULLET_CHARS)}]|(?:\d+[\.\)]))\s+")
_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
_PHONE_RE = re.compile(r"\+?\d[\d\s().-]{7,}\d")
_URL_RE = re.compile(r"(?:https?://|www\.|linkedin\.com|github\.com)", re.IGNORECASE)
_LINK_TOKEN_RE = re.compile(r"(?:https?://|www\.)?(?:[A-Za-z0-9-]+\.)+[A-Za-z]{2,}(?:/[^\s|,]*)?")
_SECTION_RE = re.compile(
    r"^\s*(summary|objective|profile|experience|work experience|employment history|professional experience|"
    r"skills|technical skills|education|projects|personal projects|certifications)\s*:?\s*$",
    re.IGNORECASE,
)
_DEGREE_RE = re.compile(
    r"\b(?:b\.?s\.?c?|b\.?a|m\.?s\.?c?|m\.?a|ph\.?d|mba|bachelor|master|associate|diploma)\b",
    re.IGNORECASE,
)


def enumerate_lines(text: str) -> list[tuple[int, str]]:
    return [(index + 1, line) for index, line in enumerate(text.splitlines())]


def normalize_line(line: str) -> str:
    return re.sub(r"\s+", " ", line).strip()


def is_bullet_like(line: str) -> bool:
    return bool(_BULLET_PATTERN.match(line))


def strip_bullet_prefix(line: str) -> str:
    return _BULLET_PATTERN.sub("", line).strip()


def is_section_heading(line: str) -> bool:
    stripped = normalize_line(line)
    if not stripped:
        return False
    if _SECTION_RE.match(stripped):
        return True
    return bool(stripped.isupper() and len(stripped.split()) <= 5 and len(stripped) <= 36)


def is_contact_or_url(line: str) -> bool:
    stripped = normalize_line(line)
    if not stripped:
        return False
    return bool(_EMAIL_RE.search(stripped) or _PHONE_RE.search(stripped) or _URL_RE.search(stripped))


def is_degree_line(line: str) -> bool:
    return bool(_DEGREE_RE.search(line))


def is_continuation_line(line: str) -> bool:
    stripped = normalize_line(line)
    if not stripped:
        return False
    if is_section_heading(stripped) or is_contact_or_url(stripped) or is_bullet_like(stripped):
        return False
    return stripped[0].islower()


def find_email(line: str) -> str:
    match = _EMAIL_RE.search(line)
    return match.group(0) if match else ""


def find_phone(line: str) -> str:
    match = _PHONE_RE.search(line)
    return match.group(0).strip() if match else ""


def find_links(line: str) -> list[str]:
    without_email = _EMAIL_RE.sub(" ", line)
    return [link for link in _LINK_TOKEN_RE.findall(without_email) if "." in link]
