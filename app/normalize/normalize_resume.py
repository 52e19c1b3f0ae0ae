from __future__ import annotations

from typing import Any

from app.schemas.analysis import (
    BulletPoint,
    Education,
    ExperienceEntry,
    PersonalInfo,
    ProjectEntry,
    ResumeDocument,
    Skills,
)

from .utils import (
    enumerate_lines,
    find_email,
    find_links,
    find_phone,
    is_bullet_like,
    is_contact_or_url,
    is_continuation_line,
    is_degree_line,
    is_section_heading,
    normalize_line,
    strip_bullet_prefix,
)

_EXPERIENCE_SECTION_HINTS = {"experience", "work experience", "employment history", "professional experience"}
_PROJECT_SECTION_HINTS = {"projects", "personal projects"}
_SKILL_LABELS = {
    "languages": "languages",
    "programming languages": "languages",
    "frameworks": "frameworks",
    "libraries": "frameworks",
    "frameworks & libraries": "frameworks",
    "tools": "tools",
    "technologies": "tools",
    "developer tools": "tools",
}


def _section_key(line: str) -> str:
    lowered = normalize_line(line).lower().rstrip(":")
    if lowered in {"summary", "objective", "profile"}:
        return "summary"
    if lowered in _EXPERIENCE_SECTION_HINTS:
        return "experience"
    if lowered in _PROJECT_SECTION_HINTS:
        return "projects"
    if lowered in {"skills", "technical skills"}:
        return "skills"
    if lowered == "education":
        return "education"
    return "other"


def _append(existing: str, addition: str) -> str:
    return f"{existing} {addition}".strip() if existing else addition


class _DocumentBuilder:
    def __init__(self) -> None:
        self.personal: dict[str, str] = {}
        self.summary = ""
        self.skills: dict[str, str] = {"languages": "", "frameworks": "", "tools": ""}
        self.education: list[dict[str, str]] = []
        self.entries: dict[str, list[dict[str, Any]]] = {"experience": [], "projects": []}

    def add_contact(self, line: str) -> None:
        email = find_email(line)
        if email and not self.personal.get("email"):
            self.personal["email"] = email
        phone = find_phone(line)
        if phone and not self.personal.get("phone"):
            self.personal["phone"] = phone
        for link in find_links(line):
            key = "linkedin" if "linkedin" in link.lower() else "portfolio"
            if not self.personal.get(key):
                self.personal[key] = link

    def add_skill_line(self, line: str) -> None:
        label, sep, value = line.partition(":")
        key = _SKILL_LABELS.get(label.strip().lower()) if sep else None
        if key:
            self.skills[key] = _append(self.skills[key], value.strip())
        else:
            self.skills["tools"] = _append(self.skills["tools"], line)

    def add_education_line(self, line: str) -> None:
        if is_degree_line(line) and self.education and not self.education[-1]["degree"]:
            self.education[-1]["degree"] = line
            return
        if is_degree_line(line):
            self.education.append({"school": "", "degree": line})
            return
        self.education.append({"school": line, "degree": ""})

    def add_entry_line(self, section: str, line: str, *, bullet: bool) -> None:
        entries = self.entries[section]
        if bullet:
            if not entries:
                entries.append({"title": "", "summary": "", "bullets": []})
            entries[-1]["bullets"].append(line)
            return
        current = entries[-1] if entries else None
        if current is not None and current["bullets"] and is_continuation_line(line):
            current["bullets"][-1] = f"{current['bullets'][-1]} {line}"
            return
        if current is None or current["bullets"]:
            entries.append({"title": line, "summary": "", "bullets": []})
            return
        if not current["title"]:
            current["title"] = line
        else:
            current["summary"] = _append(current["summary"], line)

    def build(self) -> ResumeDocument:
        experience = [
            ExperienceEntry(
                title=entry["title"],
                summary=entry["summary"],
                bullet_points=[BulletPoint(original=text) for text in entry["bullets"]],
            )
            for entry in self.entries["experience"]
        ]
        projects = [
            ProjectEntry(
                title=entry["title"],
                summary=entry["summary"],
                bullet_points=[BulletPoint(original=text) for text in entry["bullets"]],
            )
            for entry in self.entries["projects"]
        ]
        return ResumeDocument(
            personal_info=PersonalInfo(**self.personal),
            summary=self.summary,
            education=[Education(**item) for item in self.education],
            skills=Skills(**self.skills),
            experience=experience,
            projects=projects,
        )


def document_from_text(text: str) -> ResumeDocument:
    """Split plain resume text into a structured document.

    Bullet lines under experience or project headings become rewritable
    bullets; everything else lands in a static field so it still takes part
    in keyword matching.
    """
    builder = _DocumentBuilder()
    current_section = "header"

    for _, raw_line in enumerate_lines(text):
        stripped = normalize_line(raw_line)
        if not stripped:
            continue

        if is_section_heading(stripped):
            current_section = _section_key(stripped)
            continue

        if current_section == "header" and is_contact_or_url(stripped):
            builder.add_contact(stripped)
            continue

        bullet_line = is_bullet_like(raw_line) or is_bullet_like(stripped)
        cleaned = strip_bullet_prefix(stripped) if bullet_line else stripped
        if not cleaned:
            continue

        if current_section == "header":
            if not builder.personal.get("name"):
                builder.personal["name"] = cleaned
            else:
                builder.summary = _append(builder.summary, cleaned)
        elif current_section in {"experience", "projects"}:
            builder.add_entry_line(current_section, cleaned, bullet=bullet_line)
        elif current_section == "skills":
            builder.add_skill_line(cleaned)
        elif current_section == "education":
            builder.add_education_line(cleaned)
        else:
            builder.summary = _append(builder.summary, cleaned)

    return builder.build()
