from __future__ import annotations

from app.schemas.analysis import BulletPoint, ResumeDocument


def _join(*values: str, sep: str = " | ") -> str:
    return sep.join(value.strip() for value in values if value and value.strip())


def _bullet_lines(bullets: list[BulletPoint]) -> list[str]:
    return [f"- {bullet.effective_text.strip()}" for bullet in bullets if bullet.effective_text.strip()]


def render_resume_text(document: ResumeDocument) -> str:
    """Render the current document as plain text for export."""
    lines: list[str] = []
    info = document.personal_info
    if info.name.strip():
        lines.append(info.name.strip())
    contact = _join(info.email, info.phone, info.linkedin, info.portfolio)
    if contact:
        lines.append(contact)

    if document.summary.strip():
        lines.extend(["", "SUMMARY", document.summary.strip()])

    if document.education:
        lines.extend(["", "EDUCATION"])
        for education in document.education:
            lines.append(_join(education.school, education.degree, education.date))
            if education.gpa.strip():
                lines.append(f"GPA: {education.gpa.strip()}")

    skills = document.skills
    skill_lines = [
        f"{label}: {value.strip()}"
        for label, value in (
            ("Languages", skills.languages),
            ("Frameworks", skills.frameworks),
            ("Tools", skills.tools),
        )
        if value.strip()
    ]
    if skill_lines:
        lines.extend(["", "SKILLS", *skill_lines])

    if document.experience:
        lines.extend(["", "EXPERIENCE"])
        for entry in document.experience:
            lines.append(_join(entry.title, entry.company, entry.date, entry.location))
            if entry.summary.strip():
                lines.append(entry.summary.strip())
            lines.extend(_bullet_lines(entry.bullet_points))

    if document.projects:
        lines.extend(["", "PROJECTS"])
        for project in document.projects:
            lines.append(_join(project.title, project.link, project.date, project.location))
            if project.summary.strip():
                lines.append(project.summary.strip())
            lines.extend(_bullet_lines(project.bullet_points))

    return "\n".join(lines).strip() + "\n" if lines else ""
