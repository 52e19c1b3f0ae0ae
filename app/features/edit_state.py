from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterator

from app.features.recalculator import recalculate
from app.schemas.analysis import AnalysisResult, BulletPoint, BulletRef, EditAction, ResumeDocument
from app.services.resume_render import render_resume_text

logger = logging.getLogger(__name__)

Renderer = Callable[[ResumeDocument], str]

_SECTIONS = ("experience", "projects")


class BulletNotFoundError(RuntimeError):
    def __init__(self, ref: BulletRef):
        super().__init__(
            f"No bullet at {ref.section}[{ref.entry_index}].bullet_points[{ref.bullet_index}]"
        )
        self.ref = ref
        self.code = "bullet_not_found"


def iter_bullet_refs(document: ResumeDocument) -> Iterator[BulletRef]:
    for section in _SECTIONS:
        for entry_index, entry in enumerate(getattr(document, section)):
            for bullet_index in range(len(entry.bullet_points)):
                yield BulletRef(section=section, entry_index=entry_index, bullet_index=bullet_index)


def get_bullet(document: ResumeDocument, ref: BulletRef) -> BulletPoint:
    entries = getattr(document, ref.section)
    if ref.entry_index >= len(entries):
        raise BulletNotFoundError(ref)
    bullets = entries[ref.entry_index].bullet_points
    if ref.bullet_index >= len(bullets):
        raise BulletNotFoundError(ref)
    return bullets[ref.bullet_index]


def set_bullet(document: ResumeDocument, ref: BulletRef, accepted: bool) -> ResumeDocument:
    bullet = get_bullet(document, ref)
    entries = list(getattr(document, ref.section))
    entry = entries[ref.entry_index]
    bullets = list(entry.bullet_points)
    bullets[ref.bullet_index] = bullet.model_copy(update={"accepted": accepted})
    entries[ref.entry_index] = entry.model_copy(update={"bullet_points": bullets})
    return document.model_copy(update={ref.section: entries})


def toggle_bullet(document: ResumeDocument, ref: BulletRef) -> ResumeDocument:
    return set_bullet(document, ref, not get_bullet(document, ref).accepted)


def _set_all(document: ResumeDocument, accepted: bool) -> ResumeDocument:
    update: dict[str, list] = {}
    for section in _SECTIONS:
        update[section] = [
            entry.model_copy(
                update={
                    "bullet_points": [
                        bullet.model_copy(update={"accepted": accepted}) for bullet in entry.bullet_points
                    ]
                }
            )
            for entry in getattr(document, section)
        ]
    return document.model_copy(update=update)


def accept_all(document: ResumeDocument) -> ResumeDocument:
    return _set_all(document, True)


def reset_all(document: ResumeDocument) -> ResumeDocument:
    return _set_all(document, False)


def apply_edit(
    document: ResumeDocument,
    action: EditAction,
    target: BulletRef | None = None,
    accepted: bool | None = None,
) -> ResumeDocument:
    if action == "accept_all":
        return accept_all(document)
    if action == "reset_all":
        return reset_all(document)
    if target is None:
        raise ValueError(f"action '{action}' requires a target bullet")
    if action == "toggle":
        return toggle_bullet(document, target)
    if action == "set":
        if accepted is None:
            raise ValueError("action 'set' requires 'accepted'")
        return set_bullet(document, target, accepted)
    raise ValueError(f"Unsupported edit action '{action}'")


@dataclass(frozen=True)
class EditSnapshot:
    version: int
    document: ResumeDocument
    analysis: AnalysisResult
    rendering: str


class EditSession:
    """Serialized accept/reject state for one resume.

    Every transition replaces the whole document, recalculates the analysis
    against the full text and re-renders the export view before the lock is
    released. ``publish`` keeps only the newest snapshot, so a render that
    finishes after a later edit is dropped.
    """

    def __init__(
        self,
        document: ResumeDocument,
        analysis: AnalysisResult,
        renderer: Renderer | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._renderer = renderer or render_resume_text
        self._version = 0
        self._current = self._build_snapshot(document, analysis)
        self._published = self._current

    def _build_snapshot(self, document: ResumeDocument, analysis: AnalysisResult) -> EditSnapshot:
        recalculated = recalculate(analysis, document)
        return EditSnapshot(
            version=self._version,
            document=document,
            analysis=recalculated,
            rendering=self._renderer(document),
        )

    @property
    def current(self) -> EditSnapshot:
        return self._current

    @property
    def published(self) -> EditSnapshot:
        return self._published

    def apply(
        self,
        action: EditAction,
        target: BulletRef | None = None,
        accepted: bool | None = None,
    ) -> EditSnapshot:
        with self._lock:
            document = apply_edit(self._current.document, action, target=target, accepted=accepted)
            self._version += 1
            snapshot = self._build_snapshot(document, self._current.analysis)
            self._current = snapshot
        logger.debug(
            "edit_applied action=%s version=%s score=%s",
            action,
            snapshot.version,
            snapshot.analysis.match_score,
        )
        return snapshot

    def toggle(self, ref: BulletRef) -> EditSnapshot:
        return self.apply("toggle", target=ref)

    def set(self, ref: BulletRef, accepted: bool) -> EditSnapshot:
        return self.apply("set", target=ref, accepted=accepted)

    def accept_all(self) -> EditSnapshot:
        return self.apply("accept_all")

    def reset_all(self) -> EditSnapshot:
        return self.apply("reset_all")

    def publish(self, snapshot: EditSnapshot) -> bool:
        with self._lock:
            if snapshot.version < self._published.version:
                logger.debug(
                    "edit_snapshot_stale version=%s latest=%s",
                    snapshot.version,
                    self._published.version,
                )
                return False
            self._published = snapshot
            return True
