import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.features.edit_state import (  # noqa: E402
    BulletNotFoundError,
    EditSession,
    apply_edit,
    get_bullet,
    iter_bullet_refs,
    set_bullet,
    toggle_bullet,
)
from app.features.recalculator import build_initial_analysis  # noqa: E402
from app.schemas.analysis import (  # noqa: E402
    BulletPoint,
    BulletRef,
    ExperienceEntry,
    ProjectEntry,
    ResumeDocument,
)


def _document() -> ResumeDocument:
    return ResumeDocument(
        experience=[
            ExperienceEntry(
                title="Engineer",
                bullet_points=[BulletPoint(original="Wrote scripts", improved="Wrote Python scripts")],
            )
        ],
        projects=[
            ProjectEntry(
                title="Side project",
                bullet_points=[BulletPoint(original="Shipped an app", improved="Shipped a Docker app")],
            )
        ],
    )


EXPERIENCE_REF = BulletRef(section="experience", entry_index=0, bullet_index=0)
PROJECT_REF = BulletRef(section="projects", entry_index=0, bullet_index=0)


class EditFunctionTests(unittest.TestCase):
    def test_toggle_returns_new_document(self):
        document = _document()
        toggled = toggle_bullet(document, EXPERIENCE_REF)
        self.assertTrue(get_bullet(toggled, EXPERIENCE_REF).accepted)
        self.assertFalse(get_bullet(document, EXPERIENCE_REF).accepted)
        self.assertFalse(get_bullet(toggle_bullet(toggled, EXPERIENCE_REF), EXPERIENCE_REF).accepted)

    def test_set_is_absolute(self):
        document = set_bullet(_document(), PROJECT_REF, True)
        document = set_bullet(document, PROJECT_REF, True)
        self.assertTrue(get_bullet(document, PROJECT_REF).accepted)
        self.assertEqual(get_bullet(document, PROJECT_REF).effective_text, "Shipped a Docker app")

    def test_unknown_bullet_raises(self):
        missing = BulletRef(section="projects", entry_index=3, bullet_index=0)
        with self.assertRaises(BulletNotFoundError) as ctx:
            toggle_bullet(_document(), missing)
        self.assertEqual(ctx.exception.code, "bullet_not_found")
        with self.assertRaises(BulletNotFoundError):
            get_bullet(_document(), BulletRef(section="experience", entry_index=0, bullet_index=5))

    def test_iter_refs_covers_both_sections(self):
        self.assertEqual(list(iter_bullet_refs(_document())), [EXPERIENCE_REF, PROJECT_REF])

    def test_apply_edit_validates_inputs(self):
        with self.assertRaises(ValueError):
            apply_edit(_document(), "toggle")
        with self.assertRaises(ValueError):
            apply_edit(_document(), "set", target=EXPERIENCE_REF)
        accepted = apply_edit(_document(), "accept_all")
        self.assertTrue(all(get_bullet(accepted, ref).accepted for ref in iter_bullet_refs(accepted)))


class EditSessionTests(unittest.TestCase):
    def setUp(self):
        document = _document()
        analysis = build_initial_analysis(document, ["python", "docker"])
        self.session = EditSession(document, analysis)

    def test_versions_increase_and_analysis_follows_document(self):
        self.assertEqual(self.session.current.version, 0)
        self.assertEqual(self.session.current.analysis.match_score, 0)

        first = self.session.toggle(EXPERIENCE_REF)
        self.assertEqual(first.version, 1)
        self.assertEqual(first.analysis.added_keywords, ["python"])
        self.assertEqual(first.analysis.match_score, 50)
        self.assertIn("- Wrote Python scripts", first.rendering)

        second = self.session.accept_all()
        self.assertEqual(second.version, 2)
        self.assertEqual(second.analysis.match_score, 100)

        third = self.session.reset_all()
        self.assertEqual(third.analysis.match_score, 0)
        self.assertEqual(third.analysis.added_keywords, [])

    def test_publish_rejects_stale_snapshot(self):
        older = self.session.toggle(EXPERIENCE_REF)
        newer = self.session.set(PROJECT_REF, True)
        self.assertTrue(self.session.publish(newer))
        self.assertFalse(self.session.publish(older))
        self.assertEqual(self.session.published.version, newer.version)

    def test_custom_renderer(self):
        session = EditSession(_document(), build_initial_analysis(_document(), []), renderer=lambda doc: "x")
        self.assertEqual(session.accept_all().rendering, "x")


if __name__ == "__main__":
    unittest.main()
