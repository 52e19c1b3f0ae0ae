import os
import sys
import tempfile
import unittest
from pathlib import Path

# Keep API tests deterministic; no throttling and no key check.
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("API_KEY", "")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from app.core.analysis_cache import AnalysisCache  # noqa: E402
from app.main import app  # noqa: E402
from app.schemas.analysis import (  # noqa: E402
    BulletPoint,
    ExperienceEntry,
    GeneratorResult,
    ResumeDocument,
    Skills,
    SuggestionDraft,
)
from app.services.analysis_service import AnalysisService  # noqa: E402
from app.services.resume_source import LocalResumeSource  # noqa: E402
from app.services.suggestion_generator import AnalysisFailedError  # noqa: E402

RESUME = ResumeDocument(
    skills=Skills(languages="Python"),
    experience=[
        ExperienceEntry(
            title="Backend Engineer",
            bullet_points=[BulletPoint(original="Helped with deployments")],
        )
    ],
)
JOB_DESCRIPTION = "Python and Docker. Docker."


class FakeGenerator:
    def __init__(self, error=None):
        self.error = error
        self.calls = 0

    async def generate(self, resume_text, job_description, missing_keywords):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return GeneratorResult(
            match_score=40,
            suggestions=[
                SuggestionDraft(
                    original_text="Helped with deployments",
                    suggested_text="Automated Docker deployments",
                )
            ],
        )


class AnalysisApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls._tmp = tempfile.TemporaryDirectory()
        Path(cls._tmp.name, "jane.json").write_text(RESUME.model_dump_json(), encoding="utf-8")
        cls.client = TestClient(app)

    @classmethod
    def tearDownClass(cls):
        cls._tmp.cleanup()

    def _install(self, generator):
        app.state.analysis_service = AnalysisService(
            LocalResumeSource(self._tmp.name),
            generator,
            cache=AnalysisCache(ttl_seconds=600),
        )

    def _analyze(self, resume_key="jane.json"):
        return self.client.post(
            "/v1/analysis",
            json={"resume_key": resume_key, "job_description": JOB_DESCRIPTION},
        )

    def test_analysis_contract_and_cached_repeat(self):
        generator = FakeGenerator()
        self._install(generator)

        first = self._analyze()
        self.assertEqual(first.status_code, 200)
        body = first.json()
        self.assertEqual(body["analysis"]["jd_keywords"], ["docker", "python"])
        self.assertEqual(body["analysis"]["keyword_matches"], ["python"])
        self.assertEqual(body["score"], 50)
        self.assertEqual(body["suggestions"][0]["id"], "suggestion-1")
        self.assertEqual(
            body["document"]["experience"][0]["bullet_points"][0]["improved"],
            "Automated Docker deployments",
        )

        second = self._analyze()
        self.assertEqual(second.status_code, 200)
        self.assertEqual(second.content, first.content)
        self.assertEqual(generator.calls, 1)

        health = self.client.get("/v1/health")
        self.assertEqual(health.json(), {"status": "healthy", "analysis_cache_entries": 1})

    def test_unknown_resume_is_404(self):
        self._install(FakeGenerator())
        self.assertEqual(self._analyze("missing.json").status_code, 404)

    def test_generator_failure_is_502(self):
        self._install(FakeGenerator(error=AnalysisFailedError("slow", reason="timeout")))
        response = self._analyze()
        self.assertEqual(response.status_code, 502)
        detail = response.json()["detail"]
        self.assertEqual(detail["code"], "analysis_failed")
        self.assertEqual(detail["reason"], "timeout")
        self.assertEqual(app.state.analysis_service.cache_size, 0)

    def test_request_validation(self):
        self._install(FakeGenerator())
        response = self.client.post("/v1/analysis", json={"resume_key": "jane.json", "job_description": ""})
        self.assertEqual(response.status_code, 422)

    def test_edit_and_recalculate_flow(self):
        self._install(FakeGenerator())
        body = self._analyze().json()
        ref = {"section": "experience", "entry_index": 0, "bullet_index": 0}

        edited = self.client.post(
            "/v1/analysis/edit",
            json={"document": body["document"], "analysis": body["analysis"], "action": "toggle", "target": ref},
        )
        self.assertEqual(edited.status_code, 200)
        edited_body = edited.json()
        self.assertEqual(edited_body["analysis"]["match_score"], 100)
        self.assertEqual(edited_body["analysis"]["added_keywords"], ["docker"])
        self.assertIn("- Automated Docker deployments", edited_body["rendering"])

        reset = self.client.post(
            "/v1/analysis/recalculate",
            json={"document": body["document"], "analysis": edited_body["analysis"]},
        )
        self.assertEqual(reset.status_code, 200)
        self.assertEqual(reset.json()["analysis"]["match_score"], 50)

    def test_edit_errors(self):
        self._install(FakeGenerator())
        body = self._analyze().json()
        missing_ref = {"section": "projects", "entry_index": 0, "bullet_index": 0}
        response = self.client.post(
            "/v1/analysis/edit",
            json={"document": body["document"], "analysis": body["analysis"], "action": "toggle", "target": missing_ref},
        )
        self.assertEqual(response.status_code, 404)

        response = self.client.post(
            "/v1/analysis/edit",
            json={"document": body["document"], "analysis": body["analysis"], "action": "set", "target": missing_ref},
        )
        self.assertEqual(response.status_code, 422)

    def test_keyword_extraction_endpoint(self):
        response = self.client.post(
            "/v1/keywords/extract",
            json={"job_description": "Kubernetes kubernetes Python customers", "top_n": 2},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["keywords"], ["kubernetes", "python"])
        self.assertEqual(body["ranked"][0], {"term": "kubernetes", "frequency": 2, "technical": True})


if __name__ == "__main__":
    unittest.main()
