import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config.matching import (  # noqa: E402
    get_matching_config,
    get_matching_value,
    load_matching_config,
    validate_matching_config,
)


def _valid_config() -> dict:
    return {
        "extraction": {"default_top_n": 20, "technical_ratio": 0.7, "min_token_length": 3},
        "suggestions": {"resume_prompt_chars": 3000, "job_description_prompt_chars": 2000},
    }


class MatchingConfigTests(unittest.TestCase):
    def test_loader_and_value_lookup(self):
        config = get_matching_config()
        self.assertIsInstance(config, dict)
        self.assertEqual(get_matching_value("extraction.technical_ratio"), 0.7)
        self.assertEqual(get_matching_value("extraction.default_top_n"), 20)

    def test_missing_path_returns_default(self):
        self.assertEqual(get_matching_value("extraction.unknown_key", "fallback"), "fallback")
        self.assertEqual(get_matching_value("extraction.technical_ratio.deeper", 1), 1)
        self.assertIsNone(get_matching_value(""))

    def test_validation_accepts_complete_config(self):
        config = _valid_config()
        self.assertIs(validate_matching_config(config), config)

    def test_validation_rejects_missing_sections_and_keys(self):
        with self.assertRaises(RuntimeError):
            validate_matching_config(["not", "a", "mapping"])
        config = _valid_config()
        del config["suggestions"]
        with self.assertRaises(RuntimeError):
            validate_matching_config(config)
        config = _valid_config()
        del config["extraction"]["min_token_length"]
        with self.assertRaises(RuntimeError):
            validate_matching_config(config)

    def test_validation_rejects_out_of_range_values(self):
        config = _valid_config()
        config["extraction"]["technical_ratio"] = 1.5
        with self.assertRaises(RuntimeError):
            validate_matching_config(config)
        config = _valid_config()
        config["extraction"]["default_top_n"] = 0
        with self.assertRaises(RuntimeError):
            validate_matching_config(config)

    def test_load_reports_missing_and_invalid_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(RuntimeError):
                load_matching_config(Path(tmp) / "absent.yaml")
            broken = Path(tmp) / "broken.yaml"
            broken.write_text("extraction: [unclosed", encoding="utf-8")
            with self.assertRaises(RuntimeError):
                load_matching_config(broken)


if __name__ == "__main__":
    unittest.main()
