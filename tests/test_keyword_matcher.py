import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.features.keyword_matcher import keyword_in_text, match_keywords  # noqa: E402


class KeywordMatcherTests(unittest.TestCase):
    def test_plain_keyword_needs_word_boundaries(self):
        self.assertTrue(keyword_in_text("foo k bar", "k"))
        self.assertFalse(keyword_in_text("fookbar", "k"))
        self.assertFalse(keyword_in_text("Shipped JavaScript widgets", "java"))
        self.assertTrue(keyword_in_text("Wrote Java, then Kotlin.", "java"))

    def test_underscore_counts_as_word_character(self):
        self.assertFalse(keyword_in_text("used python_tools daily", "python"))

    def test_multi_word_keyword(self):
        self.assertTrue(keyword_in_text("Applied Machine Learning to search", "machine learning"))
        self.assertFalse(keyword_in_text("machine-learning", "machine learning"))

    def test_punctuated_keywords_use_containment(self):
        self.assertTrue(keyword_in_text("Strong C++17 background", "c++"))
        self.assertTrue(keyword_in_text("Owned CI/CD pipelines", "ci/cd"))
        self.assertTrue(keyword_in_text("Built with Node.js", "node.js"))

    def test_case_insensitive(self):
        self.assertTrue(keyword_in_text("KUBERNETES operator", "kubernetes"))
        self.assertTrue(keyword_in_text("kubernetes operator", "Kubernetes"))

    def test_empty_inputs(self):
        self.assertFalse(keyword_in_text("anything", ""))
        self.assertFalse(keyword_in_text("anything", "   "))
        self.assertFalse(keyword_in_text("", "python"))

    def test_match_keywords_partitions_in_input_order(self):
        keywords = ["python", "docker", "go", "c++"]
        matches, missing = match_keywords("Python and Go services, some C++", keywords)
        self.assertEqual(matches, ["python", "go", "c++"])
        self.assertEqual(missing, ["docker"])
        self.assertEqual(sorted(matches + missing), sorted(keywords))


if __name__ == "__main__":
    unittest.main()
