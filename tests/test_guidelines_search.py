import unittest
from pathlib import Path

from applehig_mcp.content.library import HIGContentLibrary
from applehig_mcp.search.guidelines import GuidelinesSearch, platform_matches

FIXTURES = Path(__file__).parent / "fixtures" / "content"


class GuidelinesSearchTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.search = GuidelinesSearch(HIGContentLibrary(FIXTURES))

    def test_exact_title_ranks_first(self):
        results = self.search.search("buttons")
        self.assertEqual(results[0]["id"], "buttons-ios")
        self.assertEqual(results[0]["type"], "guideline")
        self.assertIn("Buttons", results[0]["highlights"])

    def test_results_are_sorted_and_above_threshold(self):
        results = self.search.search("interface")
        scores = [r["relevanceScore"] for r in results]
        self.assertEqual(scores, sorted(scores, reverse=True))
        self.assertTrue(all(score > 0.08 for score in scores))

    def test_limit(self):
        self.assertLessEqual(len(self.search.search("navigation", limit=1)), 1)

    def test_platform_filter_keeps_universal_content(self):
        results = self.search.search("navigation", platform="macOS")
        ids = [r["id"] for r in results]
        self.assertIn("toolbars-macos", ids)
        self.assertNotIn("tab-bars-ios", ids)
        self.assertTrue(all(r["platform"] in ("macOS", "universal") for r in results))

    def test_universal_platform_filter_matches_everything(self):
        ids = [r["id"] for r in self.search.search("navigation", platform="universal")]
        self.assertIn("tab-bars-ios", ids)
        self.assertIn("toolbars-macos", ids)

    def test_category_filter(self):
        results = self.search.search("navigation", category="navigation")
        self.assertTrue(results)
        self.assertTrue(all(r["category"] == "navigation" for r in results))

    def test_synonym_expansion(self):
        expanded = self.search.expand_query("tab")
        self.assertEqual(expanded[0], "tab")
        self.assertIn("tab bar", expanded)

    def test_concept_boost(self):
        self.assertEqual(self.search.concept_boost("tab", "tab bars"), 0.8)
        self.assertEqual(self.search.concept_boost("red button", "buttons"), 0.4)
        self.assertEqual(self.search.concept_boost("color", "buttons"), 0.0)

    def test_unmatched_and_empty_queries(self):
        self.assertEqual(self.search.search("zzzz"), [])
        self.assertEqual(self.search.search("   "), [])

    def test_query_is_case_insensitive(self):
        self.assertEqual(self.search.search("TAB BARS")[0]["id"], "tab-bars-ios")


class FallbackSearchTests(unittest.TestCase):
    def setUp(self):
        with self.assertLogs("applehig_mcp.config", level="ERROR"):
            self.search = GuidelinesSearch(HIGContentLibrary(Path("/nonexistent/hig-content")))

    def test_empty_corpus_uses_builtin_topics(self):
        results = self.search.search("button")
        self.assertEqual(results[0]["title"], "Buttons")
        self.assertTrue(results[0]["id"].startswith("fallback-"))
        self.assertEqual(results[0]["url"], "https://developer.apple.com/design/human-interface-guidelines/buttons")

    def test_fallback_respects_platform(self):
        titles = [r["title"] for r in self.search.search("button", platform="macOS")]
        self.assertNotIn("Buttons", titles)


class PlatformMatchTests(unittest.TestCase):
    def test_platform_matches(self):
        self.assertTrue(platform_matches("iOS", None))
        self.assertTrue(platform_matches("iOS", "universal"))
        self.assertTrue(platform_matches("universal", "watchOS"))
        self.assertFalse(platform_matches("iOS", "macOS"))


if __name__ == "__main__":
    unittest.main()
