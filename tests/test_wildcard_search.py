import unittest
from pathlib import Path

from applehig_mcp.content.library import HIGContentLibrary
from applehig_mcp.search.wildcard import (
    PATTERN_EXAMPLES,
    WildcardSearch,
    matched_segments,
    parse_pattern,
    score_match,
)

FIXTURES = Path(__file__).parent / "fixtures" / "content"


class PatternTests(unittest.TestCase):
    def test_star_is_anchored(self):
        pattern = parse_pattern("Tab*")
        self.assertTrue(pattern.is_wildcard)
        self.assertTrue(pattern.regex.search("tab bars"))
        self.assertIsNone(pattern.regex.search("Stab"))

    def test_question_mark_matches_one_character(self):
        pattern = parse_pattern("?avigation")
        self.assertTrue(pattern.regex.search("Navigation"))
        self.assertIsNone(pattern.regex.search("avigation"))
        self.assertIsNone(pattern.regex.search("Navigation Bars"))

    def test_regex_characters_are_literal(self):
        pattern = parse_pattern("a.b")
        self.assertFalse(pattern.is_wildcard)
        self.assertTrue(pattern.regex.search("xa.by"))
        self.assertIsNone(pattern.regex.search("axb"))

    def test_plain_query_scores(self):
        pattern = parse_pattern("buttons")
        self.assertEqual(score_match("Buttons", pattern), 1.0)
        self.assertEqual(score_match("Buttons and bars", pattern), 0.9)
        self.assertEqual(score_match("Toolbar buttons", pattern), 0.7)
        self.assertEqual(score_match("Toggles", pattern), 0.0)

    def test_wildcard_scores_reward_literals(self):
        self.assertEqual(score_match("Tab Bars", parse_pattern("Tab*")), 0.85)
        self.assertEqual(score_match("tab bars", parse_pattern("?ab*")), 0.7)
        self.assertEqual(score_match("anything", parse_pattern("*")), 0.55)

    def test_matched_segments(self):
        self.assertEqual(matched_segments("Tab Bars", parse_pattern("*ab*ars")), ["ab", "ars"])
        self.assertEqual(matched_segments("Toolbar Buttons", parse_pattern("button")), ["Button"])


class WildcardSearchTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.search = WildcardSearch(HIGContentLibrary(FIXTURES))

    def test_prefix_pattern(self):
        response = self.search.search("tab*")
        self.assertTrue(response["isWildcard"])
        self.assertEqual([r["id"] for r in response["results"]], ["tab-bars-ios"])

        result = response["results"][0]
        self.assertEqual(result["matchedField"], "title")
        self.assertEqual(result["matchedText"], "Tab Bars")
        self.assertEqual(result["relevanceScore"], 0.85)
        # Few matches come with example patterns
        self.assertEqual(response["suggestions"], PATTERN_EXAMPLES)

    def test_keyword_match(self):
        response = self.search.search("voice*")
        self.assertEqual(response["results"][0]["id"], "accessibility-universal")
        self.assertEqual(response["results"][0]["matchedField"], "keywords")
        self.assertEqual(response["results"][0]["matchedText"], "voiceover")

    def test_platform_filter(self):
        ids = {r["id"] for r in self.search.search("*bars", platform="macOS")["results"]}
        self.assertEqual(ids, {"toolbars-macos"})

    def test_category_filter_and_limit(self):
        response = self.search.search("*", category="navigation", limit=1)
        self.assertEqual(response["totalMatches"], 2)
        self.assertEqual(len(response["results"]), 1)

    def test_plain_substring(self):
        response = self.search.search("color")
        self.assertFalse(response["isWildcard"])
        self.assertEqual(response["results"][0]["id"], "color-universal")
        self.assertEqual(response["results"][0]["relevanceScore"], 1.0)

    def test_no_matches(self):
        response = self.search.search("zz*zz")
        self.assertEqual(response["totalMatches"], 0)
        self.assertEqual(response["results"], [])
        self.assertIn("suggestions", response)


if __name__ == "__main__":
    unittest.main()
