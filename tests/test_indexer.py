import json
import shutil
import tempfile
import unittest
from pathlib import Path

from applehig_mcp.content.front_matter import parse_document
from applehig_mcp.content.indexer import SearchIndexBuilder
from applehig_mcp.content.library import HIGContentLibrary

FIXTURES = Path(__file__).parent / "fixtures" / "content"


class SearchIndexEntryTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.library = HIGContentLibrary(FIXTURES)
        cls.builder = SearchIndexBuilder()

    def test_buttons_entry(self):
        entry = self.builder.build_entry(self.library.documents["buttons-ios"])

        self.assertEqual(entry["id"], "buttons-ios")
        self.assertEqual(entry["filename"], "buttons.md")
        self.assertEqual(entry["keywords"][:4], ["buttons", "button", "tap", "action"])
        self.assertIn("ios", entry["keywords"])
        self.assertIn("visual-design", entry["keywords"])
        self.assertEqual(len(entry["keywords"]), len(set(entry["keywords"])))

        self.assertTrue(entry["snippet"].startswith("A button initiates an instantaneous action."))
        self.assertTrue(entry["hasStructuredContent"])
        self.assertTrue(entry["hasGuidelines"])
        self.assertTrue(entry["hasExamples"])
        self.assertTrue(entry["hasSpecifications"])
        self.assertEqual(entry["quality"]["codeExamplesCount"], 1)
        self.assertEqual(entry["quality"]["headingCount"], 4)
        self.assertEqual(entry["lastUpdated"], "2025-08-02T09:30:00+00:00")

    def test_fallback_document_is_flagged(self):
        entry = self.builder.build_entry(self.library.documents["complications-watchos"])
        self.assertTrue(entry["quality"]["isFallbackContent"])
        self.assertEqual(entry["quality"]["extractionMethod"], "fallback")

    def test_snippet_defaults_for_short_body(self):
        self.assertEqual(
            self.builder.generate_snippet("# Menus\n\nShort.", "Menus"),
            "Menus - Apple Human Interface Guidelines content.",
        )

    def test_snippet_is_truncated(self):
        snippet = self.builder.generate_snippet("word " * 100, "Long")
        self.assertEqual(len(snippet), 203)
        self.assertTrue(snippet.endswith("..."))

    def test_keywords_without_front_matter(self):
        doc = parse_document("# Sliders\n\nA slider lets people choose a value on iOS.", Path("sliders.md"), "iOS")
        keywords = self.builder.extract_keywords(doc)
        self.assertEqual(keywords[0], "sliders")
        self.assertIn("ios", keywords)
        self.assertIn("foundations", keywords)

    def test_concepts_from_headings_and_bold_text(self):
        concepts = self.builder.extract_concepts("# Menus\n\nUse **context menus** for secondary actions.\n\n## Tips")
        self.assertEqual(concepts, ["Menus", "Tips", "context menus"])


class CrossReferenceTests(unittest.TestCase):
    def test_same_category_and_topical_links(self):
        docs = [
            parse_document("---\ntitle: Tab Bars\nid: tab-bars-ios\nplatform: iOS\ncategory: navigation\n---\nA"),
            parse_document("---\ntitle: Tab Bars\nid: tab-bars-ipados\nplatform: iOS\ncategory: layout\n---\nB"),
            parse_document("---\ntitle: Navigation Bars\nid: nav-ios\nplatform: iOS\ncategory: navigation\n---\nC"),
            parse_document("---\ntitle: Navigation\nid: nav-universal\nplatform: universal\ncategory: foundations\n---\nD"),
        ]
        references = SearchIndexBuilder().build_cross_references(docs)
        pairs = {(r["fromSection"], r["toSection"]): r["relevanceScore"] for r in references}

        # Universal "Navigation" shares a title word with "Navigation Bars"
        self.assertEqual(pairs[("nav-universal", "nav-ios")], 0.6)
        # Same platform and category, one of two title words in common
        self.assertEqual(pairs[("tab-bars-ios", "nav-ios")], 0.9)
        self.assertNotIn(("tab-bars-ios", "tab-bars-ipados"), pairs)


class MetadataFileTests(unittest.TestCase):
    def test_generation_info(self):
        library = HIGContentLibrary(FIXTURES)
        info = library.indexer.build_generation_info(list(library.documents.values()))

        self.assertEqual(info["totalSections"], 7)
        self.assertEqual(info["successfulExtractions"], 6)
        self.assertEqual(info["averageQuality"], 0.76)
        self.assertEqual(info["platforms"], ["iOS", "macOS", "universal", "watchOS"])
        self.assertEqual(info["version"], SearchIndexBuilder.VERSION)

    def test_write_metadata(self):
        with tempfile.TemporaryDirectory() as tmp:
            content_dir = Path(tmp) / "content"
            shutil.copytree(FIXTURES, content_dir)
            library = HIGContentLibrary(content_dir)

            written = library.indexer.write_metadata(list(library.documents.values()), content_dir)

            self.assertEqual(set(written), {"search_index", "cross_references", "generation_info"})
            index = json.loads((content_dir / "metadata" / "search-index.json").read_text(encoding="utf-8"))
            self.assertEqual(index["metadata"]["totalSections"], 7)
            self.assertIn("buttons-ios", index["keywordIndex"])

            references = json.loads((content_dir / "metadata" / "cross-references.json").read_text(encoding="utf-8"))
            self.assertIn(
                {"fromSection": "tab-bars-ios", "toSection": "toolbars-macos",
                 "relationshipType": "related", "relevanceScore": 0.5},
                references,
            )

            # Metadata files are not picked up as documents on reload
            library.initialize(content_dir)
            self.assertEqual(len(library.documents), 7)


if __name__ == "__main__":
    unittest.main()
