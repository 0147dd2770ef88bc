import json
import shutil
import tempfile
import unittest
import urllib.error
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

from applehig_mcp.content.library import HIGContentLibrary
from applehig_mcp.updates.freshness import FreshnessChecker

FIXTURES = Path(__file__).parent / "fixtures" / "content"


class StaticContentTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.checker = FreshnessChecker(HIGContentLibrary(FIXTURES))

    def test_last_updated_falls_back_to_newest_document(self):
        self.assertEqual(self.checker.last_updated(), datetime(2025, 8, 3, 12, 0, tzinfo=timezone.utc))

    def test_fresh_content(self):
        result = self.checker.check_static_content(now=datetime(2025, 9, 1, tzinfo=timezone.utc))
        self.assertFalse(result["isUpdateAvailable"])
        self.assertEqual(result["ageDays"], 28)
        self.assertEqual(result["currentVersion"], "2025-08-03")
        self.assertNotIn("changelog", result)

    def test_stale_content(self):
        result = self.checker.check_static_content(now=datetime(2026, 6, 1, tzinfo=timezone.utc))
        self.assertTrue(result["isUpdateAvailable"])
        self.assertGreater(result["ageDays"], 180)
        self.assertIn("changelog", result)

    def test_content_info(self):
        info = self.checker.content_info(now=datetime(2025, 8, 10, 12, 0, tzinfo=timezone.utc))
        self.assertEqual(info, {"lastUpdated": "2025-08-03T12:00:00+00:00", "totalSections": 7, "ageDays": 7})


class GenerationInfoTests(unittest.TestCase):
    def test_generation_info_wins_over_document_dates(self):
        with tempfile.TemporaryDirectory() as tmp:
            content_dir = Path(tmp) / "content"
            shutil.copytree(FIXTURES, content_dir)
            (content_dir / "metadata").mkdir()
            (content_dir / "metadata" / "generation-info.json").write_text(
                json.dumps({"generatedAt": "2025-01-01T00:00:00+00:00", "totalSections": 7}), encoding="utf-8"
            )
            checker = FreshnessChecker(HIGContentLibrary(content_dir))
            self.assertEqual(checker.last_updated(), datetime(2025, 1, 1, tzinfo=timezone.utc))

    def test_unreadable_generation_info_is_ignored(self):
        with tempfile.TemporaryDirectory() as tmp:
            content_dir = Path(tmp) / "content"
            shutil.copytree(FIXTURES, content_dir)
            (content_dir / "metadata").mkdir()
            (content_dir / "metadata" / "generation-info.json").write_text("{not json", encoding="utf-8")
            checker = FreshnessChecker(HIGContentLibrary(content_dir))
            with self.assertLogs("applehig_mcp.config", level="WARNING"):
                self.assertIsNone(checker.generation_info())
            self.assertEqual(checker.last_updated(), datetime(2025, 8, 3, 12, 0, tzinfo=timezone.utc))

    def test_generation_info_that_is_not_an_object_is_ignored(self):
        with tempfile.TemporaryDirectory() as tmp:
            content_dir = Path(tmp) / "content"
            shutil.copytree(FIXTURES, content_dir)
            (content_dir / "metadata").mkdir()
            (content_dir / "metadata" / "generation-info.json").write_text('["2025-01-01"]', encoding="utf-8")
            checker = FreshnessChecker(HIGContentLibrary(content_dir))
            with self.assertLogs("applehig_mcp.config", level="WARNING"):
                self.assertIsNone(checker.generation_info())
            with self.assertLogs("applehig_mcp.config", level="WARNING"):
                self.assertEqual(checker.last_updated(), datetime(2025, 8, 3, 12, 0, tzinfo=timezone.utc))


class CheckUpdatesTests(unittest.TestCase):
    def setUp(self):
        with self.assertLogs("applehig_mcp.config", level="ERROR"):
            self.empty = FreshnessChecker(HIGContentLibrary(Path("/nonexistent/hig-content")))
        self.checker = FreshnessChecker(HIGContentLibrary(FIXTURES))

    def test_missing_corpus_needs_an_update(self):
        result = self.empty.check_updates(["hig-static"])
        self.assertTrue(result["hasUpdates"])
        self.assertEqual(len(result["updates"]), 1)
        self.assertEqual(result["notifications"][0]["message"], "Static HIG content is missing")
        self.assertEqual(result["summary"], "1 update available, 1 warning")

    @patch("applehig_mcp.updates.freshness.urllib.request.urlopen")
    def test_api_available(self, mock_urlopen):
        mock_urlopen.return_value.__enter__.return_value.status = 200

        result = self.checker.check_updates(["api-documentation"])

        self.assertEqual(result["updates"][0]["source"], "api-documentation")
        self.assertTrue(result["updates"][0]["available"])
        self.assertFalse(result["hasUpdates"])
        self.assertEqual(result["notifications"], [])
        self.assertEqual(result["summary"], "All sources up to date")
        request = mock_urlopen.call_args[0][0]
        self.assertEqual(request.get_method(), "HEAD")

    @patch("applehig_mcp.updates.freshness.urllib.request.urlopen")
    def test_api_unreachable_is_a_warning(self, mock_urlopen):
        mock_urlopen.side_effect = urllib.error.URLError("offline")

        with self.assertLogs("applehig_mcp.config", level="WARNING"):
            result = self.checker.check_updates(["api-documentation"])

        self.assertFalse(result["updates"][0]["available"])
        self.assertEqual(result["notifications"][0]["type"], "warning")
        self.assertEqual(result["summary"], "1 warning")

    @patch("applehig_mcp.updates.freshness.urllib.request.urlopen")
    def test_all_sources_by_default(self, mock_urlopen):
        mock_urlopen.return_value.__enter__.return_value.status = 200
        result = self.empty.check_updates()
        self.assertEqual([u["source"] for u in result["updates"]], ["hig-static", "api-documentation"])

    def test_summary_pluralizes(self):
        updates = [{"isUpdateAvailable": True}, {"isUpdateAvailable": True}]
        notifications = [{"type": "warning"}, {"type": "warning"}, {"type": "error"}]
        self.assertEqual(self.checker.summarize(updates, notifications), "2 updates available, 2 warnings, 1 error")


if __name__ == "__main__":
    unittest.main()
