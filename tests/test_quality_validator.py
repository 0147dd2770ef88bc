import unittest
from pathlib import Path

from applehig_mcp.content.front_matter import HIGDocument
from applehig_mcp.content.library import HIGContentLibrary
from applehig_mcp.quality.validator import (
    MAX_HISTORY,
    ContentQualityValidator,
    detect_fallback_content,
)

FIXTURES = Path(__file__).parent / "fixtures" / "content"


def make_document(**overrides) -> HIGDocument:
    values = {
        "title": "Sliders",
        "platform": "iOS",
        "category": "selection-and-input",
        "url": "https://developer.apple.com/design/human-interface-guidelines/sliders",
        "id": "sliders-ios",
        "body": "A slider is a horizontal track with a control called a thumb.",
        "extraction_method": "crawlee",
        "quality_score": 0.9,
        "confidence": 0.9,
        "content_length": 300,
    }
    values.update(overrides)
    return HIGDocument(**values)


class QualityScoreTests(unittest.TestCase):
    def setUp(self):
        self.validator = ContentQualityValidator()

    def test_empty_content_scores_zero(self):
        self.assertEqual(self.validator.calculate_quality_score(""), 0.0)

    def test_rich_content_is_capped(self):
        content = ("# Apple iOS macOS interface design guidelines\n" * 10) + "`code` ![img](a.png)" + "x" * 2000
        self.assertAlmostEqual(self.validator.calculate_quality_score(content), 1.0)

    def test_detect_fallback_content(self):
        self.assertTrue(detect_fallback_content("This page requires JavaScript to run."))
        self.assertFalse(detect_fallback_content("Buttons initiate actions."))

    def test_custom_thresholds_override_defaults(self):
        validator = ContentQualityValidator({"minContentLength": 5000})
        self.assertEqual(validator.thresholds["minContentLength"], 5000)
        self.assertEqual(validator.thresholds["minQualityScore"], 0.5)


class ValidateDocumentTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.library = HIGContentLibrary(FIXTURES)

    def setUp(self):
        self.validator = ContentQualityValidator()

    def test_good_document_passes_every_check(self):
        result = self.validator.validate_document(self.library.documents["buttons-ios"])
        self.assertTrue(result["isValid"])
        self.assertEqual(result["score"], 1.0)
        self.assertEqual(result["issues"], [])

    def test_fallback_document_fails(self):
        result = self.validator.validate_document(self.library.documents["complications-watchos"])
        self.assertFalse(result["isValid"])
        self.assertAlmostEqual(result["score"], 1 / 6)
        self.assertIn("Content appears to be fallback/placeholder content", result["issues"])
        self.assertEqual(len(result["issues"]), len(result["recommendations"]))

    def test_document_without_extraction_metadata_is_scored_from_body(self):
        doc = self.library.documents["gestures-universal"]
        metrics = self.validator.metrics_for(doc)
        self.assertEqual(metrics["score"], self.validator.calculate_quality_score(doc.body))
        self.assertEqual(metrics["extractionMethod"], "unknown")

        result = self.validator.validate_document(doc)
        self.assertFalse(result["isValid"])
        self.assertTrue(result["issues"][0].startswith("Quality score too low"))

    def test_four_of_six_checks_is_valid(self):
        # Fails structure and Apple terms only
        result = self.validator.validate_document(make_document())
        self.assertTrue(result["isValid"])
        self.assertAlmostEqual(result["score"], 4 / 6)

    def test_three_of_six_checks_is_invalid(self):
        result = self.validator.validate_document(make_document(extraction_method="fallback"))
        self.assertFalse(result["isValid"])
        self.assertAlmostEqual(result["score"], 3 / 6)

    def test_empty_body(self):
        result = self.validator.validate_document(make_document(body="   "))
        self.assertFalse(result["isValid"])
        self.assertEqual(result["issues"], ["Content is empty"])
        self.assertEqual(self.validator.history, [])


class StatisticsTests(unittest.TestCase):
    def test_statistics_and_report(self):
        library = HIGContentLibrary(FIXTURES)
        validator = ContentQualityValidator()
        for doc in library.documents.values():
            validator.validate_document(doc)

        stats = validator.get_statistics()
        self.assertEqual(stats["totalSections"], 7)
        self.assertEqual(stats["fallbackUsage"], 1)
        self.assertAlmostEqual(stats["extractionSuccessRate"], 6 / 7 * 100)

        report = validator.build_report()
        self.assertFalse(report["summary"]["slaCompliance"])
        self.assertEqual(report["summary"]["totalValidated"], 7)

        text = validator.generate_report()
        self.assertIn("SLA Compliance: NOT MET", text)
        self.assertIn("High Priority Issues:", text)
        self.assertIn("Fallback Usage: 1 (14.3%)", text)

    def test_empty_statistics(self):
        validator = ContentQualityValidator()
        self.assertEqual(validator.get_statistics()["extractionSuccessRate"], 0.0)
        self.assertIn("Total Sections: 0", validator.generate_report())

    def test_history_is_bounded(self):
        validator = ContentQualityValidator()
        metrics = validator.metrics_for(make_document())
        for i in range(MAX_HISTORY + 5):
            validator.record_extraction(f"doc-{i}", metrics)
        self.assertEqual(len(validator.history), MAX_HISTORY)
        self.assertEqual(validator.history[0]["id"], "doc-5")


if __name__ == "__main__":
    unittest.main()
