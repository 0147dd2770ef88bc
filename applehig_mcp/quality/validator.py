"""
Content Quality Validation Module
=================================

Validates extracted HIG documents against quality thresholds and tracks
extraction statistics across a validation run.

Each document goes through six checks (quality score, confidence, length,
structure, Apple-specific terms, fallback content). A document is valid when
at least four pass. The run as a whole meets its service level when at least
95% of documents are real extractions rather than fallback placeholders.
"""

import re
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..content.front_matter import HIGDocument
from ..content.indexer import SearchIndexBuilder

DEFAULT_THRESHOLDS = {
    "minQualityScore": 0.5,
    "minConfidence": 0.4,
    "minContentLength": 200,
    "maxFallbackRate": 5,  # percent
    "minStructureScore": 0.2,
    "minAppleTermsScore": 0.1,
}

SLA_SUCCESS_RATE = 95.0
MAX_HISTORY = 1000

QUALITY_TERMS = ["apple", "ios", "macos", "interface", "design", "guidelines"]

FALLBACK_INDICATORS = [
    "this page requires javascript",
    "single page application",
    "content extraction failed",
    "please visit the official documentation",
    "fallback information",
]

HEADING_LINE = re.compile(r"^#+\s", re.MULTILINE)


def detect_fallback_content(content: str) -> bool:
    content_lower = content.lower()
    return any(indicator in content_lower for indicator in FALLBACK_INDICATORS)


class ContentQualityValidator:
    """
    Validate documents and keep extraction statistics.

    Attributes:
        thresholds: Validation thresholds (defaults overridden per key)
        validated: Latest validation result per document id
        history: Recorded (document id, metrics, timestamp) entries, newest last
    """

    def __init__(self, thresholds: Optional[Dict] = None):
        self.thresholds = dict(DEFAULT_THRESHOLDS)
        self.thresholds.update(thresholds or {})
        self.validated: Dict[str, Dict] = {}
        self.history: List[Dict] = []
        self.indexer = SearchIndexBuilder()

    def calculate_quality_score(self, content: str) -> float:
        """Heuristic 0-1 score from length, Apple terms, headings, code and images."""
        if not content:
            return 0.0

        content_lower = content.lower()
        score = min(len(content) / 2000, 1) * 0.3

        found = len([term for term in QUALITY_TERMS if term in content_lower])
        score += (found / len(QUALITY_TERMS)) * 0.3

        score += min(len(HEADING_LINE.findall(content)) / 5, 1) * 0.2

        if "`" in content:
            score += 0.1
        if "![" in content or "<img" in content:
            score += 0.1

        return min(score, 1.0)

    def metrics_for(self, doc: HIGDocument) -> Dict:
        """
        Quality metrics for a document.

        Scores recorded in front matter win over computed ones; documents
        without extraction metadata are scored from their body.
        """
        body = doc.body
        headings = len(HEADING_LINE.findall(body))
        is_fallback = doc.is_fallback or detect_fallback_content(body)

        if doc.extraction_method == "unknown":
            score = self.calculate_quality_score(body)
            confidence = 0.1 if is_fallback else score
            method = "fallback" if is_fallback else "unknown"
        else:
            score = doc.quality_score
            confidence = doc.confidence
            method = doc.extraction_method

        return {
            "score": score,
            "confidence": confidence,
            "length": doc.content_length,
            "structureScore": min(headings / 5, 1.0),
            "appleTermsScore": self.indexer.apple_terms_score(body),
            "codeExamplesCount": body.count("```") // 2,
            "imageReferencesCount": len(re.findall(r"!\[.*?\]\(.*?\)", body)),
            "headingCount": headings,
            "isFallbackContent": is_fallback,
            "extractionMethod": method,
        }

    def is_high_quality(self, metrics: Dict) -> bool:
        t = self.thresholds
        return (
            metrics["score"] >= t["minQualityScore"]
            and metrics["confidence"] >= t["minConfidence"]
            and metrics["length"] >= t["minContentLength"]
            and not metrics["isFallbackContent"]
            and metrics["structureScore"] >= t["minStructureScore"]
        )

    def validate_document(self, doc: HIGDocument) -> Dict:
        """
        Validate one document and record it.

        Returns:
            Dictionary with isValid, score (fraction of checks passed),
            confidence, issues and recommendations
        """
        issues: List[str] = []
        recommendations: List[str] = []

        if not doc.body.strip():
            issues.append("Content is empty")
            result = {"isValid": False, "score": 0.0, "confidence": 0.0,
                      "issues": issues, "recommendations": recommendations}
            self.validated[doc.id] = result
            return result

        metrics = self.metrics_for(doc)
        t = self.thresholds

        checks = []

        def check(passed: bool, issue: str, recommendation: str):
            if not passed:
                issues.append(issue)
                recommendations.append(recommendation)
            checks.append(passed)

        check(metrics["score"] >= t["minQualityScore"],
              f"Quality score too low: {metrics['score']:.3f} (min: {t['minQualityScore']})",
              "Review content extraction patterns and selectors")
        check(metrics["confidence"] >= t["minConfidence"],
              f"Confidence too low: {metrics['confidence']:.3f} (min: {t['minConfidence']})",
              "Improve extraction accuracy or review source content")
        check(metrics["length"] >= t["minContentLength"],
              f"Content too short: {metrics['length']} characters (min: {t['minContentLength']})",
              "Verify complete content extraction or check source availability")
        check(metrics["structureScore"] >= t["minStructureScore"],
              f"Poor content structure: {metrics['structureScore']:.3f} (min: {t['minStructureScore']})",
              "Review heading extraction and content organization")
        check(metrics["appleTermsScore"] >= t["minAppleTermsScore"],
              f"Insufficient Apple-specific content: {metrics['appleTermsScore']:.3f} (min: {t['minAppleTermsScore']})",
              "Verify extraction from correct Apple HIG pages")
        check(not metrics["isFallbackContent"],
              "Content appears to be fallback/placeholder content",
              "Re-extract the page with JavaScript rendering enabled")

        passed = len([c for c in checks if c])
        result = {
            "isValid": passed >= 4,
            "score": passed / len(checks),
            "confidence": metrics["confidence"],
            "issues": issues,
            "recommendations": recommendations,
        }

        self.validated[doc.id] = result
        self.record_extraction(doc.id, metrics)
        return result

    def record_extraction(self, doc_id: str, metrics: Dict):
        self.history.append({
            "id": doc_id,
            "quality": metrics,
            "timestamp": datetime.now(timezone.utc),
        })
        if len(self.history) > MAX_HISTORY:
            self.history = self.history[-MAX_HISTORY:]

    def get_statistics(self) -> Dict:
        """Totals, fallback usage, averages and success rate over the history."""
        total = len(self.history)
        if not total:
            return {
                "totalSections": 0,
                "successfulExtractions": 0,
                "fallbackUsage": 0,
                "averageQuality": 0.0,
                "averageConfidence": 0.0,
                "extractionSuccessRate": 0.0,
            }

        fallback = len([
            e for e in self.history
            if e["quality"]["isFallbackContent"] or e["quality"]["extractionMethod"] == "fallback"
        ])
        return {
            "totalSections": total,
            "successfulExtractions": total - fallback,
            "fallbackUsage": fallback,
            "averageQuality": sum(e["quality"]["score"] for e in self.history) / total,
            "averageConfidence": sum(e["quality"]["confidence"] for e in self.history) / total,
            "extractionSuccessRate": (total - fallback) / total * 100,
        }

    def build_report(self) -> Dict:
        stats = self.get_statistics()
        results = list(self.validated.values())
        passed = len([r for r in results if r["isValid"]])

        summary = {
            "totalValidated": len(results),
            "passedValidation": passed,
            "failedValidation": len(results) - passed,
            "overallScore": passed / len(results) if results else 0.0,
            "slaCompliance": stats["extractionSuccessRate"] >= SLA_SUCCESS_RATE,
        }

        issues = {"highPriority": [], "mediumPriority": [], "lowPriority": []}
        recommendations: List[str] = []

        if not summary["slaCompliance"]:
            issues["highPriority"].append(
                f"SLA NOT MET: Extraction success rate is {stats['extractionSuccessRate']:.1f}% "
                f"(target: >={SLA_SUCCESS_RATE:.0f}%)"
            )
            recommendations.append("Review the extraction configuration and Apple website changes")

        if stats["totalSections"] and stats["averageQuality"] < 0.7:
            issues["mediumPriority"].append(f"Low average quality score: {stats['averageQuality']:.3f}")
            recommendations.append("Optimize content extraction selectors")

        if stats["totalSections"]:
            fallback_rate = stats["fallbackUsage"] / stats["totalSections"] * 100
            if fallback_rate > self.thresholds["maxFallbackRate"]:
                issues["highPriority"].append(
                    f"High fallback usage: {fallback_rate:.1f}% (max: {self.thresholds['maxFallbackRate']}%)"
                )
                recommendations.append("Investigate JavaScript execution and page loading issues")

        if summary["failedValidation"]:
            issues["lowPriority"].append(f"{summary['failedValidation']} document(s) failed validation")

        return {"summary": summary, "issues": issues, "recommendations": recommendations, "detailedMetrics": stats}

    def generate_report(self) -> str:
        """Plain-text quality report."""
        report = self.build_report()
        summary, stats = report["summary"], report["detailedMetrics"]
        total = stats["totalSections"]
        fallback_pct = stats["fallbackUsage"] / total * 100 if total else 0.0

        lines = [
            "Content Quality Validation Report",
            "=================================",
            "",
            f"SLA Compliance: {'ACHIEVED' if summary['slaCompliance'] else 'NOT MET'}",
            f"Extraction Success Rate: {stats['extractionSuccessRate']:.1f}%",
            f"Average Quality Score: {stats['averageQuality']:.3f}",
            f"Average Confidence: {stats['averageConfidence']:.3f}",
            f"Total Sections: {total}",
            f"Fallback Usage: {stats['fallbackUsage']} ({fallback_pct:.1f}%)",
            "",
            "Validation Summary:",
            f"  - Total Validated: {summary['totalValidated']}",
            f"  - Passed Validation: {summary['passedValidation']}",
            f"  - Failed Validation: {summary['failedValidation']}",
            f"  - Overall Validation Score: {summary['overallScore'] * 100:.1f}%",
            "",
        ]

        for key, label in (("highPriority", "High Priority Issues"),
                           ("mediumPriority", "Medium Priority Issues"),
                           ("lowPriority", "Low Priority Issues")):
            if report["issues"][key]:
                lines.append(f"{label}:")
                lines.extend(f"  - {issue}" for issue in report["issues"][key])
                lines.append("")

        if report["recommendations"]:
            lines.append("Recommendations:")
            lines.extend(f"  - {rec}" for rec in report["recommendations"])
            lines.append("")

        if summary["slaCompliance"]:
            lines.append(f"The corpus meets the {SLA_SUCCESS_RATE:.0f}%+ real content target.")
        else:
            lines.append(f"Action required: the corpus is below the {SLA_SUCCESS_RATE:.0f}%+ real content target.")

        return "\n".join(lines) + "\n"
