"""
Health checks for the HIG server.

Runs against the in-memory corpus only; no network access. Each check
yields a PASS, WARN or FAIL result; any FAIL makes the server unhealthy.
"""

from typing import Dict, List, Optional

from .config import logger
from .content.library import HIGContentLibrary, hig_content
from .design.components import DesignComponents
from .resources.hig_resources import HIGResources
from .search.guidelines import GuidelinesSearch
from .suggestions.suggestions import suggestion_engine

KEY_QUERIES = ["button", "navigation", "color"]


class HealthChecker:
    """Check that content, search, resources and suggestions work together."""

    def __init__(self, library: Optional[HIGContentLibrary] = None):
        self.library = library or hig_content
        self.search = GuidelinesSearch(self.library)
        self.resources = HIGResources(self.library)
        self.components = DesignComponents(self.library)

    def _result(self, test: str, status: str, details: str = "") -> Dict:
        return {"test": test, "status": status, "details": details}

    def check_content(self) -> Dict:
        stats = self.library.stats()
        if not stats["total_documents"]:
            return self._result("Content Loaded", "FAIL", "No HIG documents found")
        platforms = ", ".join(f"{p}: {n}" for p, n in sorted(stats["platforms"].items()))
        return self._result("Content Loaded", "PASS", f"{stats['total_documents']} documents ({platforms})")

    def check_search(self) -> Dict:
        empty = [q for q in KEY_QUERIES if not self.search.search(q, limit=3)]
        if len(empty) == len(KEY_QUERIES):
            return self._result("Search Functionality", "FAIL", "No results for any key query")
        if empty:
            return self._result("Search Functionality", "WARN", f"No results for: {', '.join(empty)}")
        return self._result("Search Functionality", "PASS", f"Results for all {len(KEY_QUERIES)} key queries")

    def check_resources(self) -> Dict:
        resources = self.resources.list_resources()
        try:
            for resource in resources:
                self.resources.read_resource(resource["uri"])
        except ValueError as e:
            return self._result("Resources", "FAIL", str(e))
        return self._result("Resources", "PASS", f"{len(resources)} resources readable")

    def check_components(self) -> Dict:
        spec = self.components.get_component_spec("button")
        if not spec["component"]:
            return self._result("Component Specs", "FAIL", "No specification for 'button'")
        return self._result("Component Specs", "PASS", spec["component"]["title"])

    def check_suggestions(self) -> Dict:
        suggestions = suggestion_engine.get_suggestions(
            {"current_tool": "search_guidelines", "query": "button", "results_count": 0}
        )
        if not suggestions:
            return self._result("Suggestions", "WARN", "No suggestions for an empty search")
        return self._result("Suggestions", "PASS", f"{len(suggestions)} suggestions")

    def run(self) -> Dict:
        """
        Run every check.

        Returns:
            Dictionary with healthy flag, per-check results and counts
        """
        results: List[Dict] = []
        for check in (self.check_content, self.check_search, self.check_resources,
                      self.check_components, self.check_suggestions):
            result = check()
            logger.debug(f"{result['test']}: {result['status']} {result['details']}")
            results.append(result)

        counts = {status: len([r for r in results if r["status"] == status]) for status in ("PASS", "WARN", "FAIL")}
        return {"healthy": counts["FAIL"] == 0, "results": results, "counts": counts}


def format_health(report: Dict) -> str:
    lines = ["Apple HIG MCP Server Health Check", "=" * 33, ""]
    for result in report["results"]:
        detail = f" - {result['details']}" if result["details"] else ""
        lines.append(f"[{result['status']}] {result['test']}{detail}")
    counts = report["counts"]
    lines.append("")
    lines.append(f"Passed: {counts['PASS']}  Warnings: {counts['WARN']}  Failed: {counts['FAIL']}")
    lines.append(f"Overall Health: {'HEALTHY' if report['healthy'] else 'UNHEALTHY'}")
    return "\n".join(lines) + "\n"
