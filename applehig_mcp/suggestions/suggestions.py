"""
Next-step recommendations attached to tool responses.

When a tool comes back empty, the engine points at the closest alternative
tools; otherwise it inspects the query for hints (component names, token
vocabulary, accessibility terms, API symbols, wildcards) and offers the tools
that answer those best.
"""

import re
from typing import Dict, Iterable, List

MAX_SUGGESTIONS = 3

# Tried, in order, when the current tool found nothing
FALLBACK_TOOLS = {
    "search_guidelines": ("search_wildcard", "list_guidelines"),
    "search_wildcard": ("search_guidelines", "list_guidelines"),
    "get_guideline": ("search_guidelines", "list_guidelines"),
    "list_guidelines": ("list_platforms", "list_categories"),
    "get_component_spec": ("search_guidelines", "get_design_tokens"),
    "get_technical_documentation": ("search_technical_documentation", "search_guidelines"),
    "search_technical_documentation": ("search_unified", "list_technologies"),
    "search_unified": ("search_guidelines", "search_wildcard"),
    "get_cross_references": ("search_unified", "search_guidelines"),
}

QUERY_HINTS = [
    (re.compile(r"button|picker|slider|toggle|switch|field|bar|sheet|alert|menu"),
     ("get_component_spec", "get_design_tokens")),
    (re.compile(r"color|spacing|padding|font|typography|radius|size"),
     ("get_design_tokens",)),
    (re.compile(r"accessib|voiceover|a11y|contrast|dynamic type"),
     ("get_accessibility_requirements",)),
    (re.compile(r"swiftui|uikit|appkit|api|class|struct|protocol|^ui[a-z]|^ns[a-z]"),
     ("search_technical_documentation", "get_technical_documentation")),
    (re.compile(r"[*?]"), ("search_wildcard",)),
    (re.compile(r"update|latest|new|stale"), ("check_updates",)),
]

TOOL_REASONS = {
    "search_guidelines": "Search HIG content by topic",
    "search_wildcard": "Match titles and keywords with * and ? patterns",
    "list_guidelines": "Browse guidelines by platform and category",
    "list_platforms": "See which platforms have guidelines",
    "list_categories": "See the available guideline categories",
    "get_component_spec": "Get the specification for a UI component",
    "get_design_tokens": "Get colors, spacing, typography and dimensions",
    "get_accessibility_requirements": "Get accessibility requirements for a component",
    "get_technical_documentation": "Get the API documentation behind a design",
    "check_updates": "Check whether the guidelines content is current",
    "search_technical_documentation": "Find API symbols by name or pattern",
    "search_unified": "Search guidelines and API symbols together",
    "get_cross_references": "Map a component to the APIs that implement it",
    "list_technologies": "Browse Apple frameworks and technologies",
}


class SuggestionEngine:
    """Recommends follow-up tools from the current tool, query and result count."""

    def get_suggestions(self, context: Dict) -> List[Dict]:
        """
        Return at most three ``{"tool", "reason"}`` dicts for ``context``.

        ``context`` carries ``current_tool``, ``query`` and ``results_count``.
        The current tool is never recommended and no tool appears twice.
        """
        current_tool = context.get("current_tool", "")
        query = (context.get("query") or "").lower()

        candidates: List[str] = []
        if not context.get("results_count", 0):
            candidates.extend(FALLBACK_TOOLS.get(current_tool, ()))
        for pattern, tools in QUERY_HINTS:
            if pattern.search(query):
                candidates.extend(tools)

        picked = self._unique(candidates, exclude=current_tool)
        return [{"tool": tool, "reason": self.reason_for(tool)} for tool in picked]

    @staticmethod
    def _unique(tools: Iterable[str], exclude: str) -> List[str]:
        picked: List[str] = []
        for tool in tools:
            if tool == exclude or tool in picked:
                continue
            picked.append(tool)
            if len(picked) == MAX_SUGGESTIONS:
                break
        return picked

    @staticmethod
    def reason_for(tool: str) -> str:
        return TOOL_REASONS.get(tool, tool.replace("_", " ").capitalize())


suggestion_engine = SuggestionEngine()
