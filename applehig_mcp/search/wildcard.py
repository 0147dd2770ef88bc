"""
Wildcard Search Module
======================

Pattern search over HIG titles and keywords:
- `*` matches any run of characters
- `?` matches exactly one character

Wildcard patterns are anchored and case-insensitive (`*Button` matches
"Toolbar Button" but not "Buttons bar"). A query without wildcards is matched
as a case-insensitive substring.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern

from ..content.library import HIGContentLibrary, hig_content
from .guidelines import platform_matches

PATTERN_EXAMPLES = [
    {"pattern": "*Button*", "description": "Titles or keywords containing 'button'"},
    {"pattern": "Tab*", "description": "Items starting with 'tab'"},
    {"pattern": "*bars", "description": "Items ending with 'bars'"},
    {"pattern": "?avigation*", "description": "Any first character, then 'avigation'"},
    {"pattern": "Color", "description": "Plain substring match without wildcards"},
]

WILDCARD_CHARS = re.compile(r"[*?]")


@dataclass
class WildcardPattern:
    query: str
    regex: Pattern
    is_wildcard: bool


def parse_pattern(query: str) -> WildcardPattern:
    """
    Compile a user query into a case-insensitive regex.

    Args:
        query: Pattern such as 'Tab*' or 'pick?r'

    Returns:
        WildcardPattern; wildcard patterns are anchored at both ends
    """
    if not WILDCARD_CHARS.search(query):
        return WildcardPattern(query, re.compile(re.escape(query), re.IGNORECASE), False)

    parts = []
    for char in query:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return WildcardPattern(query, re.compile(f"^{''.join(parts)}$", re.IGNORECASE), True)


def score_match(text: str, pattern: WildcardPattern) -> float:
    """Score how well text matches pattern; 0.0 when it does not match."""
    if not text or not pattern.regex.search(text):
        return 0.0

    if not pattern.is_wildcard:
        text_lower = text.lower()
        query_lower = pattern.query.lower()
        if text_lower == query_lower:
            return 1.0
        if text_lower.startswith(query_lower):
            return 0.9
        if query_lower in text_lower:
            return 0.7
        return 0.5

    wildcards = len(WILDCARD_CHARS.findall(pattern.query))
    literals = len(pattern.query) - wildcards
    score = 0.6 + min(literals * 0.1, 0.3) - wildcards * 0.05
    return round(min(1.0, max(0.1, score)), 4)


def matched_segments(text: str, pattern: WildcardPattern) -> List[str]:
    """Literal parts of the pattern that appear in text."""
    if not pattern.is_wildcard:
        found = pattern.regex.search(text)
        return [found.group(0)] if found else []
    parts = [p for p in WILDCARD_CHARS.split(pattern.query) if p]
    return [p for p in parts if p.lower() in text.lower()]


class WildcardSearch:
    """Wildcard search over the search index."""

    def __init__(self, library: Optional[HIGContentLibrary] = None):
        self.library = library or hig_content

    def search(self, query: str, platform: Optional[str] = None,
               category: Optional[str] = None, limit: int = 20) -> Dict:
        """
        Match a pattern against titles and keywords.

        Returns:
            Dictionary with the pattern, results (best match per entry) and,
            when fewer than 3 results were found, example patterns
        """
        pattern = parse_pattern(query.strip())

        results = []
        for entry in self.library.index_entries():
            if not platform_matches(entry["platform"], platform):
                continue
            if category and entry["category"] != category:
                continue

            best_score, best_field, best_text = 0.0, None, None
            candidates = [("title", entry["title"])] + [("keywords", k) for k in entry.get("keywords", [])]
            for field_name, text in candidates:
                score = score_match(text, pattern)
                if score > best_score:
                    best_score, best_field, best_text = score, field_name, text

            if not best_field:
                continue

            results.append({
                "id": entry["id"],
                "title": entry["title"],
                "url": entry["url"],
                "platform": entry["platform"],
                "category": entry["category"],
                "relevanceScore": best_score,
                "matchedField": best_field,
                "matchedText": best_text,
                "matchedSegments": matched_segments(best_text, pattern),
                "snippet": entry["snippet"],
            })

        results.sort(key=lambda r: (-r["relevanceScore"], r["title"].lower()))
        response = {
            "pattern": pattern.query,
            "isWildcard": pattern.is_wildcard,
            "totalMatches": len(results),
            "results": results[:limit],
        }
        if len(results) < 3:
            response["suggestions"] = PATTERN_EXAMPLES
        return response


# Module-level instance
wildcard_search = WildcardSearch()
