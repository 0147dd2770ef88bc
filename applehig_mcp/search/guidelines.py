"""
Guidelines Search Module
========================

Relevance-scored keyword search over the HIG search index.

Scoring combines:
- Title matches (exact, substring, per-term) and concept boosts
- Keyword matches, expanded through a synonym map
- Snippet matches
- Content bonuses for guidance, specifications, examples, structure and quality

When the corpus is empty, a small built-in set of well-known HIG topics is
searched instead so that clients still get a useful pointer.
"""

from typing import Dict, List, Optional, Tuple

from ..config import Config, logger
from ..content.library import HIGContentLibrary, hig_content

SYNONYMS: Dict[str, List[str]] = {
    # Basic search and guidelines
    "search": ["searching", "search field", "search bar", "find", "lookup"],
    "searching": ["search", "search field", "search bar", "find", "lookup"],
    "guidelines": ["best practices", "recommendations", "guidance", "standards"],
    "best practices": ["guidelines", "recommendations", "guidance", "standards"],
    # Interactive elements
    "button": ["btn", "tap", "click", "press", "action", "buttons"],
    "toggle": ["switch", "toggles", "on off", "binary control"],
    "switch": ["toggle", "toggles", "on off", "binary control"],
    "picker": ["pickers", "selection", "chooser", "selector", "segmented picker"],
    "slider": ["sliders", "range", "continuous control", "scrubber"],
    # Navigation and layout
    "navigation": ["nav", "navigate", "menu", "hierarchy", "navigation bar"],
    "tab": ["tabs", "tab bar", "tabbed", "bottom navigation"],
    "stack": ["stacks", "layout", "zstack", "vstack", "hstack", "lazy stack"],
    # Data presentation
    "progress": ["progress indicator", "loading", "spinner", "activity indicator"],
    "loading": ["progress", "spinner", "activity", "progress indicator"],
    "chart": ["charts", "graph", "data visualization", "charting"],
    "gauge": ["gauges", "meter", "measurement", "dial"],
    # Modal and overlays
    "alert": ["alerts", "dialog", "modal alert", "system alert"],
    "action sheet": ["action sheets", "bottom sheet", "modal choices"],
    "popover": ["popovers", "popup", "contextual menu", "callout"],
    "sheet": ["sheets", "modal", "presentation"],
    # Text and input
    "text field": ["text fields", "input", "text input", "form field"],
    "text": ["text field", "text view", "label", "typography"],
    # Platform concepts
    "notification": ["notifications", "push notification", "alerts", "system notification"],
    "onboarding": ["welcome", "introduction", "getting started", "first run"],
    "rating": ["ratings", "review", "stars", "feedback"],
    # General design
    "interface": ["ui", "user interface", "design", "component"],
    "component": ["element", "control", "widget", "interface"],
    "pattern": ["patterns", "design pattern", "interaction"],
    "accessibility": ["a11y", "voiceover", "accessible", "inclusive"],
    "design": ["interface", "ui", "visual", "aesthetic"],
    "dark mode": ["dark appearance", "appearance", "color scheme"],
}

# Query phrase -> title phrase that names the concept
CONCEPTS: Dict[str, str] = {
    "alert": "alerts",
    "alerts": "alerts",
    "action sheet": "action sheets",
    "action sheets": "action sheets",
    "picker": "pickers",
    "pickers": "pickers",
    "progress indicator": "progress indicators",
    "progress indicators": "progress indicators",
    "notification": "notifications",
    "notifications": "notifications",
    "button": "buttons",
    "buttons": "buttons",
    "tab": "tab bars",
    "tab bar": "tab bars",
    "tabs": "tab bars",
    "search field": "search fields",
    "search fields": "search fields",
    "progress": "progress indicators",
    "loading": "progress indicators",
    "spinner": "progress indicators",
    "activity indicator": "progress indicators",
    "dialog": "alerts",
    "modal alert": "alerts",
    "bottom sheet": "action sheets",
    "selection": "pickers",
    "chooser": "pickers",
    "push notification": "notifications",
    "system notification": "notifications",
}

FALLBACK_TOPICS = [
    {"keywords": ["button", "btn", "press", "tap", "click"], "title": "Buttons", "platform": "iOS",
     "category": "visual-design", "slug": "buttons",
     "snippet": "Buttons initiate app-specific actions, have customizable backgrounds, and can include a title or an icon. Minimum touch target size is 44pt x 44pt."},
    {"keywords": ["navigation", "nav", "navigate", "menu", "bar"], "title": "Navigation Bars", "platform": "iOS",
     "category": "navigation", "slug": "navigation-bars",
     "snippet": "A navigation bar appears at the top of an app screen, enabling navigation through a hierarchy of content."},
    {"keywords": ["tab", "tabs", "bottom"], "title": "Tab Bars", "platform": "iOS",
     "category": "navigation", "slug": "tab-bars",
     "snippet": "A tab bar appears at the bottom of an app screen and provides the ability to quickly switch between different sections of an app."},
    {"keywords": ["layout", "grid", "spacing", "margin"], "title": "Layout", "platform": "universal",
     "category": "layout", "slug": "layout",
     "snippet": "A consistent layout that adapts to various devices and contexts makes your app easier to use and helps people feel confident."},
    {"keywords": ["color", "colours", "theme", "dark", "light"], "title": "Color", "platform": "universal",
     "category": "color-and-materials", "slug": "color",
     "snippet": "Color can indicate interactivity, impart vitality, and provide visual continuity."},
    {"keywords": ["typography", "text", "font", "size"], "title": "Typography", "platform": "universal",
     "category": "typography", "slug": "typography",
     "snippet": "Typography can help you clarify a hierarchy of information and make it easy for people to find what they're looking for."},
    {"keywords": ["accessibility", "a11y", "voiceover", "accessible", "contrast"], "title": "Accessibility",
     "platform": "universal", "category": "foundations", "slug": "accessibility",
     "snippet": "People use Apple accessibility features to personalize how they interact with their devices in ways that work for them."},
    {"keywords": ["input", "field", "form", "text"], "title": "Text Fields", "platform": "iOS",
     "category": "selection-and-input", "slug": "text-fields",
     "snippet": "A text field is a rectangular area in which people enter or edit small, specific pieces of text."},
    {"keywords": ["picker", "select", "choose"], "title": "Pickers", "platform": "iOS",
     "category": "selection-and-input", "slug": "pickers",
     "snippet": "A picker displays one or more scrollable lists of distinct values that people can choose from."},
    {"keywords": ["vision", "visionos", "spatial", "immersive"], "title": "Designing for visionOS",
     "platform": "visionOS", "category": "foundations", "slug": "designing-for-visionos",
     "snippet": "visionOS brings together digital and physical worlds, creating opportunities for new types of immersive experiences."},
    {"keywords": ["watch", "watchos", "complication", "crown"], "title": "Designing for watchOS",
     "platform": "watchOS", "category": "foundations", "slug": "designing-for-watchos",
     "snippet": "Apple Watch is a highly personal device that people wear on their wrist, making it instantly accessible."},
]


def platform_matches(entry_platform: str, platform: Optional[str]) -> bool:
    """Universal content matches every platform filter; 'universal' matches everything."""
    if not platform or platform == "universal":
        return True
    return entry_platform in (platform, "universal")


class GuidelinesSearch:
    """
    Relevance-based search over HIG search index entries.

    Attributes:
        library: Content library providing the index entries
    """

    def __init__(self, library: Optional[HIGContentLibrary] = None):
        self.library = library or hig_content

    def expand_query(self, query: str) -> List[str]:
        """Original query plus synonyms for each of its terms."""
        expanded = {query: None}
        for term in [query] + [t for t in query.split() if len(t) > 1]:
            for synonym in SYNONYMS.get(term, []):
                expanded.setdefault(synonym, None)
        return list(expanded)

    def concept_boost(self, query: str, title: str) -> float:
        expected = CONCEPTS.get(query)
        if expected and expected in title:
            return 0.8
        for query_pattern, title_pattern in CONCEPTS.items():
            if query_pattern in query and title_pattern in title:
                return 0.4
        return 0.0

    def score_entry(self, entry: Dict, query: str) -> Tuple[float, List[str]]:
        """
        Score one index entry against a lower-cased query.

        Returns:
            (relevance_score, highlights)
        """
        terms = [t for t in query.split() if len(t) > 1] or [query]
        score = 0.0
        highlights: List[str] = []

        title = entry["title"].lower()
        if title == query:
            score += 1.0
            highlights.append(entry["title"])
        elif query in title:
            score += 0.6
            highlights.append(entry["title"])
        else:
            title_hits = len([t for t in terms if t in title])
            if title_hits:
                score += (title_hits / len(terms)) * 0.4
                highlights.append(entry["title"])
            boost = self.concept_boost(query, title)
            if boost:
                score += boost
                if entry["title"] not in highlights:
                    highlights.append(entry["title"])

        # Keyword matching with synonym expansion
        keyword_score = 0.0
        keywords = [k.lower() for k in entry.get("keywords", [])]
        for expanded in self.expand_query(query):
            partial = [k for k in keywords if k in expanded or expanded in k]
            if not partial:
                continue
            exact = [k for k in keywords if k == expanded]
            keyword_score += len(exact) * 0.5 if exact else len(partial) * 0.3
            highlights.extend(k for k in partial if k not in highlights)
        score += min(keyword_score, 0.8)

        snippet = entry.get("snippet", "").lower()
        if query in snippet:
            score += 0.4
        else:
            snippet_hits = len([t for t in terms if t in snippet])
            if snippet_hits:
                score += (snippet_hits / len(terms)) * 0.3

        # Content quality bonuses only apply to entries that matched at all
        if score > 0:
            if entry.get("hasGuidelines"):
                score += 0.2
            if entry.get("hasSpecifications"):
                score += 0.15
            if entry.get("hasExamples"):
                score += 0.1
            if entry.get("hasStructuredContent"):
                score += 0.05
            quality = entry.get("quality") or {}
            score += float(quality.get("score") or 0) * 0.3

        return score, highlights

    def result_type(self, entry: Dict) -> str:
        if entry.get("hasGuidelines"):
            return "guideline"
        title = entry["title"].lower()
        if any(word in title for word in ("button", "picker", "slider")):
            return "component"
        return "section"

    def search(self, query: str, platform: Optional[str] = None,
               category: Optional[str] = None, limit: int = 10) -> List[Dict]:
        """
        Search HIG content.

        Args:
            query: Search terms (e.g., "buttons", "dark mode")
            platform: Optional platform filter (universal content always matches)
            category: Optional exact category filter
            limit: Maximum number of results

        Returns:
            Results sorted by descending relevanceScore
        """
        query_lower = query.strip().lower()
        if not query_lower:
            return []

        entries = self.library.index_entries()
        if not entries:
            logger.warning("Search index is empty, using built-in fallback topics")
            return self.fallback_results(query_lower, platform, category, limit)

        results = []
        for entry in entries:
            if not platform_matches(entry["platform"], platform):
                continue
            if category and entry["category"] != category:
                continue

            score, highlights = self.score_entry(entry, query_lower)
            if score <= Config.MIN_RELEVANCE_SCORE:
                continue

            results.append({
                "id": entry["id"],
                "title": entry["title"],
                "url": entry["url"],
                "platform": entry["platform"],
                "category": entry["category"],
                "relevanceScore": round(score, 4),
                "snippet": entry["snippet"],
                "type": self.result_type(entry),
                "highlights": highlights[:3],
            })

        results.sort(key=lambda r: r["relevanceScore"], reverse=True)
        return results[:limit]

    def fallback_results(self, query: str, platform: Optional[str] = None,
                         category: Optional[str] = None, limit: int = 10) -> List[Dict]:
        """Search the built-in topic list (used only when no corpus is loaded)."""
        results = []
        for index, item in enumerate(FALLBACK_TOPICS):
            if not platform_matches(item["platform"], platform):
                continue
            if category and item["category"] != category:
                continue

            score = 0.0
            if any(k in query or query in k for k in item["keywords"]):
                score = 1.0
            if query in item["title"].lower():
                score = max(score, 0.8)
            if not score:
                continue

            results.append({
                "id": f"fallback-{index}",
                "title": item["title"],
                "url": f"{Config.HIG_BASE_URL}/{item['slug']}",
                "platform": item["platform"],
                "category": item["category"],
                "relevanceScore": score,
                "snippet": item["snippet"],
                "type": "guideline",
                "highlights": [item["title"]],
            })

        results.sort(key=lambda r: r["relevanceScore"], reverse=True)
        return results[:limit]


# Module-level instance
guidelines_search = GuidelinesSearch()
