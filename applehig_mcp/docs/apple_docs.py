"""
Apple Developer Documentation Module
=====================================

Fetches technical documentation for Apple frameworks and symbols through the
JSON endpoints behind developer.apple.com/documentation. Used to pair design
guidance with the API that implements it.

Key Features:
- Accepts a documentation path ("SwiftUI/Button") or a full documentation URL
- Parses Apple's JSON into title, abstract, declaration, discussion,
  parameters and return value
- Maps UIKit/SwiftUI symbol names to HIG search terms
- Lists technologies and searches the symbols a framework page references,
  using the guideline wildcard rules

Technical Details:
- Primary endpoint: /tutorials/data/documentation/{path}.json
- Falls back to /documentation/{path}/data.json
- Technologies index: /tutorials/data/documentation/technologies.json
- Hour-bucketed cache, trimmed to the 50 newest entries past 100
"""

import json
import time
import urllib.error
import urllib.request
from typing import Dict, List, Optional

from ..config import Config, logger
from ..search.wildcard import WILDCARD_CHARS, parse_pattern, score_match

# Symbol fragment -> HIG search terms; checked in order, first hit wins
DESIGN_MAPPINGS = [
    ("button", ["button", "buttons", "interactive", "touch target"]),
    ("navigationbar", ["navigation", "navigation bar", "hierarchy"]),
    ("tabbar", ["tab bar", "navigation", "organization"]),
    ("textfield", ["input", "text field", "form", "data entry"]),
    ("textview", ["text", "content", "editing", "input"]),
    ("imageview", ["image", "visual", "media", "content"]),
    ("scrollview", ["scroll", "content", "layout", "navigation"]),
    ("tableview", ["table", "list", "data", "organization"]),
    ("collectionview", ["collection", "grid", "layout", "organization"]),
    ("label", ["text", "typography", "labels", "content"]),
    ("picker", ["picker", "selection", "input", "data entry"]),
    ("switch", ["toggle", "switch", "control", "input"]),
    ("toggle", ["toggle", "switch", "control", "input"]),
    ("slider", ["slider", "control", "input", "range"]),
    ("stepper", ["stepper", "control", "input", "increment"]),
    ("segmentedcontrol", ["segmented control", "selection", "navigation"]),
    ("activityindicator", ["loading", "progress", "feedback"]),
    ("progressview", ["progress", "feedback", "loading"]),
    ("alert", ["alert", "dialog", "notification", "feedback"]),
    ("actionsheet", ["action sheet", "menu", "selection"]),
    ("popover", ["popover", "overlay", "context"]),
    ("toolbar", ["toolbar", "navigation", "actions"]),
    ("searchbar", ["search", "input", "discovery"]),
    ("pagecontrol", ["page control", "navigation", "paging"]),
    ("view", ["layout", "view", "container", "hierarchy"]),
]

UI_TERMS = [
    "button", "view", "label", "text", "image", "navigation", "tab", "scroll",
    "table", "collection", "picker", "switch", "slider", "stepper", "control",
    "activity", "progress", "alert", "action", "popover", "toolbar", "search",
    "page", "menu", "modal", "sheet", "bar", "field", "indicator",
]


def design_terms_for(symbol: str) -> str:
    """
    Map a technical symbol to HIG search terms.

    Args:
        symbol: Symbol or title (e.g., "UIButton", "NavigationStack")

    Returns:
        Space-separated search terms; the symbol itself when nothing maps
    """
    symbol_lower = symbol.lower()
    for fragment, terms in DESIGN_MAPPINGS:
        if fragment in symbol_lower:
            return " ".join(terms)

    found = [term for term in UI_TERMS if term in symbol_lower]
    if found:
        return " ".join(found)
    return symbol


class AppleDocsAPI:
    """
    Interface to Apple Developer documentation via JSON API.

    Attributes:
        cache: Time-keyed cache for fetched JSON data
        cache_ttl: Time-to-live for cached entries (1 hour)
        base_url: Base URL for Apple Developer documentation
    """

    def __init__(self):
        self.cache = {}
        self.cache_ttl = 3600
        self.base_url = Config.DOCS_BASE_URL

    def _fetch_json(self, url: str) -> Optional[Dict]:
        """
        Fetch JSON data from URL with caching.

        Returns:
            Parsed JSON data or None if failed
        """
        # Key changes every hour so entries expire without a sweep
        cache_key = f"{url}:{int(time.time() // self.cache_ttl)}"
        if cache_key in self.cache:
            return self.cache[cache_key]

        try:
            # User-Agent is required to avoid 403 errors
            req = urllib.request.Request(
                url,
                headers={
                    'User-Agent': 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7)',
                    'Accept': 'application/json'
                }
            )

            with urllib.request.urlopen(req, timeout=10) as response:
                if response.status == 200:
                    data = json.loads(response.read())
                    self.cache[cache_key] = data

                    if len(self.cache) > 100:
                        self.cache = dict(list(self.cache.items())[-50:])
                    return data

        except (urllib.error.URLError, OSError, ValueError) as e:
            logger.error(f"Failed to fetch {url}: {e}")

        return None

    def _parse_documentation_json(self, data: Dict) -> Dict:
        """Pull the readable parts out of Apple's documentation JSON."""
        result = {
            "title": "Unknown",
            "kind": "",
            "abstract": "",
            "declaration": "",
            "discussion": "",
            "parameters": [],
            "returns": "",
            "platforms": [],
        }

        metadata = data.get("metadata", {})
        result["title"] = metadata.get("title", "Unknown")
        result["kind"] = metadata.get("symbolKind") or metadata.get("role", "")
        result["platforms"] = [
            f"{p.get('name')} {p.get('introducedAt', '')}".strip()
            for p in metadata.get("platforms", []) if p.get("name")
        ]

        for section in data.get("primaryContentSections", []):
            if section.get("kind") == "declarations":
                # Declarations arrive as syntax-highlighting tokens
                for declaration in section.get("declarations", []):
                    for token in declaration.get("tokens", []):
                        result["declaration"] += token.get("text", "")

            elif section.get("kind") == "content":
                paragraphs = []
                for content in section.get("content", []):
                    if content.get("type") == "paragraph":
                        text = "".join(
                            inline.get("text", "") or inline.get("code", "")
                            for inline in content.get("inlineContent", [])
                        )
                        if text:
                            paragraphs.append(text)
                result["discussion"] += "\n\n".join(paragraphs)

            elif section.get("kind") == "parameters":
                result["parameters"] = [
                    {
                        "name": p.get("name", ""),
                        "description": " ".join(
                            i.get("text", "")
                            for c in p.get("content", [])
                            for i in c.get("inlineContent", [])
                        ).strip(),
                    }
                    for p in section.get("parameters", [])
                ]

        for item in data.get("abstract", []):
            if item.get("type") == "text":
                result["abstract"] += item.get("text", "")

        for section in data.get("sections", []):
            if section.get("title") == "Parameters" and not result["parameters"]:
                result["parameters"] = section.get("items", [])
            elif section.get("title") == "Return Value":
                result["returns"] = section.get("content", "")

        return result

    def normalize_path(self, url_or_path: str) -> Optional[str]:
        """
        Reduce a documentation URL or path to the part after /documentation/.

        Returns:
            Path such as 'swiftui/button', or None for a non-Apple URL
        """
        value = url_or_path.strip()
        if value.startswith("http://") or value.startswith("https://"):
            if not value.startswith(self.base_url):
                return None
            value = value.split("/documentation/", 1)[1]
        elif value.startswith("/"):
            value = value.lstrip("/")

        if value.startswith("documentation/"):
            value = value[len("documentation/"):]

        value = value.split("#", 1)[0].split("?", 1)[0].strip("/")
        return value.lower() or None

    def fetch_documentation(self, url_or_path: str) -> Dict:
        """
        Fetch and parse documentation for a framework or symbol.

        Args:
            url_or_path: "SwiftUI/Button", "documentation/UIKit/UIButton" or a
                developer.apple.com documentation URL

        Returns:
            Parsed documentation, or a dictionary with an error key
        """
        path = self.normalize_path(url_or_path)
        if not path:
            return {
                "error": "Invalid path",
                "message": "Provide a documentation path (e.g., 'SwiftUI/Button') or a developer.apple.com/documentation/ URL"
            }

        json_url = f"{Config.DOCS_JSON_BASE_URL}{path}.json"
        data = self._fetch_json(json_url)

        if not data:
            # Some pages only serve the older endpoint format
            json_url = f"{self.base_url}{path}/data.json"
            data = self._fetch_json(json_url)

        if not data:
            return {
                "error": "Failed to fetch",
                "url": f"{self.base_url}{path}",
                "suggestion": "Check if the path is correct and the page exists"
            }

        parsed = self._parse_documentation_json(data)
        parsed["symbol"] = path.rsplit("/", 1)[-1]
        parsed["framework"] = path.split("/", 1)[0]
        parsed["url"] = f"{self.base_url}{path}"
        parsed["json_url"] = json_url
        return parsed

    def related_terms(self, documentation: Dict) -> List[str]:
        """HIG search queries for a fetched documentation page, best first."""
        queries = [design_terms_for(documentation.get("title", ""))]
        symbol_terms = design_terms_for(documentation.get("symbol", ""))
        if symbol_terms not in queries:
            queries.append(symbol_terms)
        return [q for q in queries if q]

    # ------------------------------------------------------------------
    # Technologies and symbol search
    # ------------------------------------------------------------------

    def get_technologies(self) -> Dict[str, Dict]:
        """References listed on the technologies page, keyed by identifier."""
        data = self._fetch_json(Config.TECHNOLOGIES_JSON_URL)
        if not data:
            return {}
        references = data.get("references", {})
        return references if isinstance(references, dict) else {}

    def list_technologies(self, category: str = "all", platform: Optional[str] = None) -> Optional[List[Dict]]:
        """
        List Apple frameworks and top-level symbols.

        Args:
            category: 'framework' (symbol collections), 'symbol' or 'all'
            platform: Keep only technologies whose framework page lists it

        Returns:
            Technologies sorted by name, or None when the index could not be fetched
        """
        references = self.get_technologies()
        if not references:
            return None

        technologies = []
        for ref in references.values():
            if not isinstance(ref, dict) or not ref.get("title") or not ref.get("url"):
                continue
            is_framework = ref.get("kind") == "symbol" and ref.get("role") == "collection"
            if category == "framework" and not is_framework:
                continue
            if category == "symbol" and (is_framework or ref.get("kind") != "symbol"):
                continue
            technologies.append({
                "name": ref["title"],
                "description": abstract_text(ref.get("abstract")),
                "path": self.normalize_path(ref["url"]),
                "url": f"{Config.DEVELOPER_SITE_URL}{ref['url']}",
                "kind": ref.get("kind", ""),
                "role": ref.get("role", ""),
            })

        technologies.sort(key=lambda t: t["name"].lower())
        technologies = technologies[:Config.MAX_TECHNOLOGIES]

        if platform:
            # Platform support is only published on each framework's own page
            technologies = [
                t for t in technologies
                if any(platform.lower() in p.lower() for p in self.framework_platforms(t["path"]))
            ]
        return technologies

    def get_framework(self, framework: str) -> Optional[Dict]:
        path = self.normalize_path(framework)
        if not path:
            return None
        return self._fetch_json(f"{Config.DOCS_JSON_BASE_URL}{path}.json")

    def framework_platforms(self, framework: str) -> List[str]:
        data = self.get_framework(framework) or {}
        return [p.get("name") for p in data.get("metadata", {}).get("platforms", []) if p.get("name")]

    def search_framework(self, framework: str, query: str, symbol_type: Optional[str] = None,
                         platform: Optional[str] = None, limit: int = 20) -> List[Dict]:
        """
        Match a query against the symbols a framework page references.

        Queries use the same `*`/`?` rules as guideline wildcard search. Results
        are sorted by descending relevanceScore.
        """
        data = self.get_framework(framework)
        if not data:
            return []

        pattern = parse_pattern(query)
        framework_name = data.get("metadata", {}).get("title") or framework
        framework_platforms = data.get("metadata", {}).get("platforms", [])

        results = []
        for ref in data.get("references", {}).values():
            if not isinstance(ref, dict) or not ref.get("title") or not ref.get("url"):
                continue
            kind = symbol_kind(ref)
            if symbol_type and kind != symbol_type.lower():
                continue
            platforms = [p.get("name") for p in ref.get("platforms") or framework_platforms if p.get("name")]
            if platform and platforms and not any(platform.lower() in p.lower() for p in platforms):
                continue

            score = score_match(ref["title"], pattern)
            if score <= 0:
                continue
            results.append({
                "title": ref["title"],
                "description": abstract_text(ref.get("abstract")),
                "path": ref["url"],
                "framework": framework_name,
                "symbolKind": kind,
                "platforms": platforms,
                "url": f"{Config.DEVELOPER_SITE_URL}{ref['url']}",
                "relevanceScore": round(score, 4),
                "type": "technical",
            })

        results.sort(key=lambda r: (-r["relevanceScore"], r["title"]))
        return results[:limit]

    def search_symbols(self, query: str, framework: Optional[str] = None, symbol_type: Optional[str] = None,
                       platform: Optional[str] = None, limit: int = 20) -> List[Dict]:
        """
        Search API symbols in one framework, or across the first frameworks listed.

        Returns:
            Results sorted by descending relevanceScore; empty when nothing
            could be fetched
        """
        if framework:
            return self.search_framework(framework, query, symbol_type, platform, limit)

        frameworks = self.list_technologies("framework") or []
        per_framework = max(1, -(-limit // 4))
        results = []
        for tech in frameworks[:Config.SYMBOL_SEARCH_FRAMEWORKS]:
            if len(results) >= limit:
                break
            results.extend(self.search_framework(tech["path"], query, symbol_type, platform, per_framework))

        results.sort(key=lambda r: -r["relevanceScore"])
        return results[:limit]


def symbol_kind(ref: Dict) -> str:
    """Declaration keyword of a referenced symbol (struct, class, func, ...)."""
    for fragment in ref.get("fragments") or []:
        if isinstance(fragment, dict) and fragment.get("kind") == "keyword":
            return fragment.get("text", "").lower()
    return (ref.get("role") or ref.get("kind") or "").lower()


def abstract_text(abstract) -> str:
    """Join the text runs of an Apple documentation abstract."""
    if not isinstance(abstract, list):
        return ""
    return "".join(item.get("text", "") for item in abstract if isinstance(item, dict)).strip()


def symbol_query(query: str) -> str:
    """
    Turn a design query into a symbol name query.

    'navigation bar' -> 'navigationbar', 'buttons' -> 'button'. Wildcard
    patterns are returned unchanged.
    """
    if WILDCARD_CHARS.search(query):
        return query.strip()
    compact = "".join(query.split())
    if len(compact) > 3 and compact.endswith("s") and not compact.endswith("ss"):
        compact = compact[:-1]
    return compact


# Module-level instance
apple_docs = AppleDocsAPI()
