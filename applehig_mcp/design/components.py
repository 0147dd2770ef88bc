"""
Design Components Module
========================

Component-level design guidance built on top of the HIG corpus.

Key Features:
- Component specifications extracted from the matching HIG page
  (guidelines, examples, measurements)
- Design tokens (system colors, spacing, typography, dimensions)
- Accessibility requirements per component, enriched with corpus guidance
- Platform listing with links to each platform's HIG landing page

Technical Details:
- Corpus content is preferred; built-in specs for the most common components
  cover an empty or incomplete corpus
- Tokens and accessibility baselines are built-in tables
"""

import re
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..config import Config, logger
from ..content.library import HIGContentLibrary, hig_content
from ..search.guidelines import GuidelinesSearch

GUIDELINE_PATTERNS = [
    re.compile(r"^\s*[-•]\s*(.+?)$", re.MULTILINE),
    re.compile(r"^\s*\d+\.\s*(.+?)$", re.MULTILINE),
    re.compile(r"\b(?:consider|should|must|avoid|ensure)\s+.+?(?:[.!]|$)", re.IGNORECASE | re.MULTILINE),
]

EXAMPLE_PATTERNS = [
    re.compile(r"examples?[:\s]+(.+?)(?=\n\n|$)", re.IGNORECASE | re.DOTALL),
    re.compile(r"for example[,\s]+(.+?)(?=[.!]|$)", re.IGNORECASE | re.MULTILINE),
    re.compile(r"such as[:\s]+(.+?)(?=[.!]|$)", re.IGNORECASE | re.MULTILINE),
]

_TEXT_FIELD_SPEC = {
    "id": "text-fields-fallback",
    "title": "Text Fields",
    "description": "Text fields let people enter and edit text in a single line or multiple lines.",
    "platforms": ["iOS", "macOS", "watchOS", "tvOS", "visionOS"],
    "url": f"{Config.HIG_BASE_URL}/text-fields",
    "specifications": {
        "dimensions": {"height": "44pt", "minHeight": "36pt"},
        "touchTarget": "44pt x 44pt",
    },
    "guidelines": [
        "Make text fields recognizable and easy to target",
        "Use secure text fields for sensitive data",
        "Provide clear feedback for validation errors",
        "Use appropriate keyboard types for different content",
    ],
    "examples": ["Standard text field", "Search field", "Secure text field", "Multi-line text field"],
}

KNOWN_COMPONENTS: Dict[str, Dict] = {
    "button": {
        "id": "buttons-fallback",
        "title": "Buttons",
        "description": "Buttons initiate app-specific actions, have customizable backgrounds, and can include a title or an icon.",
        "platforms": ["iOS", "macOS", "watchOS", "tvOS", "visionOS"],
        "url": f"{Config.HIG_BASE_URL}/buttons",
        "specifications": {"dimensions": {"height": "44pt", "minWidth": "44pt"}},
        "guidelines": [
            "Make buttons easy to identify and predict",
            "Size buttons appropriately for their importance",
            "Use consistent styling throughout your app",
        ],
        "examples": ["Primary action buttons", "Secondary action buttons", "Destructive action buttons"],
    },
    "navigation": {
        "id": "navigation-fallback",
        "title": "Navigation Bars",
        "description": "A navigation bar appears at the top of an app screen, enabling navigation through a hierarchy of content.",
        "platforms": ["iOS", "macOS", "watchOS", "tvOS"],
        "url": f"{Config.HIG_BASE_URL}/navigation-bars",
        "specifications": {"dimensions": {"height": "44pt"}},
        "guidelines": [
            "Use a navigation bar to help people navigate hierarchical screens",
            "Show the current location in the navigation hierarchy",
            "Use the title area to clarify the current screen",
        ],
        "examples": ["Standard navigation bar", "Large title navigation bar", "Search-enabled navigation bar"],
    },
    "tab": {
        "id": "tabs-fallback",
        "title": "Tab Bars",
        "description": "A tab bar appears at the bottom of an app screen and provides the ability to quickly switch between different sections.",
        "platforms": ["iOS"],
        "url": f"{Config.HIG_BASE_URL}/tab-bars",
        "specifications": {"dimensions": {"height": "49pt"}},
        "guidelines": [
            "Use tab bars for peer categories of content",
            "Avoid using a tab bar for actions",
            "Badge tabs sparingly",
        ],
        "examples": ["Standard tab bar", "Customizable tab bar", "Translucent tab bar"],
    },
    "text field": _TEXT_FIELD_SPEC,
    "textfield": _TEXT_FIELD_SPEC,
}

SYSTEM_COLORS: Dict[str, Dict[str, str]] = {
    "iOS": {
        "primary": "#007AFF",
        "secondary": "#5856D6",
        "success": "#34C759",
        "warning": "#FF9500",
        "destructive": "#FF3B30",
        "label": "#000000",
        "secondaryLabel": "#3C3C43",
        "background": "#FFFFFF",
        "secondaryBackground": "#F2F2F7",
    },
    "macOS": {
        "primary": "#007AFF",
        "secondary": "#5856D6",
        "success": "#28CD41",
        "warning": "#FF9500",
        "destructive": "#FF3B30",
        "label": "#000000",
        "secondaryLabel": "#808080",
        "background": "#FFFFFF",
        "secondaryBackground": "#F5F5F5",
    },
}

TOKEN_TYPES = ["all", "colors", "spacing", "typography", "dimensions"]

BASE_ACCESSIBILITY = {
    "minimumTouchTarget": "44pt x 44pt",
    "contrastRatio": "4.5:1 (WCAG AA)",
    "wcagCompliance": "WCAG 2.1 AA",
    "voiceOverSupport": ["Accessible label", "Accessible hint", "Accessible value"],
    "keyboardNavigation": ["Tab navigation", "Return key activation"],
    "additionalGuidelines": [],
}

ACCESSIBILITY_OVERRIDES: Dict[str, Dict] = {
    "button": {
        "voiceOverSupport": [
            "Clear button label describing action",
            "Button trait for VoiceOver",
            "State changes announced (enabled/disabled)",
        ],
        "keyboardNavigation": [
            "Tab order follows reading order",
            "Space bar or Return key activation",
            "Focus indicator clearly visible",
        ],
        "additionalGuidelines": [
            'Use descriptive labels, not just "tap" or "click"',
            "Ensure sufficient spacing between buttons",
            "Provide haptic feedback on supported devices",
        ],
    },
    "navigation": {
        "minimumTouchTarget": "44pt x 44pt for interactive elements",
        "voiceOverSupport": [
            "Navigation bar trait",
            "Clear title announcement",
            "Back button with destination context",
        ],
        "keyboardNavigation": [
            "Tab navigation through interactive elements",
            "Escape key for back navigation (macOS)",
            "Command+[ for back navigation (macOS)",
        ],
        "additionalGuidelines": [
            "Keep navigation titles concise and descriptive",
            "Ensure back button context is clear",
            "Use navigation landmarks for screen readers",
        ],
    },
    "tab": {
        "voiceOverSupport": [
            "Tab bar trait",
            "Selected state clearly announced",
            "Tab count and position information",
        ],
        "keyboardNavigation": [
            "Arrow key navigation between tabs",
            "Return/Space key for tab selection",
            "Control+Tab for tab switching",
        ],
        "additionalGuidelines": [
            "Use clear, distinct tab labels",
            "Ensure selected state is visually obvious",
            "Badge numbers should be announced by VoiceOver",
        ],
    },
}

DEFAULT_ACCESSIBILITY_GUIDELINES = [
    "Follow platform-specific accessibility guidelines",
    "Test with VoiceOver and other assistive technologies",
    "Ensure content is accessible in all interface modes",
]

COMPONENT_ALIASES = {
    "navigation bar": "navigation",
    "navigation bars": "navigation",
    "tab bar": "tab",
    "tab bars": "tab",
    "buttons": "button",
}


def canonical_component(name: str) -> str:
    """Lower-case component name with common plural and 'bar' forms folded."""
    key = name.strip().lower()
    return COMPONENT_ALIASES.get(key, key)


def guideline_statements(content: str) -> List[str]:
    """Every bullet, numbered or 'should/must/avoid' statement, de-duplicated."""
    statements: List[str] = []
    for pattern in GUIDELINE_PATTERNS:
        for match in pattern.finditer(content):
            cleaned = re.sub(r"^[-•\d.\s]+", "", match.group(0)).strip()
            if 10 < len(cleaned) < 200 and cleaned not in statements:
                statements.append(cleaned)
    return statements


def extract_guidelines(content: str) -> List[str]:
    return guideline_statements(content)[:5]


def extract_examples(content: str) -> List[str]:
    examples: List[str] = []
    for pattern in EXAMPLE_PATTERNS:
        for match in pattern.finditer(content):
            cleaned = match.group(1).strip()
            if 5 < len(cleaned) < 100 and cleaned not in examples:
                examples.append(cleaned)
    return examples[:3]


def extract_specifications(content: str) -> Dict[str, str]:
    """Height, width, minimum size and touch target measurements in points."""
    specs: Dict[str, str] = {}
    measurements = {
        "height": r"height[:\s]+(\d+(?:\.\d+)?)\s*pt",
        "width": r"width[:\s]+(\d+(?:\.\d+)?)\s*pt",
        "minimumSize": r"minimum[:\s]+(\d+(?:\.\d+)?)\s*pt",
    }
    for key, pattern in measurements.items():
        match = re.search(pattern, content, re.IGNORECASE)
        if match:
            specs[key] = f"{match.group(1)}pt"

    if "touch target" in content.lower() or "44" in content:
        specs["touchTarget"] = "44pt x 44pt"
    return specs


class DesignComponents:
    """
    Component specifications, design tokens and accessibility requirements.

    Attributes:
        library: HIG content library used for corpus lookups
        search: Guidelines search used to find a component's page
    """

    def __init__(self, library: Optional[HIGContentLibrary] = None):
        self.library = library or hig_content
        self.search = GuidelinesSearch(self.library)

    def list_platforms(self) -> List[Dict]:
        """
        List supported platforms with their HIG links and document counts.

        Returns:
            List of platforms with name, url and documents
        """
        counts = self.library.platforms()
        return [
            {
                "platform": platform,
                "name": platform if platform != "universal" else "Universal",
                "url": Config.HIG_BASE_URL if platform == "universal"
                else f"{Config.HIG_BASE_URL}/designing-for-{platform.lower()}",
                "documents": counts.get(platform, 0),
            }
            for platform in Config.PLATFORMS
        ]

    def component_from_corpus(self, name: str, platform: Optional[str] = None) -> Optional[Dict]:
        """Build a component spec from the best-matching corpus page."""
        results = self.search.search(" ".join(name.lower().split()), platform=platform, limit=3)
        if not results or results[0]["id"].startswith("fallback-"):
            return None

        best = results[0]
        doc = self.library.get_document(best["id"])
        content = doc.body if doc else best["snippet"]

        return {
            "id": best["id"],
            "title": best["title"],
            "description": best["snippet"] or f"{best['title']} component specifications and guidelines.",
            "platforms": [best["platform"]],
            "url": best["url"],
            "specifications": extract_specifications(content),
            "guidelines": extract_guidelines(content),
            "examples": extract_examples(content),
        }

    def component_fallback(self, name: str, platform: Optional[str] = None) -> Optional[Dict]:
        """Built-in spec for a known component, exact name first, then partial."""
        key = name.strip().lower()

        component = KNOWN_COMPONENTS.get(key)
        if component:
            if platform and platform != "universal" and platform not in component["platforms"]:
                return None
            return dict(component)

        for known, component in KNOWN_COMPONENTS.items():
            if known in key or key in known:
                if platform and platform != "universal" and platform not in component["platforms"]:
                    continue
                return dict(component)
        return None

    def get_component_spec(self, component_name: str, platform: Optional[str] = None) -> Dict:
        """
        Get the specification for a UI component.

        Args:
            component_name: Component name (e.g., "Button", "Navigation Bar")
            platform: Optional platform filter

        Returns:
            Dictionary with component, relatedComponents, platforms, lastUpdated.
            component is None when nothing matches.
        """
        name = component_name.strip()
        logger.debug(f"Getting component spec for: {name} (platform: {platform or 'any'})")

        component = self.component_from_corpus(name, platform)
        if not component:
            component = self.component_fallback(name, platform)

        now = datetime.now(timezone.utc).isoformat()
        if not component:
            return {"component": None, "relatedComponents": [], "platforms": [], "lastUpdated": now}

        related = [r["title"] for r in self.library.related_documents(component["id"])]
        return {
            "component": component,
            "relatedComponents": related or component.get("guidelines", []),
            "platforms": component.get("platforms", []),
            "lastUpdated": now,
        }

    def token_database(self, component: str, platform: str) -> Dict[str, Dict[str, str]]:
        colors = SYSTEM_COLORS.get(platform, SYSTEM_COLORS["iOS"])
        key = canonical_component(component)

        if key == "button":
            return {
                "colors": dict(colors),
                "spacing": {"paddingHorizontal": "16pt", "paddingVertical": "11pt", "marginMinimum": "8pt"},
                "typography": {"fontSize": "17pt", "fontWeight": "600", "lineHeight": "22pt"},
                "dimensions": {"minHeight": "44pt", "minWidth": "44pt", "cornerRadius": "8pt"},
            }
        if key == "navigation":
            return {
                "colors": {"background": colors["background"], "tint": colors["primary"], "title": colors["label"]},
                "spacing": {"contentInset": "16pt", "titleSpacing": "8pt"},
                "typography": {"titleFontSize": "17pt", "titleFontWeight": "600"},
                "dimensions": {"height": "44pt" if platform == "iOS" else "52pt", "maxTitleWidth": "200pt"},
            }
        if key == "tab":
            return {
                "colors": {
                    "background": colors["secondaryBackground"],
                    "selectedTint": colors["primary"],
                    "unselectedTint": colors["secondaryLabel"],
                },
                "spacing": {"iconSpacing": "4pt", "horizontalPadding": "12pt"},
                "typography": {"labelFontSize": "10pt", "labelFontWeight": "400"},
                "dimensions": {"height": "49pt", "iconSize": "25pt", "maxTabs": "5"},
            }
        return {
            "colors": dict(colors),
            "spacing": {"padding": "16pt", "margin": "8pt"},
            "typography": {"fontSize": "17pt", "fontWeight": "400"},
            "dimensions": {"minHeight": "44pt"},
        }

    def get_design_tokens(self, component: str, platform: str, token_type: str = "all") -> Dict:
        """
        Get design tokens for a component.

        Args:
            component: Component name (e.g., "button", "tab bar")
            platform: Target platform; colors fall back to iOS values
            token_type: "all" or one of colors, spacing, typography, dimensions

        Returns:
            Dictionary with component, platform and the requested token groups
        """
        database = self.token_database(component, platform)
        tokens = {
            group: values for group, values in database.items()
            if token_type == "all" or token_type == group
        }
        return {"component": component, "platform": platform, "tokens": tokens}

    def get_accessibility_requirements(self, component: str, platform: str) -> Dict:
        """
        Get accessibility requirements for a component.

        Built-in requirements are extended with guidance sentences from the
        corpus's accessibility pages that mention the component.
        """
        key = canonical_component(component)
        requirements = {k: list(v) if isinstance(v, list) else v for k, v in BASE_ACCESSIBILITY.items()}
        if key in ACCESSIBILITY_OVERRIDES:
            requirements.update(
                {k: list(v) if isinstance(v, list) else v for k, v in ACCESSIBILITY_OVERRIDES[key].items()}
            )
        else:
            requirements["additionalGuidelines"] = list(DEFAULT_ACCESSIBILITY_GUIDELINES)

        corpus_guidance = self.accessibility_guidance(key, platform)
        if corpus_guidance:
            requirements["additionalGuidelines"] = requirements["additionalGuidelines"] + corpus_guidance

        return {"component": component, "platform": platform, "requirements": requirements}

    def accessibility_guidance(self, component: str, platform: str, limit: int = 3) -> List[str]:
        """Guideline sentences from accessibility documents that mention the component."""
        guidance: List[str] = []
        for doc in self.library.documents.values():
            if "accessib" not in doc.title.lower() and "accessibility" not in [k.lower() for k in doc.keywords]:
                continue
            if doc.platform not in (platform, "universal"):
                continue
            for line in guideline_statements(doc.body):
                if component in line.lower() and line not in guidance:
                    guidance.append(line)
        return guidance[:limit]


# Module-level instance
design_components = DesignComponents()
