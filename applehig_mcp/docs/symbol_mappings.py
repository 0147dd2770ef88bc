"""
Design concept to API symbol mappings.

Links HIG concepts (buttons, lists, dark mode, ...) to the SwiftUI, UIKit,
AppKit and WatchKit symbols that implement them, and pairs guideline search
results with those symbols.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..config import Config


@dataclass(frozen=True)
class SymbolMapping:
    symbol: str
    framework: str
    platform: str
    confidence: float
    notes: str

    @property
    def url(self) -> str:
        return f"{Config.DOCS_BASE_URL}{self.framework.lower()}/{self.symbol.lower()}"

    @property
    def kind(self) -> str:
        if "(" in self.symbol:
            return "method"
        if self.symbol.startswith(("UI", "NS", "WK", "LA")) or self.symbol.endswith(("View", "Controller")):
            return "class"
        if self.symbol[:1].isupper():
            return "struct"
        return "property"


def _m(symbol, framework, platform, confidence, notes):
    return SymbolMapping(symbol, framework, platform, confidence, notes)


CONCEPT_SYMBOLS: Dict[str, List[SymbolMapping]] = {
    "button": [
        _m("Button", "SwiftUI", "iOS", 0.95, "Primary SwiftUI button"),
        _m("UIButton", "UIKit", "iOS", 0.90, "UIKit button with full control over appearance"),
        _m("NSButton", "AppKit", "macOS", 0.90, "Native macOS button"),
        _m("WKInterfaceButton", "WatchKit", "watchOS", 0.85, "WatchKit interface button"),
    ],
    "navigation": [
        _m("NavigationStack", "SwiftUI", "iOS", 0.95, "Stack-based navigation in SwiftUI"),
        _m("NavigationSplitView", "SwiftUI", "iOS", 0.90, "Multicolumn navigation"),
        _m("UINavigationController", "UIKit", "iOS", 0.90, "UIKit navigation stack"),
        _m("UINavigationBar", "UIKit", "iOS", 0.85, "Bar shown at the top of a navigation stack"),
    ],
    "tab bar": [
        _m("TabView", "SwiftUI", "iOS", 0.95, "SwiftUI tabbed container"),
        _m("UITabBarController", "UIKit", "iOS", 0.90, "UIKit tab container"),
        _m("UITabBar", "UIKit", "iOS", 0.85, "UIKit tab bar control"),
    ],
    "toolbar": [
        _m("toolbar(content:)", "SwiftUI", "iOS", 0.90, "SwiftUI toolbar modifier"),
        _m("UIToolbar", "UIKit", "iOS", 0.90, "UIKit toolbar"),
        _m("NSToolbar", "AppKit", "macOS", 0.90, "Window toolbar on macOS"),
    ],
    "list": [
        _m("List", "SwiftUI", "iOS", 0.95, "SwiftUI list"),
        _m("UITableView", "UIKit", "iOS", 0.90, "UIKit table view"),
        _m("UICollectionView", "UIKit", "iOS", 0.85, "Grid and list layouts"),
        _m("NSTableView", "AppKit", "macOS", 0.90, "macOS table view"),
    ],
    "text field": [
        _m("TextField", "SwiftUI", "iOS", 0.95, "SwiftUI text input"),
        _m("SecureField", "SwiftUI", "iOS", 0.90, "Password input"),
        _m("UITextField", "UIKit", "iOS", 0.90, "Single-line text input"),
        _m("NSTextField", "AppKit", "macOS", 0.90, "macOS text field"),
    ],
    "image": [
        _m("Image", "SwiftUI", "iOS", 0.95, "SwiftUI image, including SF Symbols"),
        _m("UIImageView", "UIKit", "iOS", 0.90, "UIKit image display"),
        _m("NSImageView", "AppKit", "macOS", 0.90, "macOS image display"),
    ],
    "picker": [
        _m("Picker", "SwiftUI", "iOS", 0.95, "SwiftUI picker"),
        _m("UIPickerView", "UIKit", "iOS", 0.90, "UIKit wheel picker"),
        _m("NSPopUpButton", "AppKit", "macOS", 0.90, "macOS pop-up button"),
    ],
    "slider": [
        _m("Slider", "SwiftUI", "iOS", 0.95, "SwiftUI slider"),
        _m("UISlider", "UIKit", "iOS", 0.90, "UIKit slider"),
        _m("NSSlider", "AppKit", "macOS", 0.90, "macOS slider"),
    ],
    "toggle": [
        _m("Toggle", "SwiftUI", "iOS", 0.95, "SwiftUI toggle"),
        _m("UISwitch", "UIKit", "iOS", 0.90, "UIKit switch"),
        _m("NSSwitch", "AppKit", "macOS", 0.85, "macOS switch"),
    ],
    "alert": [
        _m("alert(_:isPresented:actions:)", "SwiftUI", "iOS", 0.95, "SwiftUI alert modifier"),
        _m("UIAlertController", "UIKit", "iOS", 0.90, "UIKit alert with actions"),
        _m("NSAlert", "AppKit", "macOS", 0.90, "macOS alert"),
    ],
    "sheet": [
        _m("sheet(isPresented:onDismiss:content:)", "SwiftUI", "iOS", 0.95, "SwiftUI modal sheet"),
        _m("UISheetPresentationController", "UIKit", "iOS", 0.85, "UIKit sheet presentation"),
        _m("NSWindow", "AppKit", "macOS", 0.70, "Sheets attach to a window on macOS"),
    ],
    "scroll view": [
        _m("ScrollView", "SwiftUI", "iOS", 0.95, "SwiftUI scrollable container"),
        _m("UIScrollView", "UIKit", "iOS", 0.90, "UIKit scroll container"),
        _m("NSScrollView", "AppKit", "macOS", 0.90, "macOS scroll container"),
    ],
    "color": [
        _m("Color", "SwiftUI", "iOS", 0.95, "SwiftUI color"),
        _m("UIColor", "UIKit", "iOS", 0.90, "UIKit dynamic and system colors"),
        _m("NSColor", "AppKit", "macOS", 0.90, "macOS colors"),
    ],
    "dark mode": [
        _m("colorScheme", "SwiftUI", "iOS", 0.95, "Current light or dark appearance"),
        _m("UIUserInterfaceStyle", "UIKit", "iOS", 0.90, "UIKit interface style"),
        _m("NSAppearance", "AppKit", "macOS", 0.90, "macOS appearance"),
    ],
    "typography": [
        _m("Font", "SwiftUI", "iOS", 0.95, "SwiftUI fonts and text styles"),
        _m("UIFont", "UIKit", "iOS", 0.90, "UIKit fonts and Dynamic Type"),
        _m("NSFont", "AppKit", "macOS", 0.90, "macOS fonts"),
    ],
    "accessibility": [
        _m("accessibilityLabel(_:)", "SwiftUI", "iOS", 0.90, "VoiceOver label for a view"),
        _m("UIAccessibility", "UIKit", "iOS", 0.90, "UIKit accessibility APIs"),
        _m("NSAccessibility", "AppKit", "macOS", 0.85, "macOS accessibility protocol"),
    ],
    "gestures": [
        _m("Gesture", "SwiftUI", "iOS", 0.90, "SwiftUI gesture protocol"),
        _m("UIGestureRecognizer", "UIKit", "iOS", 0.90, "UIKit gesture recognizers"),
        _m("NSGestureRecognizer", "AppKit", "macOS", 0.85, "macOS gesture recognizers"),
    ],
    "complications": [
        _m("WidgetKit", "WidgetKit", "watchOS", 0.90, "Complications are built as widgets"),
        _m("CLKComplicationDataSource", "ClockKit", "watchOS", 0.75, "Legacy ClockKit complications"),
    ],
    "authentication": [
        _m("ASAuthorizationAppleIDButton", "AuthenticationServices", "iOS", 0.90, "Sign in with Apple button"),
        _m("LAContext", "LocalAuthentication", "iOS", 0.90, "Face ID and Touch ID"),
    ],
}

ALIASES = {
    "buttons": "button",
    "navigation bar": "navigation",
    "navigation bars": "navigation",
    "tab bars": "tab bar",
    "tabs": "tab bar",
    "toolbars": "toolbar",
    "lists": "list",
    "table": "list",
    "tables": "list",
    "lists and tables": "list",
    "text fields": "text field",
    "text input": "text field",
    "images": "image",
    "icons": "image",
    "sf symbols": "image",
    "pickers": "picker",
    "sliders": "slider",
    "toggles": "toggle",
    "switch": "toggle",
    "switches": "toggle",
    "alerts": "alert",
    "sheets": "sheet",
    "scroll views": "scroll view",
    "scroll": "scroll view",
    "colors": "color",
    "fonts": "typography",
    "font": "typography",
    "gesture": "gestures",
    "complication": "complications",
    "sign in with apple": "authentication",
    "face id": "authentication",
}

RELATED_CONCEPTS = {
    "button": ["alert", "sheet", "toolbar"],
    "navigation": ["tab bar", "toolbar", "list"],
    "tab bar": ["navigation", "toolbar"],
    "toolbar": ["button", "navigation"],
    "list": ["scroll view", "navigation", "text field"],
    "text field": ["button", "picker", "alert"],
    "picker": ["button", "list", "sheet"],
    "alert": ["button", "sheet"],
    "sheet": ["button", "alert", "navigation"],
    "color": ["dark mode", "typography"],
    "dark mode": ["color", "typography"],
    "typography": ["color", "accessibility"],
    "accessibility": ["typography", "color", "gestures"],
    "gestures": ["accessibility"],
}


def normalize_concept(query: str) -> Optional[str]:
    """Map a component or concept name to a CONCEPT_SYMBOLS key."""
    name = re.sub(r"[^a-z0-9 ]", "", " ".join(query.lower().split())).strip()
    if name in CONCEPT_SYMBOLS:
        return name
    if name in ALIASES:
        return ALIASES[name]
    for concept in sorted(CONCEPT_SYMBOLS, key=len, reverse=True):
        if concept in name:
            return concept
    return None


def concepts_in(text: str) -> List[str]:
    """Every concept whose name or alias occurs in text."""
    lower = text.lower()
    found = []
    for phrase in list(CONCEPT_SYMBOLS) + list(ALIASES):
        concept = ALIASES.get(phrase, phrase)
        if re.search(rf"\b{re.escape(phrase)}\b", lower) and concept not in found:
            found.append(concept)
    return found


def symbols_for(concept: str, platform: Optional[str] = None,
                framework: Optional[str] = None) -> List[SymbolMapping]:
    symbols = CONCEPT_SYMBOLS.get(concept, [])
    if platform and platform != "universal":
        symbols = [s for s in symbols if s.platform == platform]
    if framework:
        symbols = [s for s in symbols if s.framework.lower() == framework.lower()]
    return sorted(symbols, key=lambda s: -s.confidence)


def related_concepts(concept: str) -> List[str]:
    return list(RELATED_CONCEPTS.get(concept, []))


def cross_reference_mappings(design_results: List[Dict], platform: Optional[str] = None,
                             framework: Optional[str] = None, limit: int = 20) -> List[Dict]:
    """
    Pair guideline search results with the symbols that implement them.

    A result whose title names a concept maps directly. A result that only
    mentions a concept in its snippet maps conceptually at 70% confidence.
    Confidence is scaled by the result's own relevance.
    """
    mappings: Dict[tuple, Dict] = {}
    for result in design_results:
        title_concepts = concepts_in(result["title"])
        snippet_concepts = [c for c in concepts_in(result.get("snippet", "")) if c not in title_concepts]

        for mapping_type, concepts, weight in (("direct", title_concepts, 1.0),
                                               ("conceptual", snippet_concepts, 0.7)):
            for concept in concepts:
                for symbol in symbols_for(concept, platform, framework):
                    confidence = round(symbol.confidence * weight * min(1.0, result["relevanceScore"] + 0.5), 2)
                    key = (result["id"], symbol.framework, symbol.symbol)
                    if key in mappings and mappings[key]["confidence"] >= confidence:
                        continue
                    mappings[key] = {
                        "designSection": result["title"],
                        "designUrl": result["url"],
                        "technicalSymbol": symbol.symbol,
                        "technicalUrl": symbol.url,
                        "confidence": confidence,
                        "mappingType": mapping_type,
                        "explanation": (
                            f"{symbol.symbol} is the {symbol.framework} implementation of "
                            f"{concept} on {symbol.platform}. {symbol.notes}."
                        ),
                        "platforms": [symbol.platform],
                        "frameworks": [symbol.framework],
                    }

    ranked = sorted(mappings.values(), key=lambda m: (-m["confidence"], m["designSection"], m["technicalSymbol"]))
    return ranked[:limit]
