import unittest

from applehig_mcp.docs.symbol_mappings import (
    concepts_in,
    cross_reference_mappings,
    normalize_concept,
    related_concepts,
    symbols_for,
)

BUTTONS_RESULT = {
    "id": "buttons-ios",
    "title": "Buttons",
    "url": "https://developer.apple.com/design/human-interface-guidelines/buttons",
    "platform": "iOS",
    "relevanceScore": 0.9,
    "snippet": "Buttons start actions. Place secondary buttons in a toolbar.",
}


class ConceptTests(unittest.TestCase):
    def test_normalize_concept(self):
        self.assertEqual(normalize_concept("Buttons"), "button")
        self.assertEqual(normalize_concept("Navigation Bar"), "navigation")
        self.assertEqual(normalize_concept("  Dark   Mode settings"), "dark mode")
        self.assertEqual(normalize_concept("switch"), "toggle")
        self.assertIsNone(normalize_concept("widgets"))

    def test_concepts_in_text(self):
        self.assertEqual(concepts_in("Tab Bars"), ["tab bar"])
        self.assertEqual(concepts_in("Buttons and toolbars"), ["button", "toolbar"])
        self.assertEqual(concepts_in("Layout"), [])

    def test_related_concepts(self):
        self.assertEqual(related_concepts("button"), ["alert", "sheet", "toolbar"])
        self.assertEqual(related_concepts("complications"), [])


class SymbolTests(unittest.TestCase):
    def test_symbols_sorted_by_confidence(self):
        self.assertEqual([s.symbol for s in symbols_for("button")],
                         ["Button", "UIButton", "NSButton", "WKInterfaceButton"])

    def test_filters(self):
        self.assertEqual([s.symbol for s in symbols_for("button", platform="macOS")], ["NSButton"])
        self.assertEqual([s.symbol for s in symbols_for("button", framework="uikit")], ["UIButton"])
        self.assertEqual(len(symbols_for("button", platform="universal")), 4)
        self.assertEqual(symbols_for("hologram"), [])

    def test_symbol_details(self):
        uibutton = symbols_for("button", framework="UIKit")[0]
        self.assertEqual(uibutton.url, "https://developer.apple.com/documentation/uikit/uibutton")
        self.assertEqual(uibutton.kind, "class")
        self.assertEqual(symbols_for("button", framework="SwiftUI")[0].kind, "struct")
        self.assertEqual(symbols_for("alert", framework="SwiftUI")[0].kind, "method")
        self.assertEqual(symbols_for("dark mode", framework="SwiftUI")[0].kind, "property")


class CrossReferenceMappingTests(unittest.TestCase):
    def test_title_concepts_map_directly(self):
        mappings = cross_reference_mappings([BUTTONS_RESULT], platform="iOS")

        self.assertEqual([m["technicalSymbol"] for m in mappings[:2]], ["Button", "UIButton"])
        first = mappings[0]
        self.assertEqual(first["designSection"], "Buttons")
        self.assertEqual(first["mappingType"], "direct")
        self.assertAlmostEqual(first["confidence"], 0.95)
        self.assertEqual(first["frameworks"], ["SwiftUI"])
        self.assertEqual(first["technicalUrl"], "https://developer.apple.com/documentation/swiftui/button")
        self.assertIn("SwiftUI implementation of button", first["explanation"])

    def test_snippet_concepts_map_conceptually(self):
        mappings = cross_reference_mappings([BUTTONS_RESULT], platform="iOS")
        conceptual = [m for m in mappings if m["mappingType"] == "conceptual"]
        self.assertEqual({m["technicalSymbol"] for m in conceptual}, {"UIToolbar", "toolbar(content:)"})
        self.assertTrue(all(m["confidence"] < 0.7 for m in conceptual))

    def test_framework_filter_and_limit(self):
        mappings = cross_reference_mappings([BUTTONS_RESULT], framework="AppKit", limit=1)
        self.assertEqual(len(mappings), 1)
        self.assertEqual(mappings[0]["technicalSymbol"], "NSButton")

    def test_no_results(self):
        self.assertEqual(cross_reference_mappings([]), [])


if __name__ == "__main__":
    unittest.main()
