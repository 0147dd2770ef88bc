import unittest
from pathlib import Path

from applehig_mcp.content.library import HIGContentLibrary
from applehig_mcp.design.components import (
    DesignComponents,
    canonical_component,
    extract_examples,
    extract_guidelines,
    extract_specifications,
)

FIXTURES = Path(__file__).parent / "fixtures" / "content"


class ExtractionTests(unittest.TestCase):
    def test_guidelines_from_bullets_and_statements(self):
        content = (
            "- Make buttons easy to identify.\n"
            "1. Keep labels short and clear.\n\n"
            "You should avoid custom gestures that conflict with system ones."
        )
        guidelines = extract_guidelines(content)
        self.assertEqual(guidelines[0], "Make buttons easy to identify.")
        self.assertIn("Keep labels short and clear.", guidelines)
        self.assertTrue(any(g.startswith("should avoid custom gestures") for g in guidelines))

    def test_guidelines_are_capped(self):
        content = "\n".join(f"- Guideline number {i} for testing" for i in range(10))
        self.assertEqual(len(extract_guidelines(content)), 5)

    def test_examples(self):
        examples = extract_examples("Use familiar icons, such as a trash can for delete.")
        self.assertEqual(examples, ["a trash can for delete"])

    def test_specifications(self):
        specs = extract_specifications("The default height: 44 pt. Width 120pt. Minimum: 28 pt.")
        self.assertEqual(specs, {"height": "44pt", "width": "120pt", "minimumSize": "28pt", "touchTarget": "44pt x 44pt"})
        self.assertEqual(extract_specifications("No measurements here."), {})

    def test_canonical_component(self):
        self.assertEqual(canonical_component("Tab Bar"), "tab")
        self.assertEqual(canonical_component(" Buttons "), "button")
        self.assertEqual(canonical_component("Slider"), "slider")


class ComponentSpecTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.components = DesignComponents(HIGContentLibrary(FIXTURES))

    def test_spec_from_corpus(self):
        result = self.components.get_component_spec("Buttons")
        component = result["component"]

        self.assertEqual(component["id"], "buttons-ios")
        self.assertEqual(component["title"], "Buttons")
        self.assertEqual(component["specifications"]["height"], "44pt")
        self.assertEqual(component["specifications"]["minimumSize"], "28pt")
        self.assertEqual(component["specifications"]["touchTarget"], "44pt x 44pt")
        self.assertIn("Make buttons easy to identify and predict in every context of your interface.",
                      component["guidelines"])
        self.assertLessEqual(len(component["guidelines"]), 5)
        self.assertLessEqual(len(component["examples"]), 3)
        self.assertEqual(result["platforms"], ["iOS"])

    def test_related_components_from_cross_references(self):
        result = self.components.get_component_spec("tab bar", platform="iOS")
        self.assertEqual(result["component"]["id"], "tab-bars-ios")
        self.assertEqual(result["relatedComponents"], ["Toolbars"])

    def test_list_platforms(self):
        platforms = {p["platform"]: p for p in self.components.list_platforms()}
        self.assertEqual(len(platforms), 6)
        self.assertEqual(platforms["iOS"]["documents"], 2)
        self.assertEqual(platforms["tvOS"]["documents"], 0)
        self.assertEqual(platforms["iOS"]["url"],
                         "https://developer.apple.com/design/human-interface-guidelines/designing-for-ios")
        self.assertEqual(platforms["universal"]["name"], "Universal")


class ComponentFallbackTests(unittest.TestCase):
    def setUp(self):
        with self.assertLogs("applehig_mcp.config", level="ERROR"):
            self.components = DesignComponents(HIGContentLibrary(Path("/nonexistent/hig-content")))

    def test_builtin_spec_when_corpus_is_empty(self):
        result = self.components.get_component_spec("text field")
        self.assertEqual(result["component"]["title"], "Text Fields")
        self.assertEqual(result["relatedComponents"], result["component"]["guidelines"])

    def test_builtin_spec_respects_platform(self):
        result = self.components.get_component_spec("tab", platform="tvOS")
        self.assertIsNone(result["component"])
        self.assertEqual(result["relatedComponents"], [])

    def test_unknown_component(self):
        self.assertIsNone(self.components.get_component_spec("Hologram Dial")["component"])


class DesignTokenTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.components = DesignComponents(HIGContentLibrary(FIXTURES))

    def test_button_tokens(self):
        tokens = self.components.get_design_tokens("button", "iOS")["tokens"]
        self.assertEqual(set(tokens), {"colors", "spacing", "typography", "dimensions"})
        self.assertEqual(tokens["colors"]["primary"], "#007AFF")
        self.assertEqual(tokens["dimensions"]["minHeight"], "44pt")

    def test_token_type_filter(self):
        result = self.components.get_design_tokens("button", "iOS", token_type="colors")
        self.assertEqual(list(result["tokens"]), ["colors"])

    def test_platform_specific_dimensions(self):
        macos = self.components.get_design_tokens("Navigation Bar", "macOS")["tokens"]
        self.assertEqual(macos["dimensions"]["height"], "52pt")
        self.assertEqual(macos["colors"]["background"], "#FFFFFF")
        self.assertEqual(self.components.get_design_tokens("tab bar", "iOS")["tokens"]["dimensions"]["height"], "49pt")

    def test_colors_default_to_ios(self):
        tokens = self.components.get_design_tokens("slider", "watchOS")["tokens"]
        self.assertEqual(tokens["colors"]["success"], "#34C759")
        self.assertEqual(tokens["spacing"], {"padding": "16pt", "margin": "8pt"})


class AccessibilityTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.components = DesignComponents(HIGContentLibrary(FIXTURES))

    def test_button_requirements_include_corpus_guidance(self):
        requirements = self.components.get_accessibility_requirements("button", "iOS")["requirements"]
        self.assertEqual(requirements["minimumTouchTarget"], "44pt x 44pt")
        self.assertIn("Button trait for VoiceOver", requirements["voiceOverSupport"])
        self.assertIn("Give every button a concise label that describes its action.",
                      requirements["additionalGuidelines"])

    def test_unknown_component_gets_default_guidelines(self):
        requirements = self.components.get_accessibility_requirements("slider", "macOS")["requirements"]
        self.assertEqual(requirements["voiceOverSupport"],
                         ["Accessible label", "Accessible hint", "Accessible value"])
        self.assertIn("Test with VoiceOver and other assistive technologies", requirements["additionalGuidelines"])

    def test_builtin_tables_are_not_mutated(self):
        self.components.get_accessibility_requirements("button", "iOS")
        again = self.components.get_accessibility_requirements("button", "iOS")["requirements"]
        self.assertEqual(again["additionalGuidelines"].count(
            "Give every button a concise label that describes its action."), 1)

    def test_returned_lists_are_copies(self):
        first = self.components.get_accessibility_requirements("button", "iOS")["requirements"]
        first["voiceOverSupport"].append("Changed by a caller")
        first["keyboardNavigation"].clear()

        again = self.components.get_accessibility_requirements("button", "iOS")["requirements"]
        self.assertNotIn("Changed by a caller", again["voiceOverSupport"])
        self.assertEqual(len(again["keyboardNavigation"]), 3)


if __name__ == "__main__":
    unittest.main()
