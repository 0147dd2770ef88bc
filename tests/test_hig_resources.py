import unittest
from pathlib import Path

from applehig_mcp.content.library import HIGContentLibrary
from applehig_mcp.resources.hig_resources import MIME_TYPE, HIGResources, ResourceError, parse_uri

FIXTURES = Path(__file__).parent / "fixtures" / "content"


class ParseUriTests(unittest.TestCase):
    def test_platform(self):
        self.assertEqual(parse_uri("hig://ios"), {"type": "platform", "platform": "iOS"})
        self.assertEqual(parse_uri("hig://VisionOS/"), {"type": "platform", "platform": "visionOS"})

    def test_category(self):
        self.assertEqual(
            parse_uri("hig://macos/selection-and-input"),
            {"type": "category", "platform": "macOS", "category": "selection-and-input"},
        )

    def test_updates(self):
        self.assertEqual(parse_uri("hig://updates/latest"), {"type": "updates", "updateType": "latest"})
        self.assertEqual(parse_uri("hig://updates"), {"type": "updates", "updateType": "latest"})

    def test_invalid_uris(self):
        for uri in ("https://ios", "hig://", "hig://android", "hig://ios/unknown", "hig://updates/liquid-glass"):
            with self.subTest(uri=uri):
                with self.assertRaises(ResourceError):
                    parse_uri(uri)

    def test_resource_error_is_a_value_error(self):
        with self.assertRaises(ValueError):
            parse_uri("file:///etc/passwd")


class HIGResourcesTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.resources = HIGResources(HIGContentLibrary(FIXTURES))

    def test_list_only_platforms_with_content(self):
        uris = [r["uri"] for r in self.resources.list_resources()]
        self.assertEqual(uris, [
            "hig://ios",
            "hig://ios/navigation",
            "hig://ios/visual-design",
            "hig://macos",
            "hig://macos/navigation",
            "hig://watchos",
            "hig://watchos/system-capabilities",
            "hig://universal",
            "hig://updates/latest-design-system",
            "hig://updates/latest",
        ])

    def test_every_listed_resource_is_readable(self):
        for resource in self.resources.list_resources():
            with self.subTest(uri=resource["uri"]):
                read = self.resources.read_resource(resource["uri"])
                self.assertEqual(read["mimeType"], MIME_TYPE)
                self.assertEqual(read["name"], resource["name"])
                self.assertIn("Attribution Notice", read["content"])

    def test_platform_resource(self):
        content = self.resources.read_resource("hig://ios")["content"]
        self.assertTrue(content.startswith("# iOS Human Interface Guidelines"))
        self.assertIn("## Buttons", content)
        self.assertIn("**URL:** https://developer.apple.com/design/human-interface-guidelines/buttons", content)
        self.assertLess(content.index("## Buttons"), content.index("## Tab Bars"))
        self.assertNotIn("## Toolbars", content)

    def test_category_resource(self):
        resource = self.resources.read_resource("hig://ios/navigation")
        self.assertEqual(resource["name"], "iOS Navigation")
        self.assertIn("## Tab Bars", resource["content"])
        self.assertNotIn("## Buttons", resource["content"])

    def test_empty_category_still_renders(self):
        content = self.resources.read_resource("hig://tvos/layout")["content"]
        self.assertTrue(content.startswith("# tvOS Layout"))
        self.assertNotIn("**URL:**", content)

    def test_updates_include_content_information(self):
        content = self.resources.read_resource("hig://updates/latest")["content"]
        self.assertIn("## Recent Updates", content)
        self.assertIn("## Content Information", content)
        self.assertIn("- **Last Updated**: 2025-08-03", content)
        self.assertIn("- **Total Sections**: 7", content)

    def test_updates_without_corpus(self):
        with self.assertLogs("applehig_mcp.config", level="ERROR"):
            resources = HIGResources(HIGContentLibrary(Path("/nonexistent/hig-content")))
        content = resources.read_resource("hig://updates/latest-design-system")["content"]
        self.assertTrue(content.startswith("# Latest Apple Design System Updates"))
        self.assertNotIn("## Content Information", content)
        self.assertEqual([r["uri"] for r in resources.list_resources()],
                         ["hig://updates/latest-design-system", "hig://updates/latest"])


if __name__ == "__main__":
    unittest.main()
