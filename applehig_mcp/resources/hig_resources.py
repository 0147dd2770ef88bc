"""
HIG Resources Module
====================

Serves the corpus as MCP resources under the `hig://` scheme:

    hig://<platform>                 every document for a platform
    hig://<platform>/<category>      one category of a platform
    hig://updates/latest             recent HIG changes
    hig://updates/latest-design-system

Platforms and categories are matched case-insensitively. Resources are
rendered as Markdown and always carry Apple's attribution notice.
"""

import re
from typing import Dict, List, Optional

from ..config import Config
from ..content.library import HIGContentLibrary, hig_content
from ..updates.freshness import FreshnessChecker

MIME_TYPE = "text/markdown"
UPDATE_KINDS = ["latest", "latest-design-system"]

URI_PATTERN = re.compile(r"^hig://([^/]+)(?:/(.+))?$")

ATTRIBUTION_TEXT = """---
**Attribution Notice**

This content is sourced from Apple's Human Interface Guidelines.

© Apple Inc. All rights reserved. This content is provided for educational and development purposes under fair use. This MCP server is not affiliated with Apple Inc. and does not claim ownership of Apple's content.

For the most up-to-date and official information, please refer to Apple's official documentation.

---

"""

RECENT_UPDATES = """## Recent Updates

- **Enhanced Design System**: Major visual improvements with advanced materials
- **Unified Design Language**: Consistent design patterns across all Apple platforms
- **Updated APIs**: Latest SwiftUI, UIKit, and AppKit capabilities

"""


class ResourceError(ValueError):
    """Raised for a malformed or unknown hig:// URI."""


def parse_uri(uri: str) -> Dict[str, Optional[str]]:
    """
    Parse a hig:// URI.

    Returns:
        Dictionary with type ('platform', 'category' or 'updates') and the
        platform, category or updateType it names

    Raises:
        ResourceError: If the scheme, platform, category or update kind is unknown
    """
    if not uri.startswith("hig://"):
        raise ResourceError(f"Unsupported URI scheme. Expected 'hig://', got: {uri}")

    match = URI_PATTERN.match(uri.rstrip("/"))
    if not match:
        raise ResourceError(f"Malformed resource URI: {uri}")
    first, second = match.groups()

    if first == "updates":
        kind = second or "latest"
        if kind not in UPDATE_KINDS:
            raise ResourceError(f"Unknown update resource: {kind}. Must be one of: {', '.join(UPDATE_KINDS)}")
        return {"type": "updates", "updateType": kind}

    platform = Config.normalize_platform(first)
    if not platform:
        raise ResourceError(f"Unknown platform: {first}. Must be one of: {', '.join(Config.PLATFORMS)}")

    if not second:
        return {"type": "platform", "platform": platform}

    category = Config.normalize_category(second)
    if not category:
        raise ResourceError(f"Unknown category: {second}")
    return {"type": "category", "platform": platform, "category": category}


class HIGResources:
    """
    List and render hig:// resources.

    Attributes:
        library: Content library the resources are rendered from
        freshness: Checker used for content age in the update resources
    """

    def __init__(self, library: Optional[HIGContentLibrary] = None):
        self.library = library or hig_content
        self.freshness = FreshnessChecker(self.library)

    def _resource(self, uri: str, name: str, description: str) -> Dict:
        return {"uri": uri, "name": name, "description": description, "mimeType": MIME_TYPE}

    def list_resources(self) -> List[Dict]:
        """Platform, platform/category, universal and update resources that have content."""
        resources = []
        counts = self.library.platforms()

        for platform in Config.PLATFORMS:
            if platform == "universal" or not counts.get(platform):
                continue
            resources.append(self._resource(
                f"hig://{platform.lower()}",
                f"{platform} Human Interface Guidelines",
                f"Complete design guidelines for {platform} development",
            ))
            categories = self.library.categories(platform)
            for category in Config.CATEGORIES:
                if categories.get(category):
                    name = Config.format_category_name(category)
                    resources.append(self._resource(
                        f"hig://{platform.lower()}/{category}",
                        f"{platform} {name}",
                        f"{platform} guidelines for {name.lower()}",
                    ))

        if counts.get("universal"):
            resources.append(self._resource(
                "hig://universal",
                "Universal Design Guidelines",
                "Cross-platform design principles and modern design system features",
            ))

        resources.append(self._resource(
            "hig://updates/latest-design-system",
            "Latest Design System Updates",
            "Most recent Apple design system updates and new design language features",
        ))
        resources.append(self._resource(
            "hig://updates/latest",
            "Latest HIG Updates",
            "Most recent changes and additions to Apple's Human Interface Guidelines",
        ))
        return resources

    def read_resource(self, uri: str) -> Dict:
        """
        Render a resource.

        Returns:
            Dictionary with uri, name, description, mimeType and content

        Raises:
            ResourceError: For an invalid URI
        """
        parsed = parse_uri(uri)

        if parsed["type"] == "platform":
            name, description, content = self.render_platform(parsed["platform"])
        elif parsed["type"] == "category":
            name, description, content = self.render_category(parsed["platform"], parsed["category"])
        else:
            name, description, content = self.render_updates(parsed["updateType"])

        resource = self._resource(uri, name, description)
        resource["content"] = content
        return resource

    def _render_sections(self, docs) -> str:
        parts = []
        for doc in docs:
            parts.append(f"## {doc.title}\n\n**URL:** {doc.url}\n\n{doc.body}\n\n---\n\n")
        return "".join(parts)

    def render_platform(self, platform: str):
        docs = self.library.documents_for(platform)
        if platform == "universal":
            name = "Universal Design Guidelines"
            intro = "Cross-platform design principles that apply to every Apple platform."
        else:
            name = f"{platform} Human Interface Guidelines"
            intro = f"This document contains the complete design guidelines for {platform} development."

        content = f"# {name}\n\n{intro}\n\n{ATTRIBUTION_TEXT}{self._render_sections(docs)}"
        return name, f"Complete design guidelines for {platform} development", content

    def render_category(self, platform: str, category: str):
        docs = self.library.documents_for(platform, category)
        category_name = Config.format_category_name(category)
        name = f"{platform} {category_name}"

        content = (
            f"# {name}\n\n"
            f"Guidelines for {category_name.lower()} in {platform} applications.\n\n"
            f"{ATTRIBUTION_TEXT}{self._render_sections(docs)}"
        )
        return name, f"{platform} guidelines for {category_name.lower()}", content

    def render_updates(self, kind: str):
        if kind == "latest-design-system":
            name = "Latest Design System Updates"
            description = "Current Apple design language featuring advanced materials and interface elements"
            content = (
                "# Latest Apple Design System Updates\n\n"
                "Apple's most recent design language updates, featuring advanced materials and visual elements.\n\n"
            )
        else:
            name = "Latest HIG Updates"
            description = "Most recent changes to Apple's Human Interface Guidelines"
            content = (
                "# Latest HIG Updates\n\n"
                "Recent changes and additions to Apple's Human Interface Guidelines.\n\n"
            )

        content += ATTRIBUTION_TEXT + RECENT_UPDATES

        info = self.freshness.content_info()
        if info:
            content += (
                "## Content Information\n\n"
                f"- **Last Updated**: {info['lastUpdated'][:10]}\n"
                f"- **Total Sections**: {info['totalSections']}\n"
                f"- **Content Age**: {info['ageDays']} days\n\n"
            )
        return name, description, content


# Module-level instance
hig_resources = HIGResources()
