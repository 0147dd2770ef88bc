"""
Configuration module for the Apple HIG MCP Server.
"""

import logging
import os
from pathlib import Path
from typing import List, Dict, Optional

# Get logger instance (uses default or parent configuration)
logger = logging.getLogger(__name__)


class Config:
    """Configuration and state management for the guidelines server."""

    # Server configuration
    SERVER_NAME = "apple-hig-mcp"
    VERSION = "1.0.0"

    # Content layout
    CONTENT_DIR_NAME = "content"
    UNIVERSAL_DIR = "universal"
    PLATFORMS_DIR = "platforms"
    METADATA_DIR = "metadata"
    SEARCH_INDEX_FILE = "search-index.json"
    CROSS_REFERENCES_FILE = "cross-references.json"
    GENERATION_INFO_FILE = "generation-info.json"

    HIG_BASE_URL = "https://developer.apple.com/design/human-interface-guidelines"

    PLATFORMS = ["iOS", "macOS", "watchOS", "tvOS", "visionOS", "universal"]
    CATEGORIES = [
        "foundations", "layout", "navigation", "presentation",
        "selection-and-input", "status", "system-capabilities",
        "visual-design", "icons-and-images", "color-and-materials",
        "typography", "motion", "technologies",
    ]
    CATEGORY_NAMES: Dict[str, str] = {
        "foundations": "Foundations",
        "layout": "Layout",
        "navigation": "Navigation",
        "presentation": "Presentation",
        "selection-and-input": "Selection and Input",
        "status": "Status",
        "system-capabilities": "System Capabilities",
        "visual-design": "Visual Design",
        "icons-and-images": "Icons and Images",
        "color-and-materials": "Color and Materials",
        "typography": "Typography",
        "motion": "Motion",
        "technologies": "Technologies",
    }
    DEFAULT_CATEGORY = "foundations"

    # Search configuration
    MAX_QUERY_LENGTH = 100
    MAX_COMPONENT_NAME_LENGTH = 50
    MAX_SEARCH_LIMIT = 50
    MAX_WILDCARD_LIMIT = 100
    SNIPPET_CHARS = 200
    MIN_RELEVANCE_SCORE = 0.08

    # Content older than this is reported as stale
    STALE_AFTER_DAYS = 180

    # Apple Developer documentation API
    DOCS_BASE_URL = "https://developer.apple.com/documentation/"
    DOCS_JSON_BASE_URL = "https://developer.apple.com/tutorials/data/documentation/"
    TECHNOLOGIES_JSON_URL = "https://developer.apple.com/tutorials/data/documentation/technologies.json"
    DEVELOPER_SITE_URL = "https://developer.apple.com"
    TECHNOLOGY_CATEGORIES = ["all", "framework", "symbol"]
    MAX_TECHNOLOGIES = 50
    # Frameworks scanned by a symbol search without a framework filter
    SYMBOL_SEARCH_FRAMEWORKS = 20
    MAX_TECHNICAL_LIMIT = 100
    MAX_UNIFIED_LIMIT = 50
    MAX_UNIFIED_SOURCE_LIMIT = 25

    @classmethod
    def normalize_platform(cls, value: Optional[str]) -> Optional[str]:
        """Map a platform name to its canonical spelling, or None if unknown."""
        if not value:
            return None
        lookup = {p.lower(): p for p in cls.PLATFORMS}
        return lookup.get(str(value).strip().lower())

    @classmethod
    def normalize_category(cls, value: Optional[str]) -> Optional[str]:
        """Map a category name (slug or display name) to its slug, or None if unknown."""
        if not value:
            return None
        slug = str(value).strip().lower().replace(" ", "-")
        return slug if slug in cls.CATEGORIES else None

    @classmethod
    def format_category_name(cls, category: str) -> str:
        return cls.CATEGORY_NAMES.get(category, category.replace("-", " ").title())

    @classmethod
    def _has_markdown(cls, path: Path) -> bool:
        return path.is_dir() and any(path.rglob("*.md"))

    @classmethod
    def find_content_paths(cls) -> List[Path]:
        """Find candidate content directories that actually contain markdown."""
        candidates = [
            Path.cwd() / cls.CONTENT_DIR_NAME,
            Path(__file__).resolve().parent.parent / cls.CONTENT_DIR_NAME,
        ]

        found = []
        for candidate in candidates:
            if candidate not in found and cls._has_markdown(candidate):
                found.append(candidate)
                logger.info(f"Found HIG content in: {candidate}")
        return found

    @classmethod
    def get_content_path(cls) -> Path:
        """Get the content directory, checking environment variable first."""
        # Allow override via environment variable for specific path
        custom_path = os.environ.get("HIG_CONTENT_PATH")

        if custom_path:
            custom_path = Path(custom_path).expanduser()
            if not custom_path.exists():
                raise ValueError(f"Custom content path does not exist: {custom_path}")
            return custom_path

        content_paths = cls.find_content_paths()
        if not content_paths:
            raise ValueError(
                "No HIG content directory found. "
                "Searched ./content and the package's parent directory. "
                "You can set HIG_CONTENT_PATH environment variable to specify a custom path."
            )
        return content_paths[0]

    @classmethod
    def metadata_path(cls, content_dir: Path) -> Path:
        return Path(content_dir) / cls.METADATA_DIR

    @classmethod
    def log_level(cls) -> int:
        level_name = os.environ.get("HIG_LOG_LEVEL", "INFO").upper()
        return getattr(logging, level_name, logging.INFO)
