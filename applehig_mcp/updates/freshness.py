"""
Content Freshness Module
========================

Reports whether the local HIG corpus is out of date and whether Apple's
documentation API can be reached.

Sources:
- hig-static: age of the corpus, from metadata/generation-info.json or the
  newest document lastUpdated; stale after Config.STALE_AFTER_DAYS
- api-documentation: HEAD request against the technologies JSON endpoint

Network and file errors are reported as notifications, never raised.
"""

import json
import urllib.error
import urllib.request
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..config import Config, logger
from ..content.front_matter import parse_timestamp
from ..content.library import HIGContentLibrary, hig_content

SOURCES = ["hig-static", "api-documentation"]


class FreshnessChecker:
    """
    Check content freshness and API availability.

    Attributes:
        library: Content library whose corpus is checked
        timeout: Seconds to wait for the API HEAD request
    """

    def __init__(self, library: Optional[HIGContentLibrary] = None, timeout: int = 10):
        self.library = library or hig_content
        self.timeout = timeout

    def generation_info(self) -> Optional[Dict]:
        """Contents of generation-info.json, or None when missing or unreadable."""
        if not self.library.content_dir:
            return None
        path = Config.metadata_path(self.library.content_dir) / Config.GENERATION_INFO_FILE
        if not path.is_file():
            return None
        try:
            info = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read {path}: {e}")
            return None
        if not isinstance(info, dict):
            logger.warning(f"Ignoring {path}: expected a JSON object")
            return None
        return info

    def last_updated(self) -> Optional[datetime]:
        """When the corpus was generated, falling back to the newest document date."""
        info = self.generation_info()
        if info:
            generated = parse_timestamp(info.get("generatedAt") or info.get("lastUpdated"))
            if generated:
                return generated

        dates = [d.last_updated for d in self.library.documents.values() if d.last_updated]
        return max(dates) if dates else None

    def content_info(self, now: Optional[datetime] = None) -> Optional[Dict]:
        """
        Summary of corpus age.

        Returns:
            Dictionary with lastUpdated, totalSections and ageDays, or None
            when the corpus has no date information
        """
        updated = self.last_updated()
        if not updated:
            return None
        now = now or datetime.now(timezone.utc)
        return {
            "lastUpdated": updated.isoformat(),
            "totalSections": len(self.library.documents),
            "ageDays": max((now - updated).days, 0),
        }

    def check_static_content(self, now: Optional[datetime] = None) -> Dict:
        checked = (now or datetime.now(timezone.utc)).isoformat()
        if not self.library.is_loaded:
            return {
                "source": "hig-static",
                "isUpdateAvailable": True,
                "lastChecked": checked,
                "updateInstructions": "No HIG content found. Set HIG_CONTENT_PATH to a generated content directory.",
            }

        info = self.content_info(now)
        if not info:
            return {
                "source": "hig-static",
                "isUpdateAvailable": False,
                "currentVersion": "Unknown",
                "lastChecked": checked,
                "updateInstructions": "Content age is unknown. Run `apple-hig-mcp rebuild-index` to record it.",
            }

        age = info["ageDays"]
        is_stale = age > Config.STALE_AFTER_DAYS
        result = {
            "source": "hig-static",
            "isUpdateAvailable": is_stale,
            "currentVersion": info["lastUpdated"][:10],
            "latestVersion": "Current Apple HIG (check developer.apple.com)",
            "lastChecked": checked,
            "ageDays": age,
            "updateInstructions": (
                "Content is stale. Regenerate the HIG content directory."
                if is_stale else f"Content is fresh ({age} days old)."
            ),
        }
        if is_stale:
            result["changelog"] = [
                f"Content is {age} days old",
                "Apple may have published new design guidelines",
            ]
        return result

    def check_api_documentation(self) -> Dict:
        """HEAD the technologies endpoint; the API itself is always current."""
        result = {
            "source": "api-documentation",
            "isUpdateAvailable": False,
            "lastChecked": datetime.now(timezone.utc).isoformat(),
        }
        try:
            req = urllib.request.Request(
                Config.TECHNOLOGIES_JSON_URL,
                method="HEAD",
                headers={"User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7)"},
            )
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                available = response.status == 200
            result.update({
                "currentVersion": "Live API",
                "latestVersion": "Live API",
                "available": available,
                "updateInstructions": (
                    "API documentation is available and current."
                    if available else "API documentation may be temporarily unavailable."
                ),
            })
        except (urllib.error.URLError, OSError) as e:
            logger.warning(f"API availability check failed: {e}")
            result.update({
                "currentVersion": "Unknown",
                "latestVersion": "Unknown",
                "available": False,
                "updateInstructions": "Could not verify API availability. Check internet connection.",
            })
        return result

    def summarize(self, updates: List[Dict], notifications: List[Dict]) -> str:
        update_count = len([u for u in updates if u["isUpdateAvailable"]])
        warning_count = len([n for n in notifications if n["type"] == "warning"])
        error_count = len([n for n in notifications if n["type"] == "error"])

        if not (update_count or warning_count or error_count):
            return "All sources up to date"

        parts = []
        if update_count:
            parts.append(f"{update_count} update{'s' if update_count > 1 else ''} available")
        if warning_count:
            parts.append(f"{warning_count} warning{'s' if warning_count > 1 else ''}")
        if error_count:
            parts.append(f"{error_count} error{'s' if error_count > 1 else ''}")
        return ", ".join(parts)

    def check_updates(self, sources: Optional[List[str]] = None) -> Dict:
        """
        Check the requested sources.

        Args:
            sources: Subset of SOURCES (default: all)

        Returns:
            Dictionary with updates, notifications, summary and hasUpdates
        """
        sources = sources or SOURCES
        updates: List[Dict] = []
        notifications: List[Dict] = []

        if "hig-static" in sources:
            static = self.check_static_content()
            updates.append(static)
            if static["isUpdateAvailable"]:
                notifications.append({
                    "type": "warning",
                    "message": (
                        f"Static HIG content is stale (>{Config.STALE_AFTER_DAYS} days old)"
                        if self.library.is_loaded else "Static HIG content is missing"
                    ),
                    "actionRequired": True,
                    "instructions": [static["updateInstructions"], "Restart the MCP server after updating"],
                })

        if "api-documentation" in sources:
            api = self.check_api_documentation()
            updates.append(api)
            if not api["available"]:
                notifications.append({
                    "type": "warning",
                    "message": "Could not verify API documentation availability",
                    "actionRequired": False,
                })

        return {
            "updates": updates,
            "notifications": notifications,
            "summary": self.summarize(updates, notifications),
            "hasUpdates": any(u["isUpdateAvailable"] for u in updates),
        }


# Module-level instance
freshness_checker = FreshnessChecker()
