"""
Front Matter Parsing
====================

Parses a single HIG content file into a HIGDocument. Each file is a Markdown
document with a YAML front matter block delimited by `---` lines, followed by
the page body and a trailing attribution notice.

Parsing is lenient: a readable file always yields a document. Missing or
malformed metadata falls back to defaults derived from the body and the
file's location in the content tree.
"""

import json
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from ..config import Config, logger

KNOWN_FIELDS = {
    "title", "platform", "category", "url", "id", "lastUpdated",
    "extractionMethod", "qualityScore", "confidence", "contentLength",
    "hasCodeExamples", "hasImages", "keywords",
}

ATTRIBUTION_MARKERS = (
    "attribution notice",
    "this content is sourced from apple's human interface guidelines",
)

CODE_FENCE = re.compile(r"^```", re.MULTILINE)
IMAGE_REF = re.compile(r"!\[[^\]]*\]\([^)]*\)")
SIMPLE_LINE = re.compile(r"^(\w+):\s*(.*)$")


class FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps as strings for parse_timestamp."""


FrontMatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass
class HIGDocument:
    """One parsed HIG content file."""

    title: str
    platform: str
    category: str
    url: str
    id: str
    body: str
    last_updated: Optional[datetime] = None
    extraction_method: str = "unknown"
    quality_score: float = 0.8
    confidence: float = 1.0
    content_length: int = 0
    has_code_examples: bool = False
    has_images: bool = False
    keywords: List[str] = field(default_factory=list)
    attribution: str = ""
    path: Optional[str] = None
    filename: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_fallback(self) -> bool:
        return self.extraction_method == "fallback"

    @property
    def slug(self) -> str:
        return Path(self.filename).stem if self.filename else slugify(self.title)

    def metadata(self) -> Dict[str, Any]:
        """Front matter as written by the extraction tool (camelCase keys)."""
        data = {
            "title": self.title,
            "platform": self.platform,
            "category": self.category,
            "url": self.url,
            "id": self.id,
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
            "extractionMethod": self.extraction_method,
            "qualityScore": self.quality_score,
            "confidence": self.confidence,
            "contentLength": self.content_length,
            "hasCodeExamples": self.has_code_examples,
            "hasImages": self.has_images,
            "keywords": list(self.keywords),
        }
        data.update(self.extra)
        return data


def slugify(text: str) -> str:
    """Lower-case, hyphen-separated slug (e.g., 'Action sheets' -> 'action-sheets')."""
    slug = re.sub(r"[^a-z0-9]+", "-", (text or "").lower())
    return slug.strip("-")


def split_front_matter(text: str) -> Tuple[Dict[str, Any], str]:
    """
    Split a document into its front matter dictionary and body.

    Args:
        text: Raw file contents

    Returns:
        (front_matter, body). front_matter is empty when the file has no
        complete `---` fenced block at the top.
    """
    # Normalize newlines and strip BOM if present
    s = text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")

    lines = s.split("\n")
    if not lines or lines[0].strip() != "---":
        return {}, s

    end_idx = None
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            end_idx = i
            break

    if end_idx is None:
        # No closing fence: treat as no front matter
        return {}, s

    raw = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1:]).lstrip("\n")

    try:
        data = yaml.load(raw, Loader=FrontMatterLoader) or {}
        if not isinstance(data, dict):
            data = {}
    except (yaml.YAMLError, ValueError) as e:
        logger.debug(f"YAML front matter failed, using line parser: {e}")
        data = _parse_simple_lines(raw)

    return data, body


def _parse_simple_lines(raw: str) -> Dict[str, Any]:
    """Fallback `key: value` parser; values are decoded as JSON when possible."""
    data: Dict[str, Any] = {}
    for line in raw.split("\n"):
        match = SIMPLE_LINE.match(line.strip())
        if not match:
            continue
        key, value = match.groups()
        try:
            data[key] = json.loads(value)
        except ValueError:
            data[key] = value.strip().strip("'\"")
    return data


def strip_attribution(body: str) -> Tuple[str, str]:
    """
    Remove the trailing attribution notice from a document body.

    Returns:
        (body_without_notice, notice). notice is empty when none was found.
    """
    rules = [m.start() for m in re.finditer(r"^---\s*$", body, re.MULTILINE)]
    for start in reversed(rules):
        tail = body[start:]
        if any(marker in tail.lower() for marker in ATTRIBUTION_MARKERS):
            return body[:start].rstrip(), tail.strip()
    return body.rstrip(), ""


def _to_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _to_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return default


def parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _to_keywords(value: Any) -> List[str]:
    if isinstance(value, str):
        return [k.strip() for k in value.split(",") if k.strip()]
    if isinstance(value, list):
        return [str(k).strip() for k in value if str(k).strip()]
    return []


def parse_document(text: str, path: Optional[Path] = None,
                   platform_hint: Optional[str] = None) -> HIGDocument:
    """
    Parse the contents of a HIG markdown file.

    Args:
        text: Raw file contents
        path: Where the file was read from (used for defaults)
        platform_hint: Platform implied by the file's directory

    Returns:
        HIGDocument with defaults filled in for missing metadata
    """
    meta, raw_body = split_front_matter(text)
    body, attribution = strip_attribution(raw_body)

    filename = path.name if path else ""
    title = str(meta.get("title") or "").strip()
    if not title:
        heading = re.search(r"^#\s+(.+)$", body, re.MULTILINE)
        title = heading.group(1).strip() if heading else Path(filename).stem.replace("-", " ").title()

    raw_platform = meta.get("platform") or platform_hint or "universal"
    platform = Config.normalize_platform(raw_platform) or str(raw_platform)

    category = str(meta.get("category") or Config.DEFAULT_CATEGORY).strip()

    doc_id = str(meta.get("id") or "").strip()
    if not doc_id:
        base = slugify(title) or Path(filename).stem
        doc_id = f"{base}-{platform.lower()}"

    return HIGDocument(
        title=title,
        platform=platform,
        category=category,
        url=str(meta.get("url") or f"{Config.HIG_BASE_URL}/{slugify(title)}"),
        id=doc_id,
        body=body,
        last_updated=parse_timestamp(meta.get("lastUpdated")),
        extraction_method=str(meta.get("extractionMethod") or "unknown"),
        quality_score=_to_float(meta.get("qualityScore"), 0.8),
        confidence=_to_float(meta.get("confidence"), 1.0),
        content_length=_to_int(meta.get("contentLength"), len(body)),
        has_code_examples=_to_bool(meta.get("hasCodeExamples"), bool(CODE_FENCE.search(body))),
        has_images=_to_bool(meta.get("hasImages"), bool(IMAGE_REF.search(body))),
        keywords=_to_keywords(meta.get("keywords")),
        attribution=attribution,
        path=str(path) if path else None,
        filename=filename,
        extra={k: v for k, v in meta.items() if k not in KNOWN_FIELDS},
    )
