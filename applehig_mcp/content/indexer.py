"""
Search Index Builder
====================

Derives search metadata from parsed HIG documents:
- Search index entries (keywords, snippet, quality metrics, content flags)
- Cross references between related sections
- Generation info describing the corpus as a whole

The same entries back the in-memory search at runtime and are written to
`content/metadata/` by the `rebuild-index` command.
"""

import json
import re
from datetime import datetime, timezone
from itertools import combinations
from pathlib import Path
from typing import Dict, List

from ..config import Config, logger
from .front_matter import HIGDocument

IMPORTANT_TERMS = [
    "liquid glass", "glass", "liquid", "material", "materials",
    "ios", "macos", "watchos", "tvos", "visionos", "universal",
    "apple", "human interface guidelines", "hig", "design",
    "button", "buttons", "navigation", "accessibility", "layout",
    "color", "typography", "interface", "user experience",
    "complications", "watch face", "digital crown",
    "spatial", "immersive", "ornaments", "eyes",
]

APPLE_TERMS = [
    "apple", "ios", "macos", "watchos", "tvos", "visionos",
    "human interface guidelines", "design", "interface",
    "user experience", "accessibility", "guideline",
]

GUIDELINE_WORDS = ["should", "must", "avoid", "ensure", "consider", "guideline", "best practice"]
SPEC_WORDS = ["size", "dimension", "pixel", "point", "pt", "px", "minimum", "maximum"]

HEADING = re.compile(r"^#+\s*(.+)$", re.MULTILINE)
BOLD = re.compile(r"\*\*(.*?)\*\*")


class SearchIndexBuilder:
    """Build search index entries and cross references for HIG documents."""

    VERSION = "2.0-topic-first"

    def build_entry(self, doc: HIGDocument) -> Dict:
        """
        Build the search index entry for a single document.

        Args:
            doc: Parsed document

        Returns:
            Dictionary in the search-index.json entry format
        """
        body = doc.body
        body_lower = body.lower()
        headings = HEADING.findall(body)

        return {
            "id": doc.id,
            "title": doc.title,
            "platform": doc.platform,
            "category": doc.category,
            "url": doc.url,
            "filename": doc.filename or f"{doc.slug}.md",
            "keywords": self.extract_keywords(doc),
            "snippet": self.generate_snippet(body, doc.title),
            "quality": {
                "score": doc.quality_score,
                "length": doc.content_length,
                "structureScore": min(len(headings) / 5, 1.0),
                "appleTermsScore": self.apple_terms_score(body),
                "codeExamplesCount": body.count("```") // 2,
                "imageReferencesCount": len(re.findall(r"!\[.*?\]", body)),
                "headingCount": len(headings),
                "isFallbackContent": doc.is_fallback,
                "extractionMethod": doc.extraction_method,
                "confidence": doc.confidence,
            },
            "lastUpdated": doc.last_updated.isoformat() if doc.last_updated else None,
            "hasStructuredContent": "##" in body and ("###" in body or "####" in body),
            "hasGuidelines": any(word in body_lower for word in GUIDELINE_WORDS),
            "hasExamples": "```" in body or "example" in body_lower,
            "hasSpecifications": any(word in body_lower for word in SPEC_WORDS),
            "conceptCount": len(self.extract_concepts(body)),
        }

    def build_index(self, docs: List[HIGDocument]) -> List[Dict]:
        return [self.build_entry(doc) for doc in docs]

    def extract_keywords(self, doc: HIGDocument) -> List[str]:
        """Front matter keywords, title words, known HIG terms, platform, category and filename parts."""
        keywords: Dict[str, None] = {}

        def add(word: str):
            word = word.strip().lower()
            if word:
                keywords.setdefault(word, None)

        for keyword in doc.keywords:
            add(keyword)

        for word in doc.title.lower().split():
            if len(word) > 2:
                add(word)

        body_lower = doc.body.lower()
        for term in IMPORTANT_TERMS:
            if term in body_lower:
                add(term)

        add(doc.platform)
        add(doc.category)

        for part in doc.slug.split("-"):
            if len(part) > 2:
                add(part)

        return list(keywords)

    def generate_snippet(self, body: str, title: str) -> str:
        """First meaningful paragraph, cleaned of markdown markers."""
        paragraphs = [p for p in re.split(r"\n\s*\n", body) if p.strip()]
        for paragraph in paragraphs:
            cleaned = re.sub(r"^#+\s*", "", paragraph.strip()).replace("**", "").strip()
            if len(cleaned) > 50 and not paragraph.strip().startswith("#"):
                if len(cleaned) > Config.SNIPPET_CHARS:
                    return cleaned[:Config.SNIPPET_CHARS] + "..."
                return cleaned
        return f"{title} - Apple Human Interface Guidelines content."

    def apple_terms_score(self, body: str) -> float:
        body_lower = body.lower()
        found = [term for term in APPLE_TERMS if term in body_lower]
        return min(len(found) / len(APPLE_TERMS), 1.0)

    def extract_concepts(self, body: str) -> List[str]:
        """Headings plus short bold phrases."""
        concepts: Dict[str, None] = {}
        for heading in HEADING.findall(body):
            if heading.strip():
                concepts.setdefault(heading.strip(), None)
        for bold in BOLD.findall(body):
            text = bold.strip()
            if 2 < len(text) < 50:
                concepts.setdefault(text, None)
        return list(concepts)

    # ------------------------------------------------------------------
    # Cross references
    # ------------------------------------------------------------------

    def relevance_between(self, a: HIGDocument, b: HIGDocument) -> float:
        score = 0.0
        if a.platform == b.platform:
            score += 0.3
        if a.category == b.category:
            score += 0.5

        words_a = a.title.lower().split()
        words_b = b.title.lower().split()
        if words_a and words_b:
            common = len([w for w in words_a if w in words_b])
            score += (common / max(len(words_a), len(words_b))) * 0.2

        return min(1.0, score)

    def _topically_similar(self, a: HIGDocument, b: HIGDocument) -> bool:
        words_a = [w for w in a.title.lower().split() if len(w) > 3]
        words_b = [w for w in b.title.lower().split() if len(w) > 3]
        return any(w in words_b for w in words_a)

    def build_cross_references(self, docs: List[HIGDocument]) -> List[Dict]:
        """
        Link related documents.

        - Universal topics link to platform topics that share a significant title word
        - Documents in the same category link when their relevance exceeds 0.3
        """
        references = []

        universal = [d for d in docs if d.platform == "universal"]
        platform_docs = [d for d in docs if d.platform != "universal"]
        for u in universal:
            for p in platform_docs:
                if self._topically_similar(u, p):
                    references.append(self._reference(u, p, 0.6))

        by_category: Dict[str, List[HIGDocument]] = {}
        for doc in docs:
            by_category.setdefault(doc.category, []).append(doc)

        for members in by_category.values():
            for a, b in combinations(members, 2):
                score = self.relevance_between(a, b)
                if score > 0.3:
                    references.append(self._reference(a, b, score))

        return references

    def _reference(self, a: HIGDocument, b: HIGDocument, score: float) -> Dict:
        return {
            "fromSection": a.id,
            "toSection": b.id,
            "relationshipType": "related",
            "relevanceScore": round(score, 3),
        }

    # ------------------------------------------------------------------
    # Metadata files
    # ------------------------------------------------------------------

    def build_generation_info(self, docs: List[HIGDocument]) -> Dict:
        successful = len([d for d in docs if not d.is_fallback])
        average = sum(d.quality_score for d in docs) / len(docs) if docs else 0.0

        return {
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "totalSections": len(docs),
            "successfulExtractions": successful,
            "averageQuality": round(average, 2),
            "platforms": sorted({d.platform for d in docs}),
            "categories": sorted({d.category for d in docs}),
            "version": self.VERSION,
        }

    def write_metadata(self, docs: List[HIGDocument], content_dir: Path) -> Dict[str, Path]:
        """
        Write search-index.json, cross-references.json and generation-info.json.

        Returns:
            Mapping of file kind to written path
        """
        metadata_dir = Config.metadata_path(content_dir)
        metadata_dir.mkdir(parents=True, exist_ok=True)

        entries = self.build_index(docs)
        info = self.build_generation_info(docs)
        index = {
            "metadata": {
                "version": self.VERSION,
                "totalSections": len(entries),
                "lastUpdated": info["generatedAt"],
                "indexType": "topic-first-keyword",
            },
            "keywordIndex": {entry["id"]: entry for entry in entries},
        }

        outputs = {
            "search_index": (metadata_dir / Config.SEARCH_INDEX_FILE, index),
            "cross_references": (metadata_dir / Config.CROSS_REFERENCES_FILE, self.build_cross_references(docs)),
            "generation_info": (metadata_dir / Config.GENERATION_INFO_FILE, info),
        }

        written = {}
        for kind, (path, payload) in outputs.items():
            path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            written[kind] = path
            logger.info(f"Wrote {path}")

        return written
