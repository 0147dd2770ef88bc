"""
HIG Content Library
===================

Manages access to the local corpus of Human Interface Guidelines pages. The
corpus is a directory of markdown files produced by an external extraction
process:

    content/
        *.md                     universal topics
        universal/*.md           universal topics (alternate layout)
        platforms/<platform>/    platform-specific topics
        metadata/                derived index files (see indexer.py)

Architecture:
- All documents are loaded into memory at startup for speed
- Documents are keyed by their front matter id
- Search index entries are built once per load and reused by every search
"""

from collections import Counter
from pathlib import Path
from typing import List, Dict, Optional

from ..config import Config, logger
from .front_matter import HIGDocument, parse_document, slugify
from .indexer import SearchIndexBuilder


class HIGContentLibrary:
    """
    Load HIG documents from the content directory and keep them in memory.

    Attributes:
        content_dir: Root of the corpus, or None when no corpus was found
        documents: Parsed documents indexed by id
        entries: Search index entries indexed by id
    """

    def __init__(self, content_dir: Optional[Path] = None):
        """Initialize library and load all documents into memory."""
        self.content_dir: Optional[Path] = None
        self.documents: Dict[str, HIGDocument] = {}
        self.entries: Dict[str, Dict] = {}
        self.cross_references: List[Dict] = []
        self.indexer = SearchIndexBuilder()
        self.initialize(content_dir)

    def initialize(self, content_dir: Optional[Path] = None):
        """
        Load (or reload) every document in the content directory.

        A missing content directory is logged and leaves the library empty.
        """
        self.documents = {}
        self.entries = {}
        self.cross_references = []

        try:
            self.content_dir = Path(content_dir) if content_dir else Config.get_content_path()
        except ValueError as e:
            logger.error(str(e))
            self.content_dir = None
            return

        if not self.content_dir.is_dir():
            logger.error(f"Content directory does not exist: {self.content_dir}")
            return

        for md_file, platform_hint in self._discover_files():
            try:
                doc = parse_document(md_file.read_text(encoding="utf-8"), md_file, platform_hint)
            except (OSError, ValueError) as e:
                logger.error(f"Error loading {md_file}: {e}")
                continue

            if doc.id in self.documents:
                logger.warning(f"Duplicate document id '{doc.id}' in {md_file}, keeping first")
                continue
            self.documents[doc.id] = doc

        docs = list(self.documents.values())
        self.entries = {entry["id"]: entry for entry in self.indexer.build_index(docs)}
        self.cross_references = self.indexer.build_cross_references(docs)

        logger.info(f"Indexed {len(self.documents)} HIG documents from {self.content_dir}")

    def _discover_files(self):
        """Yield (path, platform_hint) for every markdown file in the corpus layout."""
        root = self.content_dir
        for md_file in sorted(root.glob("*.md")):
            yield md_file, "universal"

        universal_dir = root / Config.UNIVERSAL_DIR
        if universal_dir.is_dir():
            for md_file in sorted(universal_dir.glob("*.md")):
                yield md_file, "universal"

        platforms_dir = root / Config.PLATFORMS_DIR
        if platforms_dir.is_dir():
            for platform_dir in sorted(p for p in platforms_dir.iterdir() if p.is_dir()):
                hint = Config.normalize_platform(platform_dir.name) or platform_dir.name
                for md_file in sorted(platform_dir.glob("*.md")):
                    yield md_file, hint

    @property
    def is_loaded(self) -> bool:
        return bool(self.documents)

    def get_document(self, name: str, platform: Optional[str] = None) -> Optional[HIGDocument]:
        """
        Find a document by id, filename stem, or title.

        Args:
            name: Document id (e.g., 'buttons-ios'), slug ('buttons') or title ('Buttons')
            platform: Optional platform; its document wins over the universal one

        Returns:
            The matching document or None
        """
        if name in self.documents:
            doc = self.documents[name]
            if not platform or doc.platform in (platform, "universal"):
                return doc

        wanted = name.strip().lower()
        wanted_slug = slugify(name)
        matches = [
            doc for doc in self.documents.values()
            if doc.id.lower() == wanted or doc.slug == wanted_slug or doc.title.lower() == wanted
        ]
        if platform:
            matches = [d for d in matches if d.platform in (platform, "universal")]
        if not matches:
            return None

        # Platform-specific pages first, universal last
        matches.sort(key=lambda d: d.platform == "universal")
        return matches[0]

    def list_documents(self, platform: Optional[str] = None, category: Optional[str] = None,
                       filter_str: Optional[str] = None) -> List[Dict]:
        """
        List documents with their metadata.

        Args:
            platform: Only this platform's documents
            category: Only documents in this category
            filter_str: Substring to match against titles and ids

        Returns:
            Document summaries sorted by title
        """
        documents = []
        for doc in self.documents.values():
            if platform and doc.platform != platform:
                continue
            if category and doc.category != category:
                continue
            if filter_str and filter_str.lower() not in doc.title.lower() \
                    and filter_str.lower() not in doc.id.lower():
                continue
            documents.append({
                "id": doc.id,
                "title": doc.title,
                "platform": doc.platform,
                "category": doc.category,
                "url": doc.url,
                "keywords": doc.keywords[:10],
                "quality_score": doc.quality_score,
                "content_length": doc.content_length,
            })

        documents.sort(key=lambda x: (x["title"].lower(), x["platform"]))
        return documents

    def documents_for(self, platform: str, category: Optional[str] = None) -> List[HIGDocument]:
        """Documents for one platform (and optionally one category), sorted by title."""
        docs = [
            d for d in self.documents.values()
            if d.platform == platform and (category is None or d.category == category)
        ]
        return sorted(docs, key=lambda d: d.title.lower())

    def platforms(self) -> Dict[str, int]:
        """Document counts per platform."""
        return dict(Counter(d.platform for d in self.documents.values()))

    def categories(self, platform: Optional[str] = None) -> Dict[str, int]:
        """Document counts per category, optionally for one platform."""
        return dict(Counter(
            d.category for d in self.documents.values()
            if platform is None or d.platform == platform
        ))

    def index_entries(self) -> List[Dict]:
        return list(self.entries.values())

    def related_documents(self, doc_id: str, limit: int = 5) -> List[Dict]:
        """Cross-referenced documents for doc_id, best first."""
        related: Dict[str, float] = {}
        for ref in self.cross_references:
            if ref["fromSection"] == doc_id:
                other = ref["toSection"]
            elif ref["toSection"] == doc_id:
                other = ref["fromSection"]
            else:
                continue
            related[other] = max(related.get(other, 0.0), ref["relevanceScore"])

        ranked = sorted(related.items(), key=lambda x: x[1], reverse=True)[:limit]
        return [
            {
                "id": other,
                "title": self.documents[other].title,
                "platform": self.documents[other].platform,
                "relevance_score": round(score, 3),
            }
            for other, score in ranked if other in self.documents
        ]

    def stats(self) -> Dict:
        total_size = sum(d.content_length for d in self.documents.values())
        return {
            "content_dir": str(self.content_dir) if self.content_dir else None,
            "total_documents": len(self.documents),
            "platforms": self.platforms(),
            "categories": self.categories(),
            "total_size": f"{round(total_size / 1024)}KB",
            "cross_references": len(self.cross_references),
        }


# Module-level instance
hig_content = HIGContentLibrary()
