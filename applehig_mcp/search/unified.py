"""
Unified Search Module
=====================

Runs guideline search and API symbol search for one query and merges them.

Design and technical results are linked when their titles overlap, when a
concept mapping connects them (the "Buttons" page and UIButton), or when both
contain the same query term. Linked results get a ranking boost, and the
strongest links also appear as combined results.
"""

from typing import Dict, List, Optional

from ..config import logger
from ..docs.apple_docs import AppleDocsAPI, apple_docs, symbol_query
from ..docs.symbol_mappings import concepts_in, symbols_for
from .guidelines import GuidelinesSearch, guidelines_search

LINK_THRESHOLD = 0.4
COMBINE_THRESHOLD = 0.7
LINK_BOOST = 0.2
MAX_LINKS = 10


def link_relevance(design: Dict, technical: Dict, query_terms: List[str]) -> float:
    """Score how closely a guideline result relates to an API symbol result."""
    design_title = design["title"].lower()
    symbol_title = technical["title"].lower()
    relevance = 0.0

    if design_title in symbol_title or symbol_title in design_title:
        relevance += 0.8

    for concept in concepts_in(design["title"]):
        if any(s.symbol.lower() in symbol_title for s in symbols_for(concept)):
            relevance += 0.6
            break

    relevance += 0.3 * sum(1 for term in query_terms if term in design_title and term in symbol_title)

    platforms = [p.lower() for p in technical.get("platforms", [])]
    if design.get("platform") and any(design["platform"].lower() in p for p in platforms):
        relevance += 0.2

    return round(relevance, 2)


class UnifiedSearch:
    """Guideline plus API symbol search with cross-referenced ranking."""

    def __init__(self, guidelines: Optional[GuidelinesSearch] = None, docs: Optional[AppleDocsAPI] = None):
        self.guidelines = guidelines or guidelines_search
        self.docs = docs or apple_docs

    def link(self, design_results: List[Dict], technical_results: List[Dict], query: str) -> List[Dict]:
        query_terms = [t for t in query.lower().split() if len(t) > 2]
        links = []
        for design in design_results:
            for technical in technical_results:
                relevance = link_relevance(design, technical, query_terms)
                if relevance >= LINK_THRESHOLD:
                    links.append({
                        "designSection": design["title"],
                        "technicalSymbol": technical["title"],
                        "relevance": relevance,
                    })
        links.sort(key=lambda link: -link["relevance"])
        return links[:MAX_LINKS]

    def search(self, query: str, platform: Optional[str] = None, category: Optional[str] = None,
               include_design: bool = True, include_technical: bool = True, limit: int = 20,
               design_limit: int = 10, technical_limit: int = 10) -> Dict:
        """
        Search guidelines and API symbols together.

        Returns:
            Dictionary with results (merged and ranked), designResults,
            technicalResults, sources and crossReferences
        """
        sources = []
        design_results: List[Dict] = []
        technical_results: List[Dict] = []

        if include_design:
            sources.append("design-guidelines")
            design_results = self.guidelines.search(query, platform, category, design_limit)

        if include_technical:
            sources.append("technical-documentation")
            technical_platform = platform if platform != "universal" else None
            technical_results = self.docs.search_symbols(
                symbol_query(query), platform=technical_platform, limit=technical_limit
            )
            if not technical_results:
                logger.info(f"No API symbols matched '{query}'")

        links = self.link(design_results, technical_results, query)
        return {
            "results": self.merge(design_results, technical_results, links, limit),
            "designResults": design_results,
            "technicalResults": technical_results,
            "sources": sources,
            "crossReferences": links,
        }

    def merge(self, design_results: List[Dict], technical_results: List[Dict],
              links: List[Dict], limit: int) -> List[Dict]:
        linked_sections = {link["designSection"] for link in links}
        linked_symbols = {link["technicalSymbol"] for link in links}
        merged = []

        for result in design_results:
            boost = LINK_BOOST if result["title"] in linked_sections else 0.0
            merged.append({
                "id": f"design-{result['id']}",
                "title": result["title"],
                "type": "design",
                "url": result["url"],
                "relevanceScore": round(result["relevanceScore"] + boost, 4),
                "snippet": result.get("snippet", ""),
                "platform": result["platform"],
                "category": result["category"],
            })

        for result in technical_results:
            boost = LINK_BOOST if result["title"] in linked_symbols else 0.0
            merged.append({
                "id": f"technical-{result['path']}",
                "title": result["title"],
                "type": "technical",
                "url": result["url"],
                "relevanceScore": round(result["relevanceScore"] + boost, 4),
                "snippet": result["description"],
                "framework": result["framework"],
                "symbolKind": result["symbolKind"],
                "platforms": result["platforms"],
            })

        for link in links[:3]:
            if link["relevance"] < COMBINE_THRESHOLD:
                continue
            design = next(r for r in design_results if r["title"] == link["designSection"])
            technical = next(r for r in technical_results if r["title"] == link["technicalSymbol"])
            merged.append({
                "id": f"combined-{design['id']}-{technical['path']}",
                "title": f"{design['title']} + {technical['title']}",
                "type": "combined",
                "url": design["url"],
                "relevanceScore": round((design["relevanceScore"] + technical["relevanceScore"]) / 2 + 0.3, 4),
                "snippet": f"Design: {design.get('snippet', '')} | Implementation: {technical['description']}",
                "platform": design["platform"],
                "framework": technical["framework"],
            })

        merged.sort(key=lambda r: -r["relevanceScore"])
        return merged[:limit]


unified_search = UnifiedSearch()
