"""
Apple HIG MCP Server
====================

A Model Context Protocol (MCP) server giving AI assistants searchable access
to Apple's Human Interface Guidelines from a local content directory.

Architecture Overview:
- tools.py: MCP tool/resource definitions and input validation (this file)
- content/: corpus parsing, loading and search index building
- search/: relevance and wildcard search
- design/: component specs, design tokens, accessibility requirements
- resources/: hig:// resource rendering
- docs/: Apple Developer documentation API access and symbol mappings
- updates/: content freshness checks
- config.py: central configuration

Each module handles its own caching, error handling, and business logic,
while this file focuses on MCP interface definition and input sanitization.
"""

from typing import Dict, List, Optional
from fastmcp import FastMCP
from .config import Config

from .content.library import hig_content                 # Local HIG corpus
from .search.guidelines import guidelines_search         # Relevance search
from .search.wildcard import wildcard_search             # * and ? pattern search
from .design.components import design_components, TOKEN_TYPES  # Component-level guidance
from .resources.hig_resources import hig_resources       # hig:// resources
from .docs.apple_docs import apple_docs, design_terms_for  # Apple Developer website API access
from .docs.symbol_mappings import (                      # Guideline to API symbol mapping
    cross_reference_mappings, normalize_concept, related_concepts, symbols_for,
)
from .search.unified import unified_search               # Guidelines plus API symbols
from .updates.freshness import freshness_checker, SOURCES  # Content freshness
from .suggestions.suggestions import suggestion_engine   # Centralized suggestion system

# Initialize the FastMCP server with configuration
mcp = FastMCP(Config.SERVER_NAME)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def add_suggestions(results: Dict, tool_name: str, query: str) -> Dict:
    """Add suggestions to results if applicable."""
    suggestions = suggestion_engine.get_suggestions({
        "current_tool": tool_name,
        "query": query,
        "results_count": results.get("total_results", results.get("total_found", 1))
    })
    if suggestions:
        results["suggestions"] = suggestions
    return results


def validate_query(query: Optional[str]) -> Optional[Dict]:
    if query and len(query) > Config.MAX_QUERY_LENGTH:
        return {
            "error": "Query too long",
            "message": f"Maximum query length is {Config.MAX_QUERY_LENGTH} characters"
        }
    return None


def validate_platform(platform: Optional[str], required: bool = False) -> Optional[Dict]:
    if not platform:
        if required:
            return {"error": "Missing platform", "message": f"Platform must be one of: {', '.join(Config.PLATFORMS)}"}
        return None
    if not Config.normalize_platform(platform):
        return {
            "error": "Invalid platform",
            "message": f"Platform must be one of: {', '.join(Config.PLATFORMS)}"
        }
    return None


def validate_category(category: Optional[str]) -> Optional[Dict]:
    if category and not Config.normalize_category(category):
        return {
            "error": "Invalid category",
            "message": f"Category must be one of: {', '.join(Config.CATEGORIES)}"
        }
    return None


def validate_limit(limit: int, maximum: int) -> Optional[Dict]:
    if not isinstance(limit, int) or limit < 1 or limit > maximum:
        return {"error": "Invalid limit", "message": f"Limit must be between 1 and {maximum}"}
    return None


def validate_component_name(name: Optional[str]) -> Optional[Dict]:
    if not name or not name.strip():
        return {"error": "Empty component name", "message": "Please provide a component name (e.g., 'Button')"}
    if len(name) > Config.MAX_COMPONENT_NAME_LENGTH:
        return {
            "error": "Component name too long",
            "message": f"Maximum component name length is {Config.MAX_COMPONENT_NAME_LENGTH} characters"
        }
    return None


def validate_document_id(doc_id: Optional[str]) -> Optional[Dict]:
    # Ids are plain slugs; separators or '..' would only serve path traversal
    if not doc_id or not doc_id.strip() or ".." in doc_id or "/" in doc_id or "\\" in doc_id:
        return {
            "error": "Invalid guideline id",
            "message": "Use the guideline id only (e.g., 'buttons-ios'), without path separators"
        }
    if len(doc_id) > 255:
        return {"error": "Invalid guideline id", "message": "Guideline id too long (max 255 characters)"}
    return None


def first_error(*errors: Optional[Dict]) -> Optional[Dict]:
    for error in errors:
        if error:
            return error
    return None


# ============================================================================
# SEARCH TOOLS
# ============================================================================

@mcp.tool()
def search_guidelines(query: str, platform: Optional[str] = None,
                      category: Optional[str] = None, limit: int = 10) -> Dict:
    """
    Search Apple's Human Interface Guidelines by topic or keyword.

    Results are ranked by relevance across titles, keywords (with synonyms such
    as "tab" -> "tab bar"), snippets and content quality. Universal guidance is
    included with every platform filter.

    Example queries:
    - "buttons" - Button design guidelines
    - "navigation" - Navigation patterns
    - "dark mode" - Dark Mode guidance
    - "progress" - Progress indicators and loading states

    Args:
        query: Design topic or keyword (max 100 characters)
        platform: Optional platform filter (iOS, macOS, watchOS, tvOS, visionOS, universal)
        category: Optional category filter (e.g., 'navigation', 'visual-design')
        limit: Maximum number of results, 1-50 (default: 10)

    Returns:
        Dictionary containing:
        - query, platform, category: the search parameters
        - total_results: Number of results returned
        - results: List of results with id, title, url, platform, category,
          relevanceScore, snippet, type and highlights
    """
    error = first_error(validate_query(query), validate_platform(platform),
                        validate_category(category), validate_limit(limit, Config.MAX_SEARCH_LIMIT))
    if error:
        return error

    platform = Config.normalize_platform(platform)
    category = Config.normalize_category(category)
    query = (query or "").strip()

    results = guidelines_search.search(query, platform, category, limit) if query else []
    response = {
        "query": query,
        "platform": platform,
        "category": category,
        "total_results": len(results),
        "results": results
    }
    return add_suggestions(response, "search_guidelines", query)


@mcp.tool()
def search_wildcard(pattern: str, platform: Optional[str] = None,
                    category: Optional[str] = None, limit: int = 20) -> Dict:
    """
    Search guideline titles and keywords with wildcard patterns.

    `*` matches any run of characters and `?` matches a single character.
    Patterns are case-insensitive and must match the whole title or keyword;
    a pattern without wildcards matches as a substring.

    Example patterns:
    - "*button*" - Anything mentioning buttons
    - "Tab*" - Titles starting with "Tab"
    - "?avigation*" - Navigation, navigation bars, ...

    Args:
        pattern: Wildcard pattern (max 100 characters)
        platform: Optional platform filter
        category: Optional category filter
        limit: Maximum number of results, 1-100 (default: 20)

    Returns:
        Dictionary with pattern, isWildcard, totalMatches, results (with
        matchedField and matchedSegments) and example patterns when few match
    """
    if not pattern or not pattern.strip():
        return {"error": "Empty pattern", "message": "Please provide a search pattern (e.g., 'Tab*')"}

    error = first_error(validate_query(pattern), validate_platform(platform),
                        validate_category(category), validate_limit(limit, Config.MAX_WILDCARD_LIMIT))
    if error:
        return error

    results = wildcard_search.search(
        pattern.strip(), Config.normalize_platform(platform), Config.normalize_category(category), limit
    )
    results["total_results"] = len(results["results"])
    return add_suggestions(results, "search_wildcard", pattern)


# ============================================================================
# GUIDELINE ACCESS TOOLS
# ============================================================================

@mcp.tool()
def get_guideline(id: str, platform: Optional[str] = None) -> Dict:
    """
    Retrieve the full content of a guideline.

    Args:
        id: Guideline id (e.g., 'buttons-ios'), slug ('buttons') or title ('Buttons')
        platform: Optional platform; its page wins over the universal one

    Returns:
        Dictionary with id, title, platform, category, url, metadata, content,
        attribution and related guidelines
    """
    error = first_error(validate_document_id(id), validate_platform(platform))
    if error:
        return error

    doc = hig_content.get_document(id.strip(), Config.normalize_platform(platform))
    if not doc:
        return {
            "error": "Guideline not found",
            "message": f"No guideline matches '{id}'",
            "suggestion": "Use search_guidelines or list_guidelines to find valid ids"
        }

    return {
        "id": doc.id,
        "title": doc.title,
        "platform": doc.platform,
        "category": doc.category,
        "url": doc.url,
        "metadata": doc.metadata(),
        "content": doc.body,
        "attribution": doc.attribution,
        "related": hig_content.related_documents(doc.id)
    }


@mcp.tool()
def list_guidelines(platform: Optional[str] = None, category: Optional[str] = None,
                    filter: Optional[str] = None) -> List[Dict]:
    """
    List available guidelines.

    Args:
        platform: Optional platform filter
        category: Optional category filter
        filter: Optional string to match against titles and ids

    Returns:
        List of guidelines with id, title, platform, category, url, keywords,
        quality score and content length
    """
    error = first_error(validate_platform(platform), validate_category(category))
    if error:
        return [error]
    return hig_content.list_documents(
        Config.normalize_platform(platform), Config.normalize_category(category), filter
    )


@mcp.tool()
def list_platforms() -> List[Dict]:
    """
    List all Apple platforms with their Human Interface Guidelines links.

    Returns:
        List of platforms with URLs and the number of local guidelines
    """
    return design_components.list_platforms()


@mcp.tool()
def list_categories() -> List[Dict]:
    """
    List guideline categories.

    Returns:
        List of categories with slug, display name and number of guidelines
    """
    counts = hig_content.categories()
    return [
        {"category": category, "name": Config.format_category_name(category), "documents": counts.get(category, 0)}
        for category in Config.CATEGORIES
    ]


@mcp.tool()
def list_guideline_resources() -> List[Dict]:
    """
    List the hig:// resources this server provides.

    Returns:
        List of resources with uri, name, description and mimeType
    """
    return hig_resources.list_resources()


# ============================================================================
# COMPONENT TOOLS
# ============================================================================

@mcp.tool()
def get_component_spec(component_name: str, platform: Optional[str] = None) -> Dict:
    """
    Get the design specification for a UI component.

    Guidelines, examples and measurements come from the matching HIG page;
    built-in specs cover buttons, navigation bars, tab bars and text fields.

    Args:
        component_name: Component name (e.g., 'Button', 'Navigation Bar'), max 50 characters
        platform: Optional platform filter

    Returns:
        Dictionary with component (or None), relatedComponents, platforms and lastUpdated
    """
    error = first_error(validate_component_name(component_name), validate_platform(platform))
    if error:
        return error

    result = design_components.get_component_spec(component_name, Config.normalize_platform(platform))
    result["total_results"] = 1 if result["component"] else 0
    return add_suggestions(result, "get_component_spec", component_name)


@mcp.tool()
def get_design_tokens(component: str, platform: str, token_type: str = "all") -> Dict:
    """
    Get design tokens for a component.

    Args:
        component: Component name (e.g., 'button', 'navigation bar', 'tab bar')
        platform: Target platform (colors default to iOS values)
        token_type: One of all, colors, spacing, typography, dimensions

    Returns:
        Dictionary with component, platform and tokens grouped by type
    """
    error = first_error(validate_component_name(component), validate_platform(platform, required=True))
    if error:
        return error
    if token_type not in TOKEN_TYPES:
        return {"error": "Invalid token type", "message": f"Token type must be one of: {', '.join(TOKEN_TYPES)}"}

    return design_components.get_design_tokens(component.strip(), Config.normalize_platform(platform), token_type)


@mcp.tool()
def get_accessibility_requirements(component: str, platform: str) -> Dict:
    """
    Get accessibility requirements for a component.

    Args:
        component: Component name (e.g., 'button')
        platform: Target platform

    Returns:
        Dictionary with minimum touch target, contrast ratio, VoiceOver and
        keyboard requirements, WCAG level and additional guidelines
    """
    error = first_error(validate_component_name(component), validate_platform(platform, required=True))
    if error:
        return error
    return design_components.get_accessibility_requirements(component.strip(), Config.normalize_platform(platform))


# ============================================================================
# TECHNICAL DOCUMENTATION TOOLS
# ============================================================================

@mcp.tool()
def get_technical_documentation(path: str, include_design_guidance: bool = False) -> Dict:
    """
    Fetch API documentation for an Apple framework or symbol.

    Example paths:
    - "SwiftUI/Button"
    - "documentation/UIKit/UIButton"
    - "https://developer.apple.com/documentation/swiftui/navigationstack"

    Args:
        path: Documentation path or developer.apple.com/documentation URL
        include_design_guidance: Also return related HIG guidelines

    Returns:
        Dictionary with title, abstract, declaration, discussion, parameters,
        returns and url, plus designGuidance when requested.

        Or error dictionary if fetch fails
    """
    if not path or not path.strip():
        return {
            "error": "Empty path",
            "message": "Please provide a documentation path",
            "suggestion": "Example: SwiftUI/Button"
        }
    if len(path) > 500:
        return {"error": "Path too long", "message": "Maximum path length is 500 characters"}

    documentation = apple_docs.fetch_documentation(path.strip())
    if "error" in documentation or not include_design_guidance:
        return documentation

    guidance = []
    for terms in apple_docs.related_terms(documentation):
        for result in guidelines_search.search(terms, limit=3):
            if not any(g["id"] == result["id"] for g in guidance):
                guidance.append(result)
    documentation["designGuidance"] = guidance[:3]
    return documentation


@mcp.tool()
def list_technologies(category: str = "all", platform: Optional[str] = None,
                      include_design_mapping: bool = False) -> Dict:
    """
    List Apple frameworks and technologies from the developer documentation.

    Args:
        category: 'framework', 'symbol' or 'all' (default)
        platform: Optional platform; fetches each framework page to filter
        include_design_mapping: Add the titles of related HIG guidelines

    Returns:
        Dictionary with technologies (name, description, path, url, kind,
        role), total and success; or error dictionary
    """
    if category not in Config.TECHNOLOGY_CATEGORIES:
        return {
            "error": "Invalid category",
            "message": f"Category must be one of: {', '.join(Config.TECHNOLOGY_CATEGORIES)}"
        }
    error = validate_platform(platform)
    if error:
        return error

    platform = Config.normalize_platform(platform)
    technologies = apple_docs.list_technologies(category, platform if platform != "universal" else None)
    if technologies is None:
        return {
            "error": "Failed to fetch",
            "url": Config.TECHNOLOGIES_JSON_URL,
            "suggestion": "The Apple Developer documentation API is unreachable; try again later"
        }

    if include_design_mapping:
        for tech in technologies:
            terms = design_terms_for(tech["name"])
            tech["relatedHIGSections"] = [r["title"] for r in guidelines_search.search(terms, limit=2)]

    return {"category": category, "platform": platform, "total": len(technologies), "technologies": technologies}


@mcp.tool()
def search_technical_documentation(query: str, framework: Optional[str] = None,
                                   symbol_type: Optional[str] = None,
                                   platform: Optional[str] = None, limit: int = 20) -> Dict:
    """
    Search Apple API symbols by name.

    Without a framework, the first frameworks on the technologies page are
    searched. `*` and `?` work as in search_wildcard; a plain query matches
    as a substring.

    Example queries:
    - "Button" - SwiftUI Button, UIButton, ...
    - "UI*Controller" - UIKit view controllers

    Args:
        query: Symbol name or wildcard pattern (max 100 characters)
        framework: Optional framework to search (e.g., 'SwiftUI')
        symbol_type: Optional symbol kind (e.g., 'class', 'struct', 'protocol')
        platform: Optional platform filter
        limit: Maximum number of results, 1-100 (default: 20)

    Returns:
        Dictionary with query, total_results and results (title, description,
        framework, symbolKind, platforms, url, relevanceScore)
    """
    error = first_error(validate_query(query), validate_platform(platform),
                        validate_limit(limit, Config.MAX_TECHNICAL_LIMIT))
    if error:
        return error

    query = (query or "").strip()
    platform = Config.normalize_platform(platform)
    results = []
    if query:
        results = apple_docs.search_symbols(
            query, framework=(framework or "").strip() or None, symbol_type=symbol_type,
            platform=platform if platform != "universal" else None, limit=limit
        )
    response = {"query": query, "framework": framework, "total_results": len(results), "results": results}
    return add_suggestions(response, "search_technical_documentation", query)


@mcp.tool()
def search_unified(query: str, platform: Optional[str] = None, category: Optional[str] = None,
                   include_design: bool = True, include_technical: bool = True,
                   limit: int = 20, design_limit: int = 10, technical_limit: int = 10) -> Dict:
    """
    Search design guidelines and API documentation together.

    Guidelines and symbols that refer to the same component are linked in
    crossReferences and ranked higher; the strongest links are returned as
    combined results.

    Args:
        query: Component, concept or keyword (max 100 characters)
        platform: Optional platform filter
        category: Optional HIG category filter (guidelines only)
        include_design: Search guidelines (default: True)
        include_technical: Search API symbols (default: True)
        limit: Maximum merged results, 1-50 (default: 20)
        design_limit: Guideline results to fetch, 1-25 (default: 10)
        technical_limit: Symbol results to fetch, 1-25 (default: 10)

    Returns:
        Dictionary with results, designResults, technicalResults, sources,
        crossReferences and total_results
    """
    if not query or not query.strip():
        return {"error": "Empty query", "message": "Please provide a search query (e.g., 'button')"}
    error = first_error(
        validate_query(query), validate_platform(platform), validate_category(category),
        validate_limit(limit, Config.MAX_UNIFIED_LIMIT),
        validate_limit(design_limit, Config.MAX_UNIFIED_SOURCE_LIMIT),
        validate_limit(technical_limit, Config.MAX_UNIFIED_SOURCE_LIMIT),
    )
    if error:
        return error

    query = query.strip()
    results = unified_search.search(
        query, Config.normalize_platform(platform), Config.normalize_category(category),
        include_design, include_technical, limit, design_limit, technical_limit
    )
    results["query"] = query
    results["total_results"] = len(results["results"])
    return add_suggestions(results, "search_unified", query)


@mcp.tool()
def get_cross_references(query: str, platform: Optional[str] = None, framework: Optional[str] = None,
                         include_related: bool = True, limit: int = 20) -> Dict:
    """
    Map a component or concept to the guidelines and API symbols for it.

    Works from the local guidelines and a built-in symbol table, so no
    network access is needed.

    Example queries:
    - "button" - Buttons page to SwiftUI Button, UIButton, NSButton
    - "dark mode" - Color guidance to colorScheme, NSAppearance

    Args:
        query: Component or concept name (max 100 characters)
        platform: Optional platform filter
        framework: Optional framework filter (e.g., 'SwiftUI')
        include_related: Also list related components (default: True)
        limit: Maximum number of mappings, 1-50 (default: 20)

    Returns:
        Dictionary with query, mappings (designSection, technicalSymbol,
        confidence, mappingType, explanation, ...), componentMapping,
        relatedComponents and total_results
    """
    if not query or not query.strip():
        return {"error": "Empty query", "message": "Please provide a component or concept (e.g., 'button')"}
    error = first_error(validate_query(query), validate_platform(platform),
                        validate_limit(limit, Config.MAX_SEARCH_LIMIT))
    if error:
        return error

    query = query.strip()
    platform = Config.normalize_platform(platform)
    concept = normalize_concept(query)

    design_results = guidelines_search.search(query, platform, limit=limit)
    mappings = cross_reference_mappings(design_results, platform, framework, limit)

    component_mapping = None
    if concept:
        component_mapping = {
            "componentName": concept,
            "designGuidelines": [
                {"title": r["title"], "url": r["url"], "platform": r["platform"], "relevance": r["relevanceScore"]}
                for r in design_results[:5]
            ],
            "technicalSymbols": [
                {"symbol": s.symbol, "framework": s.framework, "platform": s.platform,
                 "symbolKind": s.kind, "url": s.url, "relevance": s.confidence}
                for s in symbols_for(concept, platform, framework)
            ],
        }

    response = {
        "query": query,
        "mappings": mappings,
        "componentMapping": component_mapping,
        "total_results": len(mappings),
    }
    if include_related and concept:
        response["relatedComponents"] = related_concepts(concept)
    return add_suggestions(response, "get_cross_references", query)


# ============================================================================
# UPDATE TOOLS
# ============================================================================

@mcp.tool()
def check_updates(sources: Optional[List[str]] = None) -> Dict:
    """
    Check whether the local HIG content is current.

    Args:
        sources: Optional subset of 'hig-static' and 'api-documentation'

    Returns:
        Dictionary with updates (per source), notifications, summary and hasUpdates
    """
    unknown = [s for s in (sources or []) if s not in SOURCES]
    if unknown:
        return {"error": "Invalid source", "message": f"Sources must be among: {', '.join(SOURCES)}"}
    return freshness_checker.check_updates(sources)


# ============================================================================
# RESOURCES
# ============================================================================

@mcp.resource("hig://updates/latest", mime_type="text/markdown")
def latest_updates() -> str:
    """Most recent changes and additions to Apple's Human Interface Guidelines."""
    return hig_resources.read_resource("hig://updates/latest")["content"]


@mcp.resource("hig://updates/latest-design-system", mime_type="text/markdown")
def latest_design_system() -> str:
    """Most recent Apple design system updates."""
    return hig_resources.read_resource("hig://updates/latest-design-system")["content"]


@mcp.resource("hig://{platform}", mime_type="text/markdown")
def platform_guidelines(platform: str) -> str:
    """All guidelines for a platform (e.g., hig://ios)."""
    return hig_resources.read_resource(f"hig://{platform}")["content"]


@mcp.resource("hig://{platform}/{category}", mime_type="text/markdown")
def category_guidelines(platform: str, category: str) -> str:
    """One category of a platform's guidelines (e.g., hig://ios/navigation)."""
    return hig_resources.read_resource(f"hig://{platform}/{category}")["content"]
