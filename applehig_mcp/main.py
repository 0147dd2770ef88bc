#!/usr/bin/env python3
"""
Main entry point for the Apple HIG MCP Server.

Commands:
    serve          run the MCP server over stdio (default)
    rebuild-index  write content/metadata/*.json from the corpus
    validate       validate every document and print a quality report
    health         run health checks against the loaded corpus
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import Config, logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apple-hig-mcp",
        description="MCP server for Apple's Human Interface Guidelines",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {Config.VERSION}")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Run the MCP server over stdio (default)")

    rebuild = subparsers.add_parser("rebuild-index", help="Write search index and metadata files")
    rebuild.add_argument("--content-dir", type=Path, help="Content directory (default: auto-detect)")

    validate = subparsers.add_parser("validate", help="Validate content quality")
    validate.add_argument("--content-dir", type=Path, help="Content directory (default: auto-detect)")
    validate.add_argument("--strict", action="store_true", help="Exit 1 if any document fails validation")

    health = subparsers.add_parser("health", help="Run health checks")
    health.add_argument("--content-dir", type=Path, help="Content directory (default: auto-detect)")

    return parser


def load_content(content_dir):
    """Load the corpus, honouring an explicit --content-dir."""
    from .content.library import hig_content

    if content_dir:
        hig_content.initialize(content_dir)
    if not hig_content.is_loaded:
        raise ValueError("No HIG documents loaded. Pass --content-dir or set HIG_CONTENT_PATH.")
    return hig_content


def serve():
    from .tools import mcp

    # Modules initialize themselves on import
    logger.info("Initializing Apple HIG MCP Server...")
    logger.info("Loading modules:")
    logger.info("  ✓ HIG content library (content/library.py)")
    logger.info("  ✓ Guidelines and wildcard search (search/)")
    logger.info("  ✓ Component specs and design tokens (design/components.py)")
    logger.info("  ✓ hig:// resources (resources/hig_resources.py)")
    logger.info("  ✓ Apple API fetching (docs/apple_docs.py)")
    logger.info("  ✓ Content freshness (updates/freshness.py)")

    logger.info("Starting MCP server via stdio...")
    mcp.run()
    return 0


def rebuild_index(args) -> int:
    library = load_content(args.content_dir)
    docs = list(library.documents.values())
    written = library.indexer.write_metadata(docs, library.content_dir)
    info = library.indexer.build_generation_info(docs)

    print(f"Indexed {info['totalSections']} sections "
          f"({info['successfulExtractions']} real extractions, average quality {info['averageQuality']})")
    for path in written.values():
        print(f"  wrote {path}")
    return 0


def validate(args) -> int:
    from .quality.validator import ContentQualityValidator

    library = load_content(args.content_dir)
    validator = ContentQualityValidator()

    failed = []
    for doc in library.documents.values():
        result = validator.validate_document(doc)
        if not result["isValid"]:
            failed.append(doc.id)
            logger.warning(f"{doc.id}: {'; '.join(result['issues'])}")

    print(validator.generate_report())
    if args.strict and failed:
        print(f"{len(failed)} document(s) failed validation", file=sys.stderr)
        return 1
    return 0


def health(args) -> int:
    from .health import HealthChecker, format_health

    load_content(args.content_dir)
    report = HealthChecker().run()
    print(format_health(report))
    return 0 if report["healthy"] else 1


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # stdout belongs to the MCP stdio transport
    logging.basicConfig(
        level=Config.log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        if args.command == "rebuild-index":
            code = rebuild_index(args)
        elif args.command == "validate":
            code = validate(args)
        elif args.command == "health":
            code = health(args)
        else:
            code = serve()
        sys.exit(code)

    except ValueError as e:
        logger.error(f"Failed to initialize: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
