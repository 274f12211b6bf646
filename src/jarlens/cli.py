"""CLI entry point for jarlens."""

import argparse
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from jarlens.config import Config
from jarlens.errors import JarLensError
from jarlens.inspector import MavenInspector
from jarlens.server.formatting import format_detail, format_hits, format_jar_names

logger = logging.getLogger(__name__)

LOG_MAX_BYTES = 10 * 1024 * 1024


def configure_logging(config: Config, verbose: bool = False) -> None:
    """Log to stderr and to a rotating file in the cache directory.

    Stdout is left alone: the MCP stdio transport owns it.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    try:
        config.cache_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(config.log_file, maxBytes=LOG_MAX_BYTES, backupCount=1, encoding="utf-8")
        )
    except OSError as exc:
        print(f"Failed to initialize log file: {exc}", file=sys.stderr)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def build_config(args: argparse.Namespace) -> Config:
    """Environment configuration with command-line overrides applied."""
    config = Config.from_env()
    if args.cache_dir:
        config.cache_dir = Path(args.cache_dir).expanduser()
    if args.maven_repository:
        config.maven_repository = args.maven_repository
    if args.fernflower:
        config.fernflower_path = args.fernflower
    if args.javap:
        config.javap_path = args.javap
    return config


def serve(inspector: MavenInspector, transport: str = "stdio") -> None:
    """Start the MCP server.

    Args:
        inspector: Inspector whose caches back every tool call
        transport: Transport protocol (stdio or sse)
    """
    # Import here to avoid loading MCP unless needed
    from typing import Literal, cast

    from jarlens.server import create_mcp_server

    logger.info(f"Serving jarlens via {transport}")
    mcp = create_mcp_server(inspector)
    mcp.run(transport=cast(Literal["stdio", "sse", "streamable-http"], transport))


def resolve(inspector: MavenInspector, pom: str, force: bool = False) -> None:
    if force:
        inspector.dependencies.invalidate(pom)
    result = inspector.resolve(pom)
    print(format_jar_names(result.jar_paths))
    logger.info(str(result))


def info(inspector: MavenInspector) -> None:
    """Show what the caches currently hold."""
    print("jarlens caches")
    print(f"  Directory: {inspector.config.cache_dir}")
    print("")
    print("Dependencies:")
    print(f"  Projects: {len(inspector.dependencies.keys())}")
    print(f"  Known jars: {len(inspector.dependencies.known_jar_paths())}")
    print("")
    print("Jar index:")
    print(f"  Indexed jars: {len(inspector.jar_index)}")
    for path in (inspector.dependencies.path, inspector.jar_index.path):
        if path.exists():
            print(f"  {path.name}: {path.stat().st_size / 1024:.1f} KB")


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="jarlens",
        description="jarlens - class and method lookup across Maven dependency jars",
    )
    parser.add_argument("--cache-dir", help="Cache directory (default: ~/.cache/jarlens)")
    parser.add_argument("--maven-repository", help="Local Maven repository root")
    parser.add_argument("--fernflower", help="Path to fernflower.jar for decompilation")
    parser.add_argument("--javap", help="Path to javap; enables the disassembly fallback")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start the MCP server")
    serve_parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )

    # resolve command
    resolve_parser = subparsers.add_parser("resolve", help="List the dependency jars of a pom.xml")
    resolve_parser.add_argument("pom", help="Path to pom.xml")
    resolve_parser.add_argument(
        "--force",
        action="store_true",
        help="Ignore the cached result and run Maven again",
    )

    # search-class command
    search_class_parser = subparsers.add_parser("search-class", help="Search dependencies for classes")
    search_class_parser.add_argument("pom", help="Path to pom.xml")
    search_class_parser.add_argument("pattern", help="Name fragment or * pattern")

    # search-method command
    search_method_parser = subparsers.add_parser(
        "search-method",
        help="Search dependencies for classes declaring a method",
    )
    search_method_parser.add_argument("pom", help="Path to pom.xml")
    search_method_parser.add_argument("pattern", help="Name fragment or * pattern")

    # inspect command
    inspect_parser = subparsers.add_parser("inspect", help="Show the structure of a class")
    inspect_parser.add_argument("class_name", help="Fully qualified class name")
    inspect_parser.add_argument("--jar", help="Jar containing the class (default: search known jars)")
    inspect_parser.add_argument("--source", action="store_true", help="Print the recovered source")

    # info command
    subparsers.add_parser("info", help="Show cache statistics")

    args = parser.parse_args()

    config = build_config(args)
    configure_logging(config, args.verbose)
    inspector = MavenInspector(config)

    try:
        if args.command == "serve":
            serve(inspector, args.transport)
        elif args.command == "resolve":
            resolve(inspector, args.pom, args.force)
        elif args.command == "search-class":
            print(format_hits(inspector.search_classes(args.pom, args.pattern), args.pattern))
        elif args.command == "search-method":
            print(format_hits(inspector.search_methods(args.pom, args.pattern), args.pattern))
        elif args.command == "inspect":
            if args.jar:
                detail = inspector.inspect(args.jar, args.class_name)
            else:
                detail = inspector.inspect_by_name(args.class_name)
            print(format_detail(detail, args.source))
            if detail.is_error:
                sys.exit(1)
        elif args.command == "info":
            info(inspector)
    except JarLensError as exc:
        logger.error(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
