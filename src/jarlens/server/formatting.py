"""Plain-text rendering of results for MCP tool responses."""

from pathlib import Path

from jarlens.models import ClassDetail, SearchHit


def format_hits(hits: list[SearchHit], query: str) -> str:
    if not hits:
        return f"No results found for: {query}"

    lines = []
    for i, hit in enumerate(hits, 1):
        lines.append(f"{i}. {hit.full_name}")
        lines.append(f"   jar: {hit.jar_path}")
    return "\n".join(lines)


def format_jar_names(jar_paths: list[str]) -> str:
    if not jar_paths:
        return "No dependency jars found in the local repository."
    return "\n".join(Path(p).name for p in jar_paths)


def format_detail(detail: ClassDetail, include_source: bool = False) -> str:
    """Render a class detail; errored details render as a single error line."""
    if detail.is_error:
        return f"Error: {detail.error}\n  Class: {detail.name}"

    lines = [f"{detail.kind} {detail.name}"]
    if detail.package:
        lines.append(f"  Package: {detail.package}")
    if detail.source_origin:
        lines.append(f"  Source: {detail.source_origin}")

    if detail.imports:
        lines.append("")
        lines.append("Imports:")
        lines.extend(f"  {name}" for name in detail.imports)

    lines.append("")
    lines.append(f"Fields ({len(detail.fields)}):")
    lines.extend(f"  {field}" for field in detail.fields)

    lines.append("")
    lines.append(f"Methods ({len(detail.methods)}):")
    for method in detail.methods:
        lines.append(f"  {method.signature}")
        lines.append(f"    key: {method.normalized_definition}")

    if include_source and detail.raw_source:
        lines.append("")
        lines.append("Source:")
        lines.append(detail.raw_source)

    return "\n".join(lines)
