"""Documentation generator command line.

Generates (in the output directory):
    {name}.json       - Raw comment blocks per file
    processed.json    - Linked comments with parent/child edges
    namespaces.json   - Namespace registry
    modules.json      - Module registry
    files.json        - File registry
    elements.json     - Materialized element tree
    {name}.md         - Markdown reference
    {name}.html       - Navigable HTML reference
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import BuildOptions, load_options
from .elements import build_elements
from .errors import BuildDocsError
from .extractors import extract_from_sources
from .generators import generate_html, generate_json, generate_markdown
from .linker import link
from .models import BuildResult
from .scanner import collect_source_files
from .validators import compute_coverage, validate_comments

log = logging.getLogger(__name__)


def build(options: BuildOptions) -> BuildResult:
    """Run scan, extract, link, validate and element building."""
    sources = collect_source_files(options.target_path, options.ignore_paths, options.file_types)
    raw_comments = extract_from_sources(sources)
    linked = link(raw_comments)
    validation = validate_comments(linked, strict=options.strict)
    coverage = compute_coverage(linked)
    elements = build_elements(linked)
    return BuildResult(
        sources=sources,
        raw_comments=raw_comments,
        linked=linked,
        validation=validation,
        coverage=coverage,
        elements=elements,
    )


def write_outputs(result: BuildResult, options: BuildOptions) -> list[Path]:
    """Write the selected output formats. Returns the written paths."""
    out_dir = Path(options.output_path)
    out_dir.mkdir(parents=True, exist_ok=True)
    name = options.output_name
    formats = set(options.output_formats)
    outputs: dict[str, str] = {}

    if "json" in formats:
        outputs[f"{name}.json"] = generate_json(result.raw_comments)
        outputs["processed.json"] = generate_json(result.linked.processed)
        outputs["namespaces.json"] = generate_json(result.linked.namespaces)
        outputs["modules.json"] = generate_json(result.linked.modules)
        outputs["files.json"] = generate_json(result.linked.files)
        outputs["elements.json"] = generate_json(result.elements)
    if "md" in formats:
        outputs[f"{name}.md"] = generate_markdown(result.linked, title=options.title)
    if "html" in formats:
        outputs[f"{name}.html"] = generate_html(result.elements, title=options.title, html_options=options.html)

    written = []
    for file_name, content in outputs.items():
        path = out_dir / file_name
        path.write_text(content)
        written.append(path)
    return written


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="build-docs",
        description="Generate a reference site from JSDoc-style comment blocks.",
    )
    parser.add_argument("target", nargs="?", help="Directory or file to scan")
    parser.add_argument("--config", help="Path to a JSON config file")
    parser.add_argument("--out", dest="output_path", help="Output directory")
    parser.add_argument("--name", dest="output_name", help="Base name for output files")
    parser.add_argument(
        "--format",
        dest="output_formats",
        action="append",
        choices=["json", "md", "html"],
        help="Output format (repeatable)",
    )
    parser.add_argument("--ignore", dest="ignore_paths", action="append", help="Path fragment to skip (repeatable)")
    parser.add_argument("--ext", dest="file_types", action="append", help="File extension to scan (repeatable)")
    parser.add_argument("--title", help="Document title")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        help="Logging level",
    )
    parser.add_argument("--strict", action="store_true", default=None, help="Treat link misses as errors")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Generate all documentation."""
    args = _parse_args(argv)

    try:
        options = load_options(
            args.config,
            target_path=args.target,
            output_path=args.output_path,
            output_name=args.output_name,
            output_formats=args.output_formats,
            ignore_paths=args.ignore_paths,
            file_types=args.file_types,
            title=args.title,
            log_level=args.log_level,
            strict=args.strict,
        )
    except BuildDocsError as e:
        print(f"  ✗ {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=options.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"Extracting docs from {options.target_path}...")
    try:
        result = build(options)
    except BuildDocsError as e:
        print(f"  ✗ {e}", file=sys.stderr)
        return 1

    linked = result.linked
    print(f"  ✓ {len(result.sources)} files, {len(result.raw_comments)} comment blocks")
    print(
        f"  ✓ {len(linked.namespaces)} namespaces, {len(linked.modules)} modules, "
        f"{len(linked.files)} files, {len(result.elements)} root items"
    )

    for warning in result.validation.warnings:
        print(f"  ⚠ {warning}", file=sys.stderr)
    if result.validation.errors:
        print("\nValidation errors:")
        for err in result.validation.errors:
            print(f"  ✗ {err}")
        return 1

    coverage = result.coverage
    print(f"\nCoverage: documented {coverage['documented']:.0%}, linked {coverage['linked']:.0%}")

    print("\nGenerated:")
    for path in write_outputs(result, options):
        print(f"  {path}")

    print("\nDone!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
