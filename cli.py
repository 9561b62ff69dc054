#!/usr/bin/env python3
"""
Parameter Tree CLI

A tool for scanning configuration records for parameters and walking
configuration documents node by node.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Set

from graph import walk_unique
from graph.model import Ref
from scanner import DocumentError, ScanError, expand_paths, load_root, parse_file, scan_warn
from exporters import to_mermaid, to_ascii, to_json

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE = "%Y-%m-%d %H:%M:%S"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_WARNINGS = 2

logger = logging.getLogger("paramtree")


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE)


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="paramtree",
        description="Scan configuration records for parameters and walk configuration documents.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  paramtree scan app.settings:Config            # ASCII tree of parameters
  paramtree scan app.settings:Config -f json    # JSON output
  paramtree scan app.settings:CONFIG --strict   # Fail on duplicates or skipped fields
  paramtree walk config/                        # Every node of every document
  paramtree walk settings.yaml -v               # With debug logging
        """,
    )

    # Options shared by all commands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # scan
    scan_parser = subparsers.add_parser(
        "scan",
        parents=[common],
        help="Scan a record for parameters",
    )
    scan_parser.add_argument(
        "target",
        help="Record to scan as 'module:attribute'",
    )
    scan_parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )
    scan_parser.add_argument(
        "-f", "--format",
        choices=["ascii", "mermaid", "json"],
        default="ascii",
        help="Output format (default: ascii)",
    )
    scan_parser.add_argument(
        "--orientation",
        choices=["LR", "TD", "TB", "RL", "BT"],
        default="LR",
        help="Mermaid flowchart orientation (default: LR)",
    )
    scan_parser.add_argument(
        "--ascii-style",
        choices=["tree", "ascii"],
        default="tree",
        help="ASCII output style: 'tree' (Unicode) or 'ascii' (pure ASCII)",
    )
    scan_parser.add_argument(
        "--show-tags",
        action="store_true",
        help="Show field tags in ASCII output",
    )
    scan_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 when fields were duplicated or skipped",
    )

    # walk
    walk_parser = subparsers.add_parser(
        "walk",
        parents=[common],
        help="Walk YAML, JSON or TOML documents node by node",
    )
    walk_parser.add_argument(
        "paths",
        nargs="+",
        help="Documents, or directories to search for documents",
    )
    walk_parser.add_argument(
        "--include-ext",
        nargs="+",
        default=None,
        help="File extensions to include when searching directories (e.g., .yaml .json)",
    )

    return parser.parse_args(args)


def run_scan(parsed) -> int:
    """Scan a record and write its parameter tree."""
    try:
        root = load_root(parsed.target)
        module, warnings = scan_warn(root)
    except ScanError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    title = _root_title(root)
    if parsed.format == "mermaid":
        output = to_mermaid(
            module,
            orientation=parsed.orientation,
            title=title,
            warnings=warnings,
        )
    elif parsed.format == "json":
        output = to_json(module, warnings=warnings)
    else:  # ascii (default)
        output = to_ascii(
            module,
            title=title,
            style=parsed.ascii_style,
            show_tags=parsed.show_tags,
        )

    if parsed.output:
        try:
            output_path = Path(parsed.output)
            output_path.write_text(output, encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return EXIT_ERROR
    else:
        print(output)

    if warnings is not None:
        print(f"Warning: {warnings}", file=sys.stderr)
        if parsed.strict:
            return EXIT_WARNINGS
    return EXIT_OK


def run_walk(parsed) -> int:
    """Walk documents and print one "path<TAB>type" line per node."""
    include_ext: Optional[Set[str]] = None
    if parsed.include_ext:
        include_ext = set()
        for ext in parsed.include_ext:
            if not ext.startswith("."):
                ext = "." + ext
            include_ext.add(ext.lower())

    files = list(expand_paths([Path(p) for p in parsed.paths], include_ext))
    logger.debug("walking %d documents", len(files))
    for i, file_path in enumerate(files):
        try:
            data = parse_file(file_path)
        except DocumentError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_ERROR

        if len(files) > 1:
            if i > 0:
                print()
            print(f"==> {file_path} <==")
        for line in walk_lines(data):
            print(line)
    return EXIT_OK


def walk_lines(data) -> List[str]:
    """List "path<TAB>type" for the root of data and every node below it."""
    walker = walk_unique(Ref.new(data))
    lines = [f"{walker.path()}\t{walker.type_name()}"]
    while walker.next():
        lines.append(f"{walker.path()}\t{walker.type_name()}")
    return lines


def _root_title(root: Ref) -> str:
    # the root was scanned, so it references a record
    return type(root.get()).__name__


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)
    setup_logging(parsed.verbose)

    if parsed.command == "walk":
        return run_walk(parsed)
    return run_scan(parsed)


if __name__ == "__main__":
    sys.exit(main())
