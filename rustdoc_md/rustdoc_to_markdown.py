"""Convert a rustdoc JSON export to navigable Markdown documentation.

This module is the command-line entry point. It parses arguments, sets up
logging and hands off to the conversion pipeline, turning fatal conversion
errors into a one-line message and a nonzero exit status.
"""

import argparse
import logging
import sys
from pathlib import Path

from rustdoc_md.errors import ConversionError
from rustdoc_md.output_layout import MODES
from rustdoc_md.run_conversion import run_conversion


def _bool_arg(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "yes", "1"):
        return True
    if lowered in ("false", "no", "0"):
        return False
    msg = f"expected true or false, got {value!r}"
    raise argparse.ArgumentTypeError(msg)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="rustdoc-md",
        description="Convert a rustdoc JSON export to Markdown documentation.",
    )
    ap.add_argument(
        "input", type=Path, help="rustdoc JSON file (target/doc/<crate>.json)"
    )
    ap.add_argument(
        "out_dir",
        type=Path,
        help="Output directory; pages are written to <out_dir>/<crate>/",
    )
    ap.add_argument(
        "--include-private",
        action="store_true",
        help="Include non-public items (requires an export built with private items)",
    )
    ap.add_argument(
        "--mode",
        choices=MODES,
        default=None,
        help="Output granularity: one document, one per module, or one per item",
    )
    ap.add_argument(
        "--base-path",
        default=None,
        help="Prefix for generated links, e.g. /docs/api (default: none)",
    )
    ap.add_argument(
        "--workspace-crates",
        default=None,
        help="Comma-separated sibling crates to link internally instead of externally",
    )
    ap.add_argument(
        "--sidebar-output",
        type=Path,
        default=None,
        help=(
            "Navigation file (.json, .yml or .js/.ts); "
            "default <out_dir>/<crate>/sidebar.json"
        ),
    )
    ap.add_argument(
        "--sidebar-collapsed",
        type=_bool_arg,
        default=None,
        metavar="{true,false}",
        help="Whether sidebar categories start collapsed (default: true)",
    )
    ap.add_argument("--config", default=None, help="YAML configuration file")
    ap.add_argument(
        "--report", default=None, help="Write a JSON conversion report here"
    )
    ap.add_argument(
        "--dry-run",
        action="store_true",
        help="Run the conversion and write only the report",
    )
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return ap


def main(argv: list[str] | None = None) -> int:
    """Run the conversion process."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return run_conversion(args)
    except ConversionError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
