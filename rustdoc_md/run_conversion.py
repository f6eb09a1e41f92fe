"""Orchestration logic for converting a rustdoc JSON export to Markdown."""

import argparse
import logging
from dataclasses import dataclass
from typing import Any

from rustdoc_md.compute_config_hash import compute_config_hash
from rustdoc_md.conversion_context import build_context
from rustdoc_md.conversion_options import ConversionOptions, options_from_config
from rustdoc_md.conversion_report import ConversionReport
from rustdoc_md.deep_merge import deep_merge
from rustdoc_md.emit_documents import emit_documents
from rustdoc_md.export_index import ExportIndex
from rustdoc_md.load_config import load_config
from rustdoc_md.load_export import load_export
from rustdoc_md.navigation_builder import build_navigation, module_sidebars
from rustdoc_md.navigation_node import NavigationNode
from rustdoc_md.output_unit import OutputUnit
from rustdoc_md.render_navigation import navigation_path, render_navigation
from rustdoc_md.write_output import write_output, write_text

logger = logging.getLogger(__name__)

DEFAULT_REPORT_PATH = "conversion_report.json"


@dataclass
class ConversionResult:
    """Documents and navigation produced for one package, not yet written."""

    package: str
    units: list[OutputUnit]
    navigation: NavigationNode
    module_navigation: dict[str, NavigationNode]
    report: ConversionReport


def convert(
    index: ExportIndex,
    options: ConversionOptions,
    report: ConversionReport | None = None,
) -> ConversionResult:
    """Run the conversion pipeline over a loaded export without writing anything."""
    if report is None:
        report = ConversionReport(options.config_hash, index.package.format_version)
    ctx = build_context(index, options, report)
    units = emit_documents(ctx)
    navigation = build_navigation(ctx, units, collapsed=options.navigation_collapsed)
    return ConversionResult(
        package=ctx.package,
        units=units,
        navigation=navigation,
        module_navigation=module_sidebars(navigation),
        report=report,
    )


def write_result(result: ConversionResult, options: ConversionOptions) -> int:
    """Write the documents and the navigation file of a conversion result."""
    written = write_output(options.output_root, result.package, result.units)
    nav_file = navigation_path(
        options.output_root, result.package, options.navigation_output
    )
    write_text(
        nav_file,
        render_navigation(result.navigation, result.module_navigation, nav_file.suffix),
    )
    return written


def run_conversion(args: argparse.Namespace) -> int:
    """Execute the full conversion pipeline."""
    config = _init_config(args)
    config_hash = compute_config_hash(config)
    options = options_from_config(config, args.out_dir.resolve(), config_hash)

    index = load_export(args.input)
    report = ConversionReport(config_hash, index.package.format_version)
    result = convert(index, options, report)

    if args.dry_run:
        report_path = args.report or DEFAULT_REPORT_PATH
        report.generate_report(report_path)
        print(f"Dry run complete. Report generated at {report_path}")
        print(f"{len(result.units)} pages planned; {report.summary_line()}")
        return 0

    written = write_result(result, options)
    if args.report:
        report.generate_report(args.report)
    package_dir = options.output_root / result.package
    print(f"Generated {written} Markdown pages into: {package_dir}")
    print(report.summary_line())
    return 0


def _init_config(args: argparse.Namespace) -> dict[str, Any]:
    """Load configuration and apply command-line overrides."""
    config = load_config(args.config)
    overrides: dict[str, Any] = {}
    output: dict[str, Any] = {}
    if args.include_private:
        output["include_private"] = True
    if args.mode:
        output["mode"] = args.mode
    if args.base_path is not None:
        output["base_path"] = args.base_path
    if output:
        overrides["output"] = output
    if args.workspace_crates:
        packages = [p.strip() for p in args.workspace_crates.split(",") if p.strip()]
        overrides["workspace"] = {"packages": packages}
    navigation: dict[str, Any] = {}
    if args.sidebar_output:
        navigation["output"] = str(args.sidebar_output)
    if args.sidebar_collapsed is not None:
        navigation["collapsed"] = args.sidebar_collapsed
    if navigation:
        overrides["navigation"] = navigation
    if overrides:
        logger.debug("Command-line overrides: %s", overrides)
        config = deep_merge(config, overrides)
    return config
