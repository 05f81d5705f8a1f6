"""
depcheck CLI entry point.

This module provides the command-line interface for decoding
Dependency-Check reports.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import yaml

from depcheck import __version__
from depcheck.config import ReportConfiguration, load_config_from_env
from depcheck.errors import ReportParseError, ReportResourceError
from depcheck.loader import load_report_if_present
from depcheck.models import Analysis, IssueSeverity
from depcheck.observability import configure_logging

EXIT_OK = 0
EXIT_INVALID_REPORT = 1
EXIT_UNREADABLE_REPORT = 2
EXIT_INVALID_CONFIG = 3


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="depcheck",
        description="Decode OWASP Dependency-Check XML reports.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  depcheck parse target/dependency-check-report.xml
  depcheck parse s3://reports/app/dependency-check-report.xml --format json
  depcheck parse report.xml --prefer-cvss2 --sort
""",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity",
    )

    subparsers = parser.add_subparsers(dest="command", title="commands")

    parse_parser = subparsers.add_parser(
        "parse",
        help="Parse a Dependency-Check XML report",
        description="Parse a report and print a summary or the decoded analysis.",
    )
    parse_parser.add_argument(
        "location",
        nargs="?",
        help="Report path or s3://bucket/key (default: configured report_path)",
    )
    parse_parser.add_argument(
        "--format",
        "-f",
        choices=["summary", "json"],
        default="summary",
        help="Output format (default: summary)",
    )
    parse_parser.add_argument(
        "--output",
        "-o",
        help="Output file path (default: stdout)",
    )
    parse_parser.add_argument(
        "--config",
        "-c",
        help="Configuration file (JSON or YAML)",
    )
    parse_parser.add_argument(
        "--prefer-cvss2",
        action="store_true",
        help="Prefer CVSS v2 scores over CVSS v3",
    )
    parse_parser.add_argument(
        "--sort",
        action="store_true",
        help="Order vulnerabilities by descending score",
    )

    subparsers.add_parser("version", help="Show version information")

    return parser


def _severity_counts(analysis: Analysis, config: ReportConfiguration) -> dict[str, int]:
    counts = {severity.value: 0 for severity in IssueSeverity}
    counts["unscored"] = 0
    for dependency in analysis.dependencies:
        for vulnerability in dependency.vulnerabilities:
            if not vulnerability.has_score:
                counts["unscored"] += 1
                continue
            score = vulnerability.cvss_score(config.prefer_cvss3)
            counts[config.severity.classify(score).value] += 1
    return counts


def _format_summary(
    location: str,
    analysis: Analysis,
    config: ReportConfiguration,
    sort: bool,
) -> str:
    lines = [
        f"Report:          {location}",
        f"Engine version:  {analysis.scan_info.engine_version}",
    ]
    if analysis.project_info:
        lines.append(
            f"Project:         {analysis.project_info.name} ({analysis.project_info.report_date})"
        )
    lines.append(
        f"Dependencies:    {len(analysis.dependencies)} "
        f"({len(analysis.vulnerable_dependencies)} vulnerable)"
    )
    lines.append(f"Vulnerabilities: {analysis.vulnerability_count}")
    for name, count in _severity_counts(analysis, config).items():
        lines.append(f"  {name:<10} {count}")

    for dependency in analysis.vulnerable_dependencies:
        lines.append("")
        lines.append(f"{dependency.file_name} ({dependency.file_path})")
        vulnerabilities = (
            dependency.sorted_vulnerabilities(config.prefer_cvss3)
            if sort
            else dependency.vulnerabilities
        )
        for vulnerability in vulnerabilities:
            if vulnerability.has_score:
                score = f"{vulnerability.cvss_score(config.prefer_cvss3):.1f}"
            else:
                score = "n/a"
            severity = vulnerability.effective_severity(config.prefer_cvss3) or "-"
            lines.append(f"  {vulnerability.name:<20} {score:>5}  {severity:<8} [{vulnerability.source}]")

    return "\n".join(lines)


def _format_json(analysis: Analysis, config: ReportConfiguration, sort: bool) -> str:
    data: dict[str, Any] = analysis.to_dict()
    if sort:
        for entry, dependency in zip(data["dependencies"], analysis.dependencies):
            entry["vulnerabilities"] = [
                v.to_dict() for v in dependency.sorted_vulnerabilities(config.prefer_cvss3)
            ]
    data["severity_counts"] = _severity_counts(analysis, config)
    return json.dumps(data, indent=2)


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle the parse command."""
    try:
        config = (
            ReportConfiguration.from_file(args.config) if args.config else load_config_from_env()
        )
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return EXIT_INVALID_CONFIG
    if args.prefer_cvss2:
        config.prefer_cvss3 = False

    level = "DEBUG" if args.verbose else config.logging.level
    configure_logging(level=level, format=config.logging.format)

    location = args.location or config.report_path
    try:
        analysis = load_report_if_present(location, region=config.s3_region)
    except ReportParseError as e:
        print(f"Error: invalid report {location}: {e}", file=sys.stderr)
        return EXIT_INVALID_REPORT
    except ReportResourceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_UNREADABLE_REPORT

    if analysis is None:
        print(f"Report not found, skipping: {location}", file=sys.stderr)
        return EXIT_OK

    if args.format == "json":
        output = _format_json(analysis, config, args.sort)
    else:
        output = _format_summary(location, analysis, config, args.sort)

    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        print(output)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    if args.command == "version":
        print(f"depcheck version {__version__}")
        return EXIT_OK

    command_handlers = {
        "parse": cmd_parse,
    }
    return command_handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
