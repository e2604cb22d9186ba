"""Command-line entry point: diff two markdown table reports.

Usage:
    md-table-diff old.md new.md                       # unified-diff mode, runs `diff -u`
    md-table-diff old.md new.md --diff-file changes.diff
    diff -u old.md new.md | md-table-diff old.md new.md --diff-file -
    md-table-diff old.md new.md --mode sections --format csv
    md-table-diff --report-dir reports --report-title projectA   # previous vs latest projectA*.md
"""

import argparse
import logging
import sys
from pathlib import Path

from md_table_diff.config import REPORT_FORMATS, DiffSettings, load_settings, parse_list
from md_table_diff.errors import ConfigError, TableDiffError
from md_table_diff.pipeline import (
    create_diff_report,
    create_section_diff_report,
    default_report_name,
    link_header,
    previous_and_latest_reports,
)
from md_table_diff.reporting import get_reporter
from md_table_diff.tables.parser import read_lines

logger = logging.getLogger(__name__)

MODES = ("stream", "sections")


def build_parser() -> argparse.ArgumentParser:
    """Define the command-line options."""
    parser = argparse.ArgumentParser(description="Semantic diff of two markdown table reports")
    parser.add_argument("old", type=Path, nargs="?", default=None, help="Older markdown report")
    parser.add_argument("new", type=Path, nargs="?", default=None, help="Newer markdown report")
    parser.add_argument("--report-dir", type=Path, default=None, help="Compare the previous and latest <report-title>*.md reports in this directory instead of OLD and NEW")
    parser.add_argument("-t", "--report-title", type=str, default=None, help="Report title, used in Diff-<title>-<old>_<new> names and to find reports in --report-dir")
    parser.add_argument("--mode", choices=MODES, default="stream", help="stream: classify a unified diff; sections: diff section by section (default: stream)")
    parser.add_argument("--diff-file", type=str, default=None, help="Pre-computed unified diff of old and new ('-' for stdin) instead of running diff")
    parser.add_argument("-k", "--key-column", type=str, default=None, help="Column identifying a record (default: first column)")
    parser.add_argument("--ignore-cols", type=str, default=None, help="Comma-separated columns excluded from comparison (default: the key column)")
    parser.add_argument("-s", "--report-sections", type=str, default=None, help="Groups to report in stream mode (default: added|removed|diffed)")
    parser.add_argument("-f", "--format", dest="report_format", choices=REPORT_FORMATS, default=None, help="Report format (default: markdown)")
    parser.add_argument("--output-sections", type=str, default=None, help="'|'-separated column prefixes to report, in order (default: all columns)")
    parser.add_argument("--with-filename", action="store_true", help="Name the compared files in group titles")
    parser.add_argument("-u", "--report-base", type=str, default=None, help="Base URL; prepends links to both reports")
    output = parser.add_mutually_exclusive_group()
    output.add_argument("-o", "--output", type=Path, default=None, help="Write the report to this file (default: stdout)")
    output.add_argument("-d", "--output-dir", type=Path, default=None, help="Write the report as Diff-[<title>-]<old>_<new>.<ext> in this directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _read_diff_lines(diff_file: str | None) -> list[str] | None:
    """Load a pre-computed diff from a file or stdin (None means run diff)."""
    if diff_file is None:
        return None
    if diff_file == "-":
        return sys.stdin.read().splitlines()
    return read_lines(diff_file)


def _report_paths(args: argparse.Namespace, settings: DiffSettings) -> list[Path]:
    """The old and new report: given explicitly, or the newest two in --report-dir."""
    if args.old is not None and args.new is not None:
        return [args.old, args.new]
    paths = previous_and_latest_reports(args.report_dir, settings.report_title or "")
    if not paths:
        raise ConfigError(f"No previous and latest '{settings.report_title or ''}*.md' reports in {args.report_dir}")
    logger.info("Comparing %s with %s", paths[0], paths[1])
    return paths


def _output_path(args: argparse.Namespace, paths: list[Path], settings: DiffSettings) -> Path | None:
    """Resolve where the report goes (None means stdout)."""
    if args.output_dir is not None:
        suffix = ".csv" if settings.report_format == "csv" else ".md"
        args.output_dir.mkdir(parents=True, exist_ok=True)
        return args.output_dir / default_report_name(paths, settings.report_title, suffix=suffix)
    return args.output


def run(args: argparse.Namespace) -> int:
    """Produce the report described by parsed arguments.  Returns the exit status."""
    settings = load_settings(
        key_column=args.key_column,
        ignore_cols=parse_list(args.ignore_cols) or None,
        report_sections=parse_list(args.report_sections, "|") or None,
        report_format=args.report_format,
        section_with_filename=args.with_filename or None,
        report_base=args.report_base,
        report_title=args.report_title,
        output_sections=parse_list(args.output_sections, "|") or None,
    )
    paths = _report_paths(args, settings)
    reporter = get_reporter(settings.report_format)

    if args.mode == "sections":
        reported = create_section_diff_report(paths, reporter, settings)
    else:
        reported = create_diff_report(paths, reporter, settings, _read_diff_lines(args.diff_file))

    if reported and settings.report_base:
        reporter.header_out(link_header(paths, settings.report_base))
    if not reported:
        logger.info("No differences to report between %s and %s", paths[0], paths[1])

    output_path = _output_path(args, paths, settings)
    if output_path is None:
        reporter.stream = sys.stdout
        reporter.close()
    elif reported:
        with open(output_path, "w", encoding="utf-8") as fopen:
            reporter.stream = fopen
            reporter.close()
        logger.info("Wrote %s", output_path)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, configure logging, and run; errors are logged and give exit status 1."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.old is None or args.new is None) and args.report_dir is None:
        parser.error("give OLD and NEW reports, or --report-dir")
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s", stream=sys.stderr)
    try:
        return run(args)
    except TableDiffError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
