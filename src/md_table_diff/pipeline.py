"""Build diff reports between two versions of a markdown table report.

Two report kinds, both handed to a Reporter:

  create_diff_report          -- unified-diff based: the table lines that an
                                 external ``diff -u`` marks as added/removed
                                 are classified into "added", "removed" and
                                 "diffed" groups.
  create_section_diff_report  -- document based: both files are parsed into
                                 sections and every section with changes is
                                 reported as one group of +/- prefixed records.

Columns are merged across both files so a report whose analyzer gained a
column can still be compared with an older one.
"""

import glob
import logging
from collections.abc import Iterable
from pathlib import Path

from md_table_diff.config import DiffSettings
from md_table_diff.external import filter_table_diff_lines, run_unified_diff
from md_table_diff.reporting import Reporter
from md_table_diff.tables.columns import resolve_merged_columns
from md_table_diff.tables.parser import parse_document
from md_table_diff.tables.patterns import REPORT_SECTIONS
from md_table_diff.tables.records import resolve_key_column
from md_table_diff.tables.sections import diff_documents, diff_stream

logger = logging.getLogger(__name__)

# Generated diff reports are named "Diff-..." and are not reports to compare
DIFF_REPORT_PREFIX = "Diff-"


# ─── Naming ───────────────────────────────────────────────────────────────────


def report_label(path: str | Path) -> str:
    """Short label for a report file: the name without ".md", after its last "-".

    "reports/projectA-20250101.md" -> "20250101"
    """
    name = Path(path).name
    if ".md" in name:
        name = name[: name.rindex(".md")]
    if "-" in name:
        name = name[name.rindex("-") + 1 :]
    return name


def default_report_name(paths: list[str | Path], title: str | None = None, suffix: str = ".md") -> str:
    """File name for a diff report of two paths.

    "Diff-20250101_20250201.md", or "Diff-projectA-20250101_20250201.md" with a title.
    """
    prefix = f"{DIFF_REPORT_PREFIX}{title}" if title else DIFF_REPORT_PREFIX.rstrip("-")
    return f"{prefix}-{report_label(paths[0])}_{report_label(paths[1])}{suffix}"


def previous_and_latest_reports(directory: str | Path, title: str = "") -> list[Path]:
    """The two newest "<title>*.md" reports in ``directory``, oldest first.

    Report names end in a sortable label (a date or build number), so name
    order is report order.  Returns an empty list when fewer than two exist.
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("Report directory not found: %s", directory)
        return []
    candidates = directory.glob(f"{glob.escape(title)}*.md")
    paths = sorted(path for path in candidates if path.is_file() and not path.name.startswith(DIFF_REPORT_PREFIX))
    if len(paths) < 2:
        logger.warning("Need two '%s*.md' reports in %s, found %d", title, directory, len(paths))
        return []
    return paths[-2:]


def link_header(paths: list[str | Path], base_url: str) -> list[str]:
    """Markdown bullet links to the compared reports, followed by a blank line."""
    base_url = base_url.rstrip("/")
    lines = [f"* [{Path(path).name}]({base_url}/{Path(path).name})" for path in paths]
    lines.append("")
    return lines


def _group_title(name: str, old_path: str | Path, new_path: str | Path, with_filename: bool) -> str:
    """Title of one report group, optionally naming the compared files."""
    if not with_filename:
        return name
    if name == "diffed":
        return f"{name} between {old_path} and {new_path}"
    return f"{name} by {new_path} from {old_path}"


# ─── Reports ──────────────────────────────────────────────────────────────────


def create_diff_report(
    paths: list[str | Path],
    reporter: Reporter,
    settings: DiffSettings,
    diff_lines: Iterable[str] | None = None,
) -> bool:
    """Report added, removed and diffed records between ``paths[0]`` (old) and ``paths[1]`` (new).

    ``diff_lines`` is a pre-computed unified diff of the two files; when it is
    None the external diff tool is run.  Returns True if any group was reported.
    """
    if len(paths) != 2:
        logger.warning("A diff report needs exactly two files, got %d", len(paths))
        return False
    old_path, new_path = paths

    if diff_lines is None:
        diff_lines = run_unified_diff(old_path, new_path, settings.diff_command, settings.diff_timeout)
    else:
        diff_lines = filter_table_diff_lines(diff_lines)

    columns = resolve_merged_columns(paths)
    key_column = resolve_key_column(columns, settings.key_column)
    result = diff_stream(diff_lines, columns, key_column, settings.ignore_cols)

    reported = False
    for name in REPORT_SECTIONS:
        records = result.group(name)
        if not records or name not in settings.report_sections:
            continue
        reporter.title_out(_group_title(name, old_path, new_path, settings.section_with_filename))
        reporter.report(records, settings.output_sections)
        reporter.println()
        reported = True

    logger.info(
        "%s -> %s: %d added, %d removed, %d diffed",
        old_path,
        new_path,
        len(result.pure_added),
        len(result.pure_removed),
        len(result.diffed),
    )
    return reported


def create_section_diff_report(paths: list[str | Path], reporter: Reporter, settings: DiffSettings) -> bool:
    """Report every section that differs between ``paths[0]`` (old) and ``paths[1]`` (new).

    Returns True if any section was reported.
    """
    if len(paths) != 2:
        logger.warning("A section diff report needs exactly two files, got %d", len(paths))
        return False
    old_path, new_path = paths

    columns = resolve_merged_columns(paths)
    key_column = resolve_key_column(columns, settings.key_column)
    old_sections = parse_document(old_path, data_only=True, multi_section=True)
    new_sections = parse_document(new_path, data_only=True, multi_section=True)

    diffs = diff_documents(old_sections, new_sections, columns, key_column, settings.ignore_cols)
    for section, records in diffs.items():
        reporter.title_out(section)
        reporter.report(records, settings.output_sections)
        reporter.println()
    return bool(diffs)
