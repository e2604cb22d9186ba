"""Diff whole documents section by section, or a pre-computed unified diff of two reports.

Two modes:

  diff_documents  -- both reports parsed into ``{section: rows}``; sections
                     present on both sides are classified record by record,
                     sections present on one side only are reported wholesale
                     with their non-ignored values prefixed "+" or "-".
  diff_stream     -- the ``+``/``-`` table lines of a unified diff (from an
                     external ``diff -u``) are split into an added and a
                     removed table and classified once.
"""

import logging
from collections.abc import Iterable

from md_table_diff.tables.delta import classify, prefix_records
from md_table_diff.tables.parser import parse_row, strip_header_rows
from md_table_diff.tables.patterns import ADDED_MARKER, DIFF_FILE_HEADERS, REMOVED_MARKER
from md_table_diff.tables.records import key_rows, resolve_key_column
from md_table_diff.tables.schema import DeltaResult, Record, Row

logger = logging.getLogger(__name__)


def _default_ignore_cols(columns: list[str], key_column: str | None, ignore_cols: Iterable[str] | None) -> list[str]:
    """Ignore the key column unless ignore columns were given explicitly."""
    ignore_cols = list(ignore_cols or [])
    if ignore_cols:
        return ignore_cols
    key_column = resolve_key_column(columns, key_column)
    return [key_column] if key_column else []


# ─── Section Mode ─────────────────────────────────────────────────────────────


def diff_documents(
    old_sections: dict[str, list[Row]],
    new_sections: dict[str, list[Row]],
    columns: list[str],
    key_column: str | None = None,
    ignore_cols: Iterable[str] | None = None,
) -> dict[str, list[Record]]:
    """Diff two ``{section: data rows}`` documents.

    Sections are visited in old-document order followed by sections that only
    exist in the new document.  Each result lists added, then diffed, then
    removed records.  Sections with nothing to report are omitted.
    """
    ignore_cols = _default_ignore_cols(columns, key_column, ignore_cols)
    section_names = list(dict.fromkeys([*old_sections, *new_sections]))

    results: dict[str, list[Record]] = {}
    for section in section_names:
        if section in old_sections and section in new_sections:
            new_table = key_rows(new_sections[section], columns, key_column)
            old_table = key_rows(old_sections[section], columns, key_column)
            records = classify(new_table, old_table, ignore_cols, prefix_unmatched=True).combined()
        elif section in new_sections:
            records = prefix_records(key_rows(new_sections[section], columns, key_column), ignore_cols, ADDED_MARKER)
        else:
            records = prefix_records(key_rows(old_sections[section], columns, key_column), ignore_cols, REMOVED_MARKER)

        if records:
            results[section] = records
        else:
            logger.debug("Section '%s' unchanged", section)

    logger.info("%d of %d section(s) differ", len(results), len(section_names))
    return results


# ─── Unified Diff Mode ────────────────────────────────────────────────────────


def split_diff_stream(lines: Iterable[str], data_only: bool = True) -> tuple[list[Row], list[Row]]:
    """Partition unified-diff lines into ``(added_rows, removed_rows)``.

    Only lines starting with "+" or "-" are used; context lines and the
    ``+++``/``---`` file headers are ignored, as are lines that are not table
    rows.  With ``data_only`` a changed header/separator pair is dropped from
    each side.
    """
    added: list[Row] = []
    removed: list[Row] = []
    for line in lines:
        if line.startswith(DIFF_FILE_HEADERS):
            continue
        if line.startswith(ADDED_MARKER):
            target = added
        elif line.startswith(REMOVED_MARKER):
            target = removed
        else:
            continue
        row = parse_row(line[1:])
        if row:
            target.append(row)

    if data_only:
        added = strip_header_rows(added)
        removed = strip_header_rows(removed)
    return added, removed


def diff_stream(
    lines: Iterable[str],
    columns: list[str],
    key_column: str | None = None,
    ignore_cols: Iterable[str] | None = None,
) -> DeltaResult:
    """Classify the table rows of a unified diff into one added/removed/diffed result."""
    added_rows, removed_rows = split_diff_stream(lines)
    logger.debug("Diff stream: %d added row(s), %d removed row(s)", len(added_rows), len(removed_rows))

    new_table = key_rows(added_rows, columns, key_column)
    old_table = key_rows(removed_rows, columns, key_column)
    return classify(new_table, old_table, _default_ignore_cols(columns, key_column, ignore_cols))
