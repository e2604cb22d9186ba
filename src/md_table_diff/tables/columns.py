"""Resolve the ordered column names of a markdown table.

The header row is the row directly above the first separator row
(``| :--- | :--- |``).  Reports produced by different analyzer versions may
carry different columns, so the column sets of several files can be merged
into one first-seen-order union.
"""

import logging
from pathlib import Path

from md_table_diff.tables.parser import is_separator_row, read_lines, row_text
from md_table_diff.tables.patterns import CELL_DELIMITER
from md_table_diff.tables.schema import Row

logger = logging.getLogger(__name__)


def merge_columns(*column_sets: list[str]) -> list[str]:
    """Union several column lists, keeping first-seen order and no duplicates."""
    merged: list[str] = []
    for columns in column_sets:
        for name in columns:
            if name not in merged:
                merged.append(name)
    return merged


def _header_names(header: str | Row) -> list[str]:
    """Turn a raw header line or a parsed header row into trimmed, non-empty, unique names."""
    if isinstance(header, str):
        cells = header.split(CELL_DELIMITER)
    else:
        cells = [row_text([cell]) for cell in header]
    return merge_columns([cell.strip() for cell in cells if cell.strip()])


def resolve_columns_from_rows(rows: list) -> list[str]:
    """Return the column names from the row preceding the first separator row.

    ``rows`` may hold raw lines or parsed rows.  Returns ``[]`` when the table
    has no separator row (or the separator is the very first row).
    """
    for idx in range(1, len(rows)):
        if is_separator_row(rows[idx]):
            return _header_names(rows[idx - 1])
    return []


def resolve_columns_from_file(path: str | Path) -> list[str]:
    """Read a markdown file and resolve its column names (``[]`` if missing or headerless)."""
    columns = resolve_columns_from_rows(read_lines(path))
    if not columns:
        logger.debug("No header row found in %s", path)
    return columns


def resolve_merged_columns(paths: list[str | Path]) -> list[str]:
    """Resolve columns for each file independently and union them in path order."""
    merged = merge_columns(*(resolve_columns_from_file(path) for path in paths))
    logger.debug("Resolved %d column(s) across %d file(s)", len(merged), len(paths))
    return merged
