"""Parse markdown table text into rows of cells, grouped into named sections.

A report file looks like::

    # Section title
    | packageName | usesPermissions |
    | :--- | :--- |
    | com.example.app | android.permission.INTERNET <br> android.permission.CAMERA |

Every line containing ``|`` becomes a Row; every ``#`` heading starts a new
section.  Parsing never raises on malformed input: a line without a delimiter
yields an empty row and is skipped, and a missing file yields no sections.
"""

import logging
from pathlib import Path

from md_table_diff.tables.patterns import (
    CELL_DELIMITER,
    CELL_SPLIT_RE,
    DEFAULT_SECTION,
    ESCAPED_DELIMITER,
    HEADING_MARKER,
    HEADING_PREFIX_RE,
    MULTI_VALUE_SEPARATOR,
    REPLACEMENT_CHARACTER,
    SEPARATOR_MARKERS,
)
from md_table_diff.tables.schema import Cell, Row

logger = logging.getLogger(__name__)


# ─── File Access ──────────────────────────────────────────────────────────────


def read_lines(path: str | Path) -> list[str]:
    """Read a text file into a list of lines without trailing newlines (empty list if missing).

    Bytes that are not valid UTF-8 are replaced with U+FFFD instead of
    failing the whole report.
    """
    path = Path(path)
    if not path.is_file():
        logger.warning("Table file not found: %s", path)
        return []
    with open(path, "r", encoding="utf-8", errors="replace") as fopen:
        text = fopen.read()
    if REPLACEMENT_CHARACTER in text:
        logger.warning("Table file %s is not valid UTF-8; undecodable bytes were replaced", path)
    return text.splitlines()


# ─── Row Parsing ──────────────────────────────────────────────────────────────


def _split_multi_value(cell: str) -> Cell:
    """Split a "a <br> b" cell into its trimmed, non-empty values."""
    values = [value.strip() for value in cell.split(MULTI_VALUE_SEPARATOR)]
    values = [value for value in values if value]
    return values if values else ""


def parse_row(line: str, allow_multi_value: bool = True) -> Row:
    """Split one pipe-delimited line into cells.

    A line without the delimiter is not a table row and yields ``[]``.  One
    leading and one trailing ``|`` are dropped before splitting, each cell is
    trimmed, and (if ``allow_multi_value``) cells holding the multi-value
    separator become lists of values.  An escaped ``\\|`` does not split and
    is read back as a literal ``|``.
    """
    if CELL_DELIMITER not in line:
        return []

    text = line.strip()
    if text.startswith(CELL_DELIMITER):
        text = text[1:]
    if text.endswith(CELL_DELIMITER) and not text.endswith(ESCAPED_DELIMITER):
        text = text[:-1]

    row: Row = []
    for raw_cell in CELL_SPLIT_RE.split(text):
        cell = raw_cell.strip().replace(ESCAPED_DELIMITER, CELL_DELIMITER)
        if allow_multi_value and MULTI_VALUE_SEPARATOR in cell:
            row.append(_split_multi_value(cell))
        else:
            row.append(cell)
    return row


def row_text(row: str | Row) -> str:
    """Flatten a raw line or parsed row back into searchable text."""
    if isinstance(row, str):
        return row
    parts = []
    for cell in row:
        parts.append(MULTI_VALUE_SEPARATOR.join(cell) if isinstance(cell, list) else str(cell))
    return CELL_DELIMITER.join(parts)


def is_separator_row(row: str | Row | None) -> bool:
    """Return True if the line/row is a header separator such as ``| :--- | ---: |``."""
    if not row:
        return False
    text = row_text(row)
    return any(marker in text for marker in SEPARATOR_MARKERS)


def strip_header_rows(rows: list) -> list:
    """Drop the header label row and the separator row, keeping only data rows.

    Scans from index 1 for the first separator row and returns everything after
    it.  Rows are returned unchanged when no separator row exists.
    """
    for idx in range(1, len(rows)):
        if is_separator_row(rows[idx]):
            return rows[idx + 1 :]
    return rows


# ─── Document Parsing ─────────────────────────────────────────────────────────


def _is_heading(line: str) -> bool:
    """Return True for a markdown heading line ("# ...", "## ...")."""
    return line.strip().startswith(HEADING_MARKER)


def _heading_name(line: str) -> str:
    """Strip the heading markers and surrounding whitespace from a heading line."""
    return HEADING_PREFIX_RE.sub("", line).strip()


def parse_lines(lines: list[str], data_only: bool = True, multi_section: bool = True) -> dict[str, list[Row]] | list[Row]:
    """Group table rows by the heading that precedes them.

    Returns ``{section name: rows}`` in document order.  Rows before the first
    heading are stored under ``DEFAULT_SECTION``; sections without rows are
    dropped; a heading that repeats replaces the earlier section.  With
    ``data_only`` each section is passed through ``strip_header_rows``.  With
    ``multi_section=False`` only the first section's rows are returned.
    """
    sections: dict[str, list[Row]] = {}
    name = DEFAULT_SECTION
    current: list[Row] = []

    for line in lines:
        if _is_heading(line):
            if current:
                if name in sections:
                    logger.debug("Section '%s' appears more than once; keeping the last one", name)
                sections[name] = current
            name = _heading_name(line)
            current = []
            continue
        row = parse_row(line)
        if row:
            current.append(row)

    if current:
        sections[name] = current

    if data_only:
        sections = {section: strip_header_rows(rows) for section, rows in sections.items()}

    logger.debug("Parsed %d section(s), %d row(s)", len(sections), sum(len(rows) for rows in sections.values()))

    if multi_section:
        return sections
    return next(iter(sections.values()), [])


def parse_document(path: str | Path, data_only: bool = True, multi_section: bool = True) -> dict[str, list[Row]] | list[Row]:
    """Read a markdown report file and parse it with ``parse_lines``."""
    return parse_lines(read_lines(path), data_only=data_only, multi_section=multi_section)
