"""Render diff records as markdown tables or CSV.

A reporter receives groups of records, each introduced by a title, and
collects the rendered lines in its own buffer.  ``close()`` writes the buffer
to the output stream (if any); ``render()`` returns it as a string.

Records in one group may not share every column (a diffed record can carry a
column that only the old report had), so the header is built from the widest
record plus any columns the others add, and every row is aligned to it.
"""

import csv
import io
import logging
from collections.abc import Iterable
from typing import TextIO

from md_table_diff.errors import ConfigError
from md_table_diff.tables.patterns import CELL_DELIMITER, ESCAPED_DELIMITER, MULTI_VALUE_SEPARATOR
from md_table_diff.tables.schema import Cell, Record

logger = logging.getLogger(__name__)

URL_PREFIXES = ("http://", "https://")


def _header_columns(records: list[Record]) -> list[str]:
    """Columns of the widest record first, then columns only other records have."""
    widest = records[0]
    for record in records:
        if len(record) > len(widest):
            widest = record
    columns = list(widest)
    for record in records:
        for column in record:
            if column not in columns:
                columns.append(column)
    return columns


def _select_columns(columns: list[str], output_sections: Iterable[str] | None) -> list[tuple[str, str | None]]:
    """Map requested labels to source columns by prefix match.

    Without ``output_sections`` every column is its own label.  A requested
    label that matches no column is kept with no source (rendered empty).
    """
    if not output_sections:
        return [(column, column) for column in columns]
    selected = []
    for label in output_sections:
        source = next((column for column in columns if column.strip().startswith(label)), None)
        selected.append((label, source))
    return selected


class Reporter:
    """Plain-text reporter; subclasses decide the line format."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream
        self.lines: list[str] = []

    def title_out(self, title: str) -> None:
        """Start a group of records."""
        self.lines.append(title)

    def println(self) -> None:
        """Emit a blank separator line."""
        self.lines.append("")

    def header_out(self, lines: list[str]) -> None:
        """Put preamble lines (such as links to the compared reports) before everything reported.

        Only formats that can carry free text keep them; the plain reporter drops them.
        """
        logger.debug("%s ignores %d header line(s)", type(self).__name__, len(lines))

    def report(self, records: list[Record], output_sections: Iterable[str] | None = None) -> None:
        """Emit a header row and one row per record.

        ``output_sections`` picks and orders the columns: each label takes the
        first column whose name starts with it.
        """
        if not records:
            return
        selected = _select_columns(_header_columns(records), output_sections)
        self._emit([label for label, _ in selected], header=True)
        for record in records:
            self._emit([record.get(source, "") if source else "" for _, source in selected])

    def _emit(self, values: list[Cell | None], header: bool = False) -> None:
        self.lines.append(" ".join(self.format_value(value) for value in values))

    def format_value(self, value: Cell | None) -> str:
        """Render one cell value as text."""
        if value is None:
            return ""
        if isinstance(value, list):
            return MULTI_VALUE_SEPARATOR.join(str(item) for item in value)
        return str(value)

    def render(self) -> str:
        """Return everything reported so far."""
        if not self.lines:
            return ""
        return "\n".join(self.lines) + "\n"

    def close(self) -> None:
        """Write the buffered report to the output stream."""
        if self.stream is not None:
            self.stream.write(self.render())
            self.stream.flush()
        logger.debug("Reporter closed after %d line(s)", len(self.lines))


class MarkdownReporter(Reporter):
    """Markdown tables under ``#`` headings, re-readable by the table parser."""

    def title_out(self, title: str) -> None:
        self.lines.append(f"# {title}")
        self.lines.append("")

    def header_out(self, lines: list[str]) -> None:
        self.lines[0:0] = lines

    def format_value(self, value: Cell | None) -> str:
        """Join multi-value cells with " <br> "; render URLs as links named by their last path part.

        A ``|`` inside a value is escaped as ``\\|`` so it does not split the cell.
        """
        if isinstance(value, str) and value.startswith(URL_PREFIXES):
            name = value.rstrip("/").rsplit("/", 1)[-1]
            text = f"[{name}]({value})"
        else:
            text = super().format_value(value)
        return text.replace(CELL_DELIMITER, ESCAPED_DELIMITER)

    def _emit(self, values: list[Cell | None], header: bool = False) -> None:
        self.lines.append("| " + " | ".join(self.format_value(value) for value in values) + " |")
        if header:
            self.lines.append("|" + " :--- |" * len(values))


class CsvReporter(Reporter):
    """Comma-separated rows; each group starts with a blank line instead of a title."""

    def title_out(self, title: str) -> None:
        self.lines.append("")

    def _emit(self, values: list[Cell | None], header: bool = False) -> None:
        buffer = io.StringIO()
        csv.writer(buffer, lineterminator="").writerow([self.format_value(value) for value in values])
        self.lines.append(buffer.getvalue())


REPORTERS = {
    "markdown": MarkdownReporter,
    "csv": CsvReporter,
}


def get_reporter(report_format: str = "markdown", stream: TextIO | None = None) -> Reporter:
    """Create the reporter for ``report_format`` ("markdown" or "csv")."""
    key = report_format.strip().lower()
    if key not in REPORTERS:
        raise ConfigError(f"Unknown report format '{report_format}', expected one of {list(REPORTERS)}")
    return REPORTERS[key](stream)
