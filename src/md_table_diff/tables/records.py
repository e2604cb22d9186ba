"""Turn parsed rows into key -> Record tables."""

import logging
from collections.abc import Hashable

from md_table_diff.tables.schema import Cell, Record, Row, Table

logger = logging.getLogger(__name__)


def record_key(value: Cell | None) -> Hashable:
    """Make a key column value hashable (multi-value keys become tuples)."""
    if isinstance(value, list):
        return tuple(value)
    return value


def to_record(row: Row, columns: list[str]) -> Record:
    """Zip a row against the column names.

    Cells beyond the last column are dropped; a short row gives a record with
    fewer columns.
    """
    return dict(zip(columns, row))


def resolve_key_column(columns: list[str], key_column: str | None = None) -> str | None:
    """Return ``key_column`` if it is one of ``columns``, else the first column (None if no columns)."""
    if not columns:
        return None
    if key_column in columns:
        return key_column
    return columns[0]


def key_rows(rows: list[Row], columns: list[str], key_column: str | None = None) -> Table:
    """Build a ``{key: Record}`` table from rows in file order.

    The key is the record's value in ``key_column``, or in the first column if
    ``key_column`` is not one of ``columns``.  A record without a key value is
    stored under ``None``.  A later row with the same key replaces the earlier
    one.  Empty rows are skipped.
    """
    key_column = resolve_key_column(columns, key_column)
    if key_column is None:
        return {}

    table: Table = {}
    for row in rows:
        if not row:
            continue
        record = to_record(row, columns)
        key = record_key(record.get(key_column))
        if key in table:
            logger.debug("Duplicate key %r; keeping the later row", key)
        table[key] = record
    return table
