"""Classify keyed records into added, removed and changed, with per-column deltas.

A changed column is reported as a list of prefixed tokens: ``"-old"`` for
every value that disappeared and ``"+new"`` for every value that appeared.
Multi-value cells are compared as sets, so for::

    old  {"pkg": "app.a", "perm": ["READ", "WRITE"]}
    new  {"pkg": "app.a", "perm": ["WRITE", "EXEC"]}

the delta with ``ignore_cols=["pkg"]`` is ``{"pkg": "app.a", "perm": ["-READ", "+EXEC"]}``.
A token list with a single entry collapses to a bare string.
"""

import logging
from collections.abc import Iterable, Mapping

from md_table_diff.tables.patterns import ADDED_MARKER, REMOVED_MARKER
from md_table_diff.tables.schema import DeltaResult, Record, Table, cell_text, cell_values, collapse_values

logger = logging.getLogger(__name__)


# ─── Record Comparison ────────────────────────────────────────────────────────


def _columns_of(*records: Record) -> list[str]:
    """Column names of several records, first-seen order."""
    columns: list[str] = []
    for record in records:
        for column in record:
            if column not in columns:
                columns.append(column)
    return columns


def records_equal_ignoring(old_record: Record, new_record: Record, ignore_cols: Iterable[str]) -> bool:
    """Return True if every non-ignored column holds the same trimmed text in both records.

    All columns are checked; a column present on only one side is a mismatch.
    """
    ignore_cols = set(ignore_cols)
    for column in _columns_of(new_record, old_record):
        if column in ignore_cols:
            continue
        if column not in old_record or column not in new_record:
            return False
        if cell_text(new_record[column]) != cell_text(old_record[column]):
            return False
    return True


def compute_delta(new_record: Record, old_record: Record, ignore_cols: Iterable[str]) -> Record | None:
    """Return the delta record for two versions of the same key, or None if nothing reportable changed.

    Ignored columns carry the new value verbatim.  Other columns become
    ``["-removed"..., "+added"...]`` when their value sets differ, or keep the
    new value when the sets are equal (e.g. a reordered multi-value cell).
    """
    ignore_cols = set(ignore_cols)
    if records_equal_ignoring(old_record, new_record, ignore_cols):
        return None

    delta: Record = {}
    for column in _columns_of(new_record, old_record):
        new_value = new_record.get(column, "")
        if column in ignore_cols:
            if column in new_record:
                delta[column] = new_value
            continue

        new_values = cell_values(new_value)
        old_values = cell_values(old_record.get(column))
        additions = [value for value in new_values if value not in old_values]
        removals = [value for value in old_values if value not in new_values]

        if additions or removals:
            tokens = [REMOVED_MARKER + value for value in removals] + [ADDED_MARKER + value for value in additions]
            delta[column] = collapse_values(tokens)
        else:
            delta[column] = new_value
    return delta


# ─── Prefixing ────────────────────────────────────────────────────────────────


def prefix_record(record: Record, ignore_cols: Iterable[str], prefix: str) -> Record:
    """Prefix every value of every non-ignored column with ``prefix`` ("+" or "-").

    Blank values are dropped and duplicates removed; a single prefixed value
    collapses to a bare string.
    """
    ignore_cols = set(ignore_cols)
    result: Record = {}
    for column, value in record.items():
        if column in ignore_cols:
            result[column] = value
        else:
            result[column] = collapse_values([prefix + item for item in cell_values(value)])
    return result


def prefix_records(records: Iterable[Record] | Mapping, ignore_cols: Iterable[str], prefix: str) -> list[Record]:
    """Apply ``prefix_record`` to a list of records or to the records of a keyed table."""
    if isinstance(records, Mapping):
        records = records.values()
    ignore_cols = list(ignore_cols)
    results = []
    for record in records:
        prefixed = prefix_record(record, ignore_cols, prefix)
        if prefixed:
            results.append(prefixed)
    return results


# ─── Classification ───────────────────────────────────────────────────────────


def classify(new_table: Table, old_table: Table, ignore_cols: Iterable[str], prefix_unmatched: bool = False) -> DeltaResult:
    """Split two keyed tables into pure-added, pure-removed and diffed records.

    Keys only in ``new_table`` are added, keys only in ``old_table`` are
    removed, and keys in both are diffed when ``compute_delta`` reports a
    change.  With ``prefix_unmatched`` every field of an added/removed record
    is prefixed with "+"/"-".
    """
    ignore_cols = list(ignore_cols)
    pure_added: list[Record] = []
    pure_removed: list[Record] = []
    diffed: list[Record] = []

    for key, record in new_table.items():
        if key in old_table:
            delta = compute_delta(record, old_table[key], ignore_cols)
            if delta:
                diffed.append(delta)
        else:
            added = prefix_record(record, [], ADDED_MARKER) if prefix_unmatched else record
            if added:
                pure_added.append(added)

    for key, record in old_table.items():
        if key not in new_table:
            removed = prefix_record(record, [], REMOVED_MARKER) if prefix_unmatched else record
            if removed:
                pure_removed.append(removed)

    logger.debug("Classified: %d added, %d removed, %d diffed", len(pure_added), len(pure_removed), len(diffed))
    return DeltaResult(pure_added=pure_added, pure_removed=pure_removed, diffed=diffed)
