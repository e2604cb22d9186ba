"""Cell, row and record types plus the Pydantic model for classification results.

A markdown report has no fixed schema: every file declares its own header row,
so a Record is a plain ``dict`` over whatever columns were resolved for that
file rather than a fixed struct.  Cells are either a single string or, for
multi-value cells, a non-empty list of strings.  The helpers below convert
between the two forms so the delta logic can always work on value lists and
only collapse back to a bare string at output.
"""

from collections.abc import Hashable

from pydantic import BaseModel, Field

from md_table_diff.tables.patterns import MULTI_VALUE_SEPARATOR

# A single value, or the values of a multi-value cell in source order
Cell = str | list[str]

# One parsed table line, one Cell per column position
Row = list[Cell]

# One row zipped against the resolved column names
Record = dict[str, Cell]

# Key column value -> Record, in file order
Table = dict[Hashable, Record]


def cell_values(value: Cell | None) -> list[str]:
    """Return the trimmed, non-empty values of a cell as a list.

    Scalars are wrapped; a scalar still carrying the multi-value separator
    (e.g. parsed with multi-value splitting disabled) is split into its values.
    """
    if value is None:
        return []
    raw = value if isinstance(value, list) else str(value).strip().split(MULTI_VALUE_SEPARATOR)
    values = []
    for item in raw:
        text = str(item).strip()
        if text:
            values.append(text)
    return values


def collapse_values(values: list[str]) -> Cell:
    """De-duplicate values keeping first-seen order; one value becomes a bare string, none becomes ""."""
    unique = list(dict.fromkeys(values))
    if not unique:
        return ""
    if len(unique) == 1:
        return unique[0]
    return unique


def cell_text(value: Cell | None) -> str:
    """Stringify a cell for equality checks; value order is significant."""
    return MULTI_VALUE_SEPARATOR.join(cell_values(value))


class DeltaResult(BaseModel):
    """Outcome of classifying a new keyed table against an old one.

    The three groups are disjoint by key.  ``pure_added`` and ``diffed`` follow
    the new table's key order, ``pure_removed`` follows the old table's.
    """

    pure_added: list[Record] = Field(default_factory=list)
    pure_removed: list[Record] = Field(default_factory=list)
    diffed: list[Record] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when nothing was added, removed or changed."""
        return not (self.pure_added or self.pure_removed or self.diffed)

    def as_tuple(self) -> tuple[list[Record], list[Record], list[Record]]:
        """Return ``(pure_added, pure_removed, diffed)``."""
        return self.pure_added, self.pure_removed, self.diffed

    def combined(self) -> list[Record]:
        """Concatenate the groups in report order: added, diffed, removed."""
        return self.pure_added + self.diffed + self.pure_removed

    def group(self, name: str) -> list[Record]:
        """Return the records of one report group ("added", "removed" or "diffed")."""
        groups = {"added": self.pure_added, "removed": self.pure_removed, "diffed": self.diffed}
        return groups[name]
