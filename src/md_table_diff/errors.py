"""Exceptions raised by the report-producing shell around the table diff engine.

The parsing and diffing code in ``md_table_diff.tables`` never raises on bad
input; these cover configuration mistakes and the external ``diff`` process.
"""


class TableDiffError(Exception):
    """Base class for errors reported by the md-table-diff command."""


class ConfigError(TableDiffError, ValueError):
    """Invalid setting (unknown report format, report section, timeout, ...)."""


class ExternalDiffError(TableDiffError):
    """The external line-diff tool is missing, timed out, or failed."""
