"""Delimiters, markers and sentinel names for markdown table parsing.

These constants describe the markdown dialect written by the upstream analyzer
reports: pipe-delimited rows, a ``:---`` style separator under the header row,
``#`` headings that name sections, and ``" <br> "`` joining the values of a
multi-value cell.  Used by parser.py, columns.py and the reporters.
"""

import re

# ─── Row Structure ────────────────────────────────────────────────────────────

# Cell delimiter; a line without it is not a table row
CELL_DELIMITER = "|"

# A delimiter inside a cell value, written as "\|"
ESCAPED_DELIMITER = "\\|"

# Splits a row on delimiters that are not escaped
CELL_SPLIT_RE = re.compile(r"(?<!\\)\|")

# Stands in for bytes of a report file that are not valid UTF-8
REPLACEMENT_CHARACTER = "�"

# Joins several values inside one cell, e.g. "READ <br> WRITE"
MULTI_VALUE_SEPARATOR = " <br> "

# Substrings that identify the header/data separator row ("| :--- | ---: |")
SEPARATOR_MARKERS = (":---", ":---:", "---:")


# ─── Document Structure ───────────────────────────────────────────────────────

# Markdown heading marker that opens a new section
HEADING_MARKER = "#"

# Section name used for rows that appear before any heading
DEFAULT_SECTION = "none"

# Leading run of heading markers plus whitespace, e.g. "## "
HEADING_PREFIX_RE = re.compile(r"^\s*#+\s*")


# ─── Unified Diff Markers ─────────────────────────────────────────────────────

ADDED_MARKER = "+"
REMOVED_MARKER = "-"

# File header lines emitted by `diff -u` ("--- old.md", "+++ new.md")
DIFF_FILE_HEADERS = ("+++ ", "--- ")

# Report groups produced by a keyed classification
REPORT_SECTIONS = ("added", "removed", "diffed")
