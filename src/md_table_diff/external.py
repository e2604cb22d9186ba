"""Obtain the table lines of a unified diff between two report files.

The line diff itself comes from the external ``diff`` tool; this module only
runs it and keeps the added and removed lines that are table rows.
"""

import logging
import subprocess
from collections.abc import Iterable
from pathlib import Path

from md_table_diff.config import DEFAULT_DIFF_COMMAND, DEFAULT_DIFF_TIMEOUT
from md_table_diff.errors import ExternalDiffError
from md_table_diff.tables.patterns import ADDED_MARKER, CELL_DELIMITER, DIFF_FILE_HEADERS, REMOVED_MARKER

logger = logging.getLogger(__name__)

DIFF_LINE_MARKERS = (ADDED_MARKER, REMOVED_MARKER)


def filter_table_diff_lines(lines: Iterable[str]) -> list[str]:
    """Keep added/removed lines (leading "+" or "-") that are table rows (contain "|")."""
    kept = []
    for line in lines:
        line = line.rstrip("\r\n")
        if line.startswith(DIFF_FILE_HEADERS):
            continue
        if line.startswith(DIFF_LINE_MARKERS) and CELL_DELIMITER in line:
            kept.append(line)
    return kept


def run_unified_diff(
    old_path: str | Path,
    new_path: str | Path,
    command: str = DEFAULT_DIFF_COMMAND,
    timeout: float = DEFAULT_DIFF_TIMEOUT,
) -> list[str]:
    """Run ``diff -u -N old new`` and return its table-row lines.

    ``diff`` exits with 0 (identical) or 1 (different); anything else, a
    missing executable, or a timeout raises ExternalDiffError.
    """
    args = [command, "-u", "-N", str(old_path), str(new_path)]
    logger.info("Running %s", " ".join(args))
    try:
        completed = subprocess.run(args, capture_output=True, text=True, timeout=timeout, check=False)
    except FileNotFoundError as exc:
        raise ExternalDiffError(f"Line-diff tool not found: {command}") from exc
    except subprocess.TimeoutExpired as exc:
        raise ExternalDiffError(f"{command} timed out after {timeout:.0f}s") from exc

    if completed.returncode > 1:
        raise ExternalDiffError(f"{command} exited with status {completed.returncode}: {completed.stderr.strip()}")

    lines = filter_table_diff_lines(completed.stdout.splitlines())
    logger.debug("%s produced %d table line(s)", command, len(lines))
    return lines
