"""Unit tests for running the external unified-diff tool."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import subprocess
from unittest.mock import patch

import pytest

from md_table_diff.errors import ExternalDiffError
from md_table_diff.external import filter_table_diff_lines, run_unified_diff

DIFF_OUTPUT = """\
--- old.md\t2025-01-01 00:00:00
+++ new.md\t2025-02-01 00:00:00
@@ -1,4 +1,4 @@
 # Permissions
 | pkg | perm |
 | :--- | :--- |
-| app.a | READ |
+| app.a | WRITE |
+# New heading
"""


class TestFilterTableDiffLines:

    def test_keeps_added_and_removed_rows(self):
        assert filter_table_diff_lines(DIFF_OUTPUT.splitlines()) == ["-| app.a | READ |", "+| app.a | WRITE |"]

    def test_row_without_leading_delimiter(self):
        assert filter_table_diff_lines(["+app.a | READ"]) == ["+app.a | READ"]

    def test_strips_line_endings(self):
        assert filter_table_diff_lines(["-| app.a | READ |\r\n"]) == ["-| app.a | READ |"]


def _completed(returncode: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestRunUnifiedDiff:

    def test_differences_found(self):
        with patch("md_table_diff.external.subprocess.run", return_value=_completed(1, DIFF_OUTPUT)) as run:
            lines = run_unified_diff("old.md", "new.md", timeout=5)
        assert lines == ["-| app.a | READ |", "+| app.a | WRITE |"]
        args = run.call_args.args[0]
        assert args == ["diff", "-u", "-N", "old.md", "new.md"]
        assert run.call_args.kwargs["timeout"] == 5

    def test_identical_files(self):
        with patch("md_table_diff.external.subprocess.run", return_value=_completed(0)):
            assert run_unified_diff("old.md", "new.md") == []

    def test_failure_status(self):
        with patch("md_table_diff.external.subprocess.run", return_value=_completed(2, stderr="No such file")):
            with pytest.raises(ExternalDiffError, match="status 2"):
                run_unified_diff("old.md", "new.md")

    def test_timeout(self):
        with patch("md_table_diff.external.subprocess.run", side_effect=subprocess.TimeoutExpired("diff", 1)):
            with pytest.raises(ExternalDiffError, match="timed out"):
                run_unified_diff("old.md", "new.md", timeout=1)

    def test_missing_command(self, tmp_path):
        with pytest.raises(ExternalDiffError, match="not found"):
            run_unified_diff(tmp_path / "a.md", tmp_path / "b.md", command=str(tmp_path / "no-such-diff"))
