"""Unit tests for section-by-section document diffs and unified-diff stream diffs."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from md_table_diff.tables.parser import parse_document, parse_lines
from md_table_diff.tables.patterns import DEFAULT_SECTION
from md_table_diff.tables.sections import diff_documents, diff_stream, split_diff_stream

COLUMNS = ["pkg", "perm"]

# ===========================================================================
# diff_documents tests
# ===========================================================================


class TestDiffDocuments:

    def test_identical_documents(self):
        sections = {"Permissions": [["app.a", "READ"], ["app.b", "WRITE"]]}
        assert diff_documents(sections, sections, COLUMNS) == {}

    def test_section_only_in_new_is_prefixed_on_non_key_columns(self):
        old = {"Permissions": [["app.a", "READ"]]}
        new = {"Permissions": [["app.a", "READ"]], "Features": [["app.a", ["camera", "nfc"]], ["app.b", "wifi"]]}
        result = diff_documents(old, new, COLUMNS, "pkg")
        assert result == {
            "Features": [
                {"pkg": "app.a", "perm": ["+camera", "+nfc"]},
                {"pkg": "app.b", "perm": "+wifi"},
            ]
        }

    def test_section_only_in_old_is_prefixed_minus(self):
        old = {"Libraries": [["app.a", "maps"]]}
        result = diff_documents(old, {}, COLUMNS)
        assert result == {"Libraries": [{"pkg": "app.a", "perm": "-maps"}]}

    def test_shared_section_order_added_diffed_removed(self):
        old = {"Permissions": [["app.a", "READ"], ["app.c", "SMS"]]}
        new = {"Permissions": [["app.a", ["READ", "EXEC"]], ["app.b", "WRITE"]]}
        result = diff_documents(old, new, COLUMNS)
        assert result == {
            "Permissions": [
                {"pkg": "+app.b", "perm": "+WRITE"},
                {"pkg": "app.a", "perm": "+EXEC"},
                {"pkg": "-app.c", "perm": "-SMS"},
            ]
        }

    def test_section_order_old_first_then_new_only(self):
        old = {"B": [["app.a", "1"]], "A": [["app.a", "1"]]}
        new = {"C": [["app.a", "1"]], "A": [["app.a", "2"]]}
        assert list(diff_documents(old, new, COLUMNS)) == ["B", "A", "C"]

    def test_explicit_ignore_cols(self):
        old = {"S": [["app.a", "READ"]]}
        new = {"S": [["app.a", "WRITE"]]}
        assert diff_documents(old, new, COLUMNS, ignore_cols=["pkg", "perm"]) == {}

    def test_no_columns_gives_empty_result(self):
        assert diff_documents({"S": [["app.a"]]}, {"S": [["app.b"]]}, []) == {}

    def test_headless_documents(self):
        old = parse_lines(["| pkg | perm |", "| :--- | :--- |", "| app.a | READ |"])
        new = parse_lines(["| pkg | perm |", "| :--- | :--- |", "| app.a | WRITE |"])
        assert diff_documents(old, new, COLUMNS) == {DEFAULT_SECTION: [{"pkg": "app.a", "perm": ["-READ", "+WRITE"]}]}

    def test_report_files(self, report_pair):
        old_path, new_path = report_pair
        columns = ["packageName", "usesPermissions", "targetSdkVersion"]
        result = diff_documents(parse_document(old_path), parse_document(new_path), columns)
        assert list(result) == ["Permissions", "Libraries", "Features"]
        assert result["Permissions"] == [
            {"packageName": "+com.example.notes", "usesPermissions": "+android.permission.POST_NOTIFICATIONS", "targetSdkVersion": "+34"},
            {
                "packageName": "com.example.camera",
                "usesPermissions": ["-android.permission.CAMERA", "+android.permission.RECORD_AUDIO"],
                "targetSdkVersion": ["-33", "+34"],
            },
            {"packageName": "-com.example.legacy", "usesPermissions": "-android.permission.READ_SMS", "targetSdkVersion": "-28"},
        ]
        assert result["Libraries"] == [{"packageName": "com.example.maps", "usesPermissions": "-com.google.android.maps"}]
        assert result["Features"] == [{"packageName": "com.example.camera", "usesPermissions": "+android.hardware.camera"}]


# ===========================================================================
# Unified diff stream tests
# ===========================================================================

DIFF_LINES = [
    "--- old.md\t2025-01-01",
    "+++ new.md\t2025-02-01",
    "@@ -1,5 +1,5 @@",
    " | pkg | perm |",
    " | :--- | :--- |",
    "-| app.a | READ <br> WRITE |",
    "+| app.a | WRITE <br> EXEC |",
    "-| app.c | SMS |",
    "+| app.b | READ |",
    "+not a table row",
]


class TestSplitDiffStream:

    def test_partition(self):
        added, removed = split_diff_stream(DIFF_LINES)
        assert added == [["app.a", ["WRITE", "EXEC"]], ["app.b", "READ"]]
        assert removed == [["app.a", ["READ", "WRITE"]], ["app.c", "SMS"]]

    def test_changed_header_stripped(self):
        lines = ["-| pkg | perm |", "+| pkg | perm | sdk |", "+| :--- | :--- | :--- |", "-| :--- | :--- |", "+| app.a | READ | 33 |"]
        added, removed = split_diff_stream(lines)
        assert added == [["app.a", "READ", "33"]]
        assert removed == []

    def test_data_only_false_keeps_header(self):
        lines = ["+| pkg | perm |", "+| :--- | :--- |", "+| app.a | READ |"]
        added, _ = split_diff_stream(lines, data_only=False)
        assert len(added) == 3

    def test_context_lines_ignored(self):
        assert split_diff_stream([" | app.a | READ |"]) == ([], [])


class TestDiffStream:

    def test_classification(self):
        result = diff_stream(DIFF_LINES, COLUMNS)
        assert result.pure_added == [{"pkg": "app.b", "perm": "READ"}]
        assert result.pure_removed == [{"pkg": "app.c", "perm": "SMS"}]
        assert result.diffed == [{"pkg": "app.a", "perm": ["-READ", "+EXEC"]}]

    def test_no_prefixing_of_unmatched(self):
        result = diff_stream(["+| app.b | READ |"], COLUMNS)
        assert result.pure_added == [{"pkg": "app.b", "perm": "READ"}]

    def test_empty_stream(self):
        assert diff_stream([], COLUMNS).is_empty

    def test_no_columns(self):
        assert diff_stream(DIFF_LINES, []).is_empty
