"""Shared test configuration and fixtures."""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env from project root for all tests
root = Path(__file__).parent.parent.resolve()
load_dotenv(root / ".env")

OLD_REPORT = """\
# Permissions
| packageName | usesPermissions | targetSdkVersion |
| :--- | :--- | :--- |
| com.example.camera | android.permission.CAMERA <br> android.permission.INTERNET | 33 |
| com.example.legacy | android.permission.READ_SMS | 28 |
| com.example.maps | android.permission.ACCESS_FINE_LOCATION | 33 |

# Libraries
| packageName | usesLibraries |
| :--- | :--- |
| com.example.maps | com.google.android.maps |
"""

NEW_REPORT = """\
# Permissions
| packageName | usesPermissions | targetSdkVersion |
| :--- | :--- | :--- |
| com.example.camera | android.permission.INTERNET <br> android.permission.RECORD_AUDIO | 34 |
| com.example.maps | android.permission.ACCESS_FINE_LOCATION | 33 |
| com.example.notes | android.permission.POST_NOTIFICATIONS | 34 |

# Features
| packageName | usesFeatures |
| :--- | :--- |
| com.example.camera | android.hardware.camera |
"""


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    """Keep MD_TABLE_DIFF_* variables from a local .env out of the tests."""
    for name in list(os.environ):
        if name.startswith("MD_TABLE_DIFF_"):
            monkeypatch.delenv(name)


@pytest.fixture
def write_report(tmp_path):
    """Write markdown text to a file under tmp_path and return its path."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def report_pair(write_report):
    """Old and new versions of a package permissions report."""
    return write_report("projectA-20250101.md", OLD_REPORT), write_report("projectA-20250201.md", NEW_REPORT)
