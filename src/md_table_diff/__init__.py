"""Semantic diffs of markdown table reports.

Subpackages and modules:
  tables     -- parsing, column resolution, keying, delta classification
  config     -- settings from .env / environment, validated with Pydantic
  errors     -- exceptions raised outside the diff engine
  external   -- runs the external unified-diff tool
  reporting  -- markdown and CSV reporters
  pipeline   -- builds stream and section diff reports
  cli        -- ``md-table-diff`` command
"""
