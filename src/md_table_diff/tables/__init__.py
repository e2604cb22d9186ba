"""Markdown table parsing and keyed semantic diffing.

Submodules:
  patterns  -- delimiters, separator markers, section and diff markers
  schema    -- Cell/Row/Record types, cell helpers, DeltaResult Pydantic model
  parser    -- row and document parsing, header-row stripping
  columns   -- header row resolution and column-set merging
  records   -- rows -> key/Record tables
  delta     -- record comparison, per-column deltas, classification
  sections  -- per-section document diffs and unified-diff stream diffs
"""
