"""Puzzle parser: turn Magnets puzzle text or records into `MagnetsPuzzle` objects.

Supports:
- the plain text format (size line, four quota lines, then the marker grid)
- structured records with `rows`, `cols`, `row_pos`, `row_neg`, `col_pos`,
  `col_neg` and `board` keys (lists, numpy arrays, or JSON strings)
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Union

from .model import InferenceMode, Targets
from .puzzle import MagnetsPuzzle

_QUOTA_LINES = (
    ("row_pos", "Second line must be the number of positive poles per row"),
    ("row_neg", "Third line must be the number of negative poles per row"),
    ("col_pos", "Fourth line must be the number of positive poles per column"),
    ("col_neg", "Fifth line must be the number of negative poles per column"),
)


def _parse_ints(line: str, what: str) -> List[int]:
    try:
        return [int(tok) for tok in line.split()]
    except ValueError:
        raise ValueError(f"Wrong input format. {what}: {line!r}") from None


def parse_puzzle_text(text: str) -> Dict[str, Any]:
    """Parse the plain text format into a structured record."""
    lines = [line.strip() for line in str(text).splitlines() if line.strip()]
    if not lines:
        raise ValueError("Wrong input format. Puzzle text is empty")

    size = _parse_ints(lines[0], "First line must be the size of the board")
    if len(size) != 2:
        raise ValueError(f"Wrong input format. First line must be 'ROWS COLS', got {lines[0]!r}")
    rows, cols = size

    record: Dict[str, Any] = {"rows": rows, "cols": cols}
    for offset, (key, what) in enumerate(_QUOTA_LINES, start=1):
        if offset >= len(lines):
            raise ValueError(f"Wrong input format. {what}")
        record[key] = _parse_ints(lines[offset], what)

    board_lines = lines[5:]
    if len(board_lines) < rows:
        raise ValueError(
            f"Wrong input format. Not enough rows specified ({len(board_lines)} of {rows})"
        )
    record["board"] = [
        _parse_ints(line, f"Board row {i + 1} must hold {cols} markers")
        for i, line in enumerate(board_lines[:rows])
    ]
    return record


def _coerce_jsonable(value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.startswith("["):
            return _coerce_jsonable(json.loads(stripped))
        return value
    if isinstance(value, (list, tuple)):
        return [_coerce_jsonable(v) for v in value]
    if hasattr(value, "tolist"):
        return _coerce_jsonable(value.tolist())
    return value


def _int_list(record: Dict[str, Any], key: str) -> List[int]:
    if key not in record or record[key] is None:
        raise ValueError(f"Puzzle record is missing {key!r}")
    values = _coerce_jsonable(record[key])
    if not isinstance(values, list):
        raise ValueError(f"{key!r} must be a list of integers, got {values!r}")
    return [int(v) for v in values]


def parse_puzzle(
    puzzle_json: Dict[str, Any],
    inference: Optional[Union[InferenceMode, str]] = None,
) -> MagnetsPuzzle:
    """Build a puzzle from a record holding either `puzzle` text or structured fields."""
    text = puzzle_json.get("puzzle")
    if isinstance(text, str) and text.strip():
        record = parse_puzzle_text(text)
    else:
        record = puzzle_json

    if inference is None:
        inference = record.get("inference") or puzzle_json.get("inference") or InferenceMode.ARC_CONSISTENCY
    if not isinstance(inference, InferenceMode):
        inference = InferenceMode.parse(inference)

    board = _coerce_jsonable(record.get("board"))
    if not isinstance(board, list):
        raise ValueError("Puzzle record is missing 'board'")
    markers = [[int(v) for v in _coerce_jsonable(row)] for row in board]

    rows = int(record.get("rows", len(markers)))
    cols = int(record.get("cols", len(markers[0]) if markers else 0))

    targets = Targets(
        row_pos=tuple(_int_list(record, "row_pos")),
        row_neg=tuple(_int_list(record, "row_neg")),
        col_pos=tuple(_int_list(record, "col_pos")),
        col_neg=tuple(_int_list(record, "col_neg")),
    )
    return MagnetsPuzzle(rows=rows, cols=cols, targets=targets, markers=markers, inference=inference)
