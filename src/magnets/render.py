"""Text rendering of a puzzle's board together with its quotas."""

from typing import List

from .puzzle import MagnetsPuzzle

_CELL_WIDTH = 4


def board_rows(puzzle: MagnetsPuzzle) -> List[str]:
    """One compact string per row, e.g. `"+-.?"`."""
    return ["".join(mark.value for mark in row) for row in puzzle.cell_marks()]


def format_board(puzzle: MagnetsPuzzle) -> str:
    targets = puzzle.targets
    margin = " " * (2 * _CELL_WIDTH)
    lines = [
        margin + "".join(f"{n:{_CELL_WIDTH}}" for n in targets.col_pos),
        margin + "".join(f"{n:{_CELL_WIDTH}}" for n in targets.col_neg),
    ]
    for r, row in enumerate(puzzle.cell_marks()):
        prefix = f"{targets.row_pos[r]:{_CELL_WIDTH}}{targets.row_neg[r]:{_CELL_WIDTH}}"
        lines.append(prefix + "".join(f"{mark.value:>{_CELL_WIDTH}}" for mark in row))
    return "\n".join(lines)


def print_board(puzzle: MagnetsPuzzle) -> None:
    print(format_board(puzzle))
