"""Local consistency check run after every single assignment."""

from typing import Set

from .board import Board
from .model import Axis, CellMark, Domino, Line, adjacent_cells

_CHARGES = (CellMark.POSITIVE, CellMark.NEGATIVE)


def is_consistent(board: Board, domino: Domino) -> bool:
    """
    Check the partial board around a just-assigned domino.

    Only the poles of `domino` and the rows/columns they sit in are examined:
    like charges may not touch, and touched lines may not exceed their quotas
    (or must hit them exactly once no UNMARKED cell is left in the line).
    """
    for cell in domino.poles:
        mark = board.mark_at(cell)
        if mark not in _CHARGES:
            continue
        for neighbor in adjacent_cells(board.rows, board.cols, cell):
            if board.mark_at(neighbor) is mark:
                return False

    lines: Set[Line] = set()
    for row, col in domino.poles:
        lines.add((Axis.ROW, row))
        lines.add((Axis.COL, col))
    return all(line_within_quota(board, axis, index) for axis, index in lines)


def line_within_quota(board: Board, axis: Axis, index: int) -> bool:
    placed_pos, placed_neg, open_cells = board.line_counts(axis, index)
    target_pos, target_neg = board.targets.for_line(axis, index)
    if open_cells == 0:
        return placed_pos == target_pos and placed_neg == target_neg
    return placed_pos <= target_pos and placed_neg <= target_neg
