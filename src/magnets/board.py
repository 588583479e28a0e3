"""Live board state: cell marks, the assignment vector and running quota counters."""

from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, Tuple

from .model import (
    Assignment,
    Axis,
    Cell,
    CellMark,
    Domino,
    Orientation,
    Targets,
    pole_mark,
)


class BoardInvariantError(RuntimeError):
    """Raised when the board is driven into a state the search never produces."""


class Board:
    """
    Single-writer board shared by the whole search.

    Counters are kept incrementally so consistency checks stay O(1) per line:
    `row_pos/row_neg/col_pos/col_neg` count placed charges, `row_open/col_open`
    count cells still UNMARKED. Ownerless cells start out EMPTY.
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        targets: Targets,
        dominoes: Sequence[Domino],
        owner: Sequence[Sequence[Optional[int]]],
    ) -> None:
        self.rows = rows
        self.cols = cols
        self.targets = targets
        self.dominoes = list(dominoes)

        self.marks: List[List[CellMark]] = [
            [CellMark.UNMARKED if owner[r][c] is not None else CellMark.EMPTY for c in range(cols)]
            for r in range(rows)
        ]
        self.assignment: Assignment = [Orientation.UNRESOLVED] * len(self.dominoes)

        self.row_pos = [0] * rows
        self.row_neg = [0] * rows
        self.col_pos = [0] * cols
        self.col_neg = [0] * cols
        self.row_open = [sum(1 for m in self.marks[r] if m is CellMark.UNMARKED) for r in range(rows)]
        self.col_open = [
            sum(1 for r in range(rows) if self.marks[r][c] is CellMark.UNMARKED) for c in range(cols)
        ]

    # ------------------------------------------------------------------
    # assign / unassign
    # ------------------------------------------------------------------
    def assign(self, domino: Domino, orientation: Orientation) -> bool:
        """Place `orientation` on `domino`. Returns False if either pole is already marked."""
        if orientation is Orientation.UNRESOLVED:
            raise BoardInvariantError(f"Cannot assign UNRESOLVED to {domino.name}")
        if any(self.mark_at(cell) is not CellMark.UNMARKED for cell in domino.poles):
            return False

        for pole, cell in enumerate(domino.poles):
            self._set_mark(cell, pole_mark(orientation, pole))
        self.assignment[domino.index] = orientation
        return True

    def unassign(self, domino: Domino) -> None:
        """Undo the assignment of `domino` using the orientation recorded for it."""
        if self.assignment[domino.index] is Orientation.UNRESOLVED:
            raise BoardInvariantError(f"{domino.name} is not assigned")
        for cell in domino.poles:
            self._set_mark(cell, CellMark.UNMARKED)
        self.assignment[domino.index] = Orientation.UNRESOLVED

    @contextmanager
    def placed(self, domino: Domino, orientation: Orientation) -> Iterator[bool]:
        """Assign for the duration of the block; always rolled back on exit."""
        applied = self.assign(domino, orientation)
        try:
            yield applied
        finally:
            if applied:
                self.unassign(domino)

    def _set_mark(self, cell: Cell, mark: CellMark) -> None:
        row, col = cell
        previous = self.marks[row][col]
        self._count(row, col, previous, -1)
        self.marks[row][col] = mark
        self._count(row, col, mark, +1)

    def _count(self, row: int, col: int, mark: CellMark, delta: int) -> None:
        if mark is CellMark.POSITIVE:
            self.row_pos[row] += delta
            self.col_pos[col] += delta
        elif mark is CellMark.NEGATIVE:
            self.row_neg[row] += delta
            self.col_neg[col] += delta
        elif mark is CellMark.UNMARKED:
            self.row_open[row] += delta
            self.col_open[col] += delta

    # ------------------------------------------------------------------
    # read access
    # ------------------------------------------------------------------
    def mark_at(self, cell: Cell) -> CellMark:
        return self.marks[cell[0]][cell[1]]

    def line_counts(self, axis: Axis, index: int) -> Tuple[int, int, int]:
        """(positive, negative, unmarked) counts for one row or column."""
        if axis is Axis.ROW:
            return self.row_pos[index], self.row_neg[index], self.row_open[index]
        return self.col_pos[index], self.col_neg[index], self.col_open[index]

    def quotas_met(self) -> bool:
        for r in range(self.rows):
            if (self.row_pos[r], self.row_neg[r]) != self.targets.for_line(Axis.ROW, r):
                return False
        for c in range(self.cols):
            if (self.col_pos[c], self.col_neg[c]) != self.targets.for_line(Axis.COL, c):
                return False
        return True

    def is_complete(self) -> bool:
        return all(value is not Orientation.UNRESOLVED for value in self.assignment)

    def cell_marks(self) -> List[List[CellMark]]:
        """Copy of the current marks, for display. Not safe during a live search."""
        return [list(row) for row in self.marks]

    def snapshot(self) -> Tuple:
        return (
            tuple(tuple(row) for row in self.marks),
            tuple(self.assignment),
            tuple(self.row_pos),
            tuple(self.row_neg),
            tuple(self.col_pos),
            tuple(self.col_neg),
            tuple(self.row_open),
            tuple(self.col_open),
        )

    # ------------------------------------------------------------------
    # bulk helpers
    # ------------------------------------------------------------------
    def clear(self) -> None:
        for domino in self.dominoes:
            if self.assignment[domino.index] is not Orientation.UNRESOLVED:
                self.unassign(domino)

    def apply(self, assignment: Sequence[Orientation]) -> None:
        """Replay a full assignment onto a cleared board."""
        if len(assignment) != len(self.dominoes):
            raise BoardInvariantError(
                f"Assignment has {len(assignment)} values for {len(self.dominoes)} dominoes"
            )
        self.clear()
        for domino, orientation in zip(self.dominoes, assignment):
            if orientation is Orientation.UNRESOLVED:
                continue
            if not self.assign(domino, orientation):
                raise BoardInvariantError(f"Could not replay {orientation.value} on {domino.name}")
