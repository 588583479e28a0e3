"""Magnets core data structures: cells, dominoes, orientations and the layout deriver."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

Cell = Tuple[int, int]


class Orientation(Enum):
    FORWARD = "forward"  # pole 0 positive, pole 1 negative
    REVERSE = "reverse"  # pole 0 negative, pole 1 positive
    VACANT = "vacant"
    UNRESOLVED = "unresolved"

    @property
    def is_polar(self) -> bool:
        return self in (Orientation.FORWARD, Orientation.REVERSE)


class CellMark(Enum):
    POSITIVE = "+"
    NEGATIVE = "-"
    EMPTY = "."
    UNMARKED = "?"


class Axis(Enum):
    ROW = "row"
    COL = "col"


class InferenceMode(Enum):
    FORWARD_CHECKING = "fc"
    ARC_CONSISTENCY = "mac"

    @classmethod
    def parse(cls, raw: str) -> "InferenceMode":
        key = str(raw).strip().lower()
        for mode in cls:
            if key in (mode.value, mode.name.lower()):
                return mode
        raise ValueError(f"Unknown inference mode: {raw!r} (expected 'fc' or 'mac')")


Domains = List[List[Orientation]]
Assignment = List[Orientation]
Line = Tuple[Axis, int]

DOMAIN_VALUES: Tuple[Orientation, ...] = (
    Orientation.FORWARD,
    Orientation.REVERSE,
    Orientation.VACANT,
)


@dataclass(frozen=True)
class Domino:
    """A two-cell magnet slot. `poles[0]` is the cell whose marker started it."""

    index: int
    poles: Tuple[Cell, Cell]

    @property
    def name(self) -> str:
        return f"D{self.index}"

    def pole_of(self, cell: Cell) -> int:
        return 0 if cell == self.poles[0] else 1


@dataclass(frozen=True)
class Targets:
    row_pos: Tuple[int, ...]
    row_neg: Tuple[int, ...]
    col_pos: Tuple[int, ...]
    col_neg: Tuple[int, ...]

    def for_line(self, axis: Axis, index: int) -> Tuple[int, int]:
        if axis is Axis.ROW:
            return self.row_pos[index], self.row_neg[index]
        return self.col_pos[index], self.col_neg[index]


def pole_mark(orientation: Orientation, pole: int) -> CellMark:
    """Mark that `orientation` puts on the given pole (0 or 1)."""
    if orientation is Orientation.FORWARD:
        return CellMark.POSITIVE if pole == 0 else CellMark.NEGATIVE
    if orientation is Orientation.REVERSE:
        return CellMark.NEGATIVE if pole == 0 else CellMark.POSITIVE
    if orientation is Orientation.VACANT:
        return CellMark.EMPTY
    return CellMark.UNMARKED


def copy_domains(domains: Domains) -> Domains:
    return [list(values) for values in domains]


def adjacent_cells(rows: int, cols: int, cell: Cell) -> List[Cell]:
    row, col = cell
    neighbors: List[Cell] = []
    if row + 1 < rows:
        neighbors.append((row + 1, col))
    if row - 1 >= 0:
        neighbors.append((row - 1, col))
    if col + 1 < cols:
        neighbors.append((row, col + 1))
    if col - 1 >= 0:
        neighbors.append((row, col - 1))
    return neighbors


def line_cells(rows: int, cols: int, cell: Cell) -> List[Tuple[Cell, Line]]:
    """Every other cell sharing a column or a row with `cell`, tagged with that line."""
    row, col = cell
    cells: List[Tuple[Cell, Line]] = []
    for r in range(rows):
        if r != row:
            cells.append(((r, col), (Axis.COL, col)))
    for c in range(cols):
        if c != col:
            cells.append(((row, c), (Axis.ROW, row)))
    return cells


def derive_layout(
    markers: Sequence[Sequence[int]],
) -> Tuple[List[Domino], List[List[Optional[int]]]]:
    """
    Turn a raw marker grid into dominoes plus a cell -> domino index lookup.

    `1` starts a vertical domino with the cell below, `0` a horizontal one with
    the cell to the right; any other value is already consumed. A marker whose
    partner would fall off the grid (or was taken by an earlier domino) is
    dropped and its cell stays ownerless.
    """
    grid = [list(row) for row in markers]
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    owner: List[List[Optional[int]]] = [[None] * cols for _ in range(rows)]
    dominoes: List[Domino] = []

    for r in range(rows):
        for c in range(cols):
            marker = grid[r][c]
            if marker == 1:
                partner = (r + 1, c)
                if partner[0] >= rows:
                    continue
            elif marker == 0:
                partner = (r, c + 1)
                if partner[1] >= cols:
                    continue
            else:
                continue
            # Partner already taken by an earlier domino: same as off-grid.
            if owner[partner[0]][partner[1]] is not None:
                continue

            index = len(dominoes)
            dominoes.append(Domino(index=index, poles=((r, c), partner)))
            for pr, pc in ((r, c), partner):
                grid[pr][pc] = 2
                owner[pr][pc] = index

    return dominoes, owner
