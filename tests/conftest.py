"""Shared puzzle fixtures for the Magnets test-suite."""

import pytest

from src.magnets.model import Axis, CellMark, InferenceMode, Orientation, adjacent_cells, pole_mark
from src.magnets.parser import parse_puzzle

# Two vertical and one horizontal domino in the top rows, three horizontal at the bottom.
GRID_4X4_TEXT = """\
4 4
2 2 2 1
2 2 2 1
2 1 2 2
1 2 2 2
0 2 1 1
1 1 2 2
2 2 0 2
0 2 0 2
"""

GRID_4X6_TEXT = """\
4 6
3 3 2 3
3 3 2 3
2 2 1 2 2 2
2 1 2 2 2 2
0 2 0 2 1 1
1 0 2 1 2 2
2 0 2 2 0 2
0 2 0 2 0 2
"""

# One vertical domino in column 0; column 1 holds two ownerless cells.
SINGLE_DOMINO_RECORD = {
    "id": "single-domino",
    "rows": 2,
    "cols": 2,
    "row_pos": [1, 0],
    "row_neg": [0, 1],
    "col_pos": [1, 0],
    "col_neg": [1, 0],
    "board": [[1, 2], [2, 2]],
}


@pytest.fixture
def grid_4x4():
    return parse_puzzle({"id": "grid-4x4", "puzzle": GRID_4X4_TEXT})


@pytest.fixture
def grid_4x6():
    return parse_puzzle({"id": "grid-4x6", "puzzle": GRID_4X6_TEXT})


@pytest.fixture
def single_domino():
    return parse_puzzle(dict(SINGLE_DOMINO_RECORD))


@pytest.fixture(params=list(InferenceMode), ids=lambda mode: mode.value)
def inference(request):
    return request.param


def _marks_from_solution(puzzle, solution):
    marks = [[CellMark.EMPTY] * puzzle.cols for _ in range(puzzle.rows)]
    for domino, orientation in zip(puzzle.dominoes, solution):
        for pole, (r, c) in enumerate(domino.poles):
            marks[r][c] = pole_mark(orientation, pole)
    return marks


def check_solution(puzzle, solution):
    """Rebuild the grid from `solution` alone and check every puzzle rule."""
    assert solution is not None
    assert len(solution) == len(puzzle.dominoes)
    assert Orientation.UNRESOLVED not in solution

    marks = _marks_from_solution(puzzle, solution)
    for r in range(puzzle.rows):
        for c in range(puzzle.cols):
            mark = marks[r][c]
            if mark in (CellMark.POSITIVE, CellMark.NEGATIVE):
                for nr, nc in adjacent_cells(puzzle.rows, puzzle.cols, (r, c)):
                    assert marks[nr][nc] is not mark, f"like charges touch at {(r, c)} and {(nr, nc)}"

    for r in range(puzzle.rows):
        row = marks[r]
        expected = puzzle.targets.for_line(Axis.ROW, r)
        assert (row.count(CellMark.POSITIVE), row.count(CellMark.NEGATIVE)) == expected
    for c in range(puzzle.cols):
        col = [marks[r][c] for r in range(puzzle.rows)]
        expected = puzzle.targets.for_line(Axis.COL, c)
        assert (col.count(CellMark.POSITIVE), col.count(CellMark.NEGATIVE)) == expected
    return marks


@pytest.fixture
def solution_checker():
    return check_solution
