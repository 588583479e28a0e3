"""Binary constraint arcs between dominoes and the shared `revise` primitive."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from .model import (
    Assignment,
    Axis,
    CellMark,
    Domains,
    Domino,
    Line,
    Orientation,
    adjacent_cells,
    line_cells,
    pole_mark,
)

if TYPE_CHECKING:
    from .puzzle import MagnetsPuzzle


class ConstraintKind(Enum):
    ADJACENCY = "adjacency"  # poles touch: like charges forbidden
    QUOTA = "quota"  # poles share a row or column: bounded by remaining capacity


@dataclass(frozen=True)
class Arc:
    """Directed arc: `dependent`'s domain is revised against `source`."""

    dependent: int
    source: int
    kind: ConstraintKind
    source_pole: int
    dependent_pole: int
    line: Optional[Line] = None


def generate_arcs(
    puzzle: MagnetsPuzzle,
    variable: int,
    assignment: Assignment,
    exempt: Optional[int] = None,
) -> List[Arc]:
    """Arcs from `variable` toward every unresolved domino constrained by one of its poles."""
    arcs: List[Arc] = []
    domino = puzzle.dominoes[variable]

    def _target(cell) -> Optional[Domino]:
        index = puzzle.owner_of(cell)
        if index is None or index == variable or index == exempt:
            return None
        if assignment[index] is not Orientation.UNRESOLVED:
            return None
        return puzzle.dominoes[index]

    for pole, cell in enumerate(domino.poles):
        for neighbor_cell in adjacent_cells(puzzle.rows, puzzle.cols, cell):
            neighbor = _target(neighbor_cell)
            if neighbor is None:
                continue
            arcs.append(
                Arc(
                    dependent=neighbor.index,
                    source=variable,
                    kind=ConstraintKind.ADJACENCY,
                    source_pole=pole,
                    dependent_pole=neighbor.pole_of(neighbor_cell),
                )
            )

        for other_cell, line in line_cells(puzzle.rows, puzzle.cols, cell):
            neighbor = _target(other_cell)
            if neighbor is None:
                continue
            arcs.append(
                Arc(
                    dependent=neighbor.index,
                    source=variable,
                    kind=ConstraintKind.QUOTA,
                    source_pole=pole,
                    dependent_pole=neighbor.pole_of(other_cell),
                    line=line,
                )
            )
    return arcs


def conflicting_value(value: Orientation, pole: int, other_pole: int) -> Optional[Orientation]:
    """
    The orientation of a touching domino that would repeat `value`'s charge.

    If `value` puts a charge on `pole`, exactly one polar orientation of the other
    domino puts the same charge on `other_pole`; VACANT has no conflict.
    """
    if not value.is_polar:
        return None
    charge = pole_mark(value, pole)
    if pole_mark(Orientation.FORWARD, other_pole) is charge:
        return Orientation.FORWARD
    return Orientation.REVERSE


def revise(
    puzzle: MagnetsPuzzle,
    arc: Arc,
    domains: Domains,
    assignment: Assignment,
) -> Tuple[bool, bool]:
    """
    Drop dependent values with no support in the source. Returns (feasible, changed).

    A resolved source only supports through its assigned value; an unresolved one
    through any value left in its domain.
    """
    current = domains[arc.dependent]
    if assignment[arc.source] is not Orientation.UNRESOLVED:
        source_values: Sequence[Orientation] = [assignment[arc.source]]
    else:
        source_values = domains[arc.source]

    if arc.kind is ConstraintKind.ADJACENCY:
        kept = [
            value
            for value in current
            if _adjacency_supported(value, arc.dependent_pole, arc.source_pole, source_values)
        ]
    else:
        kept = _quota_supported(puzzle, arc, current, source_values)

    changed = len(kept) != len(current)
    if changed:
        domains[arc.dependent] = kept
    return bool(kept), changed


def _adjacency_supported(
    value: Orientation,
    dependent_pole: int,
    source_pole: int,
    source_values: Sequence[Orientation],
) -> bool:
    forced = conflicting_value(value, dependent_pole, source_pole)
    if forced is None:
        return True
    return list(source_values) != [forced]


def _quota_supported(
    puzzle: MagnetsPuzzle,
    arc: Arc,
    candidates: Sequence[Orientation],
    source_values: Sequence[Orientation],
) -> List[Orientation]:
    board = puzzle.board
    axis, index = arc.line
    target_pos, target_neg = puzzle.targets.for_line(axis, index)
    placed_pos, placed_neg, open_cells = board.line_counts(axis, index)

    dependent_poles = _poles_on_line(puzzle.dominoes[arc.dependent], axis, index)
    source = puzzle.dominoes[arc.source]
    source_poles = _poles_on_line(source, axis, index)

    # Take the pair's own cells out of the line totals.
    for pole in source_poles:
        mark = board.mark_at(source.poles[pole])
        if mark is CellMark.POSITIVE:
            placed_pos -= 1
        elif mark is CellMark.NEGATIVE:
            placed_neg -= 1
        elif mark is CellMark.UNMARKED:
            open_cells -= 1
    open_cells -= len(dependent_poles)

    kept: List[Orientation] = []
    for value in candidates:
        dep_pos, dep_neg = _charges(value, dependent_poles)
        for other in source_values:
            src_pos, src_neg = _charges(other, source_poles)
            pos = placed_pos + dep_pos + src_pos
            neg = placed_neg + dep_neg + src_neg
            if _line_feasible(pos, neg, open_cells, target_pos, target_neg):
                kept.append(value)
                break
    return kept


def _poles_on_line(domino: Domino, axis: Axis, index: int) -> List[int]:
    position = 0 if axis is Axis.ROW else 1
    return [pole for pole, cell in enumerate(domino.poles) if cell[position] == index]


def _charges(value: Orientation, poles: Sequence[int]) -> Tuple[int, int]:
    marks = [pole_mark(value, pole) for pole in poles]
    return marks.count(CellMark.POSITIVE), marks.count(CellMark.NEGATIVE)


def _line_feasible(pos: int, neg: int, open_cells: int, target_pos: int, target_neg: int) -> bool:
    if pos > target_pos or neg > target_neg:
        return False
    # Each remaining open cell can supply at most one more charge.
    return (target_pos - pos) + (target_neg - neg) <= open_cells
