"""Backtracking Magnets solver with MRV, LCV, and pluggable propagation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

from .arcs import Arc, conflicting_value, generate_arcs
from .consistency import is_consistent
from .model import Assignment, Domains, Orientation, adjacent_cells, copy_domains
from .propagation import propagate
from src.utils.trace import Tracer, get_tracer

if TYPE_CHECKING:
    from .puzzle import MagnetsPuzzle

# Extra LCV weight when a value would wipe out a neighbour's last candidate.
WIPEOUT_PENALTY = 5


@dataclass
class NodeBudget:
    """Search-node allowance; `None` means unlimited."""

    remaining: Optional[int] = None
    exhausted: bool = False

    def spend(self) -> bool:
        if self.remaining is None:
            return True
        if self.remaining <= 0:
            self.exhausted = True
            return False
        self.remaining -= 1
        return True


def solve(
    puzzle: MagnetsPuzzle,
    node_budget: Optional[int] = None,
    tracer: Optional[Tracer] = None,
) -> Optional[Assignment]:
    """
    Solve a Magnets puzzle by depth-first backtracking.
    Returns one orientation per domino, or None when no solution exists (or the
    node budget ran out). On success the solution is left on `puzzle.board`.
    """
    tracer = tracer or get_tracer()
    board = puzzle.board
    board.clear()

    domains = puzzle.initial_domains()
    initial_arcs: List[Arc] = []
    for domino in puzzle.dominoes:
        initial_arcs.extend(generate_arcs(puzzle, domino.index, board.assignment))
    feasible, domains = propagate(
        puzzle.inference, puzzle, initial_arcs, domains, board.assignment, tracer
    )
    if not feasible:
        return None

    budget = NodeBudget(remaining=node_budget)
    result = _backtrack(puzzle, domains, budget, tracer)
    if result is not None:
        board.apply(result)
    return result


def _backtrack(
    puzzle: MagnetsPuzzle,
    domains: Domains,
    budget: NodeBudget,
    tracer: Optional[Tracer] = None,
) -> Optional[Assignment]:
    tracer = tracer or get_tracer()
    if not budget.spend():
        tracer.log_budget_exhausted()
        return None

    board = puzzle.board
    assignment = board.assignment
    if board.is_complete():
        # Lines without any domino are only checked here.
        if not board.quotas_met():
            return None
        tracer.log_solution_found(assignment_size=len(assignment))
        return list(assignment)

    var = _select_unassigned_variable(assignment, domains)
    if var is None:
        return None
    domino = puzzle.dominoes[var]

    for value in _order_domain_values(puzzle, var, domains, assignment):
        with board.placed(domino, value) as applied:
            if not applied:
                continue
            tracer.log_assign(
                variable=domino.name,
                value=value.value,
                domain_size=len(domains[var]),
                assignment_size=sum(1 for v in assignment if v is not Orientation.UNRESOLVED),
            )
            if not is_consistent(board, domino):
                tracer.log_constraint_check(f"{domino.name}={value.value}", False, variable=domino.name)
                continue

            local_domains = copy_domains(domains)
            local_domains[var] = [value]
            arcs = generate_arcs(puzzle, var, assignment)
            feasible, local_domains = propagate(
                puzzle.inference, puzzle, arcs, local_domains, assignment, tracer
            )
            if not feasible:
                continue

            result = _backtrack(puzzle, local_domains, budget, tracer)
            if result is not None:
                return result
            if budget.exhausted:
                return None

    tracer.log_backtrack(domino.name)
    return None


def _select_unassigned_variable(assignment: Assignment, domains: Domains) -> Optional[int]:
    unassigned = [i for i, value in enumerate(assignment) if value is Orientation.UNRESOLVED]
    if not unassigned:
        return None
    # Minimum Remaining Values (MRV) heuristic, lowest index on ties.
    return min(unassigned, key=lambda i: (len(domains[i]), i))


def _order_domain_values(
    puzzle: MagnetsPuzzle, var: int, domains: Domains, assignment: Assignment
) -> List[Orientation]:
    # Least Constraining Value first; sort is stable so ties keep domain order.
    scored: List[Tuple[int, Orientation]] = [
        (_constraint_score(puzzle, var, value, domains, assignment), value)
        for value in domains[var]
    ]
    scored.sort(key=lambda item: item[0])
    return [value for _, value in scored]


def _constraint_score(
    puzzle: MagnetsPuzzle,
    var: int,
    value: Orientation,
    domains: Domains,
    assignment: Assignment,
) -> int:
    """How many neighbour candidates `value` would rule out through adjacency."""
    score = 0
    domino = puzzle.dominoes[var]
    for pole, cell in enumerate(domino.poles):
        for neighbor_cell in adjacent_cells(puzzle.rows, puzzle.cols, cell):
            neighbor = puzzle.owner_of(neighbor_cell)
            if neighbor is None or neighbor == var:
                continue
            if assignment[neighbor] is not Orientation.UNRESOLVED:
                continue
            neighbor_pole = puzzle.dominoes[neighbor].pole_of(neighbor_cell)
            conflict = conflicting_value(value, pole, neighbor_pole)
            if conflict is not None and conflict in domains[neighbor]:
                score += 1
                if len(domains[neighbor]) == 1:
                    score += WIPEOUT_PENALTY
    return score
