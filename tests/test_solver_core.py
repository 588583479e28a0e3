"""Unit and scenario tests for the backtracking search driver."""

from src.magnets import solver_core
from src.magnets.model import CellMark, Orientation
from src.magnets.parser import parse_puzzle
from src.utils.trace import Tracer

F, R, V = Orientation.FORWARD, Orientation.REVERSE, Orientation.VACANT


def _record(rows, cols, row_pos, row_neg, col_pos, col_neg, board):
    return {
        "rows": rows,
        "cols": cols,
        "row_pos": row_pos,
        "row_neg": row_neg,
        "col_pos": col_pos,
        "col_neg": col_neg,
        "board": board,
    }


def test_mrv_picks_smallest_domain_then_lowest_index():
    assignment = [Orientation.UNRESOLVED] * 4
    domains = [[F, R, V], [F, V], [R, V], [F]]
    assignment[3] = F
    assert solver_core._select_unassigned_variable(assignment, domains) == 1


def test_mrv_returns_none_when_everything_is_assigned():
    assert solver_core._select_unassigned_variable([F, V], [[F], [V]]) is None


def test_lcv_orders_least_disruptive_value_first(grid_4x4):
    domains = grid_4x4.initial_domains()
    domains[3] = [F]
    assignment = grid_4x4.board.assignment

    assert solver_core._constraint_score(grid_4x4, 0, F, domains, assignment) == 8
    assert solver_core._constraint_score(grid_4x4, 0, R, domains, assignment) == 2
    assert solver_core._constraint_score(grid_4x4, 0, V, domains, assignment) == 0
    assert solver_core._order_domain_values(grid_4x4, 0, domains, assignment) == [V, R, F]


def test_lcv_keeps_domain_order_on_ties(single_domino):
    domains = single_domino.initial_domains()
    order = solver_core._order_domain_values(single_domino, 0, domains, single_domino.board.assignment)
    assert order == [F, R, V]


def test_single_vertical_domino_solves_forward(single_domino, inference):
    single_domino.inference = inference
    solution = solver_core.solve(single_domino, tracer=Tracer())

    assert solution == [F]
    marks = single_domino.cell_marks()
    assert marks == [
        [CellMark.POSITIVE, CellMark.EMPTY],
        [CellMark.NEGATIVE, CellMark.EMPTY],
    ]


def test_grid_without_dominoes_is_trivially_solved():
    puzzle = parse_puzzle(_record(1, 1, [0], [0], [0], [0], [[2]]))
    assert solver_core.solve(puzzle, tracer=Tracer()) == []


def test_ownerless_line_cannot_carry_charges():
    puzzle = parse_puzzle(_record(1, 1, [1], [0], [1], [0], [[2]]))
    assert solver_core.solve(puzzle, tracer=Tracer()) is None


def test_row_demanding_more_poles_than_it_has_is_unsolvable(inference):
    puzzle = parse_puzzle(_record(1, 2, [2], [0], [1, 1], [0, 0], [[0, 2]]))
    puzzle.inference = inference
    fresh = puzzle.board.snapshot()

    assert solver_core.solve(puzzle, tracer=Tracer()) is None
    assert puzzle.board.snapshot() == fresh


def test_solves_4x4_with_either_propagator(grid_4x4, inference, solution_checker):
    grid_4x4.inference = inference
    solution = solver_core.solve(grid_4x4, tracer=Tracer())

    marks = solution_checker(grid_4x4, solution)
    assert grid_4x4.cell_marks() == marks


def test_solves_4x6_with_either_propagator(grid_4x6, inference, solution_checker):
    grid_4x6.inference = inference
    solution = grid_4x6.solve()

    solution_checker(grid_4x6, solution)
    assert grid_4x6.board.quotas_met()


def test_solving_twice_gives_the_same_answer(grid_4x4):
    first = solver_core.solve(grid_4x4, tracer=Tracer())
    second = solver_core.solve(grid_4x4, tracer=Tracer())
    assert first == second


def test_node_budget_stops_search(grid_4x6):
    tracer = Tracer()
    assert solver_core.solve(grid_4x6, node_budget=1, tracer=tracer) is None

    summary = tracer.summary()
    assert summary["budget_exhausted"]
    assert summary["num_assignments"] >= 1
    assert summary["action_counts"].get("solution_found") is None
    assert all(mark is CellMark.UNMARKED for row in grid_4x6.cell_marks() for mark in row)


def test_generous_node_budget_still_solves(grid_4x6, solution_checker):
    solution = solver_core.solve(grid_4x6, node_budget=10_000, tracer=Tracer())
    solution_checker(grid_4x6, solution)


def test_node_budget_counts_down():
    budget = solver_core.NodeBudget(remaining=2)
    assert budget.spend() and budget.spend()
    assert not budget.spend()
    assert budget.exhausted

    unlimited = solver_core.NodeBudget()
    assert all(unlimited.spend() for _ in range(100))
    assert not unlimited.exhausted
