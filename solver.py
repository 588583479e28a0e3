"""Top-level Magnets solve interface.

Expose `solve_puzzle(puzzle)` that accepts either a pre-built `MagnetsPuzzle` or a
raw puzzle record compatible with `src.magnets.parser.parse_puzzle`.
"""

from typing import Any, List, Optional, Union

from src.magnets import solver_core
from src.magnets.model import InferenceMode, Orientation
from src.magnets.parser import parse_puzzle
from src.magnets.puzzle import MagnetsPuzzle


def solve_puzzle(
    puzzle: Any,
    inference: Optional[Union[InferenceMode, str]] = None,
    node_budget: Optional[int] = None,
) -> Optional[List[Orientation]]:
    """
    Solve a puzzle and return one orientation per domino, or None if unsolvable.
    Accepts:
      - MagnetsPuzzle instances (used directly; `inference` overrides their mode)
      - Raw puzzle dictionaries (parsed via `parse_puzzle`)
    """
    if isinstance(puzzle, MagnetsPuzzle):
        magnets = puzzle
        if inference is not None:
            magnets.inference = (
                inference if isinstance(inference, InferenceMode) else InferenceMode.parse(inference)
            )
    elif isinstance(puzzle, dict):
        magnets = parse_puzzle(puzzle, inference=inference)
    else:
        raise TypeError("solve_puzzle expects a MagnetsPuzzle instance or puzzle dictionary")

    return solver_core.solve(magnets, node_budget=node_budget)


__all__ = ["solve_puzzle"]
