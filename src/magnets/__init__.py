"""Magnets puzzle model, constraint propagation, and backtracking solver."""

from .model import Axis, CellMark, Domino, InferenceMode, Orientation, Targets, derive_layout
from .board import Board, BoardInvariantError
from .puzzle import MagnetsPuzzle
from .solver_core import solve
from .parser import parse_puzzle, parse_puzzle_text

__all__ = [
    "Axis",
    "CellMark",
    "Domino",
    "InferenceMode",
    "Orientation",
    "Targets",
    "derive_layout",
    "Board",
    "BoardInvariantError",
    "MagnetsPuzzle",
    "solve",
    "parse_puzzle",
    "parse_puzzle_text",
]
