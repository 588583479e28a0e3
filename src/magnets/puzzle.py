"""A Magnets puzzle instance: dimensions, quotas, derived layout and live board."""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .board import Board
from .model import (
    DOMAIN_VALUES,
    Assignment,
    Cell,
    CellMark,
    Domains,
    Domino,
    InferenceMode,
    Targets,
    derive_layout,
)
from . import solver_core


@dataclass
class MagnetsPuzzle:
    rows: int
    cols: int
    targets: Targets
    markers: Sequence[Sequence[int]]
    inference: InferenceMode = InferenceMode.ARC_CONSISTENCY
    dominoes: List[Domino] = field(init=False)
    owner: List[List[Optional[int]]] = field(init=False)
    board: Board = field(init=False)

    def __post_init__(self) -> None:
        if self.rows < 0 or self.cols < 0:
            raise ValueError(f"Grid dimensions must be non-negative, got {self.rows}x{self.cols}")
        if len(self.markers) != self.rows or any(len(row) != self.cols for row in self.markers):
            raise ValueError(f"Marker grid does not match {self.rows}x{self.cols}")
        for label, values, expected in (
            ("row positive", self.targets.row_pos, self.rows),
            ("row negative", self.targets.row_neg, self.rows),
            ("column positive", self.targets.col_pos, self.cols),
            ("column negative", self.targets.col_neg, self.cols),
        ):
            if len(values) != expected:
                raise ValueError(f"Expected {expected} {label} targets, got {len(values)}")
            if any(v < 0 for v in values):
                raise ValueError(f"Negative {label} target in {list(values)}")

        self.dominoes, self.owner = derive_layout(self.markers)
        self.board = Board(self.rows, self.cols, self.targets, self.dominoes, self.owner)

    def owner_of(self, cell: Cell) -> Optional[int]:
        return self.owner[cell[0]][cell[1]]

    def initial_domains(self) -> Domains:
        return [list(DOMAIN_VALUES) for _ in self.dominoes]

    def cell_marks(self) -> List[List[CellMark]]:
        return self.board.cell_marks()

    def solve(self, node_budget: Optional[int] = None) -> Optional[Assignment]:
        """First solution found by backtracking search, or None if there is none."""
        return solver_core.solve(self, node_budget=node_budget)

    def __repr__(self) -> str:
        return (
            f"MagnetsPuzzle({self.rows}x{self.cols}, dominoes={len(self.dominoes)}, "
            f"inference={self.inference.value})"
        )
