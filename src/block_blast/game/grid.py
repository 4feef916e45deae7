from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Optional

import numpy as np

from .figure import Figure


_OPPOSITE = {"up": "down", "down": "up", "left": "right", "right": "left"}


class Anchor(NamedTuple):
    """Board position a figure's local origin is placed at."""

    row: int
    col: int


@dataclass(eq=False)
class Cell:
    row: int
    col: int
    occupied: bool = False
    color: Optional[str] = None
    neighbors: Dict[str, "Cell"] = field(default_factory=dict, repr=False)

    def add_neighbor(self, direction: str, cell: "Cell") -> None:
        if direction not in _OPPOSITE:
            raise ValueError(f"Invalid direction: {direction}")
        self.neighbors[direction] = cell
        cell.neighbors[_OPPOSITE[direction]] = self

    def set_occupied(self, occupied: bool, color: Optional[str] = None) -> None:
        self.occupied = occupied
        self.color = color if occupied else None


class GameGrid:
    """N x N board of cells for block placement.

    Cells are stored row-major and addressed by (row, col). Queries never
    mutate; placing and clearing are explicit calls made by the session.
    """

    def __init__(self, n: int = 10, board_size: float = 0.0) -> None:
        self.n = int(n)
        # Pixel size is only used by the coordinate bridges
        self.board_size = float(board_size) if board_size else float(self.n)
        self.cell_size = self.board_size / self.n
        self.cells: List[Cell] = [Cell(r, c) for r in range(self.n) for c in range(self.n)]
        for r in range(self.n):
            for c in range(self.n):
                cell = self.cells[r * self.n + c]
                if c != self.n - 1:
                    cell.add_neighbor("right", self.cells[r * self.n + c + 1])
                if r != self.n - 1:
                    cell.add_neighbor("down", self.cells[(r + 1) * self.n + c])

    def reset(self) -> None:
        self.clear_cells(self.cells)

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        if row < 0 or row >= self.n or col < 0 or col >= self.n:
            return None
        return self.cells[row * self.n + col]

    def find_figure_intersection(self, figure: Figure, anchor: Anchor) -> Optional[List[Cell]]:
        """Cells the figure would cover at `anchor`, or None if it does not fit."""
        row, col = anchor
        cells: List[Cell] = []
        for p in figure.points:
            cell = self.get_cell(row + p.y, col + p.x)
            if cell is None or cell.occupied:
                return None
            cells.append(cell)
        return cells

    def fit_positions(self, figure: Figure) -> List[Anchor]:
        """Every anchor at which `figure` fits, scanned row by row."""
        anchors: List[Anchor] = []
        for r in range(self.n):
            for c in range(self.n):
                if self.find_figure_intersection(figure, Anchor(r, c)) is not None:
                    anchors.append(Anchor(r, c))
        return anchors

    def fits_anywhere(self, figure: Figure) -> bool:
        for r in range(self.n - figure.height + 1):
            for c in range(self.n - figure.width + 1):
                if self.find_figure_intersection(figure, Anchor(r, c)) is not None:
                    return True
        return False

    def occupancy(self) -> np.ndarray:
        """Boolean (n, n) occupancy matrix."""
        occ = np.fromiter((cell.occupied for cell in self.cells), dtype=np.bool_, count=self.n * self.n)
        return occ.reshape(self.n, self.n)

    def complete_rows(self) -> List[int]:
        return [int(r) for r in np.flatnonzero(self.occupancy().all(axis=1))]

    def complete_columns(self) -> List[int]:
        return [int(c) for c in np.flatnonzero(self.occupancy().all(axis=0))]

    def get_complete_row_cells(self) -> List[Cell]:
        cells: List[Cell] = []
        for r in self.complete_rows():
            cells.extend(self.cells[r * self.n : (r + 1) * self.n])
        return cells

    def get_complete_column_cells(self) -> List[Cell]:
        cells: List[Cell] = []
        for c in self.complete_columns():
            cells.extend(self.cells[r * self.n + c] for r in range(self.n))
        return cells

    def occupy_cells(self, cells: Iterable[Cell], color: Optional[str] = None) -> None:
        for cell in cells:
            cell.set_occupied(True, color)

    def clear_cells(self, cells: Iterable[Optional[Cell]]) -> None:
        for cell in cells:
            if cell is not None:
                cell.set_occupied(False)

    def get_filled_ratio(self) -> float:
        return float(self.occupancy().sum()) / float(self.n * self.n)

    def to_grid_coordinates(self, x: float, y: float) -> Anchor:
        """Nearest (row, col) for a pixel position."""
        col = round(x / self.board_size * self.n)
        row = round(y / self.board_size * self.n)
        return Anchor(int(row), int(col))

    def to_world_coordinates(self, row: int, col: int) -> tuple[float, float]:
        return col / self.n * self.board_size, row / self.n * self.board_size
