from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, NamedTuple, Optional, Tuple

import numpy as np

from .errors import FigureBoundsError, InvalidFigureError


class CoordinatePair(NamedTuple):
    """Integer offset: x is the column, y is the row."""

    x: int
    y: int


PointLike = Tuple[int, int]


def as_points(points: Iterable[PointLike]) -> List[CoordinatePair]:
    return [CoordinatePair(int(p[0]), int(p[1])) for p in points]


def normalize_points(points: Iterable[PointLike]) -> List[CoordinatePair]:
    """Translate points so that min x and min y are both 0.

    Returns a new list in the input order; an empty input gives an empty list.
    """
    pts = as_points(points)
    if not pts:
        return []
    min_x = min(p.x for p in pts)
    min_y = min(p.y for p in pts)
    return [CoordinatePair(p.x - min_x, p.y - min_y) for p in pts]


@dataclass(frozen=True)
class GameCellRect:
    """Pixel rectangle for one figure section, with its board index."""

    x: float
    y: float
    width: float
    height: float
    row: int
    col: int


def grid_to_world(n: int, board_size: float, row: int, col: int) -> Tuple[float, float]:
    return col / n * board_size, row / n * board_size


@dataclass(frozen=True)
class Figure:
    """A normalized polyomino.

    The constructor validates rather than normalizes: callers pass points that
    already touch x == 0 and y == 0 (see `normalize_points`).
    """

    points: Tuple[CoordinatePair, ...]
    max_x: int = field(init=False, repr=False, compare=False)
    max_y: int = field(init=False, repr=False, compare=False)
    width: int = field(init=False, repr=False, compare=False)
    height: int = field(init=False, repr=False, compare=False)
    min_x: int = field(default=0, init=False, repr=False, compare=False)
    min_y: int = field(default=0, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Ordered set: keep first occurrence of each point
        pts = tuple(dict.fromkeys(as_points(self.points)))
        if not pts:
            raise InvalidFigureError("a figure needs at least one point")
        min_x = min(p.x for p in pts)
        min_y = min(p.y for p in pts)
        if min_x != 0 or min_y != 0:
            raise InvalidFigureError(f"figure is not normalized (min x={min_x}, min y={min_y})")
        max_x = max(p.x for p in pts)
        max_y = max(p.y for p in pts)
        object.__setattr__(self, "points", pts)
        object.__setattr__(self, "max_x", max_x)
        object.__setattr__(self, "max_y", max_y)
        object.__setattr__(self, "width", max_x + 1)
        object.__setattr__(self, "height", max_y + 1)

    @classmethod
    def from_points(cls, points: Iterable[PointLike]) -> "Figure":
        """Normalize then construct."""
        return cls(tuple(normalize_points(points)))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[CoordinatePair]:
        return iter(self.points)

    def to_array(self) -> np.ndarray:
        """Occupancy mask of shape (height, width)."""
        mask = np.zeros((self.height, self.width), dtype=np.int8)
        for p in self.points:
            mask[p.y, p.x] = 1
        return mask

    def to_game_cells(
        self,
        board_size: float,
        n: int,
        cell_size: float,
        offset: Optional[PointLike] = None,
    ) -> List[GameCellRect]:
        """Map each section to pixel space on an n x n board of `board_size` pixels.

        `offset` is an (x, y) shift in grid cells applied before the mapping.
        """
        off_x, off_y = (0, 0) if offset is None else (int(offset[0]), int(offset[1]))
        rects: List[GameCellRect] = []
        for p in self.points:
            row = p.y + off_y
            col = p.x + off_x
            if row >= n or col >= n:
                raise FigureBoundsError(f"section ({col}, {row}) falls outside a {n}x{n} board")
            x, y = grid_to_world(n, board_size, row, col)
            rects.append(GameCellRect(x=x, y=y, width=cell_size, height=cell_size, row=row, col=col))
        return rects
