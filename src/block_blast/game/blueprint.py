from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .errors import EmptyBlueprintError, NoFilledCellsError, RowTooWideError, TooManyRowsError
from .figure import CoordinatePair, PointLike, as_points, normalize_points

BLUEPRINT_MAX_DIMENSION = 8
FILLED_CHARS = frozenset("#Xx1@")


@dataclass(frozen=True)
class ParsedBlueprint:
    blueprint: str
    coordinates: Tuple[CoordinatePair, ...]
    width: int
    height: int


def is_filled_char(char: str) -> bool:
    return char in FILLED_CHARS


def _blueprint_rows(text: str) -> List[str]:
    rows = [line.replace("\t", " ").rstrip() for line in (text or "").splitlines()]
    return [row for row in rows if row.strip()]


def parse_shape_blueprint(text: str) -> ParsedBlueprint:
    """Parse an ASCII shape drawing into normalized coordinates.

    Filled cells are marked with any of ``# X x 1 @``; every other character
    is empty. The returned blueprint is re-rendered from the normalized
    points, so indentation in the input does not survive.
    """
    rows = _blueprint_rows(text)
    if not rows:
        raise EmptyBlueprintError("Provide at least one row of characters.")
    if len(rows) > BLUEPRINT_MAX_DIMENSION:
        raise TooManyRowsError(f"Blueprints are limited to {BLUEPRINT_MAX_DIMENSION} rows.")

    coordinates: List[CoordinatePair] = []
    for row_index, row in enumerate(rows):
        if len(row) > BLUEPRINT_MAX_DIMENSION:
            raise RowTooWideError(f"Each row is limited to {BLUEPRINT_MAX_DIMENSION} characters.")
        for col, char in enumerate(row):
            if is_filled_char(char):
                coordinates.append(CoordinatePair(col, row_index))

    if not coordinates:
        raise NoFilledCellsError("Use #, X, or 1 to mark filled cells.")

    normalized = normalize_points(coordinates)
    return ParsedBlueprint(
        blueprint=shape_to_blueprint(normalized),
        coordinates=tuple(normalized),
        width=max(p.x for p in normalized) + 1,
        height=max(p.y for p in normalized) + 1,
    )


def shape_to_blueprint(points: Iterable[PointLike]) -> str:
    """Render points as rows of '#' and '.'; expects normalized points."""
    pts = as_points(points)
    if not pts:
        return ""
    width = max(p.x for p in pts) + 1
    height = max(p.y for p in pts) + 1
    grid = [["."] * width for _ in range(height)]
    for p in pts:
        grid[p.y][p.x] = "#"
    return "\n".join("".join(row) for row in grid)
