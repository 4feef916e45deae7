"""
Rotation variants of polyominoes.

Variants are compared by canonical key: points sorted by (y, x) and joined
as "x,y;x,y;...". Two point sets are rotation-equivalent when any of their
quarter-turn variants share a key.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .figure import CoordinatePair, Figure, PointLike, as_points, normalize_points

DEFAULT_ROTATION_ANGLES: Tuple[int, ...] = (0, 90, 180, 270)


def canonical_key(points: Iterable[PointLike]) -> str:
    pts = sorted(as_points(points), key=lambda p: (p.y, p.x))
    return ";".join(f"{p.x},{p.y}" for p in pts)


def rotate_quarter_turn(points: Sequence[PointLike]) -> List[CoordinatePair]:
    """One 90 degree turn using the width of the shape being rotated."""
    pts = as_points(points)
    width = max(p.x for p in pts) + 1
    return [CoordinatePair(p.y, width - 1 - p.x) for p in pts]


def rotate(points: Sequence[PointLike], turns: int) -> List[CoordinatePair]:
    rotated = normalize_points(points)
    if not rotated:
        return rotated
    for _ in range(turns % 4):
        rotated = normalize_points(rotate_quarter_turn(rotated))
    return rotated


def normalize_angles(angles: Optional[Iterable[int]]) -> List[int]:
    """Requested angles -> distinct quarter-turn counts, ascending.

    None means all four angles; a set with nothing usable gives [0].
    """
    source = list(DEFAULT_ROTATION_ANGLES) if angles is None else list(angles)
    turns: List[int] = []
    for angle in source:
        angle = int(angle) % 360
        if angle % 90 != 0:
            continue
        k = angle // 90
        if k not in turns:
            turns.append(k)
    return sorted(turns) or [0]


def generate_rotations(points: Sequence[PointLike], angles: Optional[Iterable[int]] = None) -> List[Figure]:
    """Distinct rotation variants of `points` for the allowed angles.

    Variants are scanned 0, 90, 180, 270 whatever order the angles were
    given in; for rotationally symmetric shapes the lowest angle wins.
    """
    variants: List[Figure] = []
    seen = set()
    for turns in normalize_angles(angles):
        rotated = rotate(points, turns)
        key = canonical_key(rotated)
        if key not in seen:
            seen.add(key)
            variants.append(Figure(tuple(rotated)))
    return variants


@dataclass(frozen=True)
class RotationDescriptor:
    angle: int
    coordinates: Tuple[CoordinatePair, ...]
    key: str
    is_duplicate_of_base: bool
    is_redundant: bool


def describe_shape_rotations(points: Sequence[PointLike]) -> List[RotationDescriptor]:
    """Report every canonical angle without filtering anything out."""
    normalized = normalize_points(points)
    base_key = canonical_key(normalized)
    seen = set()
    descriptors: List[RotationDescriptor] = []
    for angle in DEFAULT_ROTATION_ANGLES:
        rotated = rotate(normalized, angle // 90)
        key = canonical_key(rotated)
        descriptors.append(
            RotationDescriptor(
                angle=angle,
                coordinates=tuple(rotated),
                key=key,
                is_duplicate_of_base=angle != 0 and key == base_key,
                is_redundant=key in seen,
            )
        )
        seen.add(key)
    return descriptors


def rotation_keys(points: Sequence[PointLike]) -> List[str]:
    """Distinct canonical keys over all four angles, first-seen order."""
    keys: List[str] = []
    for descriptor in describe_shape_rotations(points):
        if descriptor.key not in keys:
            keys.append(descriptor.key)
    return keys
