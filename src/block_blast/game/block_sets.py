from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .custom_sets import CustomBlockSetRecord, CustomBlockSetStore, build_custom_shape_record
from .errors import DuplicateShapeError
from .figure import CoordinatePair, Figure, PointLike, as_points, normalize_points
from .rotations import DEFAULT_ROTATION_ANGLES, generate_rotations, rotation_keys

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SET_ID = "classic"


@dataclass(frozen=True)
class ShapeDefinition:
    """Base shape plus the clockwise angles it may appear at (None = all four)."""

    coordinates: Tuple[CoordinatePair, ...]
    rotation_angles: Optional[Tuple[int, ...]] = None

    @classmethod
    def of(cls, points: Iterable[PointLike], angles: Optional[Iterable[int]] = None) -> "ShapeDefinition":
        return cls(tuple(as_points(points)), tuple(angles) if angles is not None else None)


@dataclass(frozen=True)
class BlockSetDefinition:
    id: str
    name: str
    description: str
    shapes: Tuple[ShapeDefinition, ...]


@dataclass
class BlockSetSummary:
    id: str
    name: str
    description: str
    shapes: List[Figure] = field(default_factory=list)
    preview_shapes: List[Figure] = field(default_factory=list)


CLASSIC_SHAPES: Tuple[ShapeDefinition, ...] = (
    ShapeDefinition.of([(0, 0)]),
    ShapeDefinition.of([(0, 0), (0, 1)]),
    ShapeDefinition.of([(0, 0), (0, 1), (0, 2)]),
    ShapeDefinition.of([(0, 0), (0, 1), (0, 2), (0, 3)]),
    ShapeDefinition.of([(0, 0), (0, 1), (1, 0), (1, 1)], angles=[0]),
    ShapeDefinition.of([(0, 0), (0, 1), (1, 1)]),
    ShapeDefinition.of([(0, 0), (0, 1), (1, 1), (2, 1)]),
    ShapeDefinition.of([(0, 0), (0, 1), (0, 2), (1, 2)]),
    ShapeDefinition.of([(0, 1), (1, 1), (2, 1), (1, 0)]),
    ShapeDefinition.of([(0, 0), (1, 0), (1, 1), (2, 1)]),
)

BIG_SQUARE = ShapeDefinition.of([(x, y) for y in range(3) for x in range(3)], angles=[0])

BUILT_IN_BLOCK_SETS: Tuple[BlockSetDefinition, ...] = (
    BlockSetDefinition(
        id="classic",
        name="Classic",
        description="Balanced starter pieces that keep the board approachable.",
        shapes=CLASSIC_SHAPES,
    ),
    BlockSetDefinition(
        id="expanded",
        name="Expanded",
        description="Adds a chunky 3x3 block for big clears (and bigger jams).",
        shapes=CLASSIC_SHAPES + (BIG_SQUARE,),
    ),
)


def build_shape_roster(definitions: Sequence[ShapeDefinition]) -> List[Figure]:
    """Every allowed rotation of every base shape, deduplicated per shape."""
    roster: List[Figure] = []
    for definition in definitions:
        roster.extend(generate_rotations(definition.coordinates, definition.rotation_angles))
    return roster


def build_preview_shapes(definitions: Sequence[ShapeDefinition]) -> List[Figure]:
    return [Figure.from_points(definition.coordinates) for definition in definitions]


def summarize(definition: BlockSetDefinition) -> BlockSetSummary:
    return BlockSetSummary(
        id=definition.id,
        name=definition.name,
        description=definition.description,
        shapes=build_shape_roster(definition.shapes),
        preview_shapes=build_preview_shapes(definition.shapes),
    )


def custom_record_definitions(record: CustomBlockSetRecord) -> List[ShapeDefinition]:
    return [ShapeDefinition.of(shape.points, shape.rotation_angles) for shape in record.shapes]


def summarize_custom(record: CustomBlockSetRecord) -> BlockSetSummary:
    definitions = custom_record_definitions(record)
    return BlockSetSummary(
        id=record.id,
        name=record.name,
        description=record.description,
        shapes=build_shape_roster(definitions),
        preview_shapes=build_preview_shapes(definitions),
    )


def build_shape_key_set(record: Optional[CustomBlockSetRecord]) -> Set[str]:
    """Rotation keys of every shape already registered in `record`."""
    keys: Set[str] = set()
    if record is None:
        return keys
    for shape in record.shapes:
        keys.update(rotation_keys(shape.points))
    return keys


def has_shape_collision(keys: Set[str], candidate: Sequence[PointLike]) -> bool:
    """True when `candidate` or any of its rotations is already in `keys`."""
    return any(key in keys for key in rotation_keys(candidate))


def append_shape_keys(keys: Set[str], candidate: Sequence[PointLike]) -> None:
    keys.update(rotation_keys(candidate))


@dataclass
class ImportResult:
    added: int
    skipped: int
    record: Optional[CustomBlockSetRecord] = None


class BlockSetRegistry:
    """Built-in block sets plus the user's custom sets.

    Unknown, missing and empty custom ids resolve to the default built-in set.
    """

    def __init__(
        self,
        definitions: Sequence[BlockSetDefinition] = BUILT_IN_BLOCK_SETS,
        custom_store: Optional[CustomBlockSetStore] = None,
        default_block_set_id: str = DEFAULT_BLOCK_SET_ID,
    ) -> None:
        self.definitions = tuple(definitions)
        if not any(d.id == default_block_set_id for d in self.definitions):
            raise ValueError(f"default block set {default_block_set_id!r} is not a built-in set")
        self.default_block_set_id = default_block_set_id
        self.custom_store = custom_store if custom_store is not None else CustomBlockSetStore()
        self._built_ins = {d.id: summarize(d) for d in self.definitions}

    def built_in_summaries(self) -> List[BlockSetSummary]:
        return [self._copy(self._built_ins[d.id]) for d in self.definitions]

    def custom_summaries(self) -> List[BlockSetSummary]:
        return [summarize_custom(record) for record in self.custom_store.records()]

    def block_sets(self) -> List[BlockSetSummary]:
        return self.built_in_summaries() + self.custom_summaries()

    def is_built_in(self, block_set_id: Optional[str]) -> bool:
        return block_set_id in self._built_ins

    def resolve(self, block_set_id: Optional[str]) -> BlockSetSummary:
        if block_set_id:
            if self.is_built_in(block_set_id):
                return self._copy(self._built_ins[block_set_id])
            record = self.custom_store.get(block_set_id)
            if record is not None:
                summary = summarize_custom(record)
                if summary.shapes:
                    return summary
                logger.debug("Custom block set %s has no shapes; using default", block_set_id)
            else:
                logger.debug("Unknown block set %s; using default", block_set_id)
        return self._copy(self._built_ins[self.default_block_set_id])

    def get_roster(self, block_set_id: Optional[str]) -> List[Figure]:
        return self.resolve(block_set_id).shapes

    def block_set_name(self, block_set_id: Optional[str]) -> str:
        return self.resolve(block_set_id).name

    def random_shape_for(self, block_set_id: Optional[str], rng: Optional[random.Random] = None) -> Figure:
        """Uniform pick over the expanded roster, so each rotation variant counts once."""
        shapes = self.resolve(block_set_id).shapes
        return (rng or random).choice(shapes)

    def shape_definitions_for(self, block_set_id: str) -> List[ShapeDefinition]:
        """Base shapes of a set; empty for unknown ids (no fallback here)."""
        for definition in self.definitions:
            if definition.id == block_set_id:
                return list(definition.shapes)
        record = self.custom_store.get(block_set_id)
        if record is None:
            return []
        return custom_record_definitions(record)

    def add_custom_shape(
        self,
        block_set_id: str,
        label: Optional[str] = None,
        blueprint: Optional[str] = None,
        coordinates: Optional[Iterable[PointLike]] = None,
        rotation_angles: Optional[Iterable[int]] = None,
    ) -> CustomBlockSetRecord:
        """Append a shape to a custom set, refusing rotation-equivalent duplicates."""
        target = self.custom_store.require(block_set_id)
        shape = build_custom_shape_record(
            label=label,
            blueprint=blueprint,
            coordinates=coordinates,
            rotation_angles=rotation_angles,
            clock=self.custom_store.clock,
        )
        if has_shape_collision(build_shape_key_set(target), shape.points):
            raise DuplicateShapeError("That shape (or one of its rotations) already exists in this set.")
        target.shapes.append(shape)
        return self.custom_store.save(target)

    def import_shapes(self, source_id: str, target_id: str) -> ImportResult:
        """Copy base shapes of another set into a custom set, skipping duplicates."""
        target = self.custom_store.require(target_id)
        definitions = self.shape_definitions_for(source_id)
        if not definitions:
            return ImportResult(added=0, skipped=0, record=target)
        source_name = self.block_set_name(source_id)
        keys = build_shape_key_set(target)
        added = 0
        skipped = 0
        for index, definition in enumerate(definitions):
            coordinates = normalize_points(definition.coordinates)
            if has_shape_collision(keys, coordinates):
                skipped += 1
                continue
            angles = (
                list(definition.rotation_angles)
                if definition.rotation_angles is not None
                else list(DEFAULT_ROTATION_ANGLES)
            )
            target.shapes.append(
                build_custom_shape_record(
                    label=f"{source_name} {index + 1}",
                    coordinates=coordinates,
                    rotation_angles=angles,
                    clock=self.custom_store.clock,
                )
            )
            append_shape_keys(keys, coordinates)
            added += 1
        if added:
            target = self.custom_store.save(target)
        logger.info("Imported %d shapes from %s into %s (skipped %d)", added, source_id, target_id, skipped)
        return ImportResult(added=added, skipped=skipped, record=target)

    @staticmethod
    def _copy(summary: BlockSetSummary) -> BlockSetSummary:
        # Figures are immutable; copying the lists is enough
        return BlockSetSummary(
            summary.id, summary.name, summary.description, list(summary.shapes), list(summary.preview_shapes)
        )
