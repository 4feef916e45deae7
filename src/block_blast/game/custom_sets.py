from __future__ import annotations

import json
import logging
import math
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from .blueprint import parse_shape_blueprint, shape_to_blueprint
from .errors import ShapeInputError, UnknownBlockSetError
from .figure import CoordinatePair, PointLike, normalize_points
from .rotations import DEFAULT_ROTATION_ANGLES
from .storage import KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)

STORAGE_KEY = "blockgame.customBlockSets"
CUSTOM_BLOCK_SET_ID_PREFIX = "custom"
DEFAULT_SET_NAME = "Custom Block Set"
DEFAULT_SHAPE_LABEL = "Custom Shape"


def now_ms() -> int:
    return int(time.time() * 1000)


def generate_block_set_id() -> str:
    return f"{CUSTOM_BLOCK_SET_ID_PREFIX}-{uuid.uuid4()}"


def generate_shape_id() -> str:
    return f"shape-{uuid.uuid4().hex[:12]}"


def sanitize_block_set_name(name: Optional[str]) -> str:
    trimmed = (name or "").strip()
    return trimmed or DEFAULT_SET_NAME


def sanitize_shape_label(label: Optional[str]) -> str:
    trimmed = (label or "").strip()
    return trimmed or DEFAULT_SHAPE_LABEL


def ensure_rotation_angles(angles: Iterable[Any]) -> List[int]:
    """Distinct multiples of 90 in [0, 360), always including 0, at most four."""
    unique: List[int] = []
    for angle in angles:
        if isinstance(angle, bool) or not isinstance(angle, (int, float)) or not math.isfinite(angle):
            continue
        if angle != int(angle):
            continue
        normalized = int(angle) % 360
        if normalized % 90 != 0 or normalized in unique:
            continue
        unique.append(normalized)
    if 0 not in unique:
        unique.insert(0, 0)
    return unique[: len(DEFAULT_ROTATION_ANGLES)]


@dataclass
class CustomShapeRecord:
    id: str
    label: str
    blueprint: str
    points: List[CoordinatePair]
    rotation_angles: List[int] = field(default_factory=lambda: [0])
    created_at: int = 0
    updated_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "blueprint": self.blueprint,
            "points": [{"x": p.x, "y": p.y} for p in self.points],
            "rotationAngles": list(self.rotation_angles),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, raw: Any, preserve_timestamps: bool = True) -> Optional["CustomShapeRecord"]:
        """Rebuild a stored shape; returns None when it has no usable points."""
        if not isinstance(raw, dict) or not isinstance(raw.get("points"), list):
            return None
        points: List[CoordinatePair] = []
        for point in raw["points"]:
            if not isinstance(point, dict):
                continue
            x, y = point.get("x"), point.get("y")
            if _is_finite_number(x) and _is_finite_number(y):
                points.append(CoordinatePair(math.floor(x), math.floor(y)))
        if not points:
            return None
        points = normalize_points(points)
        angles = raw.get("rotationAngles")
        created_at = raw.get("createdAt") if preserve_timestamps and _is_finite_number(raw.get("createdAt")) else now_ms()
        updated_at = raw.get("updatedAt") if preserve_timestamps and _is_finite_number(raw.get("updatedAt")) else created_at
        blueprint = raw.get("blueprint")
        shape_id = raw.get("id")
        return cls(
            id=shape_id if isinstance(shape_id, str) and shape_id else generate_shape_id(),
            label=sanitize_shape_label(raw.get("label") if isinstance(raw.get("label"), str) else None),
            blueprint=blueprint if isinstance(blueprint, str) and blueprint else shape_to_blueprint(points),
            points=points,
            rotation_angles=ensure_rotation_angles(angles if isinstance(angles, list) else [0]),
            created_at=int(created_at),
            updated_at=int(updated_at),
        )

    def copy(self) -> "CustomShapeRecord":
        return CustomShapeRecord(
            self.id, self.label, self.blueprint, list(self.points), list(self.rotation_angles),
            self.created_at, self.updated_at,
        )


@dataclass
class CustomBlockSetRecord:
    id: str
    name: str
    description: str = ""
    shapes: List[CustomShapeRecord] = field(default_factory=list)
    created_at: int = 0
    updated_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "shapes": [shape.to_dict() for shape in self.shapes],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, raw: Any, preserve_timestamps: bool = True) -> "CustomBlockSetRecord":
        raw = raw if isinstance(raw, dict) else {}
        created_at = raw.get("createdAt") if preserve_timestamps and _is_finite_number(raw.get("createdAt")) else now_ms()
        updated_at = raw.get("updatedAt") if preserve_timestamps and _is_finite_number(raw.get("updatedAt")) else created_at
        shapes: List[CustomShapeRecord] = []
        if isinstance(raw.get("shapes"), list):
            for entry in raw["shapes"]:
                shape = CustomShapeRecord.from_dict(entry, preserve_timestamps)
                if shape is not None:
                    shapes.append(shape)
        set_id = raw.get("id")
        name = raw.get("name")
        description = raw.get("description")
        return cls(
            id=set_id if isinstance(set_id, str) and set_id else generate_block_set_id(),
            name=sanitize_block_set_name(name if isinstance(name, str) else None),
            description=description if isinstance(description, str) else "",
            shapes=shapes,
            created_at=int(created_at),
            updated_at=int(updated_at),
        )

    def copy(self) -> "CustomBlockSetRecord":
        return CustomBlockSetRecord(
            self.id, self.name, self.description, [s.copy() for s in self.shapes],
            self.created_at, self.updated_at,
        )


def _is_finite_number(value: Any) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, float)) and math.isfinite(value)


def build_custom_shape_record(
    label: Optional[str] = None,
    blueprint: Optional[str] = None,
    coordinates: Optional[Iterable[PointLike]] = None,
    rotation_angles: Optional[Iterable[int]] = None,
    clock: Callable[[], int] = now_ms,
) -> CustomShapeRecord:
    """Create a shape record from a blueprint (preferred) or raw coordinates."""
    if blueprint:
        parsed = parse_shape_blueprint(blueprint)
        points = list(parsed.coordinates)
        canonical = parsed.blueprint
    elif coordinates is not None:
        points = normalize_points(coordinates)
        if not points:
            raise ShapeInputError("Shape coordinates must not be empty.")
        canonical = shape_to_blueprint(points)
    else:
        raise ShapeInputError("Shape input must include a blueprint or coordinates.")
    timestamp = clock()
    return CustomShapeRecord(
        id=generate_shape_id(),
        label=sanitize_shape_label(label),
        blueprint=canonical,
        points=points,
        rotation_angles=ensure_rotation_angles(rotation_angles if rotation_angles is not None else [0]),
        created_at=timestamp,
        updated_at=timestamp,
    )


class CustomBlockSetStore:
    """User-defined block sets kept as one JSON document in a key-value store."""

    def __init__(self, store: Optional[KeyValueStore] = None, clock: Callable[[], int] = now_ms) -> None:
        self.store = store if store is not None else MemoryStore()
        self.clock = clock

    def _read(self) -> List[CustomBlockSetRecord]:
        raw = self.store.get(STORAGE_KEY)
        if not raw:
            return []
        try:
            parsed = json.loads(raw)
        except ValueError as e:
            logger.warning("Discarding corrupt custom block sets: %s", e)
            return []
        if not isinstance(parsed, list):
            logger.warning("Discarding custom block sets: expected a list, got %s", type(parsed).__name__)
            return []
        return [CustomBlockSetRecord.from_dict(entry, preserve_timestamps=True) for entry in parsed]

    def _write(self, records: List[CustomBlockSetRecord]) -> None:
        self.store.set(STORAGE_KEY, json.dumps([record.to_dict() for record in records]))

    def list_sets(self) -> List[CustomBlockSetRecord]:
        return sorted(self._read(), key=lambda record: record.name.casefold())

    def records(self) -> List[CustomBlockSetRecord]:
        """Stored order, as written."""
        return self._read()

    def get(self, block_set_id: str) -> Optional[CustomBlockSetRecord]:
        for record in self._read():
            if record.id == block_set_id:
                return record
        return None

    def require(self, block_set_id: str) -> CustomBlockSetRecord:
        record = self.get(block_set_id)
        if record is None:
            raise UnknownBlockSetError(block_set_id)
        return record

    def create(self, name: str, description: str = "") -> CustomBlockSetRecord:
        timestamp = self.clock()
        record = CustomBlockSetRecord(
            id=generate_block_set_id(),
            name=sanitize_block_set_name(name),
            description=(description or "").strip(),
            shapes=[],
            created_at=timestamp,
            updated_at=timestamp,
        )
        records = self._read()
        records.append(record)
        self._write(records)
        logger.info("Created custom block set %s (%s)", record.id, record.name)
        return record.copy()

    def save(self, record: CustomBlockSetRecord) -> CustomBlockSetRecord:
        """Insert or replace by id, stamping `updated_at`."""
        normalized = CustomBlockSetRecord.from_dict(record.to_dict(), preserve_timestamps=True)
        normalized.updated_at = self.clock()
        records = self._read()
        for index, existing in enumerate(records):
            if existing.id == normalized.id:
                records[index] = normalized
                break
        else:
            records.append(normalized)
        self._write(records)
        return normalized.copy()

    def delete(self, block_set_id: str) -> bool:
        records = self._read()
        remaining = [record for record in records if record.id != block_set_id]
        if len(remaining) == len(records):
            return False
        self._write(remaining)
        logger.info("Deleted custom block set %s", block_set_id)
        return True

    def remove_shape(self, block_set_id: str, shape_id: str) -> CustomBlockSetRecord:
        record = self.require(block_set_id)
        record.shapes = [shape for shape in record.shapes if shape.id != shape_id]
        return self.save(record)

    def toggle_rotation(self, block_set_id: str, shape_id: str, angle: int) -> CustomBlockSetRecord:
        """Opt a shape in or out of one angle; 0 always stays enabled."""
        record = self.require(block_set_id)
        normalized = int(angle) % 360
        for shape in record.shapes:
            if shape.id != shape_id:
                continue
            if normalized in shape.rotation_angles:
                remaining = [a for a in shape.rotation_angles if a != normalized]
            else:
                remaining = shape.rotation_angles + [normalized]
            shape.rotation_angles = ensure_rotation_angles(sorted(remaining))
            shape.updated_at = self.clock()
        return self.save(record)
