"""Game module for Block Blast.

Exports the placement and line-clear engine:
- Figure / CoordinatePair: normalized polyomino model
- GameGrid / Cell / Anchor: board occupancy, fit tests and line scans
- generate_rotations / describe_shape_rotations: rotation variants
- parse_shape_blueprint / shape_to_blueprint: ASCII shape authoring
- BlockSetRegistry: built-in and custom block sets
- BlockBlastGame: session controller (3 pieces in play, scoring, game over)
- HighScoreStore: best score per block set
"""

from .block_sets import (
    BUILT_IN_BLOCK_SETS,
    DEFAULT_BLOCK_SET_ID,
    BlockSetDefinition,
    BlockSetRegistry,
    BlockSetSummary,
    ShapeDefinition,
    build_shape_key_set,
    has_shape_collision,
)
from .blueprint import BLUEPRINT_MAX_DIMENSION, ParsedBlueprint, parse_shape_blueprint, shape_to_blueprint
from .core import BlockBlastGame, GameConfig, PieceInPlay, PlacementResult, SessionState
from .custom_sets import (
    CustomBlockSetRecord,
    CustomBlockSetStore,
    CustomShapeRecord,
    build_custom_shape_record,
    ensure_rotation_angles,
)
from .errors import (
    BlockBlastError,
    BlueprintError,
    DuplicateShapeError,
    EmptyBlueprintError,
    FigureBoundsError,
    InvalidFigureError,
    NoFilledCellsError,
    RowTooWideError,
    ShapeInputError,
    TooManyRowsError,
    UnknownBlockSetError,
)
from .figure import CoordinatePair, Figure, GameCellRect, normalize_points
from .grid import Anchor, Cell, GameGrid
from .high_score import HighScoreSnapshot, HighScoreStore
from .rotations import (
    DEFAULT_ROTATION_ANGLES,
    RotationDescriptor,
    canonical_key,
    describe_shape_rotations,
    generate_rotations,
    rotation_keys,
)
from .rules import ScoringRules
from .storage import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "Anchor",
    "BLUEPRINT_MAX_DIMENSION",
    "BUILT_IN_BLOCK_SETS",
    "BlockBlastError",
    "BlockBlastGame",
    "BlockSetDefinition",
    "BlockSetRegistry",
    "BlockSetSummary",
    "BlueprintError",
    "Cell",
    "CoordinatePair",
    "CustomBlockSetRecord",
    "CustomBlockSetStore",
    "CustomShapeRecord",
    "DEFAULT_BLOCK_SET_ID",
    "DEFAULT_ROTATION_ANGLES",
    "DuplicateShapeError",
    "EmptyBlueprintError",
    "Figure",
    "FigureBoundsError",
    "GameCellRect",
    "GameConfig",
    "GameGrid",
    "HighScoreSnapshot",
    "HighScoreStore",
    "InvalidFigureError",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "NoFilledCellsError",
    "ParsedBlueprint",
    "PieceInPlay",
    "PlacementResult",
    "RotationDescriptor",
    "RowTooWideError",
    "ScoringRules",
    "SessionState",
    "ShapeDefinition",
    "ShapeInputError",
    "TooManyRowsError",
    "UnknownBlockSetError",
    "build_custom_shape_record",
    "build_shape_key_set",
    "canonical_key",
    "describe_shape_rotations",
    "ensure_rotation_angles",
    "generate_rotations",
    "has_shape_collision",
    "normalize_points",
    "parse_shape_blueprint",
    "rotation_keys",
    "shape_to_blueprint",
]
