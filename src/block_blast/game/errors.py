from __future__ import annotations


class BlockBlastError(Exception):
    """Base class for engine errors."""


class InvalidFigureError(BlockBlastError, ValueError):
    """Figure points are empty or not normalized to a (0, 0) origin."""


class FigureBoundsError(BlockBlastError, ValueError):
    """A figure plus offset does not fit inside the board."""


class BlueprintError(BlockBlastError, ValueError):
    """A shape blueprint could not be parsed."""


class EmptyBlueprintError(BlueprintError):
    pass


class TooManyRowsError(BlueprintError):
    pass


class RowTooWideError(BlueprintError):
    pass


class NoFilledCellsError(BlueprintError):
    pass


class ShapeInputError(BlockBlastError, ValueError):
    """Custom shape input carries neither a blueprint nor coordinates."""


class DuplicateShapeError(BlockBlastError, ValueError):
    """The shape, or one of its rotations, already exists in the target set."""


class UnknownBlockSetError(BlockBlastError, KeyError):
    """Raised by authoring operations that need an existing custom set."""
