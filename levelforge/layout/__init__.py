"""Public layout package interface."""

from .catalog import CatalogResolver, RoomKind, RoomTemplate  # noqa: F401
from .config import LayoutConfig, MAX_ITERATIONS  # noqa: F401
from .errors import (  # noqa: F401
    ConfigurationError,
    GenerationCancelled,
    InvariantViolation,
    LayoutError,
    NoMatchingTemplate,
    OverlapConflict,
    PlacementExhausted,
    RecoverableLayoutError,
    RegenerationExhausted,
)
from .geometry import Direction, Vec3  # noqa: F401
from .grid import GridModel  # noqa: F401
from .pipeline import (  # noqa: F401
    AttemptContext,
    CancellationToken,
    GenerationResult,
    GenerationStatus,
    LevelGenerator,
    Phase,
    generate_layout,
)
from .rooms import Door, PlacedHallway, PlacedRoom  # noqa: F401
from .topology import ShapeCategory, classify  # noqa: F401

__all__ = [
    "AttemptContext",
    "CancellationToken",
    "CatalogResolver",
    "ConfigurationError",
    "Direction",
    "Door",
    "GenerationCancelled",
    "GenerationResult",
    "GenerationStatus",
    "GridModel",
    "InvariantViolation",
    "LayoutConfig",
    "LayoutError",
    "LevelGenerator",
    "MAX_ITERATIONS",
    "NoMatchingTemplate",
    "OverlapConflict",
    "Phase",
    "PlacedHallway",
    "PlacedRoom",
    "PlacementExhausted",
    "RecoverableLayoutError",
    "RegenerationExhausted",
    "RoomKind",
    "RoomTemplate",
    "ShapeCategory",
    "Vec3",
    "classify",
    "generate_layout",
]
