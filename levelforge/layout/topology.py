"""Neighbor topology classification for grid cells."""
from __future__ import annotations

from enum import Enum
from typing import Collection, FrozenSet, NamedTuple

from .errors import InvariantViolation
from .geometry import Coord2D, Direction
from .grid import GridModel


class ShapeCategory(Enum):
    ONE_DOOR = "one_door"
    TWO_DOOR_LINEAR = "two_door_linear"
    TWO_DOOR_CURVE = "two_door_curve"
    THREE_DOOR = "three_door"
    FOUR_DOOR = "four_door"


class Topology(NamedTuple):
    count: int
    directions: FrozenSet[Direction]

    @property
    def category(self) -> ShapeCategory:
        return shape_category(self.directions)


def classify(grid: GridModel, cell: Coord2D, ignore: Collection[Coord2D] = ()) -> Topology:
    """Count filled cardinal neighbors of ``cell``.

    Out-of-grid neighbors count as absent. Cells in ``ignore`` are treated as
    empty (used to hide special/boss cells from their non-attached neighbors).
    """
    occupied = frozenset(
        d for d in Direction if grid.is_filled(d.step(cell)) and d.step(cell) not in ignore
    )
    return Topology(len(occupied), occupied)


def shape_category(directions: Collection[Direction]) -> ShapeCategory:
    dirs = frozenset(directions)
    n = len(dirs)
    if n == 0:
        raise InvariantViolation("filled cell has no filled neighbors")
    if n == 1:
        return ShapeCategory.ONE_DOOR
    if n == 2:
        a, b = tuple(dirs)
        return ShapeCategory.TWO_DOOR_LINEAR if a.opposite is b else ShapeCategory.TWO_DOOR_CURVE
    if n == 3:
        return ShapeCategory.THREE_DOOR
    return ShapeCategory.FOUR_DOOR


__all__ = ["ShapeCategory", "Topology", "classify", "shape_category"]
