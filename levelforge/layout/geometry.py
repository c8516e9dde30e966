"""Grid directions, world vectors and yaw rotation.

Grid cell (x, y) maps to world (x * spacing, 0, y * spacing), so grid +y is
world +Z. Yaw is measured in degrees about the vertical axis, clockwise when
seen from above: yaw 90 turns a TOP-facing door into a RIGHT-facing one.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Iterable, NamedTuple, Tuple, FrozenSet

Coord2D = Tuple[int, int]

YAWS = (0, 90, 180, 270)


class Direction(Enum):
    TOP = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)
    DOWN = (0, -1)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITE[self]

    @property
    def along_z(self) -> bool:
        return self.dx == 0

    def step(self, cell: Coord2D) -> Coord2D:
        return (cell[0] + self.dx, cell[1] + self.dy)

    def rotated(self, yaw: int) -> "Direction":
        idx = _CLOCKWISE.index(self)
        return _CLOCKWISE[(idx + (yaw % 360) // 90) % 4]

    def vector(self) -> "Vec3":
        return Vec3(self.dx, 0, self.dy)

    @classmethod
    def between(cls, src: Coord2D, dst: Coord2D) -> "Direction":
        """Direction of the cardinal step from ``src`` to ``dst``."""
        delta = (dst[0] - src[0], dst[1] - src[1])
        for d in cls:
            if d.value == delta:
                return d
        raise ValueError(f"{src} and {dst} are not cardinal neighbors")


_CLOCKWISE = (Direction.TOP, Direction.RIGHT, Direction.DOWN, Direction.LEFT)
_OPPOSITE = {
    Direction.TOP: Direction.DOWN,
    Direction.DOWN: Direction.TOP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

# Order used when probing for an open neighbor (special room insertion, fallbacks)
PRIORITY = (Direction.TOP, Direction.DOWN, Direction.RIGHT, Direction.LEFT)


def rotate_directions(directions: Iterable[Direction], yaw: int) -> FrozenSet[Direction]:
    return frozenset(d.rotated(yaw) for d in directions)


class Vec3(NamedTuple):
    x: float
    y: float
    z: float

    def plus(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def scaled(self, k: float) -> "Vec3":
        return Vec3(self.x * k, self.y * k, self.z * k)

    def floored(self) -> "Vec3":
        return Vec3(math.floor(self.x), math.floor(self.y), math.floor(self.z))

    def distance_to(self, other: "Vec3") -> float:
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2)

    def rotated(self, yaw: int) -> "Vec3":
        """Rotate about the vertical axis (clockwise from above)."""
        rad = math.radians(yaw % 360)
        c, s = round(math.cos(rad)), round(math.sin(rad))
        return Vec3(self.x * c + self.z * s, self.y, -self.x * s + self.z * c)

    def to_list(self):
        return [self.x, self.y, self.z]


def cell_to_world(cell: Coord2D, spacing: int) -> Vec3:
    return Vec3(cell[0] * spacing, 0, cell[1] * spacing)


__all__ = ["Coord2D", "YAWS", "Direction", "PRIORITY", "Vec3", "rotate_directions", "cell_to_world"]
