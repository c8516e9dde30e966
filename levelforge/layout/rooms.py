"""Placed room/hallway records and the layout assembler."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .catalog import CatalogResolver, Resolution, RoomKind, RoomTemplate
from .config import LayoutConfig
from .geometry import Coord2D, Direction, Vec3, cell_to_world
from .grid import GridModel
from .topology import ShapeCategory, classify


@dataclass(frozen=True)
class Door:
    direction: Direction
    position: Vec3

    def to_dict(self):
        return {"direction": self.direction.name, "position": self.position.to_list()}


@dataclass
class PlacedRoom:
    cell: Coord2D
    position: Vec3
    yaw: int
    category: ShapeCategory
    kind: RoomKind
    template: RoomTemplate
    doors: List[Door] = field(default_factory=list)

    @property
    def door_directions(self) -> frozenset:
        return frozenset(d.direction for d in self.doors)

    def spawn_transform(self) -> Optional[Tuple[Vec3, int]]:
        """World spawn point for start rooms; None when the template has none."""
        offset = self.template.spawn_offset
        if offset is None:
            return None
        return self.position.plus(offset.rotated(self.yaw)), self.yaw

    def to_dict(self):
        return {
            "cell": list(self.cell),
            "position": self.position.to_list(),
            "yaw": self.yaw,
            "category": self.category.value,
            "kind": self.kind.value,
            "template": self.template.name,
            "doors": [d.to_dict() for d in self.doors],
        }


@dataclass
class PlacedHallway:
    position: Vec3
    yaw: int
    door: Door
    template_name: str

    def to_dict(self):
        return {
            "position": self.position.to_list(),
            "yaw": self.yaw,
            "door": self.door.to_dict(),
            "template": self.template_name,
        }


def place_room(cell: Coord2D, resolution: Resolution, kind: RoomKind, config: LayoutConfig) -> PlacedRoom:
    template, yaw = resolution
    position = cell_to_world(cell, config.room_spacing)
    half = config.room_spacing / 2
    doors = [
        Door(direction, position.plus(direction.vector().scaled(half)))
        for direction in sorted((d.rotated(yaw) for d in template.doors), key=lambda d: d.name)
    ]
    return PlacedRoom(cell, position, yaw, template.category, kind, template, doors)


def assemble(grid: GridModel, resolver: CatalogResolver, config: LayoutConfig) -> List[PlacedRoom]:
    """Place one room per filled cell; the seed cell becomes the start room.

    World positions derive from grid coordinates alone, so this step can never
    produce duplicate positions. The start room is returned first.
    """
    rooms: List[PlacedRoom] = []
    start: Optional[PlacedRoom] = None
    for cell in grid.iter_filled():
        topo = classify(grid, cell)
        kind = RoomKind.START if cell == grid.seed_cell else RoomKind.ENEMY
        room = place_room(cell, resolver.resolve(topo.category, kind, topo.directions), kind, config)
        if kind is RoomKind.START:
            start = room
        else:
            rooms.append(room)
    if start is not None:
        rooms.insert(0, start)
    return rooms


def room_at(rooms: List[PlacedRoom], cell: Coord2D) -> Optional[PlacedRoom]:
    for r in rooms:
        if r.cell == cell:
            return r
    return None


__all__ = ["Door", "PlacedRoom", "PlacedHallway", "place_room", "assemble", "room_at"]
