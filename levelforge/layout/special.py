"""Boss / special room injection.

Injection mutates an already valid layout: it picks an enemy room with one or
three neighbors, carves the empty cell next to it, drops a one-door special
room there facing the enemy room, and swaps the enemy room for a template
whose doors match its new neighbor set (one more door than before).

Special cells stay FILLED in the grid but are hidden from every other room's
classification, so no room other than the attached one grows a door toward a
special room.
"""
from __future__ import annotations

import random
from typing import List, NamedTuple, Optional, Set

from .catalog import CatalogResolver, RoomKind
from .config import LayoutConfig
from .errors import PlacementExhausted
from .geometry import PRIORITY, Coord2D, Direction
from .grid import GridModel
from .rooms import PlacedRoom, place_room, room_at
from .topology import ShapeCategory, Topology, classify, shape_category


class Injection(NamedTuple):
    special: PlacedRoom
    replacement: PlacedRoom
    replaced: PlacedRoom


class SpecialRoomInjector:
    def __init__(self, resolver: CatalogResolver, config: LayoutConfig, rng=None):
        self.resolver = resolver
        self.config = config
        self.rng = rng or random
        self.special_cells: Set[Coord2D] = set()
        # enemy cells that already carry a special room
        self.anchored: Set[Coord2D] = set()

    def inject(self, rooms: List[PlacedRoom], grid: GridModel, kind: RoomKind, count: int) -> List[Injection]:
        done: List[Injection] = []
        for _ in range(count):
            done.append(self._inject_one(rooms, grid, kind))
        return done

    def _inject_one(self, rooms: List[PlacedRoom], grid: GridModel, kind: RoomKind) -> Injection:
        for _ in range(self.config.special_sample_attempts):
            cell = grid.filled_order[self.rng.randrange(len(grid.filled_order))]
            if cell == grid.seed_cell or cell in self.special_cells or cell in self.anchored:
                continue
            original = room_at(rooms, cell)
            if original is None or original.kind is not RoomKind.ENEMY:
                continue
            topo = classify(grid, cell, ignore=self.special_cells)
            if topo.count not in (1, 3):
                continue
            target = self.target_cell(grid, cell, topo)
            if target is None:
                continue
            return self._place(rooms, grid, kind, original, topo, target)
        raise PlacementExhausted(
            f"no eligible cell for {kind.value} room after {self.config.special_sample_attempts} samples"
        )

    def target_cell(self, grid: GridModel, cell: Coord2D, topo: Topology) -> Optional[Coord2D]:
        """Empty in-bounds cell next to ``cell`` to host the special room."""
        if topo.count == 1:
            (only,) = topo.directions
            opposite = only.opposite.step(cell)
            if grid.is_open(opposite):
                return opposite
        elif topo.count == 3:
            for d in PRIORITY:
                if d not in topo.directions and grid.is_open(d.step(cell)):
                    return d.step(cell)
        for d in PRIORITY:
            if grid.is_open(d.step(cell)):
                return d.step(cell)
        return None

    def _place(self, rooms, grid, kind, original, topo, target) -> Injection:
        cell = original.cell
        facing = Direction.between(target, cell)
        special = place_room(
            target,
            self.resolver.resolve(ShapeCategory.ONE_DOOR, kind, {facing}),
            kind,
            self.config,
        )
        directions = topo.directions | {Direction.between(cell, target)}
        replacement = place_room(
            cell,
            self.resolver.resolve(shape_category(directions), RoomKind.ENEMY, directions),
            RoomKind.ENEMY,
            self.config,
        )
        if kind is RoomKind.BOSS:
            self.resolver.consume(special.template)
        grid.fill(target)
        self.special_cells.add(target)
        self.anchored.add(cell)
        rooms.remove(original)
        rooms.append(special)
        rooms.append(replacement)
        return Injection(special, replacement, original)


__all__ = ["Injection", "SpecialRoomInjector"]
