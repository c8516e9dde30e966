"""Layout validation.

``has_conflict`` is the gate the generator runs once per attempt;
``find_conflicts`` lists the shared positions for its error message. The rest
are structural diagnostics used by the CLI, the seed diagnostics script and
the test-suite.
"""
from __future__ import annotations

from collections import deque
from typing import Dict, List, Set

from .catalog import RoomKind
from .geometry import Coord2D, Direction, Vec3
from .grid import GridModel
from .rooms import PlacedRoom


def find_conflicts(rooms: List[PlacedRoom]) -> List[Vec3]:
    """World positions shared by more than one room (pairwise scan)."""
    dupes: List[Vec3] = []
    for i, a in enumerate(rooms):
        for b in rooms[i + 1:]:
            if a.position == b.position and a.position not in dupes:
                dupes.append(a.position)
    return dupes


def has_conflict(rooms: List[PlacedRoom]) -> bool:
    for i, a in enumerate(rooms):
        for b in rooms[i + 1:]:
            if a.position == b.position:
                return True
    return False


def unreachable_cells(grid: GridModel) -> Set[Coord2D]:
    start = grid.seed_cell
    filled = set(grid.iter_filled())
    if start is None:
        return filled
    seen = {start}
    q = deque([start])
    while q:
        cell = q.popleft()
        for d in Direction:
            nxt = d.step(cell)
            if nxt in filled and nxt not in seen:
                seen.add(nxt)
                q.append(nxt)
    return filled - seen


def unmatched_doors(rooms: List[PlacedRoom]) -> List[tuple]:
    """Doors that do not open onto a room with the opposite door."""
    by_cell: Dict[Coord2D, PlacedRoom] = {r.cell: r for r in rooms}
    bad = []
    for r in rooms:
        for door in r.doors:
            other = by_cell.get(door.direction.step(r.cell))
            if other is None or door.direction.opposite not in other.door_directions:
                bad.append((r.cell, door.direction.name))
    return bad


def unreachable_rooms(rooms: List[PlacedRoom]) -> List[Coord2D]:
    """Rooms not reachable from the start room walking through doors."""
    by_cell = {r.cell: r for r in rooms}
    start = next((r for r in rooms if r.kind is RoomKind.START), None)
    if start is None:
        return [r.cell for r in rooms]
    seen = {start.cell}
    q = deque([start])
    while q:
        room = q.popleft()
        for d in room.door_directions:
            other = by_cell.get(d.step(room.cell))
            if other is not None and other.cell not in seen and d.opposite in other.door_directions:
                seen.add(other.cell)
                q.append(other)
    return [r.cell for r in rooms if r.cell not in seen]


def check_layout(grid: GridModel, rooms: List[PlacedRoom]) -> Dict[str, int]:
    kinds = [r.kind for r in rooms]
    return {
        "duplicate_positions": len(find_conflicts(rooms)),
        "unreachable_cells": len(unreachable_cells(grid)),
        "unreachable_rooms": len(unreachable_rooms(rooms)),
        "unmatched_doors": len(unmatched_doors(rooms)),
        "start_rooms_off_by": abs(kinds.count(RoomKind.START) - 1),
        "boss_rooms_off_by": abs(kinds.count(RoomKind.BOSS) - 1),
    }


__all__ = [
    "find_conflicts",
    "has_conflict",
    "unreachable_cells",
    "unmatched_doors",
    "unreachable_rooms",
    "check_layout",
]
