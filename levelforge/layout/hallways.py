from __future__ import annotations

import random
from typing import List, Sequence

from .catalog import RoomKind
from .config import LayoutConfig
from .errors import NoMatchingTemplate
from .geometry import Vec3
from .rooms import PlacedHallway, PlacedRoom


def hallway_yaw(door) -> int:
    # Segments are authored along X; doors facing along Z need a quarter turn.
    return 90 if door.direction.along_z else 0


def anchor_is_free(anchor: Vec3, hallways: Sequence[PlacedHallway], min_distance: float) -> bool:
    for h in hallways:
        if anchor == h.position or anchor.distance_to(h.position) < min_distance:
            return False
    return True


def connect(rooms: List[PlacedRoom], hallway_templates: Sequence[str], config: LayoutConfig, rng=None, metrics=None):
    """Place one hallway segment per enemy-room door, skipping shared doorways.

    Two adjacent rooms compute the same anchor for the doorway they share, so
    the proximity check keeps exactly one segment per connection.
    """
    if rng is None:
        rng = random
    hallways: List[PlacedHallway] = []
    for room in rooms:
        if room.kind is not RoomKind.ENEMY:
            continue
        for door in room.doors:
            anchor = room.position.plus(door.direction.vector().scaled(config.hallway_spacing)).floored()
            if not anchor_is_free(anchor, hallways, config.hallway_min_distance):
                if metrics is not None and config.enable_metrics:
                    metrics['hallways_deduped'] += 1
                continue
            if not hallway_templates:
                raise NoMatchingTemplate("hallway pool is empty")
            name = hallway_templates[rng.randrange(len(hallway_templates))]
            hallways.append(PlacedHallway(anchor, hallway_yaw(door), door, name))
    return hallways


__all__ = ["connect", "anchor_is_free", "hallway_yaw"]
