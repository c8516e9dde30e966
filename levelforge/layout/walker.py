"""Random-walk planner: grows a single connected blob of filled cells."""
from __future__ import annotations

import random
from typing import List, NamedTuple, Optional

from .errors import ConfigurationError, PlacementExhausted
from .geometry import Coord2D, Direction
from .grid import GridModel


class WalkResult(NamedTuple):
    grid: GridModel
    filled_order: List[Coord2D]
    retries: int


def validate_dimensions(width: int, length: int, room_count: int, max_cells: Optional[int] = None) -> None:
    if width < 1 or length < 1:
        raise ConfigurationError(f"grid must be at least 1x1 (got {width}x{length})")
    if max_cells is not None and width * length > max_cells:
        raise ConfigurationError(
            f"grid {width}x{length} has {width * length} cells, more than the {max_cells} allowed"
        )
    if room_count < 1:
        raise ConfigurationError(f"room_count must be positive (got {room_count})")
    if room_count > width * length:
        raise ConfigurationError(
            f"room_count {room_count} does not fit a {width}x{length} grid ({width * length} cells)"
        )


def plan(width: int, length: int, room_count: int, rng=None, retry_cap: Optional[int] = None) -> WalkResult:
    """Fill ``room_count`` cells starting from one random seed cell.

    Each new cell is a cardinal neighbor of a uniformly chosen, already filled
    cell, so the result is a single 4-connected component. Misses (out of
    bounds or already filled) retry with a fresh anchor and direction; more
    than ``retry_cap`` misses for one cell raises PlacementExhausted.
    """
    validate_dimensions(width, length, room_count)
    if rng is None:
        rng = random
    if retry_cap is None:
        retry_cap = max(1000, 64 * width * length)
    grid = GridModel(width, length)
    grid.fill((rng.randrange(width), rng.randrange(length)))
    directions = list(Direction)
    retries = 0
    for placed in range(1, room_count):
        misses = 0
        while True:
            anchor = grid.filled_order[rng.randrange(len(grid.filled_order))]
            cell = rng.choice(directions).step(anchor)
            if grid.is_open(cell):
                grid.fill(cell)
                break
            misses += 1
            if misses > retry_cap:
                raise PlacementExhausted(
                    f"random walk stuck after {misses} misses placing room {placed + 1}/{room_count}"
                )
        retries += misses
    return WalkResult(grid, grid.filled_order, retries)
