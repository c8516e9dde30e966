"""Occupancy grid owned by a single generation attempt."""
from __future__ import annotations

from typing import Iterator, List, Optional

from .geometry import Coord2D
from .tiles import EMPTY, FILLED

# Returned by lookups outside the grid so callers never need try/except probing.
ABSENT = None


class GridModel:
    """width x length matrix of EMPTY / FILLED plus the order cells were filled in.

    Indexed column-major (``cells[x][y]``) like the rest of the generator code.
    """

    __slots__ = ("width", "length", "cells", "filled_order")

    def __init__(self, width: int, length: int):
        self.width = width
        self.length = length
        self.cells: List[List[int]] = [[EMPTY for _ in range(length)] for _ in range(width)]
        self.filled_order: List[Coord2D] = []

    def in_bounds(self, cell: Coord2D) -> bool:
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.length

    def get(self, cell: Coord2D) -> Optional[int]:
        if not self.in_bounds(cell):
            return ABSENT
        return self.cells[cell[0]][cell[1]]

    def is_filled(self, cell: Coord2D) -> bool:
        return self.get(cell) == FILLED

    def is_open(self, cell: Coord2D) -> bool:
        """In-bounds and still EMPTY."""
        return self.get(cell) == EMPTY

    def fill(self, cell: Coord2D) -> None:
        if not self.in_bounds(cell):
            raise IndexError(f"cell {cell} outside {self.width}x{self.length} grid")
        if self.cells[cell[0]][cell[1]] == FILLED:
            return
        self.cells[cell[0]][cell[1]] = FILLED
        self.filled_order.append(cell)

    @property
    def seed_cell(self) -> Optional[Coord2D]:
        return self.filled_order[0] if self.filled_order else None

    @property
    def filled_count(self) -> int:
        return len(self.filled_order)

    def iter_filled(self) -> Iterator[Coord2D]:
        """Row-major scan of filled cells (x outer, y inner)."""
        for x in range(self.width):
            for y in range(self.length):
                if self.cells[x][y] == FILLED:
                    yield (x, y)

    def format_matrix(self) -> str:
        rows = []
        for x in range(self.width):
            rows.append(" ".join(str(self.cells[x][y]) for y in range(self.length)))
        return "\n".join(rows)

    def to_dict(self):
        return {
            "width": self.width,
            "length": self.length,
            "cells": [row[:] for row in self.cells],
            "filled_order": [list(c) for c in self.filled_order],
        }
