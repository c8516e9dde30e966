from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

# Grid spacing constants (world units)
ROOM_SPACING = 96
HALLWAY_SPACING = 48
HALLWAY_MIN_DISTANCE = 3
MAX_ITERATIONS = 20
# Upper bound on width * length; the grid matrix is allocated per attempt
MAX_GRID_CELLS = 10_000


@dataclass
class LayoutConfig:
    width: int = 10
    length: int = 10
    room_count: int = 12
    special_room_count: int = 1
    room_spacing: int = ROOM_SPACING
    hallway_spacing: int = HALLWAY_SPACING
    hallway_min_distance: float = HALLWAY_MIN_DISTANCE
    max_iterations: int = MAX_ITERATIONS
    seed: Optional[int] = None
    print_debug_matrix: bool = False
    walk_retry_cap: Optional[int] = None
    special_sample_attempts: int = 200
    enable_metrics: bool = True
    max_grid_cells: int = MAX_GRID_CELLS

    @property
    def cell_count(self) -> int:
        return self.width * self.length

    def effective_walk_retry_cap(self) -> int:
        if self.walk_retry_cap is not None:
            return self.walk_retry_cap
        return max(1000, 64 * self.cell_count)

    @classmethod
    def from_env(cls, **overrides) -> "LayoutConfig":
        """Build a config from LEVELFORGE_* environment variables.

        Precedence: explicit overrides > Flask app config (when an app context
        is active) > environment > dataclass defaults.
        """
        cfg = cls()
        for env_key, attr in _ENV_MAP.items():
            if env_key in os.environ:
                setattr(cfg, attr, _coerce(attr, os.environ.get(env_key, '')))
        cfg.apply_app_overrides()
        for attr, val in overrides.items():
            if val is not None:
                setattr(cfg, attr, val)
        return cfg

    def apply_app_overrides(self) -> None:
        from flask import current_app, has_app_context

        if not has_app_context():
            return
        app_cfg = current_app.config
        for env_key, attr in _ENV_MAP.items():
            if env_key in app_cfg and app_cfg.get(env_key) is not None:
                setattr(self, attr, _coerce(attr, app_cfg.get(env_key)))


_ENV_MAP = {
    'LEVELFORGE_WIDTH': 'width',
    'LEVELFORGE_LENGTH': 'length',
    'LEVELFORGE_ROOM_COUNT': 'room_count',
    'LEVELFORGE_SPECIAL_ROOM_COUNT': 'special_room_count',
    'LEVELFORGE_MAX_ITERATIONS': 'max_iterations',
    'LEVELFORGE_PRINT_DEBUG_MATRIX': 'print_debug_matrix',
    'LEVELFORGE_ENABLE_METRICS': 'enable_metrics',
    'LEVELFORGE_MAX_GRID_CELLS': 'max_grid_cells',
}

_BOOL_ATTRS = {'print_debug_matrix', 'enable_metrics'}


def _coerce(attr: str, raw):
    if attr in _BOOL_ATTRS:
        if isinstance(raw, bool):
            return raw
        return str(raw).strip().lower() not in {'0', 'false', 'no', ''}
    return int(raw)


__all__ = ["LayoutConfig", "ROOM_SPACING", "HALLWAY_SPACING", "HALLWAY_MIN_DISTANCE", "MAX_ITERATIONS", "MAX_GRID_CELLS"]
