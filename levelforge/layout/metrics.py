from __future__ import annotations

from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'attempts': 0,
        'overlap_failures': 0,
        'placement_failures': 0,
        'template_failures': 0,
        'walk_retries': 0,
        'rooms_placed': 0,
        'special_rooms': 0,
        'boss_rooms': 0,
        'hallways_placed': 0,
        'hallways_deduped': 0,
        'runtime_ms': 0.0,
    }
