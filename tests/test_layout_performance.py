import time

import pytest

from levelforge.layout.config import LayoutConfig
from levelforge.layout.pipeline import LevelGenerator

# Simple performance guardrail. Not a strict micro-benchmark; aims to catch large regressions.


@pytest.mark.performance
def test_large_grid_generation_seeds():
    seeds = [10101, 20202, 30303]
    max_seconds_per = 1.0
    for s in seeds:
        start = time.perf_counter()
        result = LevelGenerator(LayoutConfig(width=20, length=20, room_count=60, special_room_count=3, seed=s)).generate()
        elapsed = time.perf_counter() - start
        assert result.ok
        assert elapsed < max_seconds_per, f"Seed {s} took {elapsed:.3f}s (> {max_seconds_per}s)"
