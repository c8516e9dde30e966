"""Per-seed structural diagnostics shared by the CLI and scripts/diagnose_seeds.py."""
from __future__ import annotations

from typing import Dict

from .config import LayoutConfig
from .pipeline import LevelGenerator
from .validation import check_layout


def diagnose_seed(seed: int, **overrides) -> Dict:
    """Generate ``seed`` and count structural issues in the result.

    An exhausted run is reported as a single ``exhausted`` issue; its layout
    is never inspected.
    """
    config = LayoutConfig.from_env(seed=seed, **overrides)
    result = LevelGenerator(config).generate()
    if not result.ok:
        issues = {"exhausted": 1}
    else:
        ctx = result.context
        issues = check_layout(ctx.grid, ctx.rooms)
    return {
        "seed": seed,
        "attempts": result.attempts,
        "issues": issues,
        "ok": all(v == 0 for v in issues.values()),
    }


__all__ = ["diagnose_seed"]
