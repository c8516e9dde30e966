"""
project: LevelForge
module: layout_api.py
License: MIT

Layout generation API routes.

Generated layouts are cached in-process per (seed, width, length, rooms,
special) so repeated map/metrics calls for the same seed do not regenerate.
"""

import hashlib
import os
import random
import threading

from flask import Blueprint, jsonify, request

from levelforge.layout import (
    ConfigurationError,
    InvariantViolation,
    LayoutConfig,
    LevelGenerator,
)

bp_layout = Blueprint("layout", __name__)

SEED_MAX = 2**31 - 1

_layout_cache = {}
_layout_cache_lock = threading.Lock()
_LAYOUT_CACHE_MAX = 8  # small LRU-ish manual cap


def _coerce_seed(payload_seed):
    """Convert provided seed (int or str) into a bounded non-negative int."""
    if payload_seed is None:
        return random.randint(1, 1_000_000)
    if isinstance(payload_seed, bool):
        raise ValueError("seed must be an integer or string")
    if isinstance(payload_seed, int):
        return payload_seed % SEED_MAX
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return random.randint(1, 1_000_000)
        if s.isdigit():
            return int(s) % SEED_MAX
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % SEED_MAX
    raise ValueError("seed must be an integer or string")


def _int_arg(source, name):
    raw = source.get(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer")


def _config_from(source, seed) -> LayoutConfig:
    return LayoutConfig.from_env(
        seed=seed,
        width=_int_arg(source, "width"),
        length=_int_arg(source, "length"),
        room_count=_int_arg(source, "rooms"),
        special_room_count=_int_arg(source, "special"),
    )


def get_cached_layout(config: LayoutConfig):
    key = (config.seed, config.width, config.length, config.room_count, config.special_room_count)
    if os.environ.get("LEVELFORGE_DISABLE_CACHE") == "1":
        return LevelGenerator(config).generate()
    with _layout_cache_lock:
        result = _layout_cache.get(key)
        if result is not None:
            return result
    result = LevelGenerator(config).generate()
    with _layout_cache_lock:
        _layout_cache[key] = result
        if len(_layout_cache) > _LAYOUT_CACHE_MAX:
            first_key = next(iter(_layout_cache.keys()))
            if first_key != key:
                _layout_cache.pop(first_key, None)
    return result


def _layout_payload(config, result):
    ctx = result.context
    return {
        "status": result.status.value,
        "seed": result.seed,
        "attempts": result.attempts,
        "size": [config.width, config.length],
        "rooms": [r.to_dict() for r in ctx.rooms] if ctx else [],
        "hallways": [h.to_dict() for h in ctx.hallways] if ctx else [],
        "minimap": result.minimap,
        "metrics": result.metrics,
        "error": str(result.error) if result.error else None,
    }


def _generate_or_error(source, seed):
    """Return (config, result, None) or (None, None, error_response)."""
    try:
        config = _config_from(source, seed)
        return config, get_cached_layout(config), None
    except (ValueError, ConfigurationError) as exc:
        return None, None, (jsonify({"error": str(exc)}), 400)
    except InvariantViolation as exc:
        return None, None, (jsonify({"error": f"invariant violation: {exc}"}), 500)


@bp_layout.route("/api/layout/map")
def layout_map():
    """
    Generate (or fetch from cache) a layout.
    Query: seed, width, length, rooms, special (all optional)
    Response: { status, seed, attempts, size, rooms, hallways, minimap, metrics, error }
    """
    try:
        seed = _coerce_seed(request.args.get("seed"))
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    config, result, err = _generate_or_error(request.args, seed)
    if err:
        return err
    return jsonify(_layout_payload(config, result))


@bp_layout.route("/api/layout/seed", methods=["POST"])
def set_seed():
    """Coerce (or generate) a seed and build its layout.

    Body JSON (all optional):
      { "seed": <int|str|null>, "regenerate": <bool>, "width", "length", "rooms", "special" }
    - seed omitted/null and regenerate true => random seed.
    - string seeds are hashed deterministically.

    Response: { "seed": <int>, "status": <str>, "attempts": <int>, "room_count": <int> }
    """
    data = request.get_json(silent=True) or {}
    try:
        seed = _coerce_seed(None if data.get("regenerate") and data.get("seed") is None else data.get("seed"))
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    config, result, err = _generate_or_error(data, seed)
    if err:
        return err
    return jsonify(
        {
            "seed": result.seed,
            "status": result.status.value,
            "attempts": result.attempts,
            "room_count": len(result.context.rooms) if result.context else 0,
        }
    )


@bp_layout.route("/api/layout/metrics")
def layout_metrics():
    """Return generation metrics for a seed (metrics empty when disabled)."""
    if request.args.get("seed") is None:
        return jsonify({"error": "seed is required"}), 400
    try:
        seed = _coerce_seed(request.args.get("seed"))
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    config, result, err = _generate_or_error(request.args, seed)
    if err:
        return err
    return jsonify({"seed": result.seed, "size": [config.width, config.length], "metrics": result.metrics})
