"""
project: LevelForge
module: __init__.py
License: MIT

Flask application factory and package root.

The layout generator itself lives in ``levelforge.layout`` and has no HTTP
dependency; this module wires it into a small Flask app that serves layouts
as JSON. Configuration comes from environment variables (optionally from a
local ``.env``) with development defaults.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

# Load .env if present so LEVELFORGE_* settings can be supplied without
# exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

# instance/ holds the rotating log file written by server._configure_logging
try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    pass

LAYOUT_ENV_KEYS = (
    "LEVELFORGE_WIDTH",
    "LEVELFORGE_LENGTH",
    "LEVELFORGE_ROOM_COUNT",
    "LEVELFORGE_SPECIAL_ROOM_COUNT",
    "LEVELFORGE_MAX_ITERATIONS",
    "LEVELFORGE_ENABLE_METRICS",
    "LEVELFORGE_MAX_GRID_CELLS",
)


def layout_settings_from_env():
    """Raw LEVELFORGE_* strings (None when unset); LayoutConfig coerces them."""
    return {key: os.getenv(key) for key in LAYOUT_ENV_KEYS}


app.config.update(SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"), **layout_settings_from_env())

# Register HTTP blueprints after the app object exists
from levelforge.routes.layout_api import bp_layout  # noqa: E402

app.register_blueprint(bp_layout)


def create_app():
    """Return the Flask app instance."""
    return app


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal error", "error_id": error_id}), 500
