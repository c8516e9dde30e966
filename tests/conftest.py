import os
import random
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from levelforge import create_app  # noqa: E402
from levelforge.layout.services import StaticTemplateCatalog  # noqa: E402
from levelforge.routes import layout_api  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture(autouse=True)
def _clear_layout_cache():
    with layout_api._layout_cache_lock:
        layout_api._layout_cache.clear()
    yield


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def catalog():
    return StaticTemplateCatalog()
