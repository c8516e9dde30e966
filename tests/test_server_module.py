import logging

from levelforge import app
from levelforge.server import _configure_logging


def test_configure_logging_writes_instance_log(tmp_path, monkeypatch):
    root = logging.getLogger()
    saved = list(root.handlers)
    monkeypatch.setattr(app, "instance_path", str(tmp_path))
    try:
        # Run twice to ensure idempotence (handler replace path)
        _configure_logging()
        path = _configure_logging()
        assert len(root.handlers) == 2
        logging.getLogger("levelforge.test").info("hello")
    finally:
        for h in list(root.handlers):
            h.close()
            root.removeHandler(h)
        for h in saved:
            root.addHandler(h)
    assert (tmp_path / "app.log").exists()
    assert path.endswith("app.log")


def test_unknown_route_is_404(client):
    assert client.get("/api/layout/nope").status_code == 404
