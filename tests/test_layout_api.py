from levelforge.layout import pipeline


def test_map_endpoint_returns_layout(client):
    r = client.get("/api/layout/map?seed=42")
    assert r.status_code == 200
    data = r.get_json()
    assert data["status"] == "success"
    assert data["seed"] == 42
    assert data["size"] == [10, 10]
    assert len(data["rooms"]) == 14
    assert data["rooms"][0]["kind"] == "start"
    assert isinstance(data["minimap"], str)
    assert data["metrics"]["rooms_placed"] == 14
    assert data["error"] is None


def test_map_is_stable_for_fixed_seed(client):
    r1 = client.get("/api/layout/map?seed=777").get_json()
    r2 = client.get("/api/layout/map?seed=777").get_json()
    assert r1["rooms"] == r2["rooms"]
    assert r1["hallways"] == r2["hallways"]


def test_map_size_parameters(client):
    r = client.get("/api/layout/map?seed=5&width=6&length=5&rooms=8&special=0")
    assert r.status_code == 200
    data = r.get_json()
    assert data["size"] == [6, 5]
    assert len(data["rooms"]) == 8 + 1
    assert all(room["kind"] != "special" for room in data["rooms"])


def test_map_rejects_impossible_configuration(client):
    r = client.get("/api/layout/map?seed=1&width=2&length=2&rooms=9")
    assert r.status_code == 400
    assert "error" in r.get_json()


def test_map_rejects_non_integer_parameters(client):
    r = client.get("/api/layout/map?width=abc")
    assert r.status_code == 400


def test_single_room_reports_invariant_violation(client):
    r = client.get("/api/layout/map?seed=1&rooms=1")
    assert r.status_code == 500
    assert "invariant" in r.get_json()["error"]


def test_exhausted_layout_reported_with_status(client, monkeypatch):
    monkeypatch.setenv("LEVELFORGE_DISABLE_CACHE", "1")
    monkeypatch.setattr(pipeline, "has_conflict", lambda rooms: True)
    r = client.get("/api/layout/map?seed=3")
    assert r.status_code == 200
    data = r.get_json()
    assert data["status"] == "exhausted"
    assert data["attempts"] == 20
    assert data["rooms"] == []
    assert "no valid layout" in data["error"]


def test_set_numeric_string_seed(client):
    r = client.post("/api/layout/seed", json={"seed": "12345"})
    assert r.status_code == 200
    data = r.get_json()
    assert data["seed"] == 12345
    assert data["status"] == "success"
    assert data["room_count"] == 14


def test_set_string_seed_is_hashed_deterministically(client):
    s1 = client.post("/api/layout/seed", json={"seed": "AlphaSeed"}).get_json()["seed"]
    s2 = client.post("/api/layout/seed", json={"seed": "AlphaSeed"}).get_json()["seed"]
    assert isinstance(s1, int)
    assert s1 == s2


def test_regenerate_without_seed_is_random_int(client):
    r = client.post("/api/layout/seed", json={"regenerate": True})
    assert r.status_code == 200
    assert isinstance(r.get_json()["seed"], int)


def test_seed_rejects_wrong_type(client):
    r = client.post("/api/layout/seed", json={"seed": [1, 2]})
    assert r.status_code == 400
    r = client.post("/api/layout/seed", json={"seed": True})
    assert r.status_code == 400


def test_metrics_endpoint(client):
    r = client.get("/api/layout/metrics?seed=9")
    assert r.status_code == 200
    data = r.get_json()
    assert data["seed"] == 9
    assert data["metrics"]["attempts"] >= 1
    assert client.get("/api/layout/metrics").status_code == 400


def test_map_rejects_oversized_grid(client):
    r = client.get("/api/layout/map?seed=1&width=3000&length=3000&rooms=4&special=0")
    assert r.status_code == 400
    assert "cells" in r.get_json()["error"]
