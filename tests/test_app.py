"""
Integration tests for the Flask routes.
"""


def view_of(response):
    assert response.status_code == 200, response.get_json()
    return response.get_json()["view"]


class TestPages:
    """Page and state endpoints."""

    def test_index_renders(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert b"Dijkstra Step Visualizer" in resp.data
        assert b'id="btn-start"' in resp.data

    def test_state_starts_idle_on_default_preset(self, client):
        data = client.get("/api/state").get_json()
        assert data["view"]["state"] == "idle"
        assert len(data["graph"]["nodes"]) == 3
        assert data["svg"].startswith("<svg")


class TestPlaybackRoutes:
    """Playback endpoints drive the session controller."""

    def test_run_pause_step(self, client):
        view = view_of(client.post("/api/run"))
        assert view["state"] == "playing"
        assert view["currentStep"] == 1

        resp = client.post("/api/step/next")
        assert resp.get_json()["changed"] is False

        assert view_of(client.post("/api/pause"))["state"] == "paused"
        assert view_of(client.post("/api/step/next"))["currentStep"] == 2
        assert view_of(client.post("/api/step/prev"))["currentStep"] == 1

    def test_step_to_the_end(self, client):
        client.post("/api/endpoints", json={"start": "0", "end": "1"})
        view = None
        for _ in range(10):
            view = view_of(client.post("/api/step/next"))
        assert view["state"] == "finished"
        assert view["finalPath"] == [0, 2, 1]

    def test_reset(self, client):
        client.post("/api/run")
        view = view_of(client.post("/api/reset", json={"full": True}))
        assert view["state"] == "idle"
        assert view["currentStep"] == 0

    def test_speed(self, client):
        assert client.post("/api/config/speed", json={"speed": "fast"}).get_json()["delay"] == 0.4
        assert client.post("/api/config/speed", json={"delay": 0}).get_json()["delay"] == 0.05
        assert client.post("/api/config/speed", json={"speed": "warp"}).status_code == 400


class TestGraphRoutes:
    """Graph input endpoints and their validation."""

    def test_preset(self, client):
        data = client.post("/api/graph/preset", json={"name": "complex"}).get_json()
        assert len(data["graph"]["nodes"]) == 6
        assert data["view"]["start"] == 0 and data["view"]["end"] == 5

    def test_unknown_preset(self, client):
        resp = client.post("/api/graph/preset", json={"name": "nope"})
        assert resp.status_code == 400
        assert "Unknown preset" in resp.get_json()["error"]

    def test_random_bounds(self, client):
        ok = client.post("/api/graph/random", json={"nodes": 5, "probability": 0.5, "seed": 1})
        assert len(ok.get_json()["graph"]["nodes"]) == 5
        assert client.post("/api/graph/random", json={"nodes": 500}).status_code == 400
        assert client.post("/api/graph/random", json={"nodes": "many"}).status_code == 400

    def test_edges_with_endpoints(self, client):
        resp = client.post("/api/graph/edges", json={
            "edges": [["a", "b", 1], ["b", "c", 2]],
            "start": "c",
            "end": "a",
        })
        view = view_of(resp)
        assert (view["start"], view["end"]) == ("c", "a")

    def test_bad_edges_keep_previous_graph(self, client):
        resp = client.post("/api/graph/edges", json={"edges": [[0, 1, -2]]})
        assert resp.status_code == 400
        assert "positive" in resp.get_json()["error"]
        assert len(client.get("/api/state").get_json()["graph"]["nodes"]) == 3

    def test_unknown_endpoint_in_edges(self, client):
        resp = client.post("/api/graph/edges", json={"edges": [[0, 1, 2]], "end": 9})
        assert resp.status_code == 400
        assert len(client.get("/api/state").get_json()["graph"]["nodes"]) == 3

    def test_matrix(self, client):
        data = client.post("/api/graph/matrix", json={"matrix": [[0, 3], [3, 0]]}).get_json()
        assert data["graph"]["edges"] == [{"source": 0, "target": 1, "weight": 3}]

    def test_matrix_too_large(self, client):
        big = [[0] * 11 for _ in range(11)]
        assert client.post("/api/graph/matrix", json={"matrix": big}).status_code == 400

    def test_unknown_endpoint(self, client):
        resp = client.post("/api/endpoints", json={"start": "zzz"})
        assert resp.status_code == 400
        assert "not found" in resp.get_json()["error"]

    def test_rejected_endpoints_change_nothing(self, client):
        client.post("/api/run")
        resp = client.post("/api/endpoints", json={"start": 2, "end": "zzz"})
        assert resp.status_code == 400
        view = client.get("/api/state").get_json()["view"]
        assert view["start"] == 0
        assert view["state"] == "playing"

    def test_random_rejects_non_integers(self, client):
        assert client.post("/api/graph/random", json={"nodes": 2.7}).status_code == 400
        assert client.post("/api/graph/random", json={"nodes": True}).status_code == 400
        assert client.post("/api/graph/random", json={"probability": True}).status_code == 400
        assert client.post("/api/graph/random", json={"seed": True}).status_code == 400
        assert client.post("/api/graph/random", json={"seed": "7"}).status_code == 400
        ok = client.post("/api/graph/random", json={"nodes": 4.0, "seed": 2})
        assert len(ok.get_json()["graph"]["nodes"]) == 4


class TestSessions:
    """In-memory session registry."""

    def test_registry_is_bounded(self, monkeypatch):
        import config
        import main

        monkeypatch.setattr(config, "MAX_SESSIONS", 3)
        for _ in range(10):
            with main.app.test_client() as c:
                assert c.get("/api/state").status_code == 200
        assert len(main._sessions) == 3

    def test_least_recently_used_is_evicted(self, client, monkeypatch):
        import config
        import main

        monkeypatch.setattr(config, "MAX_SESSIONS", 3)
        client.get("/api/state")
        with client.session_transaction() as sess:
            sid = sess["sid"]

        others = [main.app.test_client() for _ in range(2)]
        for other in others:
            other.get("/api/state")
        first_other = list(main._sessions)[1]

        client.get("/api/state")
        main.app.test_client().get("/api/state")

        assert sid in main._sessions
        assert first_other not in main._sessions
        assert len(main._sessions) == 3
