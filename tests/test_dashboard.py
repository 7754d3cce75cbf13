"""Tests for the Flask API."""

import pytest

from node_monitor.dashboard import create_app
from node_monitor.log_source import LogFetch
from node_monitor.snapshot import SnapshotAssembler


class StubAssembler:
    def __init__(self, payload=None, error=None):
        self._payload = payload
        self._error = error

    def build(self):
        if self._error is not None:
            raise self._error
        return self._payload


@pytest.fixture
def unavailable_app(config):
    def fetch(service, max_lines, timeout=5.0):
        return LogFetch.unavailable("journal missing")

    app = create_app(config, SnapshotAssembler(config, fetch=fetch))
    app.config["TESTING"] = True
    return app


class TestHealthEndpoint:
    def test_health_returns_ok(self, config):
        client = create_app(config, StubAssembler(payload={})).test_client()
        resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["status"] == "ok"
        assert data["timestamp"].endswith("Z")

    def test_health_ignores_broken_sources(self, config):
        client = create_app(config, StubAssembler(error=RuntimeError("boom"))).test_client()
        assert client.get("/api/health").status_code == 200


class TestStatsEndpoint:
    def test_returns_payload(self, config):
        payload = {"geth": {}, "prysm": {}, "system": {}, "errors": [], "timestamp": "t"}
        client = create_app(config, StubAssembler(payload=payload)).test_client()
        resp = client.get("/api/eth-node-stats")
        assert resp.status_code == 200
        assert resp.get_json() == payload

    def test_unexpected_failure_is_500(self, config):
        client = create_app(config, StubAssembler(error=RuntimeError("assumption violated"))).test_client()
        resp = client.get("/api/eth-node-stats")
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "assumption violated"}

    def test_unavailable_logs_still_200(self, unavailable_app):
        resp = unavailable_app.test_client().get("/api/eth-node-stats")
        assert resp.status_code == 200
        data = resp.get_json()

        assert data["geth"]["status"] == "SYNCING"
        assert len(data["errors"]) >= 1
        assert "unable" in data["errors"][0]["message"].lower()

        system = data["system"]
        assert isinstance(system["memory"], int)
        assert isinstance(system["disk"], int)
        assert isinstance(system["uptime"], str)
        assert isinstance(system["cpuLoad"], float)
        assert system["timestamp"]

    def test_unknown_route_404(self, config):
        client = create_app(config, StubAssembler(payload={})).test_client()
        assert client.get("/api/nope").status_code == 404
