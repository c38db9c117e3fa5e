# tests/test_exporter.py
from wsgiref.util import setup_testing_defaults

from conftest import ScriptedClient, result
from travel_exporter.app.collector import Collector
from travel_exporter.app.exporter import make_app
from travel_exporter.core.config import parse_config


def _request(app, path):
    environ = {"PATH_INFO": path}
    setup_testing_defaults(environ)
    captured = {}

    def start_response(status, headers, exc_info=None):
        captured["status"] = status
        captured["headers"] = dict(headers)

    body = b"".join(app(environ, start_response))
    return captured["status"], body.decode("utf-8")


def _collector(registry, coordinates, client):
    cfg = parse_config({"addresses": {"A": "a", "B": "b"}, "paths": [{"from": "A", "to": "B"}]})
    return Collector.from_config(cfg, coordinates, client, registry=registry)


def test_scrape_runs_a_cycle_and_renders_metrics(registry, coordinates):
    client = ScriptedClient(result(1200, 95.4))
    app = make_app(_collector(registry, coordinates, client), registry)
    status, body = _request(app, "/metrics")
    assert status.startswith("200")
    assert len(client.queries) == 1
    assert 'waze_travel_distance_meters{from="A",to="B"} 1200.0' in body
    assert 'waze_travel_time_seconds{from="A",to="B"} 95.0' in body
    assert 'waze_api_calls_total{status="ok"} 1.0' in body


def test_other_paths_do_not_trigger_a_cycle(registry, coordinates):
    client = ScriptedClient()
    app = make_app(_collector(registry, coordinates, client), registry)
    status, _ = _request(app, "/")
    assert status.startswith("404")
    assert client.queries == []
