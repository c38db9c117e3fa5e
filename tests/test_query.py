# tests/test_query.py
import dataclasses
from urllib.parse import parse_qs, urlsplit

import pytest

from travel_exporter.core.types import Region, Vehicle
from travel_exporter.road.query import build_route_query

FROM = "x:2.294500 y:48.858400"
TO = "x:2.337600 y:48.860600"


def _query(**kwargs):
    q = build_route_query(FROM, TO, **kwargs)
    parts = urlsplit(q.url)
    return q, parts, {k: v[0] for k, v in parse_qs(parts.query).items()}


def test_default_query():
    q, parts, params = _query()
    assert parts.scheme == "https"
    assert parts.netloc == "www.waze.com"
    assert parts.path == "/row-RoutingManager/routingRequest"
    assert params == {
        "from": FROM,
        "to": TO,
        "at": "0",
        "returnJSON": "true",
        "timeout": "60000",
        "nPaths": "1",
        "options": "AVOID_TRAILS:t",
        "subscription": "*",
    }
    assert "vehicleType" not in params
    assert q.region is Region.ROW


@pytest.mark.parametrize("region, path", [
    (Region.US, "/RoutingManager/routingRequest"),
    (Region.IL, "/il-RoutingManager/routingRequest"),
    (Region.ROW, "/row-RoutingManager/routingRequest"),
])
def test_region_selects_routing_server(region, path):
    _, parts, _ = _query(region=region)
    assert parts.path == path


def test_avoid_flags():
    _, _, params = _query(avoid_toll=True, avoid_ferry=True, avoid_subscription_road=True)
    assert params["options"] == "AVOID_TRAILS:t,AVOID_TOLL_ROADS:t,AVOID_FERRIES:t"
    assert "subscription" not in params


def test_vehicle_type_only_for_non_regular():
    _, _, params = _query(vehicle=Vehicle.MOTORCYCLE)
    assert params["vehicleType"] == "MOTORCYCLE"


def test_query_is_deterministic_and_immutable():
    a = build_route_query(FROM, TO, vehicle=Vehicle.TAXI, avoid_toll=True)
    b = build_route_query(FROM, TO, vehicle=Vehicle.TAXI, avoid_toll=True)
    assert a.url == b.url
    assert a == b
    assert [k for k, _ in a.params] == sorted(k for k, _ in a.params)
    with pytest.raises(dataclasses.FrozenInstanceError):
        a.url = "http://elsewhere"


def test_coordinates_are_query_escaped():
    q = build_route_query(FROM, TO)
    assert "from=x%3A2.294500+y%3A48.858400" in q.url
    assert "subscription=%2A" in q.url


def test_custom_base_url():
    q = build_route_query(FROM, TO, base_url="http://localhost:8080/")
    assert q.url.startswith("http://localhost:8080/row-RoutingManager/routingRequest?")
