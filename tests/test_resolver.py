# tests/test_resolver.py
import pytest

from conftest import FakeResponse, FakeSession
from travel_exporter.addressing.resolver import resolve_address, resolve_address_book
from travel_exporter.core.types import ConfigError, Region
from travel_exporter.road.waze_client import WazeClient
from travel_exporter.road.waze_common import AddressNotFoundError, UpstreamStatusError


def _hit(name, lat, lon):
    return {"name": name, "location": {"lat": lat, "lon": lon}}


def test_resolve_address_returns_coordinate_token():
    session = FakeSession(FakeResponse([_hit("", 9, 9), _hit("Home", 10.5, 20.25)]))
    client = WazeClient(session=session)
    assert resolve_address("1 Main St", client=client, region=Region.US) == "x:20.250000 y:10.500000"
    assert session.calls[0]["url"].endswith("/SearchServer/mozi")


def test_resolve_address_not_found():
    client = WazeClient(session=FakeSession(FakeResponse([_hit("", 1, 1)])))
    with pytest.raises(AddressNotFoundError, match="nowhere"):
        resolve_address("nowhere", client=client)


def test_resolve_address_propagates_upstream_errors():
    client = WazeClient(session=FakeSession(FakeResponse(status_code=503, reason="Unavailable", text="")))
    with pytest.raises(UpstreamStatusError):
        resolve_address("anything", client=client)


def test_each_name_is_resolved_once():
    session = FakeSession(
        FakeResponse([_hit("a", 1, 2)]),
        FakeResponse([_hit("b", 3, 4)]),
    )
    client = WazeClient(session=session)
    book = resolve_address_book({"A": "addrA", "B": "addrB", "C": "unused"}, ["A", "B", "A"], client=client)
    assert dict(book) == {"A": "x:2.000000 y:1.000000", "B": "x:4.000000 y:3.000000"}
    assert [c["params"]["q"] for c in session.calls] == ["addrA", "addrB"]
    with pytest.raises(TypeError):
        book["C"] = "x:0 y:0"


def test_unknown_name_fails_before_any_lookup():
    session = FakeSession()
    client = WazeClient(session=session)
    with pytest.raises(ConfigError, match="Z"):
        resolve_address_book({"A": "addrA"}, ["A", "Z"], client=client)
    assert session.calls == []
