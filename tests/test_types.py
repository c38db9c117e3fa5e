# tests/test_types.py
import pytest

from travel_exporter.core.types import ConfigError, Region, Vehicle


@pytest.mark.parametrize("text, expected", [
    ("ROW", Region.ROW),
    ("row", Region.ROW),
    ("Us", Region.US),
    ("il", Region.IL),
])
def test_region_parse_is_case_insensitive(text, expected):
    assert Region.parse(text) is expected


@pytest.mark.parametrize("region", list(Region))
def test_region_serialize_parses_back(region):
    text = region.serialize()
    assert text == text.upper()
    assert Region.parse(text) is region
    assert Region.parse(Region.parse(text).serialize()) is region


@pytest.mark.parametrize("vehicle", list(Vehicle))
def test_vehicle_serialize_parses_back(vehicle):
    assert Vehicle.parse(vehicle.serialize()) is vehicle


def test_regular_vehicle_is_empty_string():
    assert Vehicle.REGULAR.serialize() == ""
    assert Vehicle.parse("") is Vehicle.REGULAR
    assert Vehicle.parse("taxi") is Vehicle.TAXI
    assert str(Vehicle.MOTORCYCLE) == "MOTORCYCLE"


@pytest.mark.parametrize("token", ["EU", "", "world", None, 1])
def test_unknown_region_is_config_error(token):
    with pytest.raises(ConfigError):
        Region.parse(token)


@pytest.mark.parametrize("token", ["car", "BUS", None])
def test_unknown_vehicle_is_config_error(token):
    with pytest.raises(ConfigError, match="vehicle"):
        Vehicle.parse(token)
