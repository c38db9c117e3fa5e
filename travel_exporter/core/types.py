# travel_exporter/core/types.py
# -*- coding: utf-8 -*-

"""
Shared enumerations and type aliases.

This module centralizes the closed value sets accepted in configuration
and a few typing helpers so they can be imported everywhere without
creating circular dependencies.

Contents
--------
- ConfigError: raised for any invalid configuration value
- Region: upstream geographic partition (ROW, US, IL)
- Vehicle: upstream routing profile (regular, TAXI, MOTORCYCLE)
- AnyMapping and CoordinateToken aliases
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping


class ConfigError(ValueError):
    """Raised when the configuration is malformed or references unknown values."""
    ...


# ────────────────────────────────────────────────────────────────────────────────
# Region
# ────────────────────────────────────────────────────────────────────────────────

class Region(Enum):
    """
    Geographic partition of the routing service.

    Each region is served by its own search and routing servers; see
    `travel_exporter.road.waze_common` for the path tables.
    """

    ROW = "ROW"
    US = "US"
    IL = "IL"

    @classmethod
    def parse(cls, text: Any) -> "Region":
        """Case-insensitive parse; raises ConfigError on unknown tokens."""
        if not isinstance(text, str):
            raise ConfigError(f"Cannot parse {text!r} as region")
        try:
            return _REGION_BY_NAME[text.upper()]
        except KeyError:
            raise ConfigError(f"Cannot parse {text!r} as region") from None

    def serialize(self) -> str:
        return _NAME_BY_REGION[self]

    def __str__(self) -> str:
        return self.serialize()


_NAME_BY_REGION: Dict[Region, str] = {
    Region.ROW: "ROW",
    Region.US: "US",
    Region.IL: "IL",
}
_REGION_BY_NAME: Dict[str, Region] = {v: k for k, v in _NAME_BY_REGION.items()}


# ────────────────────────────────────────────────────────────────────────────────
# Vehicle
# ────────────────────────────────────────────────────────────────────────────────

class Vehicle(Enum):
    """
    Routing profile used for travel time estimation.

    REGULAR serializes to the empty string, which means "do not send a
    vehicle type at all".
    """

    REGULAR = ""
    TAXI = "TAXI"
    MOTORCYCLE = "MOTORCYCLE"

    @classmethod
    def parse(cls, text: Any) -> "Vehicle":
        """Case-insensitive parse; empty string is the regular profile."""
        if not isinstance(text, str):
            raise ConfigError(f"Cannot parse {text!r} as vehicle")
        try:
            return _VEHICLE_BY_NAME[text.upper()]
        except KeyError:
            raise ConfigError(f"Cannot parse {text!r} as vehicle") from None

    def serialize(self) -> str:
        return _NAME_BY_VEHICLE[self]

    def __str__(self) -> str:
        return self.serialize()


_NAME_BY_VEHICLE: Dict[Vehicle, str] = {
    Vehicle.REGULAR: "",
    Vehicle.TAXI: "TAXI",
    Vehicle.MOTORCYCLE: "MOTORCYCLE",
}
_VEHICLE_BY_NAME: Dict[str, Vehicle] = {v: k for k, v in _NAME_BY_VEHICLE.items()}


# ────────────────────────────────────────────────────────────────────────────────
# Aliases
# ────────────────────────────────────────────────────────────────────────────────

AnyMapping = Mapping[str, Any]

CoordinateToken = str
"""Resolved location in the form "x:<lon> y:<lat>"."""
