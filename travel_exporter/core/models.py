# travel_exporter/core/models.py
# -*- coding: utf-8 -*-

"""
Core domain models (pure dataclasses).

    - PathSpec: a directed pair of address-book names
    - RouteQueryDescriptor: an immutable, fully formed routing request
    - RouteResult: travel time and distance decoded from one route

This module deliberately has no HTTP and no metrics imports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .types import CoordinateToken, Region, Vehicle


@dataclass(frozen=True)
class PathSpec:
    """
    A monitored path between two entries of the address book.

    Attributes
    ----------
    from_name : str
        Origin name (key of the address book).
    to_name : str
        Destination name (key of the address book).
    bidirectional : bool
        Also collect the reversed direction.
    """

    from_name: str
    to_name: str
    bidirectional: bool = False

    def reversed(self) -> "PathSpec":
        return PathSpec(self.to_name, self.from_name, self.bidirectional)


@dataclass(frozen=True)
class RouteQueryDescriptor:
    """
    Routing request built once per path-direction and never mutated.

    `params` is the sorted list of query parameters; `url` is the complete
    request URL derived from them.
    """

    from_coordinates: CoordinateToken
    to_coordinates: CoordinateToken
    region: Region = Region.ROW
    vehicle: Vehicle = Vehicle.REGULAR
    avoid_toll: bool = False
    avoid_subscription_road: bool = False
    avoid_ferry: bool = False
    params: Tuple[Tuple[str, str], ...] = field(default=(), compare=False)
    url: str = field(default="", compare=False)


@dataclass(frozen=True)
class RouteResult:
    """
    One decoded route.

    Attributes
    ----------
    duration_s : float
        Total route time in seconds.
    distance_m : float
        Sum of the segment lengths in meters.
    """

    duration_s: float
    distance_m: float
