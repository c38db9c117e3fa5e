# travel_exporter/road/query.py
# -*- coding: utf-8 -*-
"""
Route query builder.

Turns resolved coordinates plus routing options into an immutable
RouteQueryDescriptor holding the complete request URL. Pure data
transformation: no HTTP, no clock.
"""

from __future__ import annotations

from typing import Dict, List, Tuple
from urllib.parse import urlencode

from travel_exporter.core.models import RouteQueryDescriptor
from travel_exporter.core.types import CoordinateToken, Region, Vehicle
from travel_exporter.infra.logging import get_logger
from .waze_common import ROUTING_SERVERS, WAZE_BASE_URL

_log = get_logger(__name__)

# Fixed request knobs: one path, JSON answer, generous server-side timeout (ms)
N_PATHS = "1"
RETURN_JSON = "true"
SERVER_TIMEOUT_MS = "60000"
DEPARTURE_AT = "0"

OPT_AVOID_TRAILS = "AVOID_TRAILS:t"
OPT_AVOID_TOLL = "AVOID_TOLL_ROADS:t"
OPT_AVOID_FERRIES = "AVOID_FERRIES:t"
SUBSCRIPTION_ALL = "*"


def route_params(
      from_coordinates: CoordinateToken
    , to_coordinates: CoordinateToken
    , *
    , vehicle: Vehicle = Vehicle.REGULAR
    , avoid_toll: bool = False
    , avoid_subscription_road: bool = False
    , avoid_ferry: bool = False
) -> List[Tuple[str, str]]:
    """Query parameters of a routing request, sorted by key."""
    params: Dict[str, str] = {}
    if vehicle is not Vehicle.REGULAR:
        params["vehicleType"] = vehicle.serialize()

    options = [OPT_AVOID_TRAILS]
    if avoid_toll:
        options.append(OPT_AVOID_TOLL)
    if avoid_ferry:
        options.append(OPT_AVOID_FERRIES)
    params["options"] = ",".join(options)

    if not avoid_subscription_road:
        params["subscription"] = SUBSCRIPTION_ALL

    params["from"] = from_coordinates
    params["to"] = to_coordinates
    params["at"] = DEPARTURE_AT
    params["returnJSON"] = RETURN_JSON
    params["timeout"] = SERVER_TIMEOUT_MS
    params["nPaths"] = N_PATHS
    return sorted(params.items())


def build_route_query(
      from_coordinates: CoordinateToken
    , to_coordinates: CoordinateToken
    , *
    , region: Region = Region.ROW
    , vehicle: Vehicle = Vehicle.REGULAR
    , avoid_toll: bool = False
    , avoid_subscription_road: bool = False
    , avoid_ferry: bool = False
    , base_url: str = WAZE_BASE_URL
) -> RouteQueryDescriptor:
    """
    Build the routing request for one path-direction.

    The same inputs always produce the same URL (parameters are sorted).
    """
    params = route_params(
          from_coordinates
        , to_coordinates
        , vehicle=vehicle
        , avoid_toll=avoid_toll
        , avoid_subscription_road=avoid_subscription_road
        , avoid_ferry=avoid_ferry
    )
    url = f"{base_url.rstrip('/')}{ROUTING_SERVERS[region]}?{urlencode(params)}"
    _log.info("Result query %s", url)
    return RouteQueryDescriptor(
          from_coordinates=from_coordinates
        , to_coordinates=to_coordinates
        , region=region
        , vehicle=vehicle
        , avoid_toll=avoid_toll
        , avoid_subscription_road=avoid_subscription_road
        , avoid_ferry=avoid_ferry
        , params=tuple(params)
        , url=url
    )
