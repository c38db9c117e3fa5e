# travel_exporter/road/waze_mixins.py
# -*- coding: utf-8 -*-
"""
Reusable mixins for the Waze HTTP client:
- GeocodingMixin: free-text search against the region's search server
- RoutingMixin: routing request execution and response decoding

Expectations for the concrete client class that inherits these mixins:
- Attributes:
    self.cfg                 : WazeConfig (see travel_exporter.road.waze_common)
- Methods:
    self._get(url, params=None) -> decoded JSON (dict | list)

Notes
-----
• These helpers raise the CallError family from waze_common; they never retry.
• Decoding is strict about types: a field of the wrong type is a DecodeError,
  a missing field counts as zero.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from travel_exporter.core.models import RouteQueryDescriptor, RouteResult
from travel_exporter.core.types import CoordinateToken, Region
from travel_exporter.infra.logging import get_logger
from .waze_common import (
    _short,
    DecodeError,
    SEARCH_SERVERS,
)

_log = get_logger(__name__)


def _number(obj: Dict[str, Any], key: str) -> float:
    value = obj.get(key, 0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"Field {key!r} is not a number: {_short(value, 80)}")
    if isinstance(value, float) and not math.isfinite(value):
        raise DecodeError(f"Field {key!r} is not finite: {value!r}")
    return value


# ────────────────────────────────────────────────────────────────────────────────
# Geocoding
# ────────────────────────────────────────────────────────────────────────────────

def coordinate_token(lon: float, lat: float) -> CoordinateToken:
    """Format a location the way routing queries expect it."""
    return f"x:{lon:f} y:{lat:f}"


class GeocodingMixin:
    """
    Free-text geocoding over the search servers.

    Requires concrete client to provide:
      - self._get(...)
      - self.cfg.base_url
    """

    def geocode_text(self, text: str, region: Region = Region.ROW) -> List[Dict[str, Any]]:
        """
        Search the region's server for `text` with a null location bias.

        Returns
        -------
        list[dict]    # candidate records: {"name": str, "location": {"lat", "lon"}, ...}
        """
        _log.info("Look for address %s region=%s", _short(text), region)
        raw = self._get(
            f"{self.cfg.base_url}{SEARCH_SERVERS[region]}",
            {
                "q": text,
                "lat": "0",
                "lon": "0",
            },
        )
        if not isinstance(raw, list):
            raise DecodeError(f"Search response is not a list: {_short(raw, 120)}")
        _log.debug("GEOCODE got %s candidates", len(raw))
        return raw

    def first_named_location(self, candidates: List[Any]) -> Optional[CoordinateToken]:
        """
        Coordinate token of the first candidate with a non-empty name, or None.
        """
        for item in candidates:
            if not isinstance(item, dict) or not item.get("name"):
                continue
            location = item.get("location")
            if not isinstance(location, dict):
                raise DecodeError(f"Candidate without location: {_short(item, 120)}")
            return coordinate_token(_number(location, "lon"), _number(location, "lat"))
        return None


# ────────────────────────────────────────────────────────────────────────────────
# Routing
# ────────────────────────────────────────────────────────────────────────────────

def decode_route(inner: Any) -> RouteResult:
    """
    Convert one routing response body into a RouteResult.

    duration = totalRouteTime (seconds); distance = sum of results[].length (meters).
    """
    if not isinstance(inner, dict):
        raise DecodeError(f"Route is not an object: {_short(inner, 120)}")
    segments = inner.get("results") or []
    if not isinstance(segments, list):
        raise DecodeError("Field 'results' is not a list")

    total_length = 0
    for segment in segments:
        if not isinstance(segment, dict):
            raise DecodeError(f"Segment is not an object: {_short(segment, 80)}")
        total_length += _number(segment, "length")

    return RouteResult(
        duration_s=_number(inner, "totalRouteTime"),
        distance_m=total_length,
    )


def decode_routing_response(data: Any) -> List[RouteResult]:
    """
    Decode the primary route (if any) followed by every alternative.
    """
    if not isinstance(data, dict):
        raise DecodeError(f"Routing response is not an object: {_short(data, 120)}")

    results: List[RouteResult] = []
    primary = data.get("response")
    if primary is not None:
        results.append(decode_route(primary))

    alternatives = data.get("alternatives") or []
    if not isinstance(alternatives, list):
        raise DecodeError("Field 'alternatives' is not a list")
    for alt in alternatives:
        if not isinstance(alt, dict):
            raise DecodeError(f"Alternative is not an object: {_short(alt, 80)}")
        results.append(decode_route(alt.get("response") or {}))

    if not results and "error" in data:
        _log.warning("ROUTE upstream reported: %s", _short(data.get("error"), 200))
    return results


class RoutingMixin:
    """
    Routing request execution.

    Requires concrete client to provide:
      - self._get(...)
    """

    def call(self, query: RouteQueryDescriptor) -> List[RouteResult]:
        """
        Execute a prebuilt routing query.

        Returns
        -------
        list[RouteResult] : primary route first, then alternatives.
        """
        data = self._get(query.url)
        results = decode_routing_response(data)
        if results:
            _log.debug(
                "ROUTE ok dist=%.0fm dur=%.0fs alternatives=%s",
                results[0].distance_m,
                results[0].duration_s,
                len(results) - 1,
            )
        return results
