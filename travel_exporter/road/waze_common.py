# travel_exporter/road/waze_common.py
# -*- coding: utf-8 -*-
"""
Common pieces for the Waze client stack:
- Error classes
- Upstream constants (host, referer, per-region server paths)
- WazeConfig (timeout, user agent, base URL)
- Helpers for log previews and response error extraction

This module is "pure infra": it does not perform HTTP calls; the HTTP logic
lives in travel_exporter/road/waze_client.py. Keep it side-effect free (no
init_logging here); the entry point calls init_logging().
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from travel_exporter import __version__
from travel_exporter.core.types import Region
from travel_exporter.infra.logging import get_logger

# ────────────────────────────────────────────────────────────────────────────────
# Errors
# ────────────────────────────────────────────────────────────────────────────────

class WazeError(Exception):
    """Base class of every failure talking to the routing service."""
    ...

class AddressNotFoundError(WazeError):
    """Raised when a geocode query returned no candidate with a name."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Address not found: {address}")
        self.address = address

class CallError(WazeError):
    """One failed HTTP round trip (never retried within a cycle)."""
    ...

class TransportError(CallError):
    """Connection failure, timeout, or a request on a closed client."""
    ...

class UpstreamStatusError(CallError):
    """The service answered with a non-success HTTP status."""

    def __init__(self, status_code: int, reason: str = "", body: str = "") -> None:
        msg = f"Got HTTP {status_code} {reason}".rstrip()
        if body:
            msg = f"{msg}: {body}"
        super().__init__(msg)
        self.status_code = status_code
        self.reason = reason

class DecodeError(CallError):
    """The response body is not JSON or does not have the expected shape."""
    ...


# ────────────────────────────────────────────────────────────────────────────────
# Upstream constants
# ────────────────────────────────────────────────────────────────────────────────

WAZE_SCHEME = "https"
WAZE_HOST = "www.waze.com"
WAZE_BASE_URL = f"{WAZE_SCHEME}://{WAZE_HOST}"
WAZE_REFERER = f"{WAZE_BASE_URL}/"

SEARCH_SERVERS: Dict[Region, str] = {
    Region.US: "/SearchServer/mozi",
    Region.IL: "/il-SearchServer/mozi",
    Region.ROW: "/row-SearchServer/mozi",
}

ROUTING_SERVERS: Dict[Region, str] = {
    Region.US: "/RoutingManager/routingRequest",
    Region.IL: "/il-RoutingManager/routingRequest",
    Region.ROW: "/row-RoutingManager/routingRequest",
}


# ────────────────────────────────────────────────────────────────────────────────
# Logging helpers
# ────────────────────────────────────────────────────────────────────────────────

_log = get_logger(__name__)

def _short(v: Any, maxlen: int = 420) -> str:
    """
    Safe, concise preview of a Python object. Useful in logs.
    """
    try:
        s = json.dumps(v, ensure_ascii=False, sort_keys=True)
    except (TypeError, ValueError):
        s = str(v)
    return s if len(s) <= maxlen else (s[:maxlen] + " …")


def _extract_error_text(resp) -> str:
    """
    Best-effort extraction of a human-friendly error from a HTTP response.
    """
    try:
        text = resp.text or ""
    except (AttributeError, UnicodeDecodeError):
        return "<no-text>"
    return text[:200]


# ────────────────────────────────────────────────────────────────────────────────
# Config
# ────────────────────────────────────────────────────────────────────────────────

class WazeConfig:
    """
    Configuration bundle for the Waze HTTP client.

    Parameters
    ----------
    base_url : str
        Scheme and host of the service (no trailing slash).
    timeout_s : float
        Bound on one HTTP round trip (connect and read), in seconds.
    referer : str
        Referer header the service expects on every request.
    user_agent : str
        Sent as User-Agent.
    """
    def __init__(
        self,
        base_url: str = WAZE_BASE_URL,
        timeout_s: float = 10.0,
        referer: str = WAZE_REFERER,
        user_agent: Optional[str] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = float(timeout_s)
        self.referer = str(referer)
        self.user_agent = str(user_agent or f"waze-travel-exporter/{__version__}")

        _log.debug(
            "WazeConfig init: base_url=%s timeout=%.1fs referer=%s ua=%s",
            self.base_url,
            self.timeout_s,
            self.referer,
            self.user_agent,
        )
