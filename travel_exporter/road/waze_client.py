# travel_exporter/road/waze_client.py
# -*- coding: utf-8 -*-
"""
Concrete Waze HTTP client:
- Composes GeocodingMixin + RoutingMixin
- Centralizes HTTP (session, headers, timeout)
- Maps failures onto the CallError family
- Emits standardized logs for every round trip

Notes
-----
• One GET is one attempt: the adapter is mounted with Retry(total=0), the next
  scrape is the retry mechanism.
• close() may be called from another thread while a call is in flight; the
  session is closed and any later call fails fast with TransportError.
• Entry points should call init_logging(); this module only fetches the logger.
"""

from __future__ import annotations

import threading
import time as _time
from typing import Any as _Any, Dict as _Dict, Optional as _Optional

import requests as _req
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from travel_exporter.infra.logging import get_logger
from .waze_common import (
      _extract_error_text
    , DecodeError
    , TransportError
    , UpstreamStatusError
    , WazeConfig
)
from .waze_mixins import GeocodingMixin, RoutingMixin

_log = get_logger(__name__)


class WazeClient(GeocodingMixin, RoutingMixin):
    """
    HTTP client for the Waze search and routing servers.

      - WazeClient()                         default host, 10 s timeout
      - WazeClient(cfg=WazeConfig(...))      custom knobs
      - WazeClient(session=fake_session)     injected transport (tests)
    """

    def __init__(
        self,
        cfg: WazeConfig | None = None,
        *,
        session: _req.Session | None = None,
    ):
        self.cfg = cfg or WazeConfig()
        self._closed = threading.Event()

        if session is None:
            session = _req.Session()
            adapter = HTTPAdapter(max_retries=Retry(total=0, raise_on_status=False))
            session.mount("https://", adapter)
            session.mount("http://", adapter)
        self._sess = session
        self._sess.headers.update(
            {
                  "Referer": self.cfg.referer
                , "User-Agent": self.cfg.user_agent
                , "Accept": "application/json"
            }
        )

        _log.debug("WazeClient ready base=%s timeout=%.1fs", self.cfg.base_url, self.cfg.timeout_s)

    # ────────────────────────────────────────────────────────────────────────
    # Lifecycle helpers
    # ────────────────────────────────────────────────────────────────────────
    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        """Close the HTTP session; later calls raise TransportError."""
        if self._closed.is_set():
            return
        self._closed.set()
        self._sess.close()
        _log.debug("WazeClient closed")

    def __enter__(self) -> "WazeClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ────────────────────────────────────────────────────────────────────────
    # Core HTTP layer (used by GeocodingMixin / RoutingMixin)
    # ────────────────────────────────────────────────────────────────────────
    def _get(
        self,
        url: str,
        params: _Optional[_Dict[str, _Any]] = None,
    ) -> _Any:
        """
        Single GET with error mapping:
          - network error / timeout  → TransportError
          - status != 200            → UpstreamStatusError
          - body not JSON            → DecodeError
        """
        if self._closed.is_set():
            raise TransportError("client is closed")

        _log.info("Call %s", url)
        t0 = _time.monotonic()
        try:
            resp = self._sess.get(url, params=params, timeout=self.cfg.timeout_s)
        except _req.Timeout as e:
            dt_ms = (_time.monotonic() - t0) * 1000.0
            _log.warning("HTTP GET %s — timeout after %.0f ms", url, dt_ms)
            raise TransportError(f"timeout after {self.cfg.timeout_s:.1f}s: {e}") from e
        except _req.RequestException as e:
            dt_ms = (_time.monotonic() - t0) * 1000.0
            if self._closed.is_set():
                raise TransportError("call cancelled: client closed") from e
            _log.error("HTTP GET %s — request exception %s after %.0f ms", url, type(e).__name__, dt_ms)
            raise TransportError(str(e)) from e

        dt_ms = (_time.monotonic() - t0) * 1000.0
        if resp.status_code != 200:
            body = _extract_error_text(resp)
            _log.error("HTTP GET %s — %s (%.0f ms) body=%s", url, resp.status_code, dt_ms, body)
            raise UpstreamStatusError(resp.status_code, resp.reason or "", body)

        try:
            data = resp.json()
        except ValueError as e:
            _log.error("HTTP GET %s — invalid JSON (%.0f ms): %s", url, dt_ms, _extract_error_text(resp))
            raise DecodeError(f"invalid JSON body: {e}") from e

        _log.info("HTTP GET %s — %s (%.0f ms)", url, resp.status_code, dt_ms)
        return data


__all__ = ["WazeClient", "WazeConfig"]
