# travel_exporter/app/exporter.py
# -*- coding: utf-8 -*-
"""
Pull-model exposition.

Every GET /metrics runs `Collector.scrape()` inline (single-flight) and then
renders the collector's registry in the Prometheus text format. The HTTP
server is prometheus_client's threading WSGI server, run in a background
thread so the main thread can wait for a shutdown signal.
"""

from __future__ import annotations

import socket
import threading
from typing import Callable, Iterable, Optional
from wsgiref.simple_server import WSGIRequestHandler, make_server

from prometheus_client import CollectorRegistry, make_wsgi_app
from prometheus_client.exposition import ThreadingWSGIServer

from travel_exporter.infra.logging import get_logger
from .collector import Collector

_log = get_logger(__name__)

METRICS_PATH = "/metrics"


def make_app(collector: Collector, registry: CollectorRegistry) -> Callable:
    """WSGI app: one collection cycle per scrape of METRICS_PATH, 404 elsewhere."""
    metrics_app = make_wsgi_app(registry)

    def app(environ, start_response) -> Iterable[bytes]:
        if environ.get("PATH_INFO", "") != METRICS_PATH:
            start_response("404 Not Found", [("Content-Type", "text/plain; charset=utf-8")])
            return [b"Not Found\n"]
        collector.scrape()
        return metrics_app(environ, start_response)

    return app


class _QuietHandler(WSGIRequestHandler):
    """Route access logs through logging instead of stderr."""

    def log_message(self, format, *args):
        _log.debug("%s - %s", self.address_string(), format % args)


class _ThreadingWSGIServerV6(ThreadingWSGIServer):
    address_family = socket.AF_INET6


class MetricsServer:
    """
    Threaded HTTP server for the exposition app.

    Usage
    -----
        server = MetricsServer(app, "", 9091)
        server.start()
        ...
        server.stop()
    """

    def __init__(self, app: Callable, host: str, port: int) -> None:
        server_class = _ThreadingWSGIServerV6 if ":" in host else ThreadingWSGIServer
        self._httpd = make_server(host, port, app, server_class, handler_class=_QuietHandler)
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self._httpd.server_port

    def start(self) -> None:
        self._thread = threading.Thread(target=self._httpd.serve_forever, name="metrics-http", daemon=True)
        self._thread.start()
        _log.info("Serving metrics on %s:%s%s", self._httpd.server_address[0], self.port, METRICS_PATH)

    def stop(self) -> None:
        self._httpd.shutdown()
        self._httpd.server_close()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
        _log.info("Metrics server stopped")
