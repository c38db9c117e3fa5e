# travel_exporter/app/cli.py
# -*- coding: utf-8 -*-
"""
Command-line entry point.

    waze-exporter <config_file> [--log-level LEVEL] [--write-output | --log-file PATH]

Startup: load config → resolve every referenced address → build the
collector → bind the metrics server → serve /metrics until SIGINT/SIGTERM.
Any startup failure (bad config, unresolvable address, upstream error, port
already in use, interrupt) exits with status 1.
"""

from __future__ import annotations

import argparse
import signal
import threading
from pathlib import Path
from typing import Optional, Sequence

from prometheus_client import CollectorRegistry

from travel_exporter import __version__
from travel_exporter.addressing.resolver import resolve_address_book
from travel_exporter.core.config import ExporterConfig, load_config
from travel_exporter.core.types import ConfigError
from travel_exporter.infra.logging import get_current_log_path, get_logger, init_logging, log_banner
from travel_exporter.road.waze_client import WazeClient
from travel_exporter.road.waze_common import WazeError
from .collector import Collector
from .exporter import MetricsServer, make_app

log = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
          prog="waze-exporter"
        , description="Export Waze travel time and distance between named places as Prometheus metrics."
    )
    p.add_argument("config", help="Path to the JSON configuration file.")
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    out = p.add_mutually_exclusive_group()
    out.add_argument("--write-output", action="store_true", help="Also log to a per-run file under logs/.")
    out.add_argument("--log-file", type=Path, default=None, help="Also log to this file.")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def build_collector(cfg: ExporterConfig, client: WazeClient, registry: CollectorRegistry) -> Collector:
    """Resolve addresses once, then build every path metric."""
    coordinates = resolve_address_book(
          cfg.addresses
        , cfg.referenced_names()
        , client=client
        , region=cfg.region
    )
    return Collector.from_config(cfg, coordinates, client, registry=registry)


def serve(server: MetricsServer, collector: Collector, client: WazeClient) -> None:
    """Serve until a termination signal arrives, then cancel outstanding work."""
    stop = threading.Event()

    def _on_signal(signum, _frame):
        log.info("Received signal %s; shutting down", signum)
        stop.set()

    signal.signal(signal.SIGINT, _on_signal)
    signal.signal(signal.SIGTERM, _on_signal)

    server.start()
    try:
        while not stop.wait(1.0):
            pass
    finally:
        collector.stop()
        client.close()
        server.stop()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    init_logging(level=args.log_level, write_output=args.write_output, log_file=args.log_file)
    log_banner(log, f"waze-travel-exporter {__version__}")
    log_path = get_current_log_path()
    if log_path is not None:
        log.info("Log file → %s", log_path)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        log.error("Startup failed: %s", e)
        return 1

    with WazeClient() as client:
        try:
            registry = CollectorRegistry()
            collector = build_collector(cfg, client, registry)
            host, port = cfg.listen_address
            server = MetricsServer(make_app(collector, registry), host, port)
        except (ConfigError, WazeError) as e:
            log.error("Startup failed: %s", e)
            return 1
        except OSError as e:
            log.error("Cannot listen on %s: %s", cfg.listen, e)
            return 1
        except KeyboardInterrupt:
            log.warning("Interrupted during startup")
            return 1

        serve(server, collector, client)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
