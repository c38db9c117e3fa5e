# travel_exporter/app/collector.py
# -*- coding: utf-8 -*-
"""
Collection engine.

One PathMetric per monitored path-direction holds its prebuilt routing query
and its (distance, duration) gauge pair. A Collector drives one *cycle* per
scrape: every PathMetric in construction order, strictly sequential, with the
configured delay between two calls (never before the first).

Gauge semantics
---------------
• success → distance gauge = raw distance, duration gauge = duration rounded
  to the nearest whole second;
• failure → both gauges keep the value of the last successful cycle, the
  failure counter goes up by one, the cycle moves on to the next path.

Concurrency
-----------
• `run_cycle()` serializes cycles behind a lock.
• `scrape()` is single-flight: when a cycle is already running, the caller
  waits for it to finish and reuses its outcome instead of starting another.
• `stop()` interrupts the inter-call delay and abandons the rest of the cycle.

All metrics live on the CollectorRegistry passed in; nothing is registered
on the process-wide default registry.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Sequence

from prometheus_client import CollectorRegistry, Counter, Gauge

from travel_exporter.core.config import ExporterConfig
from travel_exporter.core.models import PathSpec, RouteQueryDescriptor, RouteResult
from travel_exporter.core.types import CoordinateToken
from travel_exporter.infra.logging import get_logger
from travel_exporter.road.query import build_route_query
from travel_exporter.road.waze_common import CallError, WAZE_BASE_URL

_log = get_logger(__name__)

NAMESPACE = "waze"

PARAMETER_LABELS = (
    "from",
    "to",
    "region",
    "sleep",
    "vehicle",
    "avoid_toll",
    "avoid_subscription_road",
    "avoid_ferry",
    "bidirectional",
)


def round_half_away(value: float) -> float:
    """Round to the nearest integer, halves away from zero (95.5 -> 96)."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def _flag(value: bool) -> str:
    return "true" if value else "false"


# ────────────────────────────────────────────────────────────────────────────────
# Metric families
# ────────────────────────────────────────────────────────────────────────────────

class WazeMetrics:
    """Metric families of the exporter, registered on one registry."""

    def __init__(self, registry: CollectorRegistry) -> None:
        self.travel_time = Gauge(
            "travel_time_seconds",
            "travel time in seconds",
            ["from", "to"],
            namespace=NAMESPACE,
            registry=registry,
        )
        self.travel_distance = Gauge(
            "travel_distance_meters",
            "travel distance in meters",
            ["from", "to"],
            namespace=NAMESPACE,
            registry=registry,
        )
        self.api_calls = Counter(
            "api_calls",
            "number of calls to the Waze API",
            ["status"],
            namespace=NAMESPACE,
            registry=registry,
        )
        self.parameters = Counter(
            "parameters",
            "Waze parameters",
            list(PARAMETER_LABELS),
            namespace=NAMESPACE,
            registry=registry,
        )
        self.time_spent = Counter(
            "time_seconds",
            "total time spent to process Waze API",
            namespace=NAMESPACE,
            registry=registry,
        )
        self.calls_ok = self.api_calls.labels("ok")
        self.calls_ko = self.api_calls.labels("ko")


# ────────────────────────────────────────────────────────────────────────────────
# Per path-direction state
# ────────────────────────────────────────────────────────────────────────────────

class PathMetric:
    """
    One monitored path-direction: its query and its gauge pair.

    Gauges are only written by `record()`, which the Collector calls with the
    cycle lock held.
    """

    def __init__(
        self,
        from_name: str,
        to_name: str,
        query: RouteQueryDescriptor,
        metrics: WazeMetrics,
    ) -> None:
        self.from_name = from_name
        self.to_name = to_name
        self.query = query
        self.distance = metrics.travel_distance.labels(from_name, to_name)
        self.duration = metrics.travel_time.labels(from_name, to_name)

    @property
    def labels(self) -> tuple:
        return (self.from_name, self.to_name)

    def record(self, result: RouteResult) -> None:
        self.distance.set(result.distance_m)
        self.duration.set(round_half_away(result.duration_s))

    def __repr__(self) -> str:
        return f"PathMetric({self.from_name!r} -> {self.to_name!r})"


@dataclass
class CycleStats:
    """Outcome of one cycle."""

    ok: int = 0
    ko: int = 0
    elapsed_s: float = 0.0
    abandoned: bool = False


# ────────────────────────────────────────────────────────────────────────────────
# Collector
# ────────────────────────────────────────────────────────────────────────────────

class Collector:
    """
    Drives the routing client over every PathMetric once per cycle.

    Parameters
    ----------
    path_metrics : Sequence[PathMetric]
        Cycle order.
    client
        Anything with `call(RouteQueryDescriptor) -> list[RouteResult]`.
    metrics : WazeMetrics
    sleep_s : float
        Delay between two consecutive calls.
    sleep : Callable[[float], None] | None
        Replaces the interruptible wait (tests).
    clock : Callable[[], float]
        Monotonic clock used to time upstream calls.
    """

    def __init__(
        self,
        path_metrics: Sequence[PathMetric],
        client,
        *,
        metrics: WazeMetrics,
        sleep_s: float = 0.5,
        sleep: Optional[Callable[[float], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.path_metrics: List[PathMetric] = list(path_metrics)
        self.client = client
        self.metrics = metrics
        self.sleep_s = float(sleep_s)
        self._sleep = sleep
        self._clock = clock
        self._stop = threading.Event()
        self._cycle_lock = threading.Lock()
        self._last_stats: Optional[CycleStats] = None

    @classmethod
    def from_config(
        cls,
        cfg: ExporterConfig,
        coordinates: Mapping[str, CoordinateToken],
        client,
        *,
        registry: CollectorRegistry,
        base_url: str = WAZE_BASE_URL,
        **kwargs,
    ) -> "Collector":
        """
        Build one PathMetric per path-direction and declare run parameters.

        A bidirectional path yields its reversed PathMetric right after the
        forward one. A direction already monitored is skipped with a warning.
        """
        metrics = WazeMetrics(registry)
        path_metrics: List[PathMetric] = []
        seen = set()

        for spec in cfg.paths:
            directions = [spec, spec.reversed()] if spec.bidirectional else [spec]
            created = 0
            for d in directions:
                if (d.from_name, d.to_name) in seen:
                    _log.warning("Duplicate path %s -> %s ignored", d.from_name, d.to_name)
                    continue
                seen.add((d.from_name, d.to_name))
                path_metrics.append(_create_path_metric(d, cfg, coordinates, metrics, base_url))
                created += 1
            if not created:
                continue

            metrics.parameters.labels(
                spec.from_name,
                spec.to_name,
                cfg.region.serialize(),
                str(cfg.sleep_ms),
                cfg.vehicle.serialize(),
                _flag(cfg.avoid_toll),
                _flag(cfg.avoid_subscription_road),
                _flag(cfg.avoid_ferry),
                _flag(spec.bidirectional),
            ).inc()

        return cls(path_metrics, client, metrics=metrics, sleep_s=cfg.sleep_s, **kwargs)

    # ────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ────────────────────────────────────────────────────────────────────
    @property
    def running(self) -> bool:
        return self._cycle_lock.locked()

    @property
    def last_stats(self) -> Optional[CycleStats]:
        return self._last_stats

    def stop(self) -> None:
        """Interrupt the current delay and make running/future cycles bail out."""
        self._stop.set()

    # ────────────────────────────────────────────────────────────────────
    # Cycles
    # ────────────────────────────────────────────────────────────────────
    def scrape(self) -> Optional[CycleStats]:
        """
        Single-flight entry point used by the metrics endpoint.

        Runs a cycle, or waits for the one in flight and returns its stats.
        """
        if self._cycle_lock.acquire(blocking=False):
            try:
                return self._cycle()
            finally:
                self._cycle_lock.release()

        _log.info("Cycle already in flight; waiting for its results")
        with self._cycle_lock:
            return self._last_stats

    def run_cycle(self) -> CycleStats:
        """Run one full cycle, queued behind any cycle in flight."""
        with self._cycle_lock:
            return self._cycle()

    def _pause(self) -> bool:
        if self._sleep is not None:
            self._sleep(self.sleep_s)
        else:
            self._stop.wait(self.sleep_s)
        return not self._stop.is_set()

    def _cycle(self) -> CycleStats:
        stats = CycleStats()
        begin = self._clock()
        _log.debug("Cycle start (%s paths)", len(self.path_metrics))

        for idx, pm in enumerate(self.path_metrics):
            if self._stop.is_set() or (idx > 0 and not self._pause()):
                stats.abandoned = True
                _log.warning("Cycle abandoned after %s of %s paths", idx, len(self.path_metrics))
                break

            t0 = self._clock()
            try:
                results = self.client.call(pm.query)
            except CallError as e:
                self.metrics.time_spent.inc(max(0.0, self._clock() - t0))
                self.metrics.calls_ko.inc()
                stats.ko += 1
                # gauges keep their previous values
                _log.warning("%s %s %s", pm.from_name, pm.to_name, e)
                continue

            self.metrics.time_spent.inc(max(0.0, self._clock() - t0))
            self.metrics.calls_ok.inc()
            stats.ok += 1
            if results:
                pm.record(results[0])
            else:
                _log.warning("%s %s no route in response", pm.from_name, pm.to_name)

        stats.elapsed_s = self._clock() - begin
        self._last_stats = stats
        _log.info("Cycle done ok=%s ko=%s elapsed=%.2fs", stats.ok, stats.ko, stats.elapsed_s)
        return stats


def _create_path_metric(
    spec: PathSpec,
    cfg: ExporterConfig,
    coordinates: Mapping[str, CoordinateToken],
    metrics: WazeMetrics,
    base_url: str,
) -> PathMetric:
    _log.info("Create metrics from %s to %s", spec.from_name, spec.to_name)
    query = build_route_query(
          coordinates[spec.from_name]
        , coordinates[spec.to_name]
        , region=cfg.region
        , vehicle=cfg.vehicle
        , avoid_toll=cfg.avoid_toll
        , avoid_subscription_road=cfg.avoid_subscription_road
        , avoid_ferry=cfg.avoid_ferry
        , base_url=base_url
    )
    return PathMetric(spec.from_name, spec.to_name, query, metrics)
