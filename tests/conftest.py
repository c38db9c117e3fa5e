# tests/conftest.py
# -*- coding: utf-8 -*-
"""Shared fakes: an in-memory requests session and a scripted route client."""

from __future__ import annotations

import json
from typing import Any, List

import pytest
from prometheus_client import CollectorRegistry

from travel_exporter.core.models import RouteResult


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, reason: str = "OK", text: str | None = None):
        self._payload = payload
        self.status_code = status_code
        self.reason = reason
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Returns queued responses (or raises queued exceptions) in order."""

    def __init__(self, *responses):
        self.queue: List[Any] = list(responses)
        self.headers: dict = {}
        self.calls: List[dict] = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout, "headers": dict(self.headers)})
        item = self.queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def close(self):
        self.closed = True


class ScriptedClient:
    """Route client double: each call pops the next outcome."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.queries = []

    def call(self, query):
        self.queries.append(query)
        item = self.outcomes.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def route_body(lengths, total_time, alternatives=()):
    body = {"response": {"results": [{"length": n} for n in lengths], "totalRouteTime": total_time}}
    if alternatives:
        body["alternatives"] = [
            {"response": {"results": [{"length": n} for n in alt_lengths], "totalRouteTime": alt_time}}
            for alt_lengths, alt_time in alternatives
        ]
    return body


def result(distance, duration):
    return [RouteResult(duration_s=duration, distance_m=distance)]


@pytest.fixture
def registry():
    return CollectorRegistry()


@pytest.fixture
def coordinates():
    return {
        "A": "x:1.000000 y:2.000000",
        "B": "x:3.000000 y:4.000000",
        "C": "x:5.000000 y:6.000000",
    }
