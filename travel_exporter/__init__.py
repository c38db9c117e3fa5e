# travel_exporter/__init__.py
# -*- coding: utf-8 -*-
"""
Waze travel-time exporter.

Resolves named addresses once, then on every scrape queries the Waze
routing service for each configured path and republishes travel time and
distance as Prometheus gauges.
"""

__version__ = "1.0.0"
