# travel_exporter/core/__init__.py
