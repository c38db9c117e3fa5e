# travel_exporter/addressing/__init__.py
