# travel_exporter/road/__init__.py
