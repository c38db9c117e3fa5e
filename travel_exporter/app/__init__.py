# travel_exporter/app/__init__.py
