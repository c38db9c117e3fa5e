# travel_exporter/infra/__init__.py
