"""Shared helpers: geodesic geometry and OSM tag predicates."""
