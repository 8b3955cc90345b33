"""Orchestration: per-tile translator and the tile fan-out."""
