"""Elevation provider adapters and the batched elevation service."""
