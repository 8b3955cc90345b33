"""Core utilities and shared infrastructure.

- config: Generation options loading and validation
- constants: Tag keys, thresholds, network type codes
- exceptions: Custom exception hierarchy
"""
