"""Deterministic tick-based grid battle resolver."""

__version__ = "0.1.0"
