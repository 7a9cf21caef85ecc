"""Utility helpers."""

from .clock import Clock, monotonic_millis  # noqa: F401

__all__ = ["Clock", "monotonic_millis"]
