"""Service module exports."""

from . import demo_seed, variance, variance_display

__all__ = ["demo_seed", "variance", "variance_display"]
