"""Service module exports."""

from . import projection, strategies

__all__ = ["projection", "strategies"]
