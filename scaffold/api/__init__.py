"""API routes package."""

from scaffold.api import health, pprof

__all__ = ["health", "pprof"]
