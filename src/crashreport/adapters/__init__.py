"""Adapters for external services."""

from .transport import RaygunTransport

__all__ = ["RaygunTransport"]
