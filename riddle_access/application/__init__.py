"""
Application Layer

The session-scoped facade consumed by the presentation layer.
"""

from .access_layer import AccessLayer, StoreFactory

__all__ = ["AccessLayer", "StoreFactory"]
