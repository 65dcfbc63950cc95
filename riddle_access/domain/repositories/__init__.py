"""
Repository Interfaces

These interfaces define contracts for data access without
specifying implementation details (Dependency Inversion Principle).
"""

from .riddle_source import IRiddleSource
from .shard_store import IShardStore

__all__ = [
    "IRiddleSource",
    "IShardStore",
]
