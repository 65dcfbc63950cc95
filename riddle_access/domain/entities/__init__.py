"""
Domain Entities

Pure domain objects describing dataset loading and consumer views.
"""

from .shard import LoadStrategy, ShardState, ShardPage, DatasetState
from .projection import ViewMode, BatchResult, CursorState

__all__ = [
    "LoadStrategy",
    "ShardState",
    "ShardPage",
    "DatasetState",
    "ViewMode",
    "BatchResult",
    "CursorState",
]
