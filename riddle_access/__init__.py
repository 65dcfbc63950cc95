"""
Riddle Access Package

Incremental, fault-tolerant access to a sharded riddle dataset.

Architecture: Lazy Shard Loading
- Shards are pulled one at a time, only when a view needs more candidates
- Missing or malformed shards fall back to the full dataset, re-sliced into pages
- Each category/search view owns its store and delivers popularity-sorted batches
- Nothing raises to the caller; no data means an empty result
"""

__version__ = "0.1.0"

from .models import Riddle, ComponentType, EventType
from .domain.entities import BatchResult, ShardPage, ViewMode, LoadStrategy
from .domain.services import (
    DedupRegistry,
    PayloadNormalizer,
    ProjectionCursor,
    normalize,
    match_all,
    match_keyword,
    match_category,
    by_popularity_desc,
)
from .infrastructure.repositories import ShardStore
from .infrastructure.clients import HttpRiddleSource, LocalRiddleSource
from .application import AccessLayer
from .infrastructure.factory import AccessLayerFactory

__all__ = [
    "Riddle",
    "ComponentType",
    "EventType",
    "BatchResult",
    "ShardPage",
    "ViewMode",
    "LoadStrategy",
    "DedupRegistry",
    "PayloadNormalizer",
    "ProjectionCursor",
    "normalize",
    "match_all",
    "match_keyword",
    "match_category",
    "by_popularity_desc",
    "ShardStore",
    "HttpRiddleSource",
    "LocalRiddleSource",
    "AccessLayer",
    "AccessLayerFactory",
]
