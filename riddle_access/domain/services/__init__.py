"""
Domain Services

Normalization, matching, deduplication and projection logic.
"""

from .normalizer import PayloadNormalizer, ExtractionStrategy, normalize
from .dedup_registry import DedupRegistry
from .matching import (
    Predicate,
    SortKey,
    match_all,
    match_keyword,
    match_category,
    by_popularity_desc,
)
from .projection_cursor import ProjectionCursor

__all__ = [
    "PayloadNormalizer",
    "ExtractionStrategy",
    "normalize",
    "DedupRegistry",
    "Predicate",
    "SortKey",
    "match_all",
    "match_keyword",
    "match_category",
    "by_popularity_desc",
    "ProjectionCursor",
]
