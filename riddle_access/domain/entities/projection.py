"""
Domain Entity: Projection

Per-consumer view state for incremental, filtered, sorted delivery.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, List, Set

from riddle_access.models import Riddle


class ViewMode(str, Enum):
    """How a consumer key is interpreted."""

    CATEGORY = "category"
    SEARCH = "search"


@dataclass
class BatchResult:
    """One batch handed to the presentation layer."""

    items: List[Riddle] = field(default_factory=list)
    has_more: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "has_more": self.has_more,
        }


@dataclass
class CursorState:
    """
    Accumulated state of one consumer key.

    matched[:displayed_count] has been delivered and is frozen; the tail is
    sorted again whenever a new shard contributes matches.
    """

    key: str
    displayed_count: int = 0
    matched: List[Riddle] = field(default_factory=list)
    matched_ids: Set[Hashable] = field(default_factory=set)
    shards_exhausted: bool = False
    store_generation: int = 0

    @property
    def undelivered_count(self) -> int:
        return len(self.matched) - self.displayed_count

    def reset(self, store_generation: int) -> None:
        self.displayed_count = 0
        self.matched = []
        self.matched_ids = set()
        self.shards_exhausted = False
        self.store_generation = store_generation
