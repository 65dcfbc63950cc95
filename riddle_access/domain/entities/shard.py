"""
Domain Entity: Shard

Loading state for the sharded riddle dataset.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from riddle_access.models import Riddle


class LoadStrategy(str, Enum):
    """Strategy the store is currently using to produce riddles."""

    SHARDS = "shards"  # data/all_riddles_page_<n>.json, one at a time
    FULL_DATASET = "full_dataset"  # data/all_riddles.json re-sliced into pages


@dataclass(frozen=True)
class ShardState:
    """A shard index the store has successfully loaded."""

    index: int
    loaded: bool = True


@dataclass
class ShardPage:
    """Result of one incremental load."""

    items: List[Riddle] = field(default_factory=list)
    has_more: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "has_more": self.has_more,
        }


@dataclass
class DatasetState:
    """
    Everything one ShardStore knows about the dataset.

    accumulated_records only grows until the store is cleared. It holds
    either the concatenated shards or the full dataset, never a mix.
    """

    loaded_shards: Dict[int, ShardState] = field(default_factory=dict)
    full_dataset_loaded: bool = False
    accumulated_records: List[Riddle] = field(default_factory=list)
    current_index: int = 0
    exhausted: bool = False
    strategy: LoadStrategy = LoadStrategy.SHARDS
    fallback_offset: int = 0
    fallback_attempted: bool = False

    def mark_loaded(self, index: int) -> None:
        self.loaded_shards[index] = ShardState(index=index)
        self.current_index = index

    def is_loaded(self, index: int) -> bool:
        return index in self.loaded_shards
