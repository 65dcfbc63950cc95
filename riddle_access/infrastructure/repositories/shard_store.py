"""
Infrastructure: Shard Store

Owns retrieval and caching of the riddle dataset.

Lazy Loading Architecture:
1. Shards are requested one at a time, index 1..total_shards
2. A missing, empty or malformed shard engages the full-dataset fallback,
   once per lifetime; the full dataset is then re-sliced into pages of
   fallback_page_size and shard loading is abandoned
3. load_all() fetches the full dataset directly and degrades to the shard
   loop, bounded by load_all_cap, when that fails

Concurrent callers of the same operation share one in-flight task, so a
shard is never fetched or appended twice.
"""

import asyncio
from typing import Awaitable, Callable, Dict, List, Optional

from riddle_access.domain.entities import DatasetState, LoadStrategy, ShardPage, ShardState
from riddle_access.domain.repositories import IRiddleSource
from riddle_access.domain.services import PayloadNormalizer
from riddle_access.logging_utils import StructuredLogger, ComponentType
from riddle_access.models import EventType, Riddle


class ShardStore:
    """
    Repository for the sharded riddle dataset with a full-dataset fallback.

    Public operations never raise: any failure degrades to the next
    strategy and, when none is left, to an empty result.
    """

    def __init__(
        self,
        source: IRiddleSource,
        normalizer: Optional[PayloadNormalizer] = None,
        total_shards: int = 3,
        fallback_page_size: int = 50,
        load_all_cap: int = 500,
        trace_id: str = "shard-store",
    ):
        """
        Initialize shard store.

        Args:
            source: Where raw payloads come from
            normalizer: Payload normalizer (default strategies if omitted)
            total_shards: Number of shard resources
            fallback_page_size: Page size when re-slicing the full dataset
            load_all_cap: Stop the degraded load_all loop past this many riddles
            trace_id: Correlation id for structured log events
        """
        if total_shards < 0:
            raise ValueError("total_shards must be >= 0")
        if fallback_page_size < 1:
            raise ValueError("fallback_page_size must be >= 1")

        self.source = source
        self.normalizer = normalizer or PayloadNormalizer()
        self.total_shards = total_shards
        self.fallback_page_size = fallback_page_size
        self.load_all_cap = load_all_cap
        self.trace_id = trace_id

        self._state = DatasetState()
        self._generation = 0
        self._inflight: Dict[str, asyncio.Task] = {}

        self.logger = StructuredLogger(ComponentType.SHARD_STORE)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def strategy(self) -> LoadStrategy:
        return self._state.strategy

    @property
    def is_full_dataset_loaded(self) -> bool:
        return self._state.full_dataset_loaded

    @property
    def accumulated_records(self) -> List[Riddle]:
        return list(self._state.accumulated_records)

    @property
    def loaded_shards(self) -> List[ShardState]:
        return [self._state.loaded_shards[i] for i in sorted(self._state.loaded_shards)]

    def has_more_data(self) -> bool:
        return not self._state.exhausted

    def clear(self) -> None:
        """Reset to the initial state; results of fetches still in flight are discarded."""
        records = len(self._state.accumulated_records)
        self._state = DatasetState()
        self._generation += 1
        self._inflight.clear()

        self.logger.log_event(
            trace_id=self.trace_id,
            event_type=EventType.CACHE_CLEARED,
            payload={"generation": self._generation},
            metrics={"discarded_records": records},
        )

    async def load_next_shard(self) -> ShardPage:
        """
        Load the next shard, or the next fallback page once the fallback is active.

        Returns:
            ShardPage with the new riddles; has_more is False once exhausted
        """
        try:
            return await self._shared("next_shard", self._load_next_shard)
        except Exception as e:
            self.logger.logger.error(f"Unexpected failure loading next shard: {e}")
            # Stop callers that loop on has_more_data()
            self._mark_exhausted(f"unexpected error: {type(e).__name__}")
            return ShardPage(items=[], has_more=False)

    async def load_all(self) -> List[Riddle]:
        """
        Load the complete dataset.

        Returns:
            Every riddle obtained, possibly empty; repeated calls return the
            same sequence until clear()
        """
        try:
            return await self._shared("all", self._load_all)
        except Exception as e:
            self.logger.logger.error(f"Unexpected failure loading all riddles: {e}")
            return list(self._state.accumulated_records)

    async def _shared(self, name: str, factory: Callable[[], Awaitable]):
        task = self._inflight.get(name)
        if task is None or task.done():
            task = asyncio.ensure_future(factory())
            self._inflight[name] = task
            task.add_done_callback(lambda t: self._forget_task(name, t))
        # One caller being cancelled must not cancel the load for the others
        return await asyncio.shield(task)

    def _forget_task(self, name: str, task: asyncio.Task) -> None:
        if self._inflight.get(name) is task:
            del self._inflight[name]

    async def _load_next_shard(self) -> ShardPage:
        state = self._state
        generation = self._generation

        if state.exhausted:
            return ShardPage(items=[], has_more=False)

        if state.strategy == LoadStrategy.FULL_DATASET:
            return self._next_fallback_page()

        index = state.current_index + 1
        if index > self.total_shards or state.is_loaded(index):
            self._mark_exhausted("all shards loaded")
            return ShardPage(items=[], has_more=False)

        records = await self._fetch_records(f"shard {index}", lambda: self.source.fetch_shard(index))
        if generation != self._generation:
            return ShardPage(items=[], has_more=self.has_more_data())

        if not records:
            self.logger.logger.warning(f"Shard {index} missing, empty or malformed")
            if not state.fallback_attempted and not state.full_dataset_loaded:
                return await self._engage_fallback(generation)
            self._mark_exhausted(f"shard {index} unavailable and fallback already used")
            return ShardPage(items=[], has_more=False)

        state.accumulated_records.extend(records)
        state.mark_loaded(index)
        has_more = index < self.total_shards

        self.logger.log_event(
            trace_id=self.trace_id,
            event_type=EventType.SHARD_LOADED,
            payload={"index": index},
            metrics={
                "records": len(records),
                "accumulated": len(state.accumulated_records),
            },
        )

        if not has_more:
            self._mark_exhausted("all shards loaded")
        return ShardPage(items=records, has_more=has_more)

    async def _engage_fallback(self, generation: int) -> ShardPage:
        state = self._state
        state.fallback_attempted = True

        self.logger.log_event(
            trace_id=self.trace_id,
            event_type=EventType.FALLBACK_ENGAGED,
            payload={"after_shard": state.current_index},
            metrics={"accumulated": len(state.accumulated_records)},
        )

        records = await self._fetch_full_records()
        if generation != self._generation:
            return ShardPage(items=[], has_more=self.has_more_data())

        if not records:
            self._mark_exhausted("full dataset unavailable")
            return ShardPage(items=[], has_more=False)

        if not self._adopt_full_dataset(records):
            self._mark_exhausted("full dataset smaller than loaded shards")
            return ShardPage(items=[], has_more=False)

        return self._next_fallback_page()

    async def _load_all(self) -> List[Riddle]:
        state = self._state
        generation = self._generation

        if state.full_dataset_loaded or (state.exhausted and state.accumulated_records):
            return list(state.accumulated_records)

        records = await self._fetch_full_records()
        if generation != self._generation:
            return list(self._state.accumulated_records)

        if records and self._adopt_full_dataset(records):
            self.logger.logger.info(f"Loaded full dataset: {len(records)} riddles")
            return list(state.accumulated_records)

        # The full resource just failed; shard misses below should not refetch it
        state.fallback_attempted = True
        self.logger.logger.warning(
            f"Full dataset unavailable, loading shards (cap {self.load_all_cap})"
        )

        while self.has_more_data() and len(self._state.accumulated_records) < self.load_all_cap:
            await self.load_next_shard()
            if generation != self._generation:
                break

        return list(self._state.accumulated_records)

    async def _fetch_full_records(self) -> List[Riddle]:
        return await self._fetch_records("full dataset", self.source.fetch_full)

    async def _fetch_records(self, label: str, fetch: Callable[[], Awaitable]) -> List[Riddle]:
        """Fetch and normalize one resource; any failure counts as no data."""
        try:
            payload = await fetch()
            return self.normalizer.normalize(payload)
        except Exception as e:
            self.logger.logger.warning(f"Failed to load {label}: {type(e).__name__}: {e}")
            return []

    def _adopt_full_dataset(self, records: List[Riddle]) -> bool:
        """Replace shard data with the full dataset; pages restart at offset 0."""
        state = self._state
        if len(records) < len(state.accumulated_records):
            self.logger.logger.warning(
                f"Full dataset has {len(records)} riddles but shards already "
                f"yielded {len(state.accumulated_records)}; keeping shard data"
            )
            return False

        state.accumulated_records = list(records)
        state.full_dataset_loaded = True
        state.strategy = LoadStrategy.FULL_DATASET
        state.fallback_offset = 0
        return True

    def _next_fallback_page(self) -> ShardPage:
        state = self._state
        start = state.fallback_offset
        end = start + self.fallback_page_size
        items = state.accumulated_records[start:end]
        state.fallback_offset = min(end, len(state.accumulated_records))

        has_more = end < len(state.accumulated_records)
        if not has_more:
            self._mark_exhausted("full dataset fully paged")
        return ShardPage(items=items, has_more=has_more)

    def _mark_exhausted(self, reason: str) -> None:
        if self._state.exhausted:
            return
        self._state.exhausted = True
        self.logger.log_event(
            trace_id=self.trace_id,
            event_type=EventType.DATASET_EXHAUSTED,
            payload={"reason": reason, "strategy": self._state.strategy.value},
            metrics={"accumulated": len(self._state.accumulated_records)},
        )
