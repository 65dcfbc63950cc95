"""
Domain Service: Projection Cursor

Incremental, filtered, popularity-sorted delivery over a shard store.

For each consumer key the cursor keeps the riddles that matched so far.
A request first serves from that backlog and only pulls another page from
the store when the backlog cannot fill the batch. Newly matched riddles
are merged into the undelivered tail, which is then re-sorted; delivered
riddles keep their position.
"""

import logging
from typing import Dict, List, Optional

from riddle_access.domain.entities import BatchResult, CursorState
from riddle_access.domain.repositories import IShardStore
from riddle_access.models import Riddle
from .dedup_registry import DedupRegistry
from .matching import Predicate, SortKey, by_popularity_desc, match_all


class ProjectionCursor:
    """
    Domain service producing fixed-size batches for consumer keys.

    One cursor may track several keys, but they all share the store's page
    window: a page pulled for one key is not replayed for another. Give
    each active view its own store (see AccessLayer) or clear the store
    before switching keys.
    """

    def __init__(self, store: IShardStore, registry: Optional[DedupRegistry] = None):
        """
        Initialize projection cursor.

        Args:
            store: Store to pull pages from
            registry: Delivered-identity registry (a private one if omitted)
        """
        self.store = store
        self.registry = registry if registry is not None else DedupRegistry()
        self._states: Dict[str, CursorState] = {}
        self.logger = logging.getLogger(__name__)

    def state_for(self, key: str) -> CursorState:
        """Get or create the state of a key, resetting it if the store was cleared."""
        state = self._states.get(key)
        if state is None:
            state = CursorState(key=key, store_generation=self.store.generation)
            self._states[key] = state
        else:
            self._sync_generation(state)
        return state

    async def request(
        self,
        key: str,
        predicate: Optional[Predicate] = None,
        sort_key: SortKey = by_popularity_desc,
        batch_size: int = 9,
    ) -> BatchResult:
        """
        Deliver the next batch for a key.

        Args:
            key: Consumer key (category name or search term)
            predicate: Filter applied to every riddle pulled from the store
            sort_key: Key for the stable sort of undelivered matches
            batch_size: Maximum number of riddles to return

        Returns:
            BatchResult with up to batch_size new riddles and whether more exist
        """
        predicate = predicate or match_all()
        state = self.state_for(key)

        if batch_size < 1:
            return BatchResult(items=[], has_more=self._has_more(state))

        while state.undelivered_count < batch_size and not state.shards_exhausted:
            if not self.store.has_more_data():
                state.shards_exhausted = True
                break

            generation = self.store.generation
            page = await self.store.load_next_shard()

            if generation != self.store.generation:
                # Store was cleared while the page was loading
                self._sync_generation(state)
                continue

            self._merge(state, page.items, predicate, sort_key)
            if not page.has_more:
                state.shards_exhausted = True

        items = self._deliver(state, batch_size)
        has_more = self._has_more(state)

        self.logger.debug(
            f"Delivered {len(items)} riddles for {key!r} "
            f"({state.displayed_count}/{len(state.matched)} matched, has_more={has_more})"
        )
        return BatchResult(items=items, has_more=has_more)

    def reset(self, key: Optional[str] = None) -> None:
        """Forget delivery progress for one key, or for all keys."""
        keys = [key] if key is not None else list(self._states)
        for k in keys:
            state = self._states.get(k)
            if state is not None:
                state.reset(self.store.generation)
            self.registry.forget(k)

    def dispose(self, key: str) -> None:
        """Drop a key's state entirely."""
        self._states.pop(key, None)
        self.registry.forget(key)

    def keys(self) -> List[str]:
        return list(self._states)

    def _sync_generation(self, state: CursorState) -> None:
        if state.store_generation != self.store.generation:
            state.reset(self.store.generation)
            self.registry.forget(state.key)

    def _merge(
        self,
        state: CursorState,
        riddles: List[Riddle],
        predicate: Predicate,
        sort_key: SortKey,
    ) -> None:
        fresh = []
        for riddle in riddles:
            if not predicate(riddle):
                continue
            identity = self.registry.identity(riddle)
            # Fallback pages can re-present riddles of earlier shards
            if identity in state.matched_ids or self.registry.seen(state.key, riddle):
                continue
            state.matched_ids.add(identity)
            fresh.append(riddle)

        if not fresh:
            return

        tail = state.matched[state.displayed_count:] + fresh
        tail.sort(key=sort_key)
        state.matched = state.matched[:state.displayed_count] + tail

    def _deliver(self, state: CursorState, batch_size: int) -> List[Riddle]:
        items = []
        while len(items) < batch_size and state.displayed_count < len(state.matched):
            riddle = state.matched[state.displayed_count]
            state.displayed_count += 1
            if self.registry.seen(state.key, riddle):
                continue
            self.registry.mark(state.key, riddle)
            items.append(riddle)
        return items

    def _has_more(self, state: CursorState) -> bool:
        if state.displayed_count < len(state.matched):
            return True
        return not state.shards_exhausted and self.store.has_more_data()
