"""
Application: Access Layer

Facade the presentation layer talks to. One instance per page session.

Orchestrates:
1. One ShardStore + ProjectionCursor per active view (category or search term)
2. A separate bulk store for whole-dataset features (random, popular, category lists)
3. Explicit lifecycle: reset() when the browsing context changes, dispose() at teardown
"""

import asyncio
import random
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from riddle_access.domain.entities import BatchResult, ViewMode
from riddle_access.domain.repositories import IShardStore
from riddle_access.domain.services import (
    Predicate,
    ProjectionCursor,
    by_popularity_desc,
    match_category,
    match_keyword,
)
from riddle_access.logging_utils import StructuredLogger, ComponentType
from riddle_access.models import EventType, Riddle

# Builds a fresh store; the argument is the trace id for its log events
StoreFactory = Callable[[str], IShardStore]

ViewKey = Tuple[ViewMode, str]


@dataclass
class _View:
    key: str
    mode: ViewMode
    store: IShardStore
    cursor: ProjectionCursor
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class AccessLayer:
    """
    Session-scoped entry point for riddle access.

    Every view owns its store, so interleaved category and search requests
    never share a page window. Requests for the same view are serialized:
    a second caller waits for the in-flight request and then continues from
    where it left off.

    No public method raises; failures are logged and an empty value returned.
    """

    def __init__(
        self,
        store_factory: StoreFactory,
        default_batch_size: int = 9,
        session_id: Optional[str] = None,
    ):
        """
        Initialize access layer.

        Args:
            store_factory: Creates a new, empty store for each view
            default_batch_size: Batch size when the caller gives none
            session_id: Trace id for log correlation (random if omitted)
        """
        self._store_factory = store_factory
        self.default_batch_size = default_batch_size
        self.session_id = session_id or str(uuid.uuid4())

        self._views: Dict[ViewKey, _View] = {}
        self._bulk_store: Optional[IShardStore] = None
        self._disposed = False

        self.logger = StructuredLogger(ComponentType.ACCESS_LAYER)

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    async def get_batch(
        self,
        key: str,
        batch_size: Optional[int] = None,
        mode: ViewMode = ViewMode.CATEGORY,
    ) -> BatchResult:
        """
        Deliver the next batch for a category or search term.

        Args:
            key: Category name or search term (blank means every riddle)
            batch_size: Maximum riddles to return (default_batch_size if None)
            mode: ViewMode.CATEGORY or ViewMode.SEARCH

        Returns:
            BatchResult; items never repeat across calls for the same view
        """
        if self._disposed:
            self.logger.logger.warning("get_batch called on a disposed access layer")
            return BatchResult(items=[], has_more=False)

        size = self.default_batch_size if batch_size is None else batch_size

        try:
            view = self._view_for(key, mode)
            async with view.lock:
                result = await view.cursor.request(
                    view.key,
                    predicate=self._predicate_for(view),
                    sort_key=by_popularity_desc,
                    batch_size=size,
                )
        except Exception as e:
            self.logger.logger.error(f"Failed to load batch for {mode.value} {key!r}: {e}")
            return BatchResult(items=[], has_more=False)

        self.logger.log_event(
            trace_id=self.session_id,
            event_type=EventType.BATCH_DELIVERED,
            payload={"mode": mode.value, "key": view.key},
            metrics={"items": len(result.items), "has_more": result.has_more},
        )
        return result

    async def browse_category(self, category: str, batch_size: Optional[int] = None) -> BatchResult:
        return await self.get_batch(category, batch_size, mode=ViewMode.CATEGORY)

    async def search(self, term: str, batch_size: Optional[int] = None) -> BatchResult:
        return await self.get_batch(term, batch_size, mode=ViewMode.SEARCH)

    async def get_all(self) -> List[Riddle]:
        """
        Load the whole dataset.

        Returns:
            All valid riddles; the same sequence on repeated calls until reset()
        """
        if self._disposed:
            return []
        try:
            return await self._bulk().load_all()
        except Exception as e:
            self.logger.logger.error(f"Failed to load all riddles: {e}")
            return []

    async def get_category(self, category: str) -> List[Riddle]:
        """All riddles whose category is exactly the given one."""
        predicate = match_category(category, strict=True)
        return [riddle for riddle in await self.get_all() if predicate(riddle)]

    async def get_random(self, rng: Optional[random.Random] = None) -> Optional[Riddle]:
        """Pick one riddle at random, or None when no data is available."""
        riddles = await self.get_all()
        if not riddles:
            return None
        return (rng or random).choice(riddles)

    async def get_popular(self, page: int = 0, page_size: Optional[int] = None) -> BatchResult:
        """
        One page of the whole dataset ordered by popularity.

        Args:
            page: Zero-based page number
            page_size: Riddles per page (default_batch_size if None)
        """
        size = self.default_batch_size if page_size is None else page_size
        if page < 0 or size < 1:
            return BatchResult(items=[], has_more=False)

        ranked = sorted(await self.get_all(), key=by_popularity_desc)
        start = page * size
        end = start + size
        return BatchResult(items=ranked[start:end], has_more=end < len(ranked))

    def active_views(self) -> List[ViewKey]:
        return list(self._views)

    def reset(self) -> None:
        """Drop every view and cached dataset; the next request starts from scratch."""
        cleared = len(self._views) + (1 if self._bulk_store is not None else 0)
        for view in self._views.values():
            view.store.clear()
        if self._bulk_store is not None:
            self._bulk_store.clear()

        self._views = {}
        self._bulk_store = None

        self.logger.log_event(
            trace_id=self.session_id,
            event_type=EventType.CACHE_CLEARED,
            payload={"scope": "session"},
            metrics={"stores_cleared": cleared},
        )

    def dispose_view(self, key: str, mode: ViewMode = ViewMode.CATEGORY) -> None:
        """Tear down one view and its store."""
        view = self._views.pop((mode, self._normalize_key(key)), None)
        if view is not None:
            view.store.clear()

    def dispose(self) -> None:
        """End the session; later calls return empty results."""
        if self._disposed:
            return
        self.reset()
        self._disposed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.dispose()

    def _view_for(self, key: str, mode: ViewMode) -> _View:
        view_key = (mode, self._normalize_key(key))
        view = self._views.get(view_key)
        if view is None:
            store = self._store_factory(f"{self.session_id}:{mode.value}:{view_key[1]}")
            view = _View(
                key=view_key[1],
                mode=mode,
                store=store,
                cursor=ProjectionCursor(store),
            )
            self._views[view_key] = view
        return view

    def _bulk(self) -> IShardStore:
        if self._bulk_store is None:
            self._bulk_store = self._store_factory(f"{self.session_id}:all")
        return self._bulk_store

    @staticmethod
    def _predicate_for(view: _View) -> Predicate:
        if view.mode == ViewMode.SEARCH:
            return match_keyword(view.key)
        return match_category(view.key)

    @staticmethod
    def _normalize_key(key: Optional[str]) -> str:
        return (key or "").strip()
