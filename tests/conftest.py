"""
Shared test fixtures and utilities for riddle access tests
"""

import asyncio
from typing import Any, Dict, List, Optional

import pytest
from unittest.mock import AsyncMock, MagicMock

from riddle_access.infrastructure.repositories import ShardStore


def riddle_dict(n: int, popularity: Any = 0, category: str = "animal", **extra) -> Dict[str, Any]:
    """Build one raw riddle entry as it appears in the JSON files."""
    data = {
        "id": n,
        "question": f"question {n}",
        "answer": f"answer {n}",
        "category": category,
        "popularity": popularity,
    }
    data.update(extra)
    return data


class FakeRiddleSource:
    """
    In-memory IRiddleSource.

    shards maps shard index to payload; a missing index behaves like a 404.
    shard_errors maps shard index to an exception raised instead of answering.
    """

    def __init__(
        self,
        shards: Optional[Dict[int, Any]] = None,
        full: Any = None,
        delay: float = 0.0,
        shard_errors: Optional[Dict[int, BaseException]] = None,
    ):
        self.shards = shards or {}
        self.shard_errors = shard_errors or {}
        self.full = full
        self.delay = delay
        self.shard_calls: List[int] = []
        self.full_calls = 0

    async def fetch_shard(self, index: int) -> Optional[Any]:
        self.shard_calls.append(index)
        if self.delay:
            await asyncio.sleep(self.delay)
        if index in self.shard_errors:
            raise self.shard_errors[index]
        return self.shards.get(index)

    async def fetch_full(self) -> Optional[Any]:
        self.full_calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.full


@pytest.fixture
def make_riddle():
    return riddle_dict


@pytest.fixture
def make_source():
    return FakeRiddleSource


@pytest.fixture
def scenario_riddles():
    """Six valid riddles with popularities [10, 5, 8, 2, 9, 1]."""
    return [riddle_dict(i + 1, popularity=p) for i, p in enumerate([10, 5, 8, 2, 9, 1])]


@pytest.fixture
def sharded_source(scenario_riddles):
    """Three shards of two riddles each, plus the same six as the full dataset."""
    return FakeRiddleSource(
        shards={
            1: scenario_riddles[0:2],
            2: scenario_riddles[2:4],
            3: scenario_riddles[4:6],
        },
        full=list(scenario_riddles),
    )


@pytest.fixture
def make_store():
    """Build a ShardStore over a source with small defaults."""

    def _make(source, **kwargs):
        kwargs.setdefault("total_shards", 3)
        kwargs.setdefault("fallback_page_size", 2)
        return ShardStore(source=source, **kwargs)

    return _make


@pytest.fixture
def mock_aiohttp():
    """
    Helper to create properly mocked aiohttp sessions with async context managers.

    Call with a dict mapping URL to (status, json_data) or to an exception
    instance; unknown URLs answer 404. Returns (mock_session_context, mock_session).
    """

    def _make(routes: Dict[str, Any]):
        def get(url, **kwargs):
            route = routes.get(url, (404, None))
            if isinstance(route, BaseException):
                raise route

            status, json_data = route
            mock_response = MagicMock()
            mock_response.status = status
            if isinstance(json_data, BaseException):
                mock_response.json = AsyncMock(side_effect=json_data)
            else:
                mock_response.json = AsyncMock(return_value=json_data)

            # Mock async context manager for session.get()
            mock_get_context = AsyncMock()
            mock_get_context.__aenter__.return_value = mock_response
            mock_get_context.__aexit__.return_value = None
            return mock_get_context

        mock_session = MagicMock()
        mock_session.get.side_effect = get

        # Mock ClientSession as async context manager
        mock_session_context = AsyncMock()
        mock_session_context.__aenter__.return_value = mock_session
        mock_session_context.__aexit__.return_value = None

        return mock_session_context, mock_session

    return _make
