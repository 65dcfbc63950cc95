"""
Repository Interface: Shard Store

Defines the contract projections use to pull riddles incrementally.
"""

from typing import List, Protocol

from riddle_access.domain.entities import ShardPage
from riddle_access.models import Riddle


class IShardStore(Protocol):
    """
    Interface for incremental dataset access.

    Projections only ever ask for the next page and whether more exist;
    they never mutate the store's state directly.
    """

    @property
    def generation(self) -> int:
        """Number of times the store has been cleared."""
        ...

    async def load_next_shard(self) -> ShardPage:
        """
        Load the next page of riddles.

        Returns:
            ShardPage with the newly loaded riddles and whether more exist
        """
        ...

    async def load_all(self) -> List[Riddle]:
        """
        Load the whole dataset.

        Returns:
            Every riddle the store could obtain (possibly empty)
        """
        ...

    def has_more_data(self) -> bool:
        """True until the store has run out of pages."""
        ...

    def clear(self) -> None:
        """Discard all loaded data and start over."""
        ...
