"""
Repository Interface: Riddle Source

Defines the contract for retrieving raw riddle payloads.
"""

from typing import Any, Optional, Protocol


class IRiddleSource(Protocol):
    """
    Interface for raw dataset retrieval.

    Implementations never raise for transport or decoding problems: a
    missing resource, an HTTP error, a timeout or undecodable JSON are all
    reported as None so the caller can move on to its next strategy.
    """

    async def fetch_shard(self, index: int) -> Optional[Any]:
        """
        Fetch the decoded JSON of one shard.

        Args:
            index: Shard number, starting at 1

        Returns:
            Decoded JSON payload, or None if unavailable
        """
        ...

    async def fetch_full(self) -> Optional[Any]:
        """
        Fetch the decoded JSON of the full dataset.

        Returns:
            Decoded JSON payload, or None if unavailable
        """
        ...
