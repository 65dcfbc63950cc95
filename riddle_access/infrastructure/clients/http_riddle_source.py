"""
Infrastructure: HTTP Riddle Source

Fetches riddle JSON files over HTTP with aiohttp.

Every resource is tried against each configured base URL in order (for
example the site itself, then a mirror). The first base that answers 200
with decodable JSON wins; anything else moves on to the next base.
"""

import asyncio
from typing import Any, List, Optional, Sequence
from urllib.parse import urljoin

import aiohttp

from riddle_access.logging_utils import StructuredLogger, ComponentType

DEFAULT_FULL_DATASET_PATH = "data/all_riddles.json"
DEFAULT_SHARD_TEMPLATE = "data/all_riddles_page_{index}.json"


class HttpRiddleSource:
    """
    IRiddleSource implementation over HTTP.

    A fresh ClientSession is opened per request, matching the short-lived
    request pattern used elsewhere; failures are logged and reported as None.
    """

    def __init__(
        self,
        base_urls: Sequence[str],
        full_dataset_path: str = DEFAULT_FULL_DATASET_PATH,
        shard_template: str = DEFAULT_SHARD_TEMPLATE,
        timeout: float = 10.0,
    ):
        """
        Initialize HTTP riddle source.

        Args:
            base_urls: Base URLs tried in order for every resource
            full_dataset_path: Path of the full dataset relative to a base URL
            shard_template: Path of shard n, with an {index} placeholder
            timeout: Total timeout per request in seconds
        """
        # urljoin drops the last path segment of a base without a trailing slash
        self._base_urls = [
            url if url.endswith("/") else f"{url}/" for url in base_urls if url
        ]
        self._full_dataset_path = full_dataset_path
        self._shard_template = shard_template
        self._timeout = timeout
        self.logger = StructuredLogger(ComponentType.RIDDLE_SOURCE)

    @property
    def base_urls(self) -> List[str]:
        return list(self._base_urls)

    def candidate_urls(self, path: str) -> List[str]:
        """Resolve a relative path against every base URL, without duplicates."""
        urls = []
        for base in self._base_urls:
            url = urljoin(base, path)
            if url not in urls:
                urls.append(url)
        return urls

    async def fetch_shard(self, index: int) -> Optional[Any]:
        return await self._fetch_first(self._shard_template.format(index=index))

    async def fetch_full(self) -> Optional[Any]:
        return await self._fetch_first(self._full_dataset_path)

    async def _fetch_first(self, path: str) -> Optional[Any]:
        for url in self.candidate_urls(path):
            payload = await self._fetch_json(url)
            if payload is not None:
                return payload
        return None

    async def _fetch_json(self, url: str) -> Optional[Any]:
        """GET one URL and decode it as JSON."""
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    url,
                    timeout=aiohttp.ClientTimeout(total=self._timeout)
                ) as response:
                    if response.status != 200:
                        self.logger.logger.info(f"{url} returned HTTP {response.status}")
                        return None

                    # Static hosts often serve .json as text/plain
                    return await response.json(content_type=None)

        except asyncio.TimeoutError:
            self.logger.logger.warning(f"Timeout after {self._timeout}s fetching {url}")
            return None

        except aiohttp.ClientError as e:
            self.logger.logger.warning(f"HTTP client error fetching {url}: {e}")
            return None

        except ValueError as e:
            self.logger.logger.warning(f"Invalid JSON from {url}: {e}")
            return None
