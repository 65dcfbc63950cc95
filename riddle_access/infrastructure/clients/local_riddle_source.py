"""
Infrastructure: Local Riddle Source

Reads riddle JSON files from a local directory laid out like the site:
<data_dir>/data/all_riddles.json and <data_dir>/data/all_riddles_page_<n>.json.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Optional, Union

from riddle_access.logging_utils import StructuredLogger, ComponentType
from .http_riddle_source import DEFAULT_FULL_DATASET_PATH, DEFAULT_SHARD_TEMPLATE


class LocalRiddleSource:
    """
    IRiddleSource implementation over the filesystem.

    Files are read in a worker thread so the event loop only suspends at
    the same points it would for network fetches.
    """

    def __init__(
        self,
        data_dir: Union[str, Path],
        full_dataset_path: str = DEFAULT_FULL_DATASET_PATH,
        shard_template: str = DEFAULT_SHARD_TEMPLATE,
    ):
        self.data_dir = Path(data_dir)
        self._full_dataset_path = full_dataset_path
        self._shard_template = shard_template
        self.logger = StructuredLogger(ComponentType.RIDDLE_SOURCE)

    async def fetch_shard(self, index: int) -> Optional[Any]:
        path = self.data_dir / self._shard_template.format(index=index)
        return await asyncio.to_thread(self._read_json, path)

    async def fetch_full(self) -> Optional[Any]:
        path = self.data_dir / self._full_dataset_path
        return await asyncio.to_thread(self._read_json, path)

    def _read_json(self, path: Path) -> Optional[Any]:
        try:
            if not path.is_file():
                self.logger.logger.info(f"Riddle file not found: {path}")
                return None

            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            self.logger.logger.warning(f"Failed to read {path}: {e}")
            return None
