"""
Infrastructure: Access Layer Factory

Dependency injection factory for assembling all components.
Single source of truth for component wiring.
"""

import os
from typing import Any, Dict, List, Optional

from riddle_access.application import AccessLayer, StoreFactory
from riddle_access.config import ConfigError, get_config
from riddle_access.domain.repositories import IRiddleSource
from riddle_access.domain.services import PayloadNormalizer
from riddle_access.infrastructure.clients import HttpRiddleSource, LocalRiddleSource
from riddle_access.infrastructure.repositories import ShardStore
from riddle_access.logging_utils import set_log_level


class AccessLayerFactory:
    """
    Factory for creating AccessLayer components.

    Implements dependency injection pattern.
    """

    @staticmethod
    def create_source(
        kind: str = "http",
        base_urls: Optional[List[str]] = None,
        data_dir: str = ".",
        full_dataset_path: str = "data/all_riddles.json",
        shard_template: str = "data/all_riddles_page_{index}.json",
        http_timeout: float = 10.0,
    ) -> IRiddleSource:
        """
        Create a riddle source.

        Args:
            kind: "http" or "local"
            base_urls: Base URLs tried in order (http only)
            data_dir: Directory holding data/ (local only)
            full_dataset_path: Relative path of the full dataset
            shard_template: Relative path of shard n with an {index} placeholder
            http_timeout: Per-request timeout in seconds (http only)

        Raises:
            ConfigError: For an unknown kind or an http source without URLs
        """
        if kind == "http":
            if not base_urls:
                raise ConfigError("http source requires at least one base URL")
            return HttpRiddleSource(
                base_urls=base_urls,
                full_dataset_path=full_dataset_path,
                shard_template=shard_template,
                timeout=http_timeout,
            )
        if kind == "local":
            return LocalRiddleSource(
                data_dir=data_dir,
                full_dataset_path=full_dataset_path,
                shard_template=shard_template,
            )
        raise ConfigError(f"Unknown riddle source kind: {kind!r}")

    @staticmethod
    def create_store_factory(
        source: IRiddleSource,
        total_shards: int = 3,
        fallback_page_size: int = 50,
        load_all_cap: int = 500,
    ) -> StoreFactory:
        """Create a callable that builds fresh ShardStores over one source."""
        normalizer = PayloadNormalizer()

        def build(trace_id: str) -> ShardStore:
            return ShardStore(
                source=source,
                normalizer=normalizer,
                total_shards=total_shards,
                fallback_page_size=fallback_page_size,
                load_all_cap=load_all_cap,
                trace_id=trace_id,
            )

        return build

    @staticmethod
    def create_access_layer(
        source: IRiddleSource,
        total_shards: int = 3,
        fallback_page_size: int = 50,
        load_all_cap: int = 500,
        default_batch_size: int = 9,
        session_id: Optional[str] = None,
    ) -> AccessLayer:
        """
        Create fully wired AccessLayer.

        Args:
            source: Where riddle payloads come from
            total_shards: Number of shard resources
            fallback_page_size: Page size when re-slicing the full dataset
            load_all_cap: Bound for the degraded load-all shard loop
            default_batch_size: Batch size when callers give none
            session_id: Trace id for log correlation

        Returns:
            Fully configured AccessLayer instance
        """
        store_factory = AccessLayerFactory.create_store_factory(
            source=source,
            total_shards=total_shards,
            fallback_page_size=fallback_page_size,
            load_all_cap=load_all_cap,
        )
        return AccessLayer(
            store_factory=store_factory,
            default_batch_size=default_batch_size,
            session_id=session_id,
        )

    @staticmethod
    def create_from_config(config: Optional[Dict[str, Any]] = None) -> AccessLayer:
        """
        Create access layer from the YAML configuration.

        Args:
            config: Parsed configuration (the packaged YAML file if None)
        """
        config = config if config is not None else get_config()
        source_cfg = config.get("source") or {}
        paths_cfg = config.get("paths") or {}
        store_cfg = config.get("store") or {}
        projection_cfg = config.get("projection") or {}
        logging_cfg = config.get("logging") or {}

        set_log_level(logging_cfg.get("level"))

        source = AccessLayerFactory.create_source(
            kind=source_cfg.get("kind", "http"),
            base_urls=list(source_cfg.get("base_urls") or []),
            data_dir=source_cfg.get("data_dir", "."),
            full_dataset_path=paths_cfg.get("full_dataset", "data/all_riddles.json"),
            shard_template=paths_cfg.get("shard_template", "data/all_riddles_page_{index}.json"),
            http_timeout=float(source_cfg.get("http_timeout", 10.0)),
        )

        return AccessLayerFactory.create_access_layer(
            source=source,
            total_shards=int(store_cfg.get("total_shards", 3)),
            fallback_page_size=int(store_cfg.get("fallback_page_size", 50)),
            load_all_cap=int(store_cfg.get("load_all_cap", 500)),
            default_batch_size=int(projection_cfg.get("default_batch_size", 9)),
        )

    @staticmethod
    def create_from_env() -> AccessLayer:
        """
        Create access layer from the YAML configuration overridden by
        environment variables.

        Convenience method for deployment.

        Returns:
            Configured AccessLayer
        """
        base = get_config()
        config = {section: dict(base.get(section) or {}) for section in base}
        source_cfg = config.setdefault("source", {})
        store_cfg = config.setdefault("store", {})

        if os.getenv("RIDDLE_SOURCE"):
            source_cfg["kind"] = os.getenv("RIDDLE_SOURCE")
        if os.getenv("RIDDLE_BASE_URLS"):
            source_cfg["base_urls"] = [
                url.strip() for url in os.getenv("RIDDLE_BASE_URLS").split(",") if url.strip()
            ]
        if os.getenv("RIDDLE_DATA_DIR"):
            source_cfg["data_dir"] = os.getenv("RIDDLE_DATA_DIR")
        if os.getenv("RIDDLE_HTTP_TIMEOUT"):
            source_cfg["http_timeout"] = float(os.getenv("RIDDLE_HTTP_TIMEOUT"))
        if os.getenv("RIDDLE_TOTAL_SHARDS"):
            store_cfg["total_shards"] = int(os.getenv("RIDDLE_TOTAL_SHARDS"))
        if os.getenv("RIDDLE_PAGE_SIZE"):
            store_cfg["fallback_page_size"] = int(os.getenv("RIDDLE_PAGE_SIZE"))

        return AccessLayerFactory.create_from_config(config)
