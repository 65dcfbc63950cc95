"""
Infrastructure Repositories
"""

from .shard_store import ShardStore

__all__ = ["ShardStore"]
