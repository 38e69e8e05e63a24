"""
Adapters layer - Persistence of weekly state (file, HTTP, local cache).
"""

from .http_store import HttpStateStore
from .json_file_store import JsonFileStateStore
from .local_cache_store import LocalCacheStore

__all__ = ["HttpStateStore", "JsonFileStateStore", "LocalCacheStore"]
