"""Infrastructure cache module."""
from .file_cache import FileCacheStore, sanitize_key
from .memory_cache import MemoryCacheStore

__all__ = [
    'FileCacheStore',
    'MemoryCacheStore',
    'sanitize_key',
]
