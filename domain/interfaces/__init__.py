"""Domain interfaces."""
from .repository import IMatchRepository, IPlayerRepository
from .cache_store import ICacheStore

__all__ = [
    'IMatchRepository',
    'IPlayerRepository',
    'ICacheStore',
]
