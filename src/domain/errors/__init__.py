"""Domain errors package.

Usage:
    from src.domain.errors import CacheQueryError, LoadError, LockContentionError
"""

from src.domain.errors.cache_query_error import (
    CacheQueryError,
    LoadError,
    LockContentionError,
)

__all__ = [
    "CacheQueryError",
    "LoadError",
    "LockContentionError",
]
