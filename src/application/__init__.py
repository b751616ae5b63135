"""Application layer - Cache-aside use cases.

This layer binds a cache client to one kind of entity so services depend on
a small, strategy-agnostic contract:

- CachedLookup: get / preload / update / invalidate for one key namespace

The application layer orchestrates infrastructure through the cache client
but contains no caching rules of its own.
"""

from src.application.cached_lookup import CachedLookup

__all__ = ["CachedLookup"]
