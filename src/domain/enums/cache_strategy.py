"""Cache query strategy selection.

Callers choose which stampede mitigation a lookup uses; the layer never picks
one on its own.
"""

from enum import Enum


class CacheStrategy(str, Enum):
    """Query strategies offered by the cache client.

    Values:
        PASS_THROUGH: Null caching against penetration. Concurrent misses may
            each hit the store once.
        MUTEX: Single synchronous rebuild per expired key, other callers
            wait and re-read.
        LOGICAL_EXPIRE: Stale-while-revalidate on pre-populated, physically
            immortal entries. Never blocks on the store.
    """

    PASS_THROUGH = "pass_through"
    MUTEX = "mutex"
    LOGICAL_EXPIRE = "logical_expire"
