"""Lock lease value object.

A lease is the proof of holding a rebuild lock. Its random token is what the
backend compares on release, so a slow holder whose lease already expired can
never delete a lock re-acquired by someone else.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class LockLease:
    """Held rebuild lock (value object).

    Attributes:
        resource_key: Logical resource the lock protects (the data key).
        lock_key: Backend key holding the lock (lock namespace + resource).
        token: Random holder token stored as the lock value.
        lease_ttl: Lease length in seconds; the lock self-expires after it.
    """

    resource_key: str
    lock_key: str
    token: str
    lease_ttl: float
