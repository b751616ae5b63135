"""Cache entry value objects.

Two payload flavors share the same data key namespace:

- Hard-TTL entries hold the serialized value directly; the backend TTL
  governs physical expiry. An empty payload is the null marker.
- Logical-expiry entries are physically immortal and carry their own
  staleness deadline inside a JSON envelope:

      {"data": <serialized value>, "expire_at": "2026-10-19T12:00:20+00:00"}

Usage:
    from src.domain.value_objects import LogicalExpiryEntry

    entry = LogicalExpiryEntry.create(data={"name": "X"}, now=now, logical_ttl=20)
    raw = entry.to_json()
    LogicalExpiryEntry.from_json(raw).is_expired(now)  # False
"""

import json
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

NULL_MARKER = ""
"""Cached payload meaning "confirmed absent in the system of record"."""


def is_null_marker(raw: str | None) -> bool:
    """Return True when a raw payload is the null marker.

    A missing key (None) is NOT a null marker: it means "unknown, reload".
    """
    return raw is not None and raw.strip() == NULL_MARKER


@dataclass(frozen=True, slots=True, kw_only=True)
class LogicalExpiryEntry:
    """Stale-while-revalidate cache entry (value object).

    Attributes:
        data: JSON-compatible representation of the cached value.
        expire_at: Aware UTC timestamp after which the entry is stale.
    """

    data: Any
    expire_at: datetime

    @classmethod
    def create(
        cls, *, data: Any, now: datetime, logical_ttl: float
    ) -> "LogicalExpiryEntry":
        """Build an entry that goes stale ``logical_ttl`` seconds after ``now``."""
        return cls(data=data, expire_at=now + timedelta(seconds=logical_ttl))

    def is_expired(self, now: datetime) -> bool:
        """Check staleness. An entry is fresh up to and including expire_at."""
        return now > self.expire_at

    def to_json(self) -> str:
        """Encode the envelope for storage.

        Raises:
            TypeError: If ``data`` is not JSON-compatible.
        """
        return json.dumps(
            {"data": self.data, "expire_at": self.expire_at.isoformat()},
            separators=(",", ":"),
        )

    @classmethod
    def from_json(cls, raw: str) -> "LogicalExpiryEntry":
        """Decode a stored envelope.

        Naive timestamps are interpreted as UTC.

        Raises:
            ValueError: If the payload is not an envelope (bad JSON, missing
                fields, unparseable timestamp).
        """
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid logical expiry envelope: {e}") from e

        if not isinstance(payload, dict) or "expire_at" not in payload:
            raise ValueError("Logical expiry envelope must contain 'expire_at'")
        if "data" not in payload:
            raise ValueError("Logical expiry envelope must contain 'data'")

        expire_raw = payload["expire_at"]
        if not isinstance(expire_raw, str):
            raise ValueError("'expire_at' must be an ISO-8601 string")
        expire_at = datetime.fromisoformat(expire_raw.replace("Z", "+00:00"))
        if expire_at.tzinfo is None:
            expire_at = expire_at.replace(tzinfo=UTC)

        return cls(data=payload["data"], expire_at=expire_at)
