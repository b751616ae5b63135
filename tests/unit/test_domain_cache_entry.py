"""Unit tests for cache entry value objects.

Tests cover:
- Null marker detection (blank payloads only, never a missing key)
- Logical expiry envelope creation, staleness boundary and decoding
"""

from datetime import UTC, datetime, timedelta

import pytest

from src.domain.value_objects import NULL_MARKER, LogicalExpiryEntry, is_null_marker

NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)


@pytest.mark.unit
class TestNullMarker:
    """Test is_null_marker."""

    @pytest.mark.parametrize("raw", ["", " ", "\n\t"])
    def test_blank_payload_is_null_marker(self, raw):
        assert is_null_marker(raw) is True

    def test_missing_key_is_not_null_marker(self):
        assert is_null_marker(None) is False

    @pytest.mark.parametrize("raw", ['""', "null", "0", '{"id":1}'])
    def test_non_blank_payload_is_not_null_marker(self, raw):
        assert is_null_marker(raw) is False

    def test_marker_constant_is_empty(self):
        assert NULL_MARKER == ""


@pytest.mark.unit
class TestLogicalExpiryEntry:
    """Test envelope semantics."""

    def test_create_sets_deadline(self):
        entry = LogicalExpiryEntry.create(data={"id": 1}, now=NOW, logical_ttl=20)

        assert entry.expire_at == NOW + timedelta(seconds=20)

    def test_fresh_until_deadline_inclusive(self):
        entry = LogicalExpiryEntry.create(data=1, now=NOW, logical_ttl=20)

        assert entry.is_expired(NOW + timedelta(seconds=19)) is False
        assert entry.is_expired(NOW + timedelta(seconds=20)) is False
        assert entry.is_expired(NOW + timedelta(seconds=20, microseconds=1)) is True

    def test_to_json_is_compact(self):
        entry = LogicalExpiryEntry.create(data={"id": 1}, now=NOW, logical_ttl=20)

        assert entry.to_json() == (
            '{"data":{"id":1},"expire_at":"2024-01-01T12:00:20+00:00"}'
        )

    def test_from_json_restores_entry(self):
        entry = LogicalExpiryEntry.create(data=[1, 2], now=NOW, logical_ttl=5)

        assert LogicalExpiryEntry.from_json(entry.to_json()) == entry

    def test_from_json_accepts_z_suffix(self):
        entry = LogicalExpiryEntry.from_json(
            '{"data":null,"expire_at":"2024-01-01T12:00:00Z"}'
        )

        assert entry.expire_at == NOW
        assert entry.data is None

    def test_from_json_treats_naive_timestamp_as_utc(self):
        entry = LogicalExpiryEntry.from_json(
            '{"data":1,"expire_at":"2024-01-01T12:00:00"}'
        )

        assert entry.expire_at == NOW

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "[]",
            '{"data":1}',
            '{"expire_at":"2024-01-01T12:00:00Z"}',
            '{"data":1,"expire_at":1704110400}',
            '{"data":1,"expire_at":"yesterday"}',
        ],
    )
    def test_from_json_rejects_invalid_envelope(self, raw):
        with pytest.raises(ValueError):
            LogicalExpiryEntry.from_json(raw)

    def test_entry_is_immutable(self):
        entry = LogicalExpiryEntry.create(data=1, now=NOW, logical_ttl=5)

        with pytest.raises(AttributeError):
            entry.data = 2  # type: ignore[misc]
