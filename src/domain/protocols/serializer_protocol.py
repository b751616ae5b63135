"""Serializer protocol.

The caller of a cache query supplies both the loader and the deserialization
target. A serializer converts between the caller's type and a JSON-compatible
structure; the cache client turns that structure into text.
"""

from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class SerializerProtocol(Protocol[T]):
    """Typed converter between values and JSON-compatible data."""

    def dump(self, value: T) -> Any:
        """Convert a value to JSON-compatible data.

        Raises:
            TypeError: If the value has an unsupported type.
            ValueError: If the value cannot be represented.
        """
        ...

    def load(self, data: Any) -> T:
        """Rebuild a value from JSON-compatible data.

        Raises:
            ValueError: If the data does not match the target type.
        """
        ...
