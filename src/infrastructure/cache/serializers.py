"""Serializers backed by pydantic TypeAdapter.

The cache client needs to turn a caller's typed value into JSON-compatible
data and back. ``PydanticSerializer`` does this for any type pydantic
understands: dataclasses, pydantic models, TypedDicts, builtins and their
generics.

Usage:
    from src.infrastructure.cache.serializers import PydanticSerializer

    serializer = PydanticSerializer(Shop)
    data = serializer.dump(shop)    # {"id": 1, "name": "X", ...}
    shop = serializer.load(data)    # Shop(id=1, name="X", ...)
"""

from functools import lru_cache
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter

from src.domain.protocols.serializer_protocol import SerializerProtocol

T = TypeVar("T")


class PydanticSerializer(Generic[T]):
    """SerializerProtocol implementation for an arbitrary target type.

    Note: Does NOT inherit from SerializerProtocol (uses structural typing).

    Attributes:
        target_type: Type values are validated into on load.
    """

    def __init__(self, target_type: type[T] | Any) -> None:
        self.target_type = target_type
        self._adapter: TypeAdapter[T] = TypeAdapter(target_type)

    def dump(self, value: T) -> Any:
        """Convert a value to JSON-compatible data.

        Raises:
            ValueError: If pydantic cannot serialize the value.
        """
        return self._adapter.dump_python(value, mode="json")

    def load(self, data: Any) -> T:
        """Validate JSON-compatible data into the target type.

        Raises:
            ValueError: If the data does not match the target type
                (pydantic.ValidationError is a ValueError).
        """
        return self._adapter.validate_python(data)

    def __repr__(self) -> str:
        return f"PydanticSerializer({self.target_type!r})"


def as_serializer(target: SerializerProtocol[T] | type[T] | Any) -> SerializerProtocol[T]:
    """Accept either a serializer or a target type.

    Anything exposing ``dump`` and ``load`` is used as-is; everything else is
    treated as a type and wrapped in a PydanticSerializer, built once per
    type so the adapter's core schema is not recompiled on every read.
    """
    if callable(getattr(target, "dump", None)) and callable(
        getattr(target, "load", None)
    ) and not isinstance(target, type):
        return target
    try:
        return _serializer_for_type(target)
    except TypeError:
        # Unhashable type expressions (e.g. Annotated with list metadata)
        return PydanticSerializer(target)


@lru_cache(maxsize=256)
def _serializer_for_type(target: Any) -> PydanticSerializer[Any]:
    return PydanticSerializer(target)
