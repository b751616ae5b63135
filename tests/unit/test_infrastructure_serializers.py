"""Unit tests for PydanticSerializer and as_serializer."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Annotated

import pytest
from pydantic import BaseModel

from src.infrastructure.cache.serializers import PydanticSerializer, as_serializer


@dataclass
class Shop:
    id: int
    name: str
    opened_at: datetime | None = None


class Voucher(BaseModel):
    id: int
    value: float


@pytest.mark.unit
class TestPydanticSerializer:
    """Test dump/load for common target types."""

    def test_dataclass_dump_is_json_compatible(self):
        serializer = PydanticSerializer(Shop)
        shop = Shop(id=1, name="A", opened_at=datetime(2024, 1, 1, tzinfo=UTC))

        assert serializer.dump(shop) == {
            "id": 1,
            "name": "A",
            "opened_at": "2024-01-01T00:00:00Z",
        }

    def test_dataclass_load(self):
        serializer = PydanticSerializer(Shop)

        shop = serializer.load({"id": 1, "name": "A", "opened_at": None})

        assert shop == Shop(id=1, name="A")

    def test_pydantic_model(self):
        serializer = PydanticSerializer(Voucher)

        data = serializer.dump(Voucher(id=2, value=9.5))

        assert data == {"id": 2, "value": 9.5}
        assert serializer.load(data) == Voucher(id=2, value=9.5)

    def test_generic_builtin(self):
        serializer = PydanticSerializer(list[int])

        assert serializer.load(["1", 2]) == [1, 2]

    def test_load_mismatch_raises_value_error(self):
        serializer = PydanticSerializer(Shop)

        with pytest.raises(ValueError):
            serializer.load({"name": "missing id"})

    def test_repr(self):
        assert "Shop" in repr(PydanticSerializer(Shop))


@pytest.mark.unit
class TestAsSerializer:
    """Test target normalization."""

    def test_type_is_wrapped(self):
        serializer = as_serializer(Shop)

        assert isinstance(serializer, PydanticSerializer)
        assert serializer.target_type is Shop

    def test_serializer_passes_through(self):
        serializer = PydanticSerializer(int)

        assert as_serializer(serializer) is serializer

    def test_model_class_is_wrapped_not_used_as_serializer(self):
        serializer = as_serializer(Voucher)

        assert isinstance(serializer, PydanticSerializer)

    def test_same_type_reuses_serializer(self):
        assert as_serializer(Shop) is as_serializer(Shop)
        assert as_serializer(list[int]) is as_serializer(list[int])

    def test_unhashable_type_expression_still_wrapped(self):
        target = Annotated[int, ["unhashable"]]

        serializer = as_serializer(target)

        assert isinstance(serializer, PydanticSerializer)
        assert serializer.load(3) == 3
