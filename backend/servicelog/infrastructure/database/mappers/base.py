"""Entity mapper contract and the storage conversions shared by every mapper.

A mapper converts between a domain entity and its storage row:

* ``from_storage(row)`` builds the entity from an ORM row, converting integer
  booleans, empty date text and integer keys to their domain types.
* ``to_storage(partial)`` converts a partial mapping of entity attributes to
  column values, emitting only the keys present in the input so that a
  partial update never touches columns the caller did not supply.

Mappers hold no validation or business rules.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, Generic, TypeVar

EntityT = TypeVar("EntityT")
ModelT = TypeVar("ModelT")

Converter = Callable[[Any], Any]


def bool_from_storage(value: int | bool | None) -> bool:
    return value == 1 or value is True


def bool_to_storage(value: bool | None) -> int:
    return 1 if value else 0


def date_from_storage(value: str | None) -> str | None:
    return value or None


def date_to_storage(value: str | None) -> str | None:
    return value or None


def id_from_storage(value: int | None) -> str | None:
    return None if value is None else str(value)


def int_id_to_storage(value: str | int | None) -> int | None:
    """Domain ids of integer-keyed tables travel as strings; store them as ints."""
    if value is None or value == "":
        return None
    return int(value)


def enum_to_storage(value: Enum | str) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def passthrough(value: Any) -> Any:
    return value


class StorageConversionError(ValueError):
    """A supplied attribute value cannot be converted to its column type."""

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"invalid {field}: {value!r}")


class EntityMapper(ABC, Generic[EntityT, ModelT]):
    """Bidirectional entity ↔ row conversion for one table.

    Subclasses declare ``converters``: entity attribute → storage converter.
    Attribute and column names are identical; only the value types differ.
    """

    converters: Mapping[str, Converter] = {}
    integer_key: bool = False

    @abstractmethod
    def from_storage(self, row: ModelT) -> EntityT:
        """Map ORM row → domain entity."""
        ...

    def to_storage(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Map a partial set of entity attributes → column values."""
        values: dict[str, Any] = {}
        for key, convert in self.converters.items():
            if key not in data:
                continue
            try:
                values[key] = convert(data[key])
            except (TypeError, ValueError) as exc:
                raise StorageConversionError(key, data[key]) from exc
        return values

    def to_storage_key(self, entity_id: Any) -> Any:
        """Convert a domain id to a primary-key value; ``None`` if it cannot exist."""
        if entity_id is None:
            return None
        if not self.integer_key:
            return str(entity_id)
        try:
            return int(entity_id)
        except (TypeError, ValueError):
            return None
