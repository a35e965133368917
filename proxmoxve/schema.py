"""A small schema model for data sources: value types, attribute schemas and resource state."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ValueType(Enum):
    """The type of value an attribute holds."""

    STRING = "string"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    LIST = "list"
    SET = "set"
    MAP = "map"


@dataclass
class Schema:
    """Describes one attribute of a resource."""

    type: ValueType
    description: str = ""
    required: bool = False
    optional: bool = False
    computed: bool = False
    elem: Schema | Resource | None = None


@dataclass
class Resource:
    """A set of attribute schemas and the function that reads them."""

    schema: dict[str, Schema] = field(default_factory=dict)
    read: Callable[..., Any] | None = None

    def required_keys(self) -> list[str]:
        """Return the sorted names of the required attributes."""
        return sorted(key for key, item in self.schema.items() if item.required)

    def computed_keys(self) -> list[str]:
        """Return the sorted names of the computed attributes."""
        return sorted(key for key, item in self.schema.items() if item.computed)

    def nested(self, key: str) -> Resource:
        """Return the resource that describes the elements of attribute ``key``."""
        elem = self.schema[key].elem
        if not isinstance(elem, Resource):
            raise ValueError(f"attribute {key!r} has no nested schema")
        return elem


def _zero(value_type: ValueType) -> Any:
    return {
        ValueType.STRING: "",
        ValueType.BOOL: False,
        ValueType.INT: 0,
        ValueType.FLOAT: 0.0,
        ValueType.LIST: [],
        ValueType.SET: frozenset(),
        ValueType.MAP: {},
    }[value_type]


def _coerce(key: str, item: Schema, value: Any) -> Any:
    kind = item.type
    if kind is ValueType.STRING:
        if not isinstance(value, str):
            raise TypeError(f"{key}: expected a string, got {type(value).__name__}")
        return value
    if kind is ValueType.BOOL:
        if not isinstance(value, bool):
            raise TypeError(f"{key}: expected a bool, got {type(value).__name__}")
        return value
    if kind is ValueType.INT:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{key}: expected an int, got {type(value).__name__}")
        return value
    if kind is ValueType.FLOAT:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"{key}: expected a number, got {type(value).__name__}")
        return float(value)
    if kind is ValueType.LIST:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
            raise TypeError(f"{key}: expected a list, got {type(value).__name__}")
        return list(value)
    if kind is ValueType.SET:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
            raise TypeError(f"{key}: expected a set, got {type(value).__name__}")
        items = list(value)
        if isinstance(item.elem, Resource):
            unique: list[Any] = []
            for element in items:
                if element not in unique:
                    unique.append(element)
            return unique
        return frozenset(items)
    if not isinstance(value, Mapping):
        raise TypeError(f"{key}: expected a map, got {type(value).__name__}")
    return dict(value)


class ResourceData:
    """The state of one resource instance: its id and attribute values."""

    def __init__(self, resource: Resource, values: Mapping[str, Any] | None = None) -> None:
        self.resource = resource
        self.id = ""
        self._values: dict[str, Any] = {}
        for key, value in (values or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Any:
        """Return the value of ``key``, or the zero value of its type if unset."""
        item = self.resource.schema[key]
        if key in self._values:
            return self._values[key]
        return _zero(item.type)

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``; None clears it."""
        if key not in self.resource.schema:
            raise KeyError(f"unknown attribute {key!r}")
        if value is None:
            self._values.pop(key, None)
            return
        self._values[key] = _coerce(key, self.resource.schema[key], value)

    def set_id(self, value: str) -> None:
        """Set the resource id."""
        self.id = value