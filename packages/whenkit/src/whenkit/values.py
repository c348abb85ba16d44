"""JSON-shaped condition values."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class ValueKind(Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class ConditionParseError(ValueError):
    """Raised when text is not a strict JSON condition value."""


@dataclass
class ConditionValue:
    """Tagged JSON value; OBJECT keys keep insertion order."""

    kind: ValueKind = ValueKind.NULL
    value: Any = None

    @classmethod
    def null(cls) -> ConditionValue:
        return cls(kind=ValueKind.NULL)

    @classmethod
    def boolean(cls, value: bool) -> ConditionValue:
        return cls(kind=ValueKind.BOOLEAN, value=bool(value))

    @classmethod
    def number(cls, value: int | float) -> ConditionValue:
        return cls(kind=ValueKind.NUMBER, value=value)

    @classmethod
    def string(cls, value: str) -> ConditionValue:
        return cls(kind=ValueKind.STRING, value=value)

    @classmethod
    def array(cls, items: list[ConditionValue] | None = None) -> ConditionValue:
        return cls(kind=ValueKind.ARRAY, value=list(items or []))

    @classmethod
    def object(cls, members: dict[str, ConditionValue] | None = None) -> ConditionValue:
        return cls(kind=ValueKind.OBJECT, value=dict(members or {}))

    @classmethod
    def from_json(cls, obj: Any) -> ConditionValue:
        """Convert a decoded JSON value (dict/list/str/...) into a ConditionValue."""
        if obj is None:
            return cls.null()
        # bool before number: bool is an int subclass
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, (int, float)):
            if isinstance(obj, float) and not math.isfinite(obj):
                raise ConditionParseError(f"Non-finite number {obj!r} is not valid JSON")
            return cls.number(obj)
        if isinstance(obj, str):
            return cls.string(obj)
        if isinstance(obj, (list, tuple)):
            return cls.array([cls.from_json(item) for item in obj])
        if isinstance(obj, dict):
            return cls.object({str(k): cls.from_json(v) for k, v in obj.items()})
        if isinstance(obj, ConditionValue):
            return obj
        raise ConditionParseError(f"Unsupported value type: {type(obj).__name__}")

    def to_json(self) -> Any:
        if self.kind == ValueKind.OBJECT:
            return {k: v.to_json() for k, v in self.value.items()}
        if self.kind == ValueKind.ARRAY:
            return [item.to_json() for item in self.value]
        return self.value

    @property
    def is_null(self) -> bool:
        return self.kind == ValueKind.NULL

    @property
    def is_container(self) -> bool:
        return self.kind in (ValueKind.OBJECT, ValueKind.ARRAY)

    def keys(self) -> list[str]:
        if self.kind != ValueKind.OBJECT:
            return []
        return list(self.value.keys())

    def __len__(self) -> int:
        if self.is_container:
            return len(self.value)
        return 0


Condition = Union[ConditionValue, str]


def _reject_constant(name: str) -> Any:
    raise ConditionParseError(f"Non-standard JSON constant {name}")


def parse_condition(text: str) -> ConditionValue:
    """Parse strict JSON text into a ConditionValue."""
    try:
        return ConditionValue.from_json(json.loads(text, parse_constant=_reject_constant))
    except (ValueError, RecursionError) as err:
        raise ConditionParseError(str(err))


def dumps(value: Condition | None, indent: int | None = None) -> str:
    """Serialize a condition (structured or raw string) as JSON text."""
    if isinstance(value, ConditionValue):
        return json.dumps(value.to_json(), indent=indent, ensure_ascii=False)
    return json.dumps(value, indent=indent, ensure_ascii=False)
