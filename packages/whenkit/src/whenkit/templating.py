"""Template-variable substitution for conditions and query fields.

The host owns variable resolution; this module only decides *where* the
host's ``resolve(text, scoped_vars)`` is applied. Structured conditions are
walked leaf by leaf, raw condition text is first made parseable by quoting
bare macros and falls back to resolving the whole string when it still is
not JSON.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Mapping, Protocol

from whenkit.macros import scan
from whenkit.values import Condition, ConditionParseError, ConditionValue, ValueKind, parse_condition

logger = logging.getLogger(__name__)


class Resolver(Protocol):
    """Host template resolver: total, unresolved references pass through."""

    def __call__(self, text: str, scoped_vars: Any) -> str: ...


def _resolve(text: str, scoped_vars: Any, resolve: Resolver) -> str:
    try:
        result = resolve(text, scoped_vars)
    except Exception as e:
        logger.warning("Template resolver failed for %r: %s", text, e)
        return text
    if not isinstance(result, str):
        return text if result is None else str(result)
    return result


def _substitute_value(value: ConditionValue, scoped_vars: Any, resolve: Resolver) -> ConditionValue:
    if value.kind == ValueKind.OBJECT:
        return ConditionValue.object(
            {k: _substitute_value(v, scoped_vars, resolve) for k, v in value.value.items()}
        )
    if value.kind == ValueKind.ARRAY:
        return ConditionValue.array([_substitute_value(v, scoped_vars, resolve) for v in value.value])
    if value.kind == ValueKind.STRING:
        return ConditionValue.string(_resolve(value.value, scoped_vars, resolve))
    return value


def substitute(value: Condition, scoped_vars: Any, resolve: Resolver) -> Condition:
    """Resolve template variables inside a condition.

    A raw string that parses (after macro quoting) comes back structured;
    one that does not is resolved as a whole and stays a string.
    """
    if isinstance(value, ConditionValue):
        return _substitute_value(value, scoped_vars, resolve)
    try:
        parsed = parse_condition(scan(value))
    except ConditionParseError:
        logger.debug("Condition is not JSON, resolving as raw text")
        return _resolve(value, scoped_vars, resolve)
    return _substitute_value(parsed, scoped_vars, resolve)


def substitute_scalar(text: str | None, scoped_vars: Any, resolve: Resolver) -> str | None:
    if text is None:
        return None
    return _resolve(text, scoped_vars, resolve)


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_number(text: str) -> int | float | None:
    """Parse a resolved numeric field; ``None`` when it is not a finite number."""
    stripped = text.strip()
    if not stripped or "_" in stripped:
        return None
    try:
        return int(stripped)
    except ValueError:
        pass
    try:
        number = float(stripped)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def substitute_number(value: int | float | str | None, scoped_vars: Any, resolve: Resolver) -> int | float | None:
    """Resolve a numeric field through its string form; failures erase it."""
    if value is None:
        return None
    text = value if isinstance(value, str) else _format_number(value)
    return parse_number(_resolve(text, scoped_vars, resolve))


_VAR_PATTERN = re.compile(
    r"\$\{([A-Za-z_][A-Za-z0-9_.]*)(?::[^}]*)?\}"  # ${name} or ${name:format}
    r"|\[\[([A-Za-z_][A-Za-z0-9_.]*)(?::[^\]]*)?\]\]"  # [[name]]
    r"|\$([A-Za-z_][A-Za-z0-9_]*)"  # $name
)


class SimpleTemplateResolver:
    """Mapping-backed resolver for ``$name``, ``${name}`` and ``[[name]]``.

    Stands in for the host resolver in tools and tests. Scoped variables
    passed to a call take precedence over the resolver's own variables.
    Unknown references are left exactly as written.
    """

    def __init__(self, variables: Mapping[str, Any] | None = None) -> None:
        self._variables: dict[str, Any] = dict(variables) if variables else {}

    @property
    def variables(self) -> dict[str, Any]:
        return dict(self._variables)

    def __call__(self, text: str, scoped_vars: Mapping[str, Any] | None = None) -> str:
        lookup = dict(self._variables)
        if scoped_vars:
            for name, entry in scoped_vars.items():
                # host scoped vars are {"name": {"text": ..., "value": ...}}
                if isinstance(entry, Mapping) and "value" in entry:
                    entry = entry["value"]
                lookup[name] = entry

        def replacer(match: re.Match[str]) -> str:
            name = match.group(1) or match.group(2) or match.group(3)
            if name not in lookup:
                return match.group(0)
            entry = lookup[name]
            if isinstance(entry, (list, tuple)):
                return ",".join(str(v) for v in entry)
            return str(entry)

        return _VAR_PATTERN.sub(replacer, text)
