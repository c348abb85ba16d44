"""Query model and request preparation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from whenkit.templating import Resolver, substitute, substitute_number, substitute_scalar
from whenkit.values import Condition, ConditionValue

logger = logging.getLogger(__name__)


class DataMode(Enum):
    LABEL_ONLY = "LabelOnly"
    CONTENT_ONLY = "ContentOnly"
    LABEL_AND_CONTENT = "LabelAndContent"


def _parse_mode(mode: Any) -> DataMode | None:
    if not mode:
        return None
    try:
        return DataMode(mode)
    except ValueError:
        logger.warning("Ignoring unknown data mode %r", mode)
        return None


@dataclass
class QueryOptions:
    start: int | float | None = None
    stop: int | float | None = None
    when: Condition | None = None
    ext: Any = None
    strict: bool | None = None
    continuous: bool | None = None
    mode: DataMode | None = None

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.start is not None:
            out["start"] = self.start
        if self.stop is not None:
            out["stop"] = self.stop
        if self.when is not None:
            out["when"] = self.when.to_json() if isinstance(self.when, ConditionValue) else self.when
        if self.ext is not None:
            out["ext"] = self.ext
        if self.strict is not None:
            out["strict"] = self.strict
        if self.continuous is not None:
            out["continuous"] = self.continuous
        if self.mode is not None:
            out["mode"] = self.mode.value
        return out

    @classmethod
    def from_json(cls, data: dict[str, Any] | None) -> QueryOptions:
        data = data or {}
        when = data.get("when")
        if when is not None and not isinstance(when, (str, ConditionValue)):
            when = ConditionValue.from_json(when)
        mode = data.get("mode")
        return cls(
            start=data.get("start"),
            stop=data.get("stop"),
            when=when,
            ext=data.get("ext"),
            strict=data.get("strict"),
            continuous=data.get("continuous"),
            mode=_parse_mode(mode),
        )


@dataclass
class Query:
    ref_id: str = "A"
    bucket: str | None = None
    entry: str | None = None
    options: QueryOptions = field(default_factory=QueryOptions)

    @property
    def when(self) -> Condition | None:
        return self.options.when

    def with_when(self, when: Condition | None) -> Query:
        return replace(self, options=replace(self.options, when=when))

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {"refId": self.ref_id}
        if self.bucket is not None:
            out["bucket"] = self.bucket
        if self.entry is not None:
            out["entry"] = self.entry
        out["options"] = self.options.to_json()
        return out

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Query:
        return cls(
            ref_id=data.get("refId", "A"),
            bucket=data.get("bucket"),
            entry=data.get("entry"),
            options=QueryOptions.from_json(data.get("options")),
        )


def apply_template_variables(query: Query, scoped_vars: Any, resolve: Resolver) -> Query:
    """Return a request-ready copy of ``query`` with template variables resolved."""
    options = query.options
    when = options.when
    return replace(
        query,
        bucket=substitute_scalar(query.bucket, scoped_vars, resolve),
        entry=substitute_scalar(query.entry, scoped_vars, resolve),
        options=replace(
            options,
            start=substitute_number(options.start, scoped_vars, resolve),
            stop=substitute_number(options.stop, scoped_vars, resolve),
            when=substitute(when, scoped_vars, resolve) if when is not None else None,
        ),
    )


def filter_query(query: Query) -> bool:
    """A query is only sent when both bucket and entry are chosen."""
    return bool(query.bucket) and bool(query.entry)


def prepare_query(query: Query, range_from: int | float, range_to: int | float) -> Query:
    """Inject the host's current time range as start/stop."""
    return replace(query, options=replace(query.options, start=range_from, stop=range_to))
