"""Condition editor session: text <-> query, completions and validation."""

from __future__ import annotations

import logging
from dataclasses import replace

from whenkit.completion import SuggestionItem, complete
from whenkit.config import EditorConfig
from whenkit.provider import EditorHost, ProviderRegistry
from whenkit.query import Query
from whenkit.validation import ConditionValidator, StatusListener, ValidationCoordinator, ValidationStatus
from whenkit.values import Condition, ConditionParseError, dumps, parse_condition

logger = logging.getLogger(__name__)


def editor_text(when: Condition | None) -> str:
    """Text shown in the editor for a stored condition."""
    if when is None:
        return ""
    if isinstance(when, str):
        return when
    return dumps(when, indent=2)


def parse_editor_text(text: str) -> Condition | None:
    """Condition stored for editor text; invalid JSON is kept verbatim."""
    trimmed = text.strip()
    if not trimmed:
        return None
    try:
        return parse_condition(trimmed)
    except ConditionParseError:
        return text


class EditorSession:
    """One condition editor bound to one query."""

    def __init__(
        self,
        query: Query,
        validator: ConditionValidator,
        *,
        registry: ProviderRegistry,
        host: EditorHost | None = None,
        config: EditorConfig | None = None,
    ) -> None:
        self._query = query
        self._registry = registry
        self._config = config or EditorConfig()
        self._host: EditorHost | None = None
        self._coordinator = ValidationCoordinator(
            validator,
            bucket=query.bucket,
            entry=query.entry,
            condition=query.when,
            config=self._config,
        )
        if host is not None:
            self.mount(host)

    @property
    def query(self) -> Query:
        return self._query

    @property
    def text(self) -> str:
        return editor_text(self._query.when)

    @property
    def status(self) -> ValidationStatus:
        return self._coordinator.status

    @property
    def host(self) -> EditorHost | None:
        return self._host

    @property
    def coordinator(self) -> ValidationCoordinator:
        return self._coordinator

    def on_status(self, callback: StatusListener) -> None:
        self._coordinator.on_status(callback)

    def mount(self, host: EditorHost) -> None:
        """Attach to an editor host and make sure completions are available."""
        self._host = host
        self._registry.ensure_registered(host)

    def on_change(self, text: str) -> Query:
        when = parse_editor_text(text)
        if isinstance(when, str):
            logger.debug("Condition text is not JSON, kept as raw text")
        self._query = self._query.with_when(when)
        self._coordinator.update(condition=when)
        return self._query

    def set_bucket(self, bucket: str | None) -> Query:
        self._query = replace(self._query, bucket=bucket)
        self._coordinator.update(bucket=bucket)
        return self._query

    def set_entry(self, entry: str | None) -> Query:
        self._query = replace(self._query, entry=entry)
        self._coordinator.update(entry=entry)
        return self._query

    def complete(self, line_text: str, column: int, line_number: int = 1) -> list[SuggestionItem]:
        return complete(line_text, column, line_number=line_number, document=self.text)

    async def close(self) -> None:
        await self._coordinator.close()
        self._host = None

