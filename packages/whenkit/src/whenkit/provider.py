"""Completion provider and its per-host registration."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

from whenkit.completion import MONACO_KINDS, SuggestionKind, complete
from whenkit.config import EditorConfig

logger = logging.getLogger(__name__)

TRIGGER_CHARACTERS: tuple[str, ...] = ("{", '"', ":", ",", " ", "$", "&", "@", "#")


class TextModel(Protocol):
    """Editor document as seen by the provider."""

    def get_line_content(self, line_number: int) -> str: ...


class EditorHost(Protocol):
    """Editor host that accepts completion providers."""

    def register_completion_item_provider(self, language: str, provider: CompletionProvider) -> Any: ...


class CompletionProvider:
    """Adapts ``complete`` to the editor host's provider interface."""

    trigger_characters = TRIGGER_CHARACTERS

    def __init__(self, kinds: Mapping[SuggestionKind, Any] | None = None) -> None:
        self._kinds = dict(kinds) if kinds else dict(MONACO_KINDS)

    def provide_completion_items(
        self,
        model: TextModel,
        position: Mapping[str, int] | Any,
        kinds: Mapping[SuggestionKind, Any] | None = None,
    ) -> dict[str, list[dict[str, Any]]]:
        if isinstance(position, Mapping):
            line_number = position.get("lineNumber", 1)
            column = position.get("column", 1)
        else:
            line_number = getattr(position, "line_number", 1)
            column = getattr(position, "column", 1)

        line_text = model.get_line_content(line_number) or ""
        get_value = getattr(model, "get_value", None)
        document = get_value() if callable(get_value) else None

        items = complete(line_text, column, line_number=line_number, document=document)
        kind_map = kinds or self._kinds
        return {"suggestions": [item.to_host(kind_map) for item in items]}


class ProviderRegistry:
    """Tracks which editor hosts already carry the completion provider.

    One registry is shared by the editor sessions of an application; a
    host gets the provider registered once no matter how many editors
    mount on it.
    """

    def __init__(self, provider: CompletionProvider | None = None, language: str = "json") -> None:
        self._provider = provider or CompletionProvider()
        self._language = language
        self._handles: dict[int, tuple[Any, Any]] = {}

    @classmethod
    def from_config(cls, config: EditorConfig, provider: CompletionProvider | None = None) -> ProviderRegistry:
        return cls(provider=provider, language=config.language)

    @property
    def language(self) -> str:
        return self._language

    @property
    def provider(self) -> CompletionProvider:
        return self._provider

    def is_registered(self, host: Any) -> bool:
        return id(host) in self._handles

    def ensure_registered(self, host: EditorHost) -> bool:
        """Register the provider on ``host``; False when it already was."""
        key = id(host)
        if key in self._handles:
            return False
        configure = getattr(host, "configure_json_defaults", None)
        if callable(configure):
            # host JSON diagnostics/completion would compete with ours
            configure(validate=False, completion_items=False, diagnostics=False)
        handle = host.register_completion_item_provider(self._language, self._provider)
        # keep the host alive so its id cannot be reused while registered
        self._handles[key] = (host, handle)
        logger.debug("Registered completion provider on host %r", host)
        return True

    def unregister(self, host: Any) -> bool:
        entry = self._handles.pop(id(host), None)
        if entry is None:
            return False
        _, handle = entry
        dispose = getattr(handle, "dispose", None)
        if callable(dispose):
            dispose()
        return True

    def clear(self) -> None:
        for host, _ in list(self._handles.values()):
            self.unregister(host)

    def __len__(self) -> int:
        return len(self._handles)
