"""Classify the caret position inside condition text."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

_TOKEN_CHAR = re.compile(r"[$@&#\w]", re.ASCII)
_AFTER_COLON = re.compile(r":\s*$")
_AFTER_EACH_T = re.compile(r'"\$each_t"\s*:\s*$')


class ContextKind(Enum):
    DOCUMENT_START = "document_start"
    INSIDE_STRING = "inside_string"
    AFTER_COLON = "after_colon"
    AFTER_BRACE_OR_BARE_KEY = "after_brace_or_bare_key"
    OTHER = "other"


@dataclass(frozen=True)
class CursorContext:
    kind: ContextKind = ContextKind.OTHER
    after_each_t_key: bool = False

    @classmethod
    def document_start(cls) -> CursorContext:
        return cls(kind=ContextKind.DOCUMENT_START)

    @classmethod
    def inside_string(cls) -> CursorContext:
        return cls(kind=ContextKind.INSIDE_STRING)

    @classmethod
    def after_colon(cls, after_each_t_key: bool = False) -> CursorContext:
        return cls(kind=ContextKind.AFTER_COLON, after_each_t_key=after_each_t_key)

    @classmethod
    def after_brace_or_bare_key(cls) -> CursorContext:
        return cls(kind=ContextKind.AFTER_BRACE_OR_BARE_KEY)

    @classmethod
    def other(cls) -> CursorContext:
        return cls(kind=ContextKind.OTHER)


@dataclass(frozen=True)
class Classification:
    context: CursorContext
    token_start: int
    prefix: str


def count_unescaped_quotes(text: str) -> int:
    count = 0
    escaped = False
    for ch in text:
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == '"':
            count += 1
    return count


def token_start(prefix: str) -> int:
    """Index where the identifier-like token ending at the caret begins."""
    pos = len(prefix)
    while pos > 0 and _TOKEN_CHAR.match(prefix[pos - 1]):
        pos -= 1
    return pos


def classify(
    line_text: str,
    column: int,
    *,
    line_number: int = 1,
    document: str | None = None,
) -> Classification:
    """Classify a caret at 1-based ``column`` of ``line_text``.

    ``document`` is the whole editor text; when it is not given, emptiness
    of the document is judged from the caret line alone.
    """
    column = max(1, min(column, len(line_text) + 1))
    prefix = line_text[: column - 1]
    start = token_start(prefix)

    inside_string = count_unescaped_quotes(prefix) % 2 == 1
    if document is None:
        document_empty = prefix.strip() == ""
    else:
        document_empty = document.strip() == ""
    document_start = document_empty and line_number == 1
    after_open_brace = prefix.strip().endswith("{")
    after_colon = bool(_AFTER_COLON.search(prefix)) and not inside_string
    after_each_t = bool(_AFTER_EACH_T.search(prefix))

    if document_start:
        context = CursorContext.document_start()
    elif inside_string:
        context = CursorContext.inside_string()
    elif after_colon:
        context = CursorContext.after_colon(after_each_t)
    elif after_open_brace or (prefix and not inside_string):
        context = CursorContext.after_brace_or_bare_key()
    else:
        context = CursorContext.other()

    logger.debug("Caret %d:%d classified as %s", line_number, column, context.kind.value)
    return Classification(context=context, token_start=start, prefix=prefix)
