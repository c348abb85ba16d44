"""Quote bare host macros so condition text can be parsed as JSON.

Operators write ``{"$each_t": $__interval}`` in the editor; the macro is
expanded by the host only after the condition is parsed, so a bare macro
outside a string would make the text invalid JSON. ``scan`` wraps such bare
occurrences in double quotes and leaves everything else untouched.
"""

from __future__ import annotations

from typing import Iterable

INTERVAL_MACRO = "$__interval"
INTERVAL_MS_MACRO = "$__interval_ms"

DEFAULT_MACROS: tuple[str, ...] = (INTERVAL_MS_MACRO, INTERVAL_MACRO)


def _is_identifier_char(ch: str) -> bool:
    return ch == "_" or ch.isascii() and ch.isalnum()


def _match_macro(text: str, pos: int, macros: tuple[str, ...]) -> str | None:
    for token in macros:
        if not text.startswith(token, pos):
            continue
        end = pos + len(token)
        if end < len(text) and _is_identifier_char(text[end]):
            continue
        return token
    return None


def scan(text: str, macros: Iterable[str] = DEFAULT_MACROS) -> str:
    """Return ``text`` with bare macro tokens outside strings double-quoted."""
    ordered = tuple(sorted({m for m in macros if m}, key=len, reverse=True))
    out: list[str] = []
    in_string = False
    escaped = False
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if escaped:
            escaped = False
            out.append(ch)
            i += 1
            continue
        if ch == "\\":
            escaped = True
            out.append(ch)
            i += 1
            continue
        if ch == '"':
            in_string = not in_string
            out.append(ch)
            i += 1
            continue
        if not in_string and ordered:
            token = _match_macro(text, i, ordered)
            if token is not None:
                out.append(f'"{token}"')
                i += len(token)
                continue
        out.append(ch)
        i += 1
    return "".join(out)
