"""Ranked, range-anchored completion suggestions for condition text."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from whenkit.catalog import (
    AGGREGATION_OPERATORS,
    DIRECTIVES,
    EXAMPLES,
    LOGICAL_OPERATORS,
    MISC_OPERATORS,
    OPERATOR_GROUPS,
    Operator,
)
from whenkit.cursor import ContextKind, CursorContext, classify
from whenkit.macros import INTERVAL_MACRO


class SuggestionKind(Enum):
    SNIPPET = "snippet"
    PROPERTY = "property"
    OPERATOR = "operator"
    VALUE = "value"


# Monaco's CompletionItemKind values
MONACO_KINDS: dict[SuggestionKind, int] = {
    SuggestionKind.PROPERTY: 9,
    SuggestionKind.OPERATOR: 11,
    SuggestionKind.VALUE: 13,
    SuggestionKind.SNIPPET: 27,
}


@dataclass(frozen=True)
class CompletionRange:
    """Editor range with 1-based columns; ``end_column`` is exclusive."""

    start_line: int
    end_line: int
    start_column: int
    end_column: int

    def to_host(self) -> dict[str, int]:
        return {
            "startLineNumber": self.start_line,
            "endLineNumber": self.end_line,
            "startColumn": self.start_column,
            "endColumn": self.end_column,
        }


@dataclass(frozen=True)
class SuggestionItem:
    label: str
    kind: SuggestionKind
    insert_text: str
    detail: str
    range: CompletionRange
    sort_text: str
    documentation: str | None = None

    def to_host(self, kinds: Mapping[SuggestionKind, Any] | None = None) -> dict[str, Any]:
        kinds = kinds or MONACO_KINDS
        item: dict[str, Any] = {
            "label": self.label,
            "kind": kinds[self.kind],
            "insertText": self.insert_text,
            "detail": self.detail,
            "range": self.range.to_host(),
            "sortText": self.sort_text,
        }
        if self.documentation is not None:
            item["documentation"] = self.documentation
        return item


LABEL_DOC = "Reference to a label in the record"
COMPUTED_LABEL_DOC = "Reference to a computed label from extensions"


def _sort_key(group: int, index: int) -> str:
    return f"{group}{index:02d}"


def _label_refs(rng: CompletionRange, group: int, *, as_key: bool) -> list[SuggestionItem]:
    return [
        SuggestionItem(
            label="&label_name",
            kind=SuggestionKind.PROPERTY,
            insert_text='"&label_name": { "$eq": "value" }' if as_key else "&label_name",
            detail="Label reference",
            documentation=LABEL_DOC,
            range=rng,
            sort_text=_sort_key(group, 0),
        ),
        SuggestionItem(
            label="@computed_label",
            kind=SuggestionKind.PROPERTY,
            insert_text='"@computed_label": { "$gt": 0 }' if as_key else "@computed_label",
            detail="Computed label",
            documentation=COMPUTED_LABEL_DOC,
            range=rng,
            sort_text=_sort_key(group, 1),
        ),
    ]


def _operators(
    ops: tuple[Operator, ...], rng: CompletionRange, group: int, *, as_key: bool
) -> list[SuggestionItem]:
    return [
        SuggestionItem(
            label=op.name,
            kind=SuggestionKind.OPERATOR,
            insert_text=f'"{op.name}": ' if as_key else op.insert_text,
            detail=op.description,
            range=rng,
            sort_text=_sort_key(group, index),
        )
        for index, op in enumerate(ops)
    ]


def _examples(rng: CompletionRange) -> list[SuggestionItem]:
    return [
        SuggestionItem(
            label=example.name,
            kind=SuggestionKind.SNIPPET,
            insert_text=example.insert_text,
            detail=example.description,
            documentation="Complete query example",
            range=rng,
            sort_text=_sort_key(0, index),
        )
        for index, example in enumerate(EXAMPLES)
    ]


def _inside_string(rng: CompletionRange) -> list[SuggestionItem]:
    items = _label_refs(rng, 0, as_key=False)
    for group, (_, ops) in enumerate(OPERATOR_GROUPS, start=1):
        items.extend(_operators(ops, rng, group, as_key=False))
    return items


def _values(rng: CompletionRange, after_each_t_key: bool) -> list[SuggestionItem]:
    items: list[SuggestionItem] = []
    if after_each_t_key:
        items.append(SuggestionItem(
            label=INTERVAL_MACRO,
            kind=SuggestionKind.VALUE,
            insert_text=f'"{INTERVAL_MACRO}"',
            detail="Grafana interval macro",
            documentation="Replaced by Grafana with an auto interval for the current time range",
            range=rng,
            sort_text="000",
        ))
    # booleans are quoted: the query language reads "True"/"False" tokens
    literals = (
        ("String value", '"value"', "String value"),
        ("Numeric value", "100", "Numeric value"),
        ("Boolean true", '"True"', "Boolean value"),
        ("Boolean false", '"False"', "Boolean value"),
    )
    for index, (label, insert_text, detail) in enumerate(literals):
        items.append(SuggestionItem(
            label=label,
            kind=SuggestionKind.VALUE,
            insert_text=insert_text,
            detail=detail,
            range=rng,
            sort_text=_sort_key(1, index),
        ))
    return items


def _keys(rng: CompletionRange) -> list[SuggestionItem]:
    items = _label_refs(rng, 1, as_key=True)
    items.extend(_operators(LOGICAL_OPERATORS, rng, 2, as_key=True))
    items.extend(_operators(AGGREGATION_OPERATORS, rng, 3, as_key=True))
    items.extend(_operators(MISC_OPERATORS, rng, 4, as_key=True))
    items.extend(
        SuggestionItem(
            label=directive.name,
            kind=SuggestionKind.PROPERTY,
            insert_text=directive.insert_text,
            detail=directive.description,
            documentation="Query directive",
            range=rng,
            sort_text=_sort_key(9, index),
        )
        for index, directive in enumerate(DIRECTIVES)
    )
    return items


def assemble(
    context: CursorContext,
    token_start: int,
    column: int,
    line_number: int,
) -> list[SuggestionItem]:
    """Build the suggestion list for a classified caret position.

    Every item replaces the token between ``token_start`` (0-based) and the
    caret at 1-based ``column`` on ``line_number``.
    """
    end_column = max(1, column)
    start_column = min(max(0, token_start) + 1, end_column)
    rng = CompletionRange(
        start_line=line_number,
        end_line=line_number,
        start_column=start_column,
        end_column=end_column,
    )
    if context.kind == ContextKind.DOCUMENT_START:
        return _examples(rng)
    if context.kind == ContextKind.INSIDE_STRING:
        return _inside_string(rng)
    if context.kind == ContextKind.AFTER_COLON:
        return _values(rng, context.after_each_t_key)
    if context.kind == ContextKind.AFTER_BRACE_OR_BARE_KEY:
        return _keys(rng)
    return []


def complete(
    line_text: str,
    column: int,
    line_number: int = 1,
    document: str | None = None,
) -> list[SuggestionItem]:
    """Classify the caret and return ranked suggestions for it."""
    result = classify(line_text, column, line_number=line_number, document=document)
    caret = len(result.prefix) + 1
    return assemble(result.context, result.token_start, caret, line_number)
