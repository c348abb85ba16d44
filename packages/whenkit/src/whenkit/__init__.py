"""Condition editor core: templating, completion and validation."""

from whenkit.values import ConditionParseError, ConditionValue, ValueKind, dumps, parse_condition
from whenkit.macros import DEFAULT_MACROS, INTERVAL_MACRO, scan
from whenkit.templating import SimpleTemplateResolver, substitute, substitute_number, substitute_scalar
from whenkit.query import DataMode, Query, QueryOptions, apply_template_variables, filter_query, prepare_query
from whenkit.cursor import Classification, ContextKind, CursorContext, classify
from whenkit.completion import CompletionRange, SuggestionItem, SuggestionKind, assemble, complete
from whenkit.provider import CompletionProvider, ProviderRegistry
from whenkit.config import EditorConfig
from whenkit.validation import (
    StatusKind,
    ValidationCoordinator,
    ValidationStatus,
    extract_error_message,
)
from whenkit.editor import EditorSession, editor_text, parse_editor_text

__all__ = [
    "Classification",
    "CompletionProvider",
    "CompletionRange",
    "ConditionParseError",
    "ConditionValue",
    "ContextKind",
    "CursorContext",
    "DEFAULT_MACROS",
    "DataMode",
    "EditorConfig",
    "EditorSession",
    "INTERVAL_MACRO",
    "ProviderRegistry",
    "Query",
    "QueryOptions",
    "SimpleTemplateResolver",
    "StatusKind",
    "SuggestionItem",
    "SuggestionKind",
    "ValidationCoordinator",
    "ValidationStatus",
    "ValueKind",
    "apply_template_variables",
    "assemble",
    "classify",
    "complete",
    "dumps",
    "editor_text",
    "extract_error_message",
    "filter_query",
    "parse_condition",
    "parse_editor_text",
    "prepare_query",
    "scan",
    "substitute",
    "substitute_number",
    "substitute_scalar",
]
