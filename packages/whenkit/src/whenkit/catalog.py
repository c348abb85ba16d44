"""Static catalog of condition operators, directives and worked examples."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Operator:
    name: str
    description: str
    insert_text: str


@dataclass(frozen=True)
class Directive:
    name: str
    description: str
    insert_text: str


@dataclass(frozen=True)
class Example:
    name: str
    description: str
    insert_text: str


def _op(name: str, description: str) -> Operator:
    return Operator(name=name, description=description, insert_text=name)


COMPARISON_OPERATORS: tuple[Operator, ...] = (
    _op("$eq", "Equal to"),
    _op("$ne", "Not equal to"),
    _op("$gt", "Greater than"),
    _op("$gte", "Greater than or equal"),
    _op("$lt", "Less than"),
    _op("$lte", "Less than or equal"),
)

LOGICAL_OPERATORS: tuple[Operator, ...] = (
    _op("$and", "Logical AND"),
    _op("$all_of", "All conditions must be true"),
    _op("$or", "Logical OR"),
    _op("$any_of", "Any condition must be true"),
    _op("$xor", "Exactly one condition must be true"),
    _op("$one_of", "Exactly one condition must be true"),
    _op("$not", "Logical NOT"),
    _op("$none_of", "No conditions must be true"),
    _op("$in", "Value is in list"),
    _op("$nin", "Value is not in list"),
)

STRING_OPERATORS: tuple[Operator, ...] = (
    _op("$contains", "String contains substring"),
    _op("$starts_with", "String starts with substring"),
    _op("$ends_with", "String ends with substring"),
)

ARITHMETIC_OPERATORS: tuple[Operator, ...] = (
    _op("$add", "Addition"),
    _op("$sub", "Subtraction"),
    _op("$mult", "Multiplication"),
    _op("$div", "Division (float)"),
    _op("$div_num", "Division (integer)"),
    _op("$rem", "Remainder"),
    _op("$abs", "Absolute value"),
)

AGGREGATION_OPERATORS: tuple[Operator, ...] = (
    _op("$each_n", "Keep every N-th record"),
    _op("$each_t", "Keep one record per time interval"),
    _op("$limit", "Limit the number of records"),
)

MISC_OPERATORS: tuple[Operator, ...] = (
    _op("$has", "Record has labels"),
    _op("$exists", "Record has labels"),
    _op("$cast", "Cast to type"),
    _op("$ref", "Reference label"),
    _op("$timestamp", "Record timestamp"),
    _op("$id", "Record timestamp"),
)

# Completion order inside a string literal
OPERATOR_GROUPS: tuple[tuple[str, tuple[Operator, ...]], ...] = (
    ("comparison", COMPARISON_OPERATORS),
    ("logical", LOGICAL_OPERATORS),
    ("string", STRING_OPERATORS),
    ("arithmetic", ARITHMETIC_OPERATORS),
    ("aggregation", AGGREGATION_OPERATORS),
    ("misc", MISC_OPERATORS),
)

DIRECTIVES: tuple[Directive, ...] = (
    Directive("#ctx_before", "Include records before match", '"#ctx_before": 10'),
    Directive("#ctx_after", "Include records after match", '"#ctx_after": 5'),
    Directive("#select_labels", "Select specific labels", '"#select_labels": ["label1", "label2"]'),
    Directive("#batch_size", "Batch size limit", '"#batch_size": "5MB"'),
    Directive("#batch_records", "Batch record limit", '"#batch_records": 1000'),
    Directive("#batch_timeout", "Batch timeout", '"#batch_timeout": "200ms"'),
    Directive("#batch_metadata_size", "Batch metadata size limit", '"#batch_metadata_size": "500KB"'),
    Directive("#record_timeout", "Record processing timeout", '"#record_timeout": "100ms"'),
    Directive(
        "#ext",
        "Extension parameters",
        '"#ext": {\n  "extension_name": {\n    "param": "value"\n  }\n}',
    ),
)

EXAMPLES: tuple[Example, ...] = (
    Example(
        "Simple label comparison",
        "Basic label equality check",
        '{\n  "&sensor_id": { "$eq": "sensor_001" }\n}',
    ),
    Example(
        "Numeric range filter",
        "Filter values within range",
        '{\n  "&temperature": { "$gte": 20, "$lte": 30 }\n}',
    ),
    Example(
        "String contains",
        "Filter strings containing text",
        '{\n  "&message": { "$contains": "error" }\n}',
    ),
    Example(
        "Multiple conditions (AND)",
        "Multiple conditions with AND logic",
        '{\n  "$and": [\n    { "&status": { "$eq": "active" } },\n    { "&count": { "$gt": 10 } }\n  ]\n}',
    ),
    Example(
        "Any condition (OR)",
        "Multiple conditions with OR logic",
        '{\n  "$or": [\n    { "&priority": { "$eq": "high" } },\n    { "&urgent": { "$eq": true } }\n  ]\n}',
    ),
    Example(
        "Label exists check",
        "Check if record has specific labels",
        '{\n  "$has": ["sensor_id", "timestamp"]\n}',
    ),
    Example(
        "String pattern matching",
        "String starts with pattern",
        '{\n  "&filename": { "$starts_with": "log_" }\n}',
    ),
    Example(
        "Value in list",
        "Check if value is in list",
        '{\n  "$in": ["&status", "active", "pending", "running"]\n}',
    ),
    Example(
        "One record per interval",
        "Downsample with the dashboard interval",
        '{\n  "$each_t": "$__interval"\n}',
    ),
    Example(
        "Complex nested condition",
        "Nested logical operators example",
        '{\n  "$and": [\n    {\n      "$or": [\n        { "&level": { "$eq": "error" } },\n'
        '        { "&level": { "$eq": "critical" } }\n      ]\n    },\n'
        '    { "&timestamp": { "$gte": 1640995200000 } }\n  ]\n}',
    ),
)
