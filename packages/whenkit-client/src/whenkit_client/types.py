"""Wire models for the datasource resource endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ValidateConditionRequest(BaseModel):
    bucket: str
    entry: str
    condition: Any = None


class ValidationResult(BaseModel):
    valid: bool
    error: str | None = None


class NamedItem(BaseModel):
    """A bucket or entry as listed by the datasource."""

    name: str
