"""Editor configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class EditorConfig:
    debounce_seconds: float = 0.5
    language: str = "json"
    default_invalid_message: str = "Invalid condition"
    default_failure_message: str = "Validation failed"

    @classmethod
    def from_env(cls) -> EditorConfig:
        """Read overrides from WHENKIT_* environment variables."""
        config = cls()
        debounce = os.environ.get("WHENKIT_DEBOUNCE_SECONDS")
        if debounce:
            try:
                config.debounce_seconds = max(0.0, float(debounce))
            except ValueError:
                logger.warning("Ignoring invalid WHENKIT_DEBOUNCE_SECONDS=%r", debounce)
        language = os.environ.get("WHENKIT_LANGUAGE")
        if language:
            config.language = language
        return config
