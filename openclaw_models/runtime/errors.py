"""Errors raised while resolving or writing models.json."""

from typing import Any, List, Optional


class ModelsConfigError(Exception):
    """Base error for models.json generation."""


class InvalidModelsConfigError(ModelsConfigError, ValueError):
    """Caller-supplied config does not match the expected shape."""

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors or []
