"""Type predictor exception hierarchy."""

from __future__ import annotations

from typing import Any


class TypePredictorError(Exception):
    """Base exception for all type predictor errors."""


class SchemaValidationError(TypePredictorError):
    """A document did not conform to a synthesized schema."""

    def __init__(self, issues: list[Any]) -> None:
        self.issues = issues
        summary = "; ".join(f"{issue.path or '<root>'}: {issue.message}" for issue in issues[:5])
        if len(issues) > 5:
            summary += f"; ... ({len(issues) - 5} more)"
        super().__init__(f"Document failed validation: {summary}")


class DocumentLoadError(TypePredictorError):
    """A sample document could not be read or decoded."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot load document from {source}: {reason}")
