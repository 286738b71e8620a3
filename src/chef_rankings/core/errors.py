"""Custom exceptions for configuration, validation and storage errors."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Base exception for caller-facing errors with optional suggestions."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"[Configuration Error] {self.message}"
        if self.suggestion:
            msg += f"\n[Suggestion] {self.suggestion}"
        return msg


class ValidationError(ConfigurationError):
    """Error when caller input fails validation (month format, weights, imports)."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(
            f"Invalid value for '{field}'",
            f"{reason}",
        )


class NotFoundError(Exception):
    """Error when a chef or snapshot referenced by the caller does not exist."""

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


class StoreError(Exception):
    """Error raised when a persistence operation fails.

    Wraps the underlying database exception; it is never retried inside the
    package and aborts the batch step that triggered it.
    """

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Store operation '{operation}' failed: {detail}")
