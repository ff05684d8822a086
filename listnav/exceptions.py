"""Exception hierarchy for listnav.

The filtering, selection and pagination logic never raises on ordinary
input: degenerate cases (an empty query, a missing field, a zero page size)
are handled locally and silently. These exceptions cover the remaining
programming and environment errors.

Exception Hierarchy:
    ListnavError (base)
    ├── ConfigurationError - invalid widget or settings values
    ├── ItemsFileError - an items file could not be read or parsed
    └── TypeaheadError - an external query channel failed (retryable)

Usage:
    from listnav.exceptions import ConfigurationError

    if not bind_property:
        raise ConfigurationError("bind_property is required", setting="bind_property")
"""

from typing import Any, Optional


class ListnavError(Exception):
    """Base exception for all listnav errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., settings, paths)
        retryable: Whether this error might succeed on retry
    """

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        **context: Any,
    ) -> None:
        self.message = message
        self.context = context
        self.retryable = retryable
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigurationError(ListnavError):
    """A widget or settings value is invalid."""

    def __init__(
        self,
        message: str = "Configuration error",
        *,
        setting: Optional[str] = None,
        **context: Any,
    ) -> None:
        if setting:
            context["setting"] = setting
        super().__init__(message, **context)


class ItemsFileError(ListnavError):
    """An items file could not be loaded."""

    def __init__(
        self,
        message: str = "Failed to load items",
        *,
        path: Optional[str] = None,
        **context: Any,
    ) -> None:
        if path:
            context["path"] = path
        super().__init__(message, **context)


class TypeaheadError(ListnavError):
    """The external query channel raised while answering a query."""

    def __init__(
        self,
        message: str = "Typeahead query failed",
        *,
        query: Optional[str] = None,
        **context: Any,
    ) -> None:
        if query is not None:
            context["query"] = query[:100] + "..." if len(query) > 100 else query
        super().__init__(message, retryable=True, **context)
