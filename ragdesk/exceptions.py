"""Exception hierarchy for RAGDesk."""

from typing import Any

STORE_UNAVAILABLE_MESSAGE = (
    "The document store is temporarily unavailable. Please try again later."
)


class RAGDeskError(Exception):
    """Base exception for all RAGDesk errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize the error with a message and optional debugging context.

        Args:
            message: Human-readable error message.
            details: Additional context for logs and diagnostics.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return the message, including details when present."""  # noqa: DOC201
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(RAGDeskError, ValueError):
    """Raised at startup when required configuration is missing."""


class InputValidationError(RAGDeskError):
    """Raised when caller-supplied input is rejected."""


class MissingInputError(InputValidationError):
    """Raised when no file content was supplied."""


class UnsupportedFormatError(InputValidationError):
    """Raised when a file is neither plain text nor PDF."""

    def __init__(
        self,
        message: str,
        mime_type: str | None = None,
        filename: str | None = None,
    ) -> None:
        """Initialize with the signals that failed format detection.

        Args:
            message: Error message.
            mime_type: Declared MIME type, if any.
            filename: Declared filename, if any.
        """
        details: dict[str, Any] = {}
        if mime_type:
            details["mime_type"] = mime_type
        if filename:
            details["filename"] = filename
        super().__init__(message, details)


class DocumentLoadError(InputValidationError):
    """Raised when the document parser fails on a supported file."""


class StoreUnavailableError(RAGDeskError):
    """Raised when the vector store backend cannot be reached.

    ``message`` keeps the internal detail for logs; ``user_message`` is safe to
    show to API callers.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the store-unavailable error.

        Args:
            message: Internal error message.
            operation: Store operation that failed (add, retrieve).
            details: Additional context.
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        self.operation = operation
        self.user_message = STORE_UNAVAILABLE_MESSAGE
        super().__init__(message, details)


class LanguageModelError(RAGDeskError):
    """Raised when the language model returns an unusable response."""
