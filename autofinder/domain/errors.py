"""Domain error classes.

Catalog failures are carried as values of a small taxonomy so the
coordinator can record them in state instead of propagating them.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Kinds of catalog failures surfaced to observers."""

    NETWORK_FAILURE = "network_failure"
    SERVER_ERROR = "server_error"
    DECODING_ERROR = "decoding_error"


class DomainError(Exception):
    """Base class for all domain errors."""

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        """
        Create a domain error.

        Args:
            message: Human-readable error message
            **context: Additional context (e.g., field names, status codes)
        """
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format for protocol translation."""
        return {
            "message": self.message,
            "code": self.error_code,
            **self.context,
        }


class FilterValidationError(DomainError):
    """Raised when filter parameters are invalid."""

    error_code: str = "FILTER_VALIDATION_ERROR"


class CatalogError(DomainError):
    """Base class for failures reported by the catalog transport."""

    error_code: str = "CATALOG_ERROR"
    kind: ErrorKind = ErrorKind.SERVER_ERROR


class NetworkFailure(CatalogError):
    """Transport-level failure (no connectivity, timeout, connection reset)."""

    error_code: str = "NETWORK_FAILURE"
    kind: ErrorKind = ErrorKind.NETWORK_FAILURE


class ServerError(CatalogError):
    """Non-2xx response from the catalog API."""

    error_code: str = "SERVER_ERROR"
    kind: ErrorKind = ErrorKind.SERVER_ERROR

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        **context: Any,
    ) -> None:
        """
        Create a server error.

        Args:
            message: Human-readable error message
            status_code: HTTP status code, if any
            code: Error code from the decoded error payload, if any
            **context: Additional context
        """
        self.status_code = status_code
        self.code = code
        super().__init__(message, status_code=status_code, server_code=code, **context)


class DecodingError(CatalogError):
    """Response body could not be decoded into the expected shape."""

    error_code: str = "DECODING_ERROR"
    kind: ErrorKind = ErrorKind.DECODING_ERROR
