"""Exceptions and error codes for oracle-dml-common.

Two kinds of failure exist: usage errors (a required argument is missing)
and operation errors (a connection or a catalog statement failed). Neither
is caught or retried inside the library.
"""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the library."""

    USAGE_ERROR = "usage_error"
    OPERATION_ERROR = "operation_error"
    DATABASE_CONNECTION_ERROR = "database_connection_error"
    STATEMENT_ERROR = "statement_error"


class ErrorDetail:
    """Structured error detail information."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation.

        Returns:
            dict: Dictionary containing error information.
        """
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"ErrorDetail(code={self.code}, message={self.message!r})"


class OracleDmlError(Exception):
    """Base exception for all oracle-dml-common errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.OPERATION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize base error.

        Args:
            message: Human-readable error message.
            code: Error code identifier.
            details: Optional additional context.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_error_detail(self) -> ErrorDetail:
        """Convert exception to ErrorDetail."""
        return ErrorDetail(code=self.code, message=self.message, details=self.details)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code}, message={self.message!r})"


class UsageError(OracleDmlError):
    """Raised when a required argument (handle, object or table name) is missing."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code=ErrorCode.USAGE_ERROR, details=details)


class OperationError(OracleDmlError):
    """Raised when talking to the database fails.

    The driver's own error text is carried in the message and the original
    exception is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.OPERATION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code=code, details=details)


class DatabaseConnectionError(OperationError):
    """Raised when a database handle cannot be opened."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message, code=ErrorCode.DATABASE_CONNECTION_ERROR, details=details
        )


class StatementError(OperationError):
    """Raised when a catalog statement fails to execute or fetch."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code=ErrorCode.STATEMENT_ERROR, details=details)
