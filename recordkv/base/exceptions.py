"""
recordkv Custom Exceptions

This module defines the exception classes raised by the transactional store
implementations, the transaction builder and the response decoder. The record
adapter converts all of them into a Status.ERROR at its public boundary.
"""

from typing import Optional


class RecordKVException(Exception):
    """
    Base exception class for all recordkv errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[str] = None,
    ):
        """
        Initialize RecordKVException.

        Args:
            message: Human-readable error message
            status_code: HTTP status code used when the error is served by the store service
            details: Additional error details (optional)
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict:
        """Convert exception to dict for JSON response."""
        result = {
            "error": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class StoreCommunicationError(RecordKVException):
    """Exception raised when the transactional runtime cannot be reached."""

    def __init__(
        self,
        message: str = "Failed to communicate with transactional store",
        details: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            status_code=503,
            details=details,
        )


class TransactionAbortedError(RecordKVException):
    """
    Exception raised when the runtime aborts a submitted program.

    None of the program's writes are visible after this error.
    """

    def __init__(
        self,
        message: str = "Transaction aborted",
        details: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            status_code=409,
            details=details,
        )


class ProgramFormatError(RecordKVException):
    """Exception raised when a transaction program cannot be decoded from its wire form."""

    def __init__(
        self,
        message: str = "Malformed transaction program",
        details: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            status_code=400,
            details=details,
        )


class StoreClosedError(RecordKVException):
    """Exception raised when a program is submitted to a closed store."""

    def __init__(
        self,
        message: str = "Store is closed",
        details: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            status_code=503,
            details=details,
        )


class SeparatorViolationError(RecordKVException):
    """Exception raised when a field value contains the reserved value separator."""

    def __init__(
        self,
        field: str,
        details: Optional[str] = None,
    ):
        super().__init__(
            message=f"Value of field {field!r} contains the reserved separator",
            status_code=400,
            details=details,
        )
        self.field = field


class ResponseDecodeError(RecordKVException):
    """
    Exception raised when a composite read response does not match the
    fields that were requested.
    """

    def __init__(
        self,
        expected: int,
        actual: int,
        details: Optional[str] = None,
    ):
        super().__init__(
            message=f"Expected {expected} segments in composite response, got {actual}",
            status_code=502,
            details=details,
        )
        self.expected = expected
        self.actual = actual


class AdapterStateError(RecordKVException):
    """Exception raised on lifecycle misuse of the benchmark binding (e.g. double init)."""

    def __init__(
        self,
        message: str = "Invalid adapter state",
        details: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            status_code=500,
            details=details,
        )
