"""
Translation Memory Exceptions

Every failure path of the TM core raises one of these, so the API layer can
map it to a status code and callers can decide whether to retry.
"""
from typing import Any, Optional


class TMError(Exception):
    """Base exception for the translation memory core."""

    status_code: int = 500
    kind: str = "TMError"

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        body = {"error": self.message, "kind": self.kind}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(TMError):
    """Required field missing or empty after normalization."""

    status_code = 400
    kind = "ValidationError"


class StorageError(TMError):
    """Failure at the segment store boundary."""

    kind = "StorageError"


class StorageUnavailable(StorageError):
    """Store could not be reached."""

    status_code = 502
    kind = "StorageUnavailable"


class StorageTimeout(StorageError):
    """Store did not answer within the configured timeout."""

    status_code = 504
    kind = "StorageTimeout"


class StorageProtocolError(StorageError):
    """Store answered with an error response."""

    kind = "StorageProtocolError"

    def __init__(
        self,
        message: str,
        details: Optional[Any] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, details)
        if status_code:
            self.status_code = status_code


class FallbackOracleError(TMError):
    """Machine translation call failed for a segment."""

    status_code = 502
    kind = "FallbackOracleError"

    def __init__(self, message: str, segment: Optional[str] = None, details: Optional[Any] = None):
        if details is None and segment is not None:
            details = {"segment": segment}
        super().__init__(message, details)
        self.segment = segment
