"""Typed failures shared by the storage and analysis services.

Each exception carries a ``kind`` so callers can branch on it directly
(``if exc.kind is ErrorKind.NOT_FOUND``) instead of relying on the class hierarchy.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Category of a failure."""

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    INTERNAL = "internal"


class TextScannerError(Exception):
    """Base for all domain failures."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(TextScannerError):
    """Missing or malformed input (null text, empty upload, bad file id)."""

    kind = ErrorKind.INVALID_INPUT


class NotFoundError(TextScannerError):
    """Referenced file has no record or no retrievable content."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str, file_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.file_id = file_id


class UpstreamUnavailableError(TextScannerError):
    """A collaborator service could not be reached or answered with an error."""

    kind = ErrorKind.UPSTREAM_UNAVAILABLE


class ComputationError(TextScannerError):
    """Unexpected failure while hashing, tokenizing, or persisting."""

    kind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        operation: str,
        file_id: Optional[str] = None,
    ) -> None:
        context = f"{operation} failed"
        if file_id:
            context += f" for file {file_id}"
        super().__init__(f"{context}: {message}")
        self.operation = operation
        self.file_id = file_id
