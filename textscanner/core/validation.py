"""Input validation for file ids and uploads."""

import uuid
from pathlib import PurePath
from typing import Iterable, Optional

from textscanner.core.errors import InvalidInputError


def validate_file_id(file_id: Optional[str]) -> str:
    """Return the canonical lower-case UUID string. Raises InvalidInputError."""
    if file_id is None or not file_id.strip():
        raise InvalidInputError("File ID cannot be empty")
    try:
        return str(uuid.UUID(file_id.strip()))
    except ValueError:
        raise InvalidInputError("Invalid file ID format")


def validate_upload(
    filename: Optional[str],
    size: int,
    max_bytes: int,
    allowed_extensions: Iterable[str],
) -> str:
    """Check an upload before it is stored. Returns the bare file name."""
    if size == 0:
        raise InvalidInputError("File is empty or not provided")
    if size > max_bytes:
        raise InvalidInputError(
            f"File size exceeds maximum allowed size of {max_bytes // 1024 // 1024}MB"
        )
    # Only the last segment counts: clients sometimes send a full local path
    name = PurePath((filename or "").replace("\\", "/")).name.strip()
    if not name:
        raise InvalidInputError("Query parameter 'filename' is required")
    allowed = list(allowed_extensions)
    if PurePath(name).suffix.lower() not in allowed:
        raise InvalidInputError(f"File type not allowed. Allowed types: {', '.join(allowed)}")
    return name
