"""Request-level validation for uploaded statement batches."""

import logging
from typing import Sized

logger = logging.getLogger(__name__)

MAX_FILES = 12


class ValidationError(Exception):
    """Raised when the caller's input is unusable (reported as 400)."""

    pass


class NoFilesProvided(ValidationError):
    """Raised when a request carries no files."""

    def __init__(self, message: str = "No files uploaded."):
        super().__init__(message)


class TooManyFiles(ValidationError):
    """Raised when a request carries more files than one prompt should combine."""

    pass


def validate_batch(files: Sized | None, max_files: int = MAX_FILES) -> None:
    """
    Validate a batch of uploaded files before any processing.

    Args:
        files: Uploaded files (any sized collection)
        max_files: Maximum number of files per request

    Raises:
        NoFilesProvided: If the batch is empty or missing
        TooManyFiles: If the batch exceeds max_files
    """
    if not files:
        raise NoFilesProvided()

    if len(files) > max_files:
        logger.warning(f"Rejected batch of {len(files)} files (limit {max_files})")
        raise TooManyFiles(f"Too many files ({len(files)}), maximum {max_files} per request")
