"""Temporary storage for uploaded statement files."""

import logging
import uuid
from pathlib import Path

from fastapi import UploadFile

from backend.models import UploadedFile

logger = logging.getLogger(__name__)


async def save_uploads(files: list[UploadFile], directory: Path) -> list[UploadedFile]:
    """
    Write each upload to its own temporary file.

    Args:
        files: Multipart uploads from the request, in upload order
        directory: Directory for temporary files

    Returns:
        UploadedFile handles in the same order
    """
    directory.mkdir(parents=True, exist_ok=True)
    saved: list[UploadedFile] = []

    try:
        for upload in files:
            contents = await upload.read()
            path = directory / uuid.uuid4().hex
            path.write_bytes(contents)
            saved.append(UploadedFile(path=path, filename=upload.filename or path.name, size=len(contents)))
    except Exception:
        # Do not leave partial batches behind
        for uploaded in saved:
            remove_temp_file(uploaded.path)
        raise

    logger.info(f"Stored {len(saved)} uploads in {directory}")
    return saved


def read_upload(uploaded: UploadedFile) -> bytes:
    """Read a stored upload's bytes."""
    return uploaded.path.read_bytes()


def remove_temp_file(path: Path) -> None:
    """Delete a temporary file. Failures are logged, never raised."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Could not delete temporary file {path}: {e}")
