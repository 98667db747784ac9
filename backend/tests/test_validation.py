"""Tests for request validation."""

import pytest

from backend.parsers.validation import (
    MAX_FILES,
    NoFilesProvided,
    TooManyFiles,
    ValidationError,
    validate_batch,
)


class TestValidateBatch:
    """Test batch validation."""

    def test_rejects_empty_batch(self):
        """Should reject an empty file list."""
        with pytest.raises(NoFilesProvided, match="No files uploaded"):
            validate_batch([])

    def test_rejects_missing_batch(self):
        """Should reject a missing file list."""
        with pytest.raises(NoFilesProvided):
            validate_batch(None)

    def test_rejects_oversized_batch(self):
        """Should reject more than the maximum number of files."""
        with pytest.raises(TooManyFiles, match="maximum 12"):
            validate_batch(["f"] * (MAX_FILES + 1))

    def test_custom_limit(self):
        with pytest.raises(TooManyFiles):
            validate_batch(["a", "b"], max_files=1)

    def test_accepts_valid_batch(self):
        """Should accept between one and max files."""
        validate_batch(["f"])
        validate_batch(["f"] * MAX_FILES)

    def test_errors_share_base_class(self):
        """Both input errors map to the same 400 handling."""
        assert issubclass(NoFilesProvided, ValidationError)
        assert issubclass(TooManyFiles, ValidationError)
