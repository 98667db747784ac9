"""Tests for settings and backend construction."""

from pathlib import Path

from backend.config import Settings
from backend.parsers.ocr_client import build_ocr_backend


class TestSettings:
    """Test configuration defaults and derived values."""

    def test_defaults(self):
        settings = Settings(_env_file=None, azure_endpoint="", azure_key="")
        assert settings.llm_temperature == 0.2
        assert settings.llm_max_tokens >= 4000
        assert settings.max_files == 12
        assert settings.sanitize_text is False
        assert settings.strict_json_scan is False
        assert settings.ocr_configured is False

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("AZURE_ENDPOINT", "https://example.cognitiveservices.azure.com/")
        monkeypatch.setenv("AZURE_KEY", "secret")
        monkeypatch.setenv("SANITIZE_TEXT", "true")

        settings = Settings(_env_file=None)

        assert settings.ocr_configured is True
        assert settings.sanitize_text is True

    def test_uploads_path(self, tmp_path):
        settings = Settings(_env_file=None, data_dir=tmp_path)
        settings.ensure_directories()
        assert settings.uploads_path == Path(tmp_path) / "uploads"
        assert settings.uploads_path.is_dir()


class TestBuildOcrBackend:
    """Test OCR backend availability."""

    def test_none_without_credentials(self):
        assert build_ocr_backend(Settings(_env_file=None, azure_endpoint="", azure_key="")) is None

    def test_none_with_partial_credentials(self):
        settings = Settings(_env_file=None, azure_endpoint="https://example.cognitiveservices.azure.com/", azure_key="")
        assert build_ocr_backend(settings) is None
