"""Configuration management for the statement extractor."""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # LLM Configuration
    llm_provider: Literal["ollama", "openai"] = "openai"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    ollama_host: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"
    llm_temperature: float = 0.2
    llm_max_tokens: int = 4096  # Long statements must not truncate mid-JSON
    json_mode: bool = False  # Ask the provider for a native JSON object response

    # Azure Document Intelligence (OCR backend)
    azure_endpoint: str = ""
    azure_key: str = ""
    azure_document_model: str = "prebuilt-bankStatement.us"

    # Pipeline toggles
    sanitize_text: bool = False
    strict_json_scan: bool = False
    pdf_text_fallback: bool = False
    parallel_extraction: bool = False
    max_files: int = 12

    # Development mode
    dev_mode: bool = True
    log_level: str = "INFO"

    # Data directory
    data_dir: Path = Path.home() / ".statement-extractor"

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    allowed_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # AZURE_KEY and azure_key both work
        extra="ignore",  # Ignore extra environment variables
    )

    @property
    def uploads_path(self) -> Path:
        """Get the temporary uploads directory path."""
        return self.data_dir / "uploads"

    @property
    def ocr_configured(self) -> bool:
        """Whether credentials for the OCR backend are present."""
        return bool(self.azure_endpoint and self.azure_key)

    def ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.uploads_path.mkdir(parents=True, exist_ok=True)

    def log_config(self) -> None:
        """Log current configuration with sensitive values redacted."""
        print("\n" + "=" * 60)
        print("📋 CONFIGURATION LOADED")
        print("=" * 60)
        print(f"LLM Provider:        {self.llm_provider}")
        print(
            f"OpenAI API Key:      {'✓ Set (' + self.openai_api_key[:8] + '...' + self.openai_api_key[-4:] + ')' if self.openai_api_key else '✗ Not set'}"
        )
        print(f"OpenAI Model:        {self.openai_model}")
        print(f"Ollama Host:         {self.ollama_host}")
        print(f"Ollama Model:        {self.ollama_model}")
        print(f"Temperature:         {self.llm_temperature}")
        print(f"Max Output Tokens:   {self.llm_max_tokens}")
        print(f"JSON Mode:           {self.json_mode}")
        print("-" * 60)
        print(f"Azure Endpoint:      {self.azure_endpoint or '✗ Not set'}")
        print(f"Azure Key:           {'✓ Set' if self.azure_key else '✗ Not set'}")
        print(f"Document Model:      {self.azure_document_model}")
        print("-" * 60)
        print(f"Sanitize Text:       {self.sanitize_text}")
        print(f"Strict JSON Scan:    {self.strict_json_scan}")
        print(f"PDF Text Fallback:   {self.pdf_text_fallback}")
        print(f"Parallel Extraction: {self.parallel_extraction}")
        print(f"Max Files:           {self.max_files}")
        print(f"Uploads Directory:   {self.uploads_path}")
        print(f"API Host:            {self.api_host}:{self.api_port}")
        print("=" * 60 + "\n")


# Global settings instance
settings = Settings()
