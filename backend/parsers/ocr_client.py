"""OCR backend client (Azure AI Document Intelligence)."""

import io
import logging
from typing import Any, Optional, Protocol

from backend.config import Settings

logger = logging.getLogger(__name__)


class OcrBackend(Protocol):
    """Document analysis service: submit bytes, wait for the job, return its result."""

    async def analyze(self, contents: bytes, content_type: str) -> Any: ...

    async def close(self) -> None: ...


class DocumentIntelligenceBackend:
    """Runs an analysis job against a Document Intelligence model and polls until done."""

    def __init__(self, endpoint: str, key: str, model_id: str):
        from azure.ai.documentintelligence.aio import DocumentIntelligenceClient
        from azure.core.credentials import AzureKeyCredential

        self.model_id = model_id
        self.endpoint = endpoint
        self._client = DocumentIntelligenceClient(endpoint, AzureKeyCredential(key))

    async def analyze(self, contents: bytes, content_type: str) -> Any:
        """
        Submit a document and block until the job completes or fails.

        No client-side timeout is applied beyond the service's own.
        """
        poller = await self._client.begin_analyze_document(
            self.model_id,
            io.BytesIO(contents),
            content_type=content_type,
        )
        return await poller.result()

    async def close(self) -> None:
        await self._client.close()


def build_ocr_backend(settings: Settings) -> Optional[DocumentIntelligenceBackend]:
    """Create the OCR backend, or None when credentials are not configured."""
    if not settings.ocr_configured:
        logger.info("Azure credentials not set; OCR-eligible files will be decoded as text")
        return None
    logger.info(f"Document Intelligence client initialized (endpoint={settings.azure_endpoint})")
    return DocumentIntelligenceBackend(
        endpoint=settings.azure_endpoint,
        key=settings.azure_key,
        model_id=settings.azure_document_model,
    )
