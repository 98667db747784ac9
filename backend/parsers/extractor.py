"""Text extraction from uploaded statement files."""

import logging
from io import BytesIO
from pathlib import PurePath
from typing import Optional

import pdfplumber

from backend.models import ExtractionOutcome
from backend.parsers.document_types import OcrResultSummary, coerce_ocr_result
from backend.parsers.normalizer import normalize
from backend.parsers.ocr_client import OcrBackend

logger = logging.getLogger(__name__)

OCR_EXTENSIONS = {"pdf", "jpg", "jpeg", "png", "tiff", "bmp", "gif"}

CONTENT_TYPES = {
    "pdf": "application/pdf",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "tiff": "image/tiff",
    "bmp": "image/bmp",
    "gif": "image/gif",
}


class ExtractionFailure(Exception):
    """Raised when a file's text cannot be obtained at all."""

    pass


def file_extension(filename: str) -> str:
    """Lower-case extension without the dot ("" if none)."""
    return PurePath(filename or "").suffix.lower().lstrip(".")


def is_ocr_eligible(filename: str) -> bool:
    """PDFs and images go to the OCR backend; everything else is read as text."""
    return file_extension(filename) in OCR_EXTENSIONS


def content_type_for(filename: str) -> str:
    """MIME type sent with the analysis request."""
    return CONTENT_TYPES.get(file_extension(filename), "application/octet-stream")


def decode_text(contents: bytes) -> str:
    """Decode bytes as UTF-8, replacing undecodable sequences."""
    return contents.decode("utf-8", errors="replace")


def _extract_pdf_text_layer(contents: bytes) -> str:
    """Embedded text of a digital PDF, page by page."""
    full_text = ""
    with pdfplumber.open(BytesIO(contents)) as pdf:
        for page in pdf.pages:
            text = page.extract_text() or ""
            full_text += text + "\n\n"
    return full_text.strip()


class TextExtractor:
    """
    Chooses an extraction path per file type.

    OCR-eligible files go to the OCR backend when one is configured. If the
    backend is missing or fails, the bytes are salvaged as UTF-8 text and the
    outcome is marked degraded with the reason.
    """

    def __init__(self, ocr_backend: Optional[OcrBackend] = None, pdf_text_fallback: bool = False):
        self.ocr_backend = ocr_backend
        self.pdf_text_fallback = pdf_text_fallback

    async def extract(self, contents: bytes, filename: str) -> ExtractionOutcome:
        if not is_ocr_eligible(filename):
            return ExtractionOutcome.ok(decode_text(contents), method="text")

        if self.ocr_backend is None:
            return self._salvage(contents, filename, "OCR backend not configured")

        content_type = content_type_for(filename)
        try:
            result = await self.ocr_backend.analyze(contents, content_type)
        except Exception as e:
            logger.error(f"OCR analysis failed for {filename}: {e}")
            return self._salvage(contents, filename, f"OCR analysis failed: {e}")

        try:
            ocr = coerce_ocr_result(result)
            text = normalize(ocr)
            summary = OcrResultSummary.of(ocr)
        except Exception as e:
            logger.error(f"Unreadable OCR result for {filename}: {e}")
            return self._salvage(contents, filename, f"OCR result could not be read: {e}")

        logger.info(
            f"OCR extracted {len(text)} chars from {filename} ({content_type}, {summary.kind}: "
            f"{summary.paragraph_count} paragraphs, {summary.page_count} pages, {summary.line_count} lines)"
        )
        return ExtractionOutcome.ok(text, method="ocr")

    def _salvage(self, contents: bytes, filename: str, reason: str) -> ExtractionOutcome:
        if self.pdf_text_fallback and file_extension(filename) == "pdf":
            try:
                text = _extract_pdf_text_layer(contents)
            except Exception as e:
                logger.warning(f"PDF text layer extraction failed for {filename}: {e}")
            else:
                if text:
                    logger.warning(f"{reason}; using PDF text layer for {filename}")
                    return ExtractionOutcome.degraded(text, method="pdf-text", reason=reason)

        logger.warning(f"{reason}; decoding {filename} as UTF-8 text")
        return ExtractionOutcome.degraded(decode_text(contents), method="decode-fallback", reason=reason)
