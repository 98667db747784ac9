"""Flatten OCR analysis results into plain text."""

import logging
from typing import Any, Iterable

from backend.parsers.document_types import coerce_ocr_result

logger = logging.getLogger(__name__)


def classify(result: Any) -> str:
    """Report which result variant is populated ("aggregate", "paragraphs", "page_lines" or "empty")."""
    return coerce_ocr_result(result).kind


def normalize(result: Any) -> str:
    """
    Convert an OCR backend response into one plain-text string.

    Precedence, first non-empty wins: aggregate content, then paragraphs, then
    page lines. Units are joined with newlines in document order (page order
    then line order for the page path). Missing fields contribute nothing.

    Args:
        result: SDK result object, dict parsed from JSON, or OcrResult

    Returns:
        Plain text, possibly empty
    """
    ocr = coerce_ocr_result(result)

    if ocr.content:
        return ocr.content

    paragraphs = _join(p.content for p in ocr.paragraphs or [])
    if paragraphs:
        return paragraphs

    lines = _join(line.content for page in ocr.pages or [] for line in page.lines or [])
    if lines:
        return lines

    logger.warning("OCR result has no content, paragraphs or page lines")
    return ""


def _join(parts: Iterable[str | None]) -> str:
    text = "\n".join(part or "" for part in parts)
    # A list of empty units counts as empty
    return text if text.strip() else ""
