"""Pydantic models for OCR analysis results.

Document analysis backends return different shapes depending on model and API
version: a single aggregate ``content`` string, a ``paragraphs`` list, or
``pages`` each holding ``lines``. These models accept any of them, from either
SDK objects or plain dicts, with every field optional.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

ResultKind = Literal["aggregate", "paragraphs", "page_lines", "empty"]


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore", from_attributes=True)


class OcrLine(_Lenient):
    content: str | None = None


class OcrPage(_Lenient):
    page_number: int | None = None
    lines: list[OcrLine] | None = None


class OcrParagraph(_Lenient):
    content: str | None = None
    role: str | None = None


class OcrResult(_Lenient):
    """Union of the result shapes; which field is populated decides the variant."""

    content: str | None = None
    paragraphs: list[OcrParagraph] | None = None
    pages: list[OcrPage] | None = None

    @property
    def kind(self) -> ResultKind:
        """Variant in precedence order: aggregate content, paragraphs, page lines."""
        if self.content:
            return "aggregate"
        if self.paragraphs:
            return "paragraphs"
        if self.pages:
            return "page_lines"
        return "empty"


def _plain(value: Any) -> Any:
    """Turn SDK model objects into plain containers so pydantic can read them."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    as_dict = getattr(value, "as_dict", None)
    if callable(as_dict):
        return _plain(as_dict())
    return {
        name: _plain(getattr(value, name, None))
        for name in ("content", "paragraphs", "pages", "lines", "page_number", "role")
        if getattr(value, name, None) is not None
    }


def _text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _mappings(value: Any) -> list[dict] | None:
    """Entries of a result list that are objects; anything else is dropped."""
    if not isinstance(value, list):
        return None
    return [item for item in value if isinstance(item, dict)]


def _page_number(page: dict) -> int | None:
    # Azure JSON uses camelCase for page numbers
    number = page.get("page_number", page.get("pageNumber"))
    return number if isinstance(number, int) and not isinstance(number, bool) else None


def _page(page: dict) -> OcrPage:
    lines = _mappings(page.get("lines"))
    return OcrPage(
        page_number=_page_number(page),
        lines=None if lines is None else [OcrLine(content=_text(line.get("content"))) for line in lines],
    )


def coerce_ocr_result(result: Any) -> OcrResult:
    """
    Build an OcrResult from a backend response of any supported shape.

    Null or non-object list entries are skipped and non-text content is read as
    missing (numbers are kept as their string form), so a malformed response
    yields less text instead of an error.
    """
    if isinstance(result, OcrResult):
        return result
    if result is None:
        return OcrResult()
    data = _plain(result)
    if not isinstance(data, dict):
        return OcrResult()

    paragraphs = _mappings(data.get("paragraphs"))
    pages = _mappings(data.get("pages"))
    return OcrResult(
        content=_text(data.get("content")),
        paragraphs=None
        if paragraphs is None
        else [OcrParagraph(content=_text(p.get("content")), role=_text(p.get("role"))) for p in paragraphs],
        pages=None if pages is None else [_page(page) for page in pages],
    )


class OcrResultSummary(BaseModel):
    """Counts logged after an analysis job completes."""

    kind: ResultKind
    content_chars: int = 0
    paragraph_count: int = 0
    page_count: int = 0
    line_count: int = 0

    @classmethod
    def of(cls, result: OcrResult) -> "OcrResultSummary":
        return cls(
            kind=result.kind,
            content_chars=len(result.content or ""),
            paragraph_count=len(result.paragraphs or []),
            page_count=len(result.pages or []),
            line_count=sum(len(p.lines or []) for p in result.pages or []),
        )
