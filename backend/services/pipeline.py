"""Statement extraction pipeline: files -> text -> prompt -> LLM -> structured record."""

import asyncio
import logging
from typing import Optional, Protocol

from backend.config import Settings
from backend.models import ExtractedDocument, ResponseEnvelope, UploadedFile
from backend.parsers.extractor import ExtractionFailure, TextExtractor
from backend.parsers.llm_client import Completion, CompletionBackendFailure, LLMCompletionBackend
from backend.parsers.ocr_client import build_ocr_backend
from backend.parsers.prompts import build_prompt
from backend.parsers.recovery import MalformedOutput, recover
from backend.parsers.sanitizer import sanitize
from backend.parsers.validation import MAX_FILES, validate_batch
from backend.services.upload import read_upload, remove_temp_file

logger = logging.getLogger(__name__)


class CompletionBackend(Protocol):
    async def complete(
        self, prompt: str, temperature: Optional[float] = None, max_tokens: Optional[int] = None
    ) -> Completion: ...


def combine_texts(documents: list[ExtractedDocument]) -> str:
    """Concatenate document texts in upload order, each preceded by a blank line."""
    return "".join("\n\n" + doc.text for doc in documents)


class StatementPipeline:
    """
    Runs one request's batch of files through extraction, prompting and recovery.

    Holds no state between calls; collaborators are injected so tests can
    substitute fakes.
    """

    def __init__(
        self,
        extractor: TextExtractor,
        completion_backend: CompletionBackend,
        sanitize_text: bool = False,
        strict_json_scan: bool = False,
        temperature: float = 0.2,
        max_tokens: int = 4096,
        max_files: int = MAX_FILES,
        parallel_extraction: bool = False,
    ):
        self.extractor = extractor
        self.completion_backend = completion_backend
        self.sanitize_text = sanitize_text
        self.strict_json_scan = strict_json_scan
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_files = max_files
        self.parallel_extraction = parallel_extraction

    @classmethod
    def from_settings(cls, settings: Settings) -> "StatementPipeline":
        """Build the pipeline and its backends from configuration."""
        extractor = TextExtractor(
            ocr_backend=build_ocr_backend(settings),
            pdf_text_fallback=settings.pdf_text_fallback,
        )
        return cls(
            extractor=extractor,
            completion_backend=LLMCompletionBackend(settings),
            sanitize_text=settings.sanitize_text,
            strict_json_scan=settings.strict_json_scan,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            max_files=settings.max_files,
            parallel_extraction=settings.parallel_extraction,
        )

    async def process(self, files: list[UploadedFile]) -> ResponseEnvelope:
        """
        Process a batch of stored uploads.

        Raises:
            NoFilesProvided: If the batch is empty (before any network call)
            TooManyFiles: If the batch exceeds the configured limit
        """
        validate_batch(files, self.max_files)

        try:
            documents = await self._extract_all(files)
        except ExtractionFailure as e:
            logger.error(f"Extraction failed: {e}")
            return ResponseEnvelope.failed(str(e))

        return await self._run(documents)

    async def process_documents(self, documents: list[tuple[str, bytes]]) -> ResponseEnvelope:
        """Process in-memory (filename, contents) pairs."""
        validate_batch(documents, self.max_files)

        extracted = [await self._extract(filename, contents) for filename, contents in documents]
        return await self._run(extracted)

    async def _extract_all(self, files: list[UploadedFile]) -> list[ExtractedDocument]:
        if self.parallel_extraction:
            # Let every file finish (and drop its temp file) before reporting a failure
            results = await asyncio.gather(*(self._extract_file(f) for f in files), return_exceptions=True)
            for result in results:
                if isinstance(result, BaseException):
                    raise result
            return list(results)
        return [await self._extract_file(f) for f in files]

    async def aclose(self) -> None:
        """Release the OCR client, if the extractor holds one."""
        close = getattr(getattr(self.extractor, "ocr_backend", None), "close", None)
        if close is not None:
            await close()

    async def _extract_file(self, uploaded: UploadedFile) -> ExtractedDocument:
        try:
            try:
                contents = read_upload(uploaded)
            except OSError as e:
                raise ExtractionFailure(f"Could not read {uploaded.filename}: {e}") from e
            return await self._extract(uploaded.filename, contents)
        finally:
            remove_temp_file(uploaded.path)

    async def _extract(self, filename: str, contents: bytes) -> ExtractedDocument:
        outcome = await self.extractor.extract(contents, filename)
        if outcome.is_degraded:
            logger.warning(f"Degraded extraction for {filename}: {outcome.reason}")
        return ExtractedDocument(
            filename=filename,
            text=outcome.text,
            method=outcome.method,
            degraded_reason=outcome.reason,
        )

    async def _run(self, documents: list[ExtractedDocument]) -> ResponseEnvelope:
        combined = combine_texts(documents)
        if self.sanitize_text:
            combined = sanitize(combined)

        prompt = build_prompt(combined)
        logger.info(f"Built prompt from {len(documents)} documents ({len(combined)} chars of text)")

        try:
            completion = await self.completion_backend.complete(
                prompt, temperature=self.temperature, max_tokens=self.max_tokens
            )
        except CompletionBackendFailure as e:
            return ResponseEnvelope.failed(str(e))
        except Exception as e:
            logger.exception("Unexpected completion backend error")
            return ResponseEnvelope.failed(f"LLM call failed: {e}")

        if completion.truncated:
            logger.warning("Completion stopped at the token limit; output is likely truncated")

        try:
            record = recover(
                completion.parsed if completion.parsed is not None else completion.content,
                strict=self.strict_json_scan,
            )
        except MalformedOutput as e:
            return ResponseEnvelope.failed(str(e), raw=e.raw)

        logger.info(f"Recovered statement with {record.transaction_count} transactions")
        return ResponseEnvelope.succeeded(record)
