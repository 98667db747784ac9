"""Data models for the statement extractor."""

from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class DepositOrWithdrawal(str, Enum):
    """Direction labels the prompt asks the model to use."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class StatementMetadata(BaseModel):
    """Statement-level fields reported by the model."""

    model_config = ConfigDict(extra="allow")

    ownerName: Any = None
    bankName: Any = None
    accountNumber: Any = None
    statementDate: Any = None
    dateRangeStartDate: Any = None
    dateRangeEndDate: Any = None
    totalAmountOfDepositsAsReported: Any = None
    totalAmountOfWithdrawalsAsReported: Any = None
    totalCountOfDepositsAsReported: Any = None
    totalCountOfWithdrawalsAsReported: Any = None


class StatementTransaction(BaseModel):
    """A single transaction line as emitted by the model."""

    model_config = ConfigDict(extra="allow")

    date: Any = None
    description: Any = None
    amount: Any = None
    depositOrWithdrawal: Any = None
    transactionCategory: Any = None


class StatementRecord(BaseModel):
    """Structured output of the pipeline: metadata plus transactions in emission order."""

    model_config = ConfigDict(extra="allow")

    # Shapes that do not fit the typed models are kept exactly as emitted.
    metadata: Annotated[Union[StatementMetadata, Any], Field(union_mode="left_to_right")] = Field(
        default_factory=StatementMetadata
    )
    transactions: Annotated[Union[list[StatementTransaction], Any], Field(union_mode="left_to_right")] = Field(
        default_factory=list
    )

    @property
    def transaction_count(self) -> int:
        return len(self.transactions) if isinstance(self.transactions, list) else 0


class UploadedFile(BaseModel):
    """A file written to temporary storage for the duration of one request."""

    path: Path
    filename: str
    size: int = 0


class ExtractionOutcome(BaseModel):
    """Result of extracting one file: Ok(text) or Degraded(text, reason)."""

    status: Literal["ok", "degraded"]
    text: str
    method: Literal["ocr", "text", "pdf-text", "decode-fallback"]
    reason: str | None = None

    @classmethod
    def ok(cls, text: str, method: str) -> "ExtractionOutcome":
        return cls(status="ok", text=text, method=method)

    @classmethod
    def degraded(cls, text: str, method: str, reason: str) -> "ExtractionOutcome":
        return cls(status="degraded", text=text, method=method, reason=reason)

    @property
    def is_degraded(self) -> bool:
        return self.status == "degraded"


class ExtractedDocument(BaseModel):
    """Text extracted from one uploaded file."""

    filename: str
    text: str
    method: str
    degraded_reason: str | None = None


class ResponseEnvelope(BaseModel):
    """Success/failure envelope returned to the caller."""

    success: bool
    result: Any = None
    error: str | None = None
    raw: str | None = None

    @classmethod
    def succeeded(cls, result: StatementRecord | str) -> "ResponseEnvelope":
        if isinstance(result, StatementRecord):
            result = result.model_dump(exclude_unset=True)
        return cls(success=True, result=result)

    @classmethod
    def failed(cls, error: str, raw: str | None = None) -> "ResponseEnvelope":
        return cls(success=False, error=error, raw=raw)

    def to_response(self) -> dict[str, Any]:
        """Wire form: only the fields that apply to this outcome."""
        if self.success:
            return {"success": True, "result": self.result}
        body: dict[str, Any] = {"success": False, "error": self.error}
        if self.raw is not None:
            body["raw"] = self.raw
        return body
