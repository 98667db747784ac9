"""Recover a statement record from free-form LLM output."""

import json
import logging
from typing import Any

from backend.models import StatementRecord

logger = logging.getLogger(__name__)


class MalformedOutput(Exception):
    """Raised when no JSON object can be recovered from the model output."""

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(message)
        self.raw = raw


def slice_json_candidate(raw: str) -> str:
    """
    Return the text from the first "{" to the last "}" inclusive.

    Heuristic: prose before and after the object is dropped. Returns "" when
    there is no opening brace or no closing brace after it.
    """
    start = raw.find("{")
    end = raw.rfind("}")
    if start == -1 or end < start:
        return ""
    return raw[start : end + 1]


def scan_json_object(raw: str) -> str:
    """
    Return the first balanced {...} block, ignoring braces inside string literals.

    Returns "" when no balanced object exists (e.g. truncated output).
    """
    start = raw.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(raw)):
            ch = raw[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
            elif ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    candidate = raw[start : i + 1]
                    try:
                        json.loads(candidate)
                        return candidate
                    except json.JSONDecodeError:
                        break
        else:
            # Unclosed object: anything after start is nested inside it
            return ""
        start = raw.find("{", start + 1)
    return ""


def recover(raw: Any, strict: bool = False) -> StatementRecord:
    """
    Parse model output into a StatementRecord.

    Args:
        raw: Model output text, or an already-parsed object from a JSON-mode backend
        strict: Use the string-aware bracket scan instead of first "{" / last "}"

    Returns:
        StatementRecord with fields as emitted (no numeric coercion)

    Raises:
        MalformedOutput: If no JSON object can be recovered; carries the raw text
    """
    if isinstance(raw, StatementRecord):
        return raw
    if isinstance(raw, dict):
        return StatementRecord.model_validate(raw)

    text = raw if isinstance(raw, str) else ("" if raw is None else str(raw))
    candidate = scan_json_object(text) if strict else slice_json_candidate(text)
    if not candidate:
        logger.error(f"No JSON object found in model output ({len(text)} chars)")
        raise MalformedOutput("Model output did not contain a JSON object", raw=text)

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON from LLM: {e}")
        logger.error(f"Content preview: {candidate[:200]}...")
        if not text.rstrip().endswith("}"):
            logger.error("Response appears truncated (doesn't end with })")
        raise MalformedOutput(f"Model output is not valid JSON: {e}", raw=text)

    if not isinstance(data, dict):
        raise MalformedOutput("Model output JSON is not an object", raw=text)

    return StatementRecord.model_validate(data)
