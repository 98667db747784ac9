"""Character-class cleanup for OCR text before prompting."""

import re

# Letters, digits, whitespace and . , $ # - _ /
_DISALLOWED = re.compile(r"[^\w\s.,$#\-/]")


def sanitize(text: str) -> str:
    """Remove every character outside the allow-list. Idempotent."""
    if not text:
        return ""
    return _DISALLOWED.sub("", text)
