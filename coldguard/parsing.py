"""
Parsing of LLM draft output.

Models asked for a JSON object sometimes stop mid-object. Parsing returns a
tagged result so callers can tell a clean parse from a repaired one, and
both from a failure that needs the template fallback.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional

from coldguard.models import DraftSource


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing model output."""
    source: DraftSource
    content: Optional[dict] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.source is not DraftSource.FALLBACK


def repair_truncated_json(text: str) -> Optional[str]:
    """
    Close a JSON object that was cut off after a string value.

    Only handles text that starts with ``{`` and does not end with ``}``: it
    is cut back to the last double quote and a closing brace is appended.
    Returns None when the pattern does not apply.
    """
    stripped = text.strip()
    if not stripped.startswith("{") or stripped.endswith("}"):
        return None
    last_quote = stripped.rfind('"')
    if last_quote <= 0:
        return None
    return stripped[: last_quote + 1] + "}"


def _load_object(text: str) -> dict:
    parsed = json.loads(text)
    if not isinstance(parsed, dict):
        raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
    return parsed


def parse_draft_json(text: Optional[str]) -> ParseResult:
    """Parse model output, trying one truncation repair before giving up."""
    if not text or not text.strip():
        return ParseResult(DraftSource.FALLBACK, error="empty model output")

    try:
        return ParseResult(DraftSource.PARSED, _load_object(text))
    except ValueError as exc:
        first_error = str(exc)

    repaired = repair_truncated_json(text)
    if repaired is None:
        return ParseResult(DraftSource.FALLBACK, error=first_error)

    try:
        content = _load_object(repaired)
    except ValueError as exc:
        return ParseResult(DraftSource.FALLBACK, error=f"repair failed: {exc}")

    logger.info("Repaired truncated JSON from model output")
    return ParseResult(DraftSource.REPAIRED, content)
