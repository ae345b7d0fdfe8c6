"""Parse provider text into validated Intentions.

Models answer with prose around a JSON object, usually inside a fenced
code block. These helpers find the object, decode it and validate it
against the intention schema. None of them raise: every outcome is a
ParseResult.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, replace
from typing import Optional

from agentic_ui.domains.intention.schema import validate_intention_payload
from agentic_ui.domains.shared.results import (
    FailureKind,
    ParseFailure,
    ParseResult,
    ParseSuccess,
)

logger = logging.getLogger(__name__)

_FENCED_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_BARE_OBJECT_RE = re.compile(r"(\{[\s\S]*\})")


@dataclass(frozen=True)
class JsonPayload:
    """A JSON candidate cut out of provider text.

    Attributes:
        json_text: The candidate JSON, stripped
        message: The prose before and after it, or None when there is none
    """

    json_text: str
    message: Optional[str] = None


def extract_json_payload(text: str) -> Optional[JsonPayload]:
    """Find the JSON object in ``text``.

    A fenced code block wins over a bare ``{...}`` span. Returns None when
    neither is present.
    """

    match = _FENCED_RE.search(text) or _BARE_OBJECT_RE.search(text)
    if match is None:
        return None
    before = text[: match.start()].strip()
    after = text[match.end():].strip()
    message = "\n\n".join(part for part in (before, after) if part)
    return JsonPayload(json_text=match.group(1).strip(), message=message or None)


def parse_intention_response(
    json_text: str,
    *,
    raw_text: Optional[str] = None,
    message: Optional[str] = None,
) -> ParseResult:
    """Decode and validate one JSON document.

    Args:
        json_text: The JSON to decode
        raw_text: Full provider text, attached to failures for diagnostics
        message: Prose to carry on success when the payload has no
            ``displayMessage``

    Returns:
        ParseSuccess, a MALFORMED_PROVIDER_OUTPUT failure when the text
        cannot be decoded, or a SCHEMA_VIOLATION failure listing every
        bad field.
    """

    raw = raw_text if raw_text is not None else json_text
    try:
        payload = json.loads(json_text)
    except (ValueError, RecursionError) as exc:
        # Oversized integer literals raise a plain ValueError
        logger.info("Provider output is not valid JSON: %s", exc)
        return ParseFailure(
            kind=FailureKind.MALFORMED_PROVIDER_OUTPUT,
            error=f"Invalid JSON: {exc}",
            raw_text=raw,
        )

    result = validate_intention_payload(payload)
    if not result.success:
        return replace(result, raw_text=raw)
    if result.message is None and message:
        return ParseSuccess(intention=result.intention, message=message)
    return result


def extract_and_parse_intention(text: str) -> ParseResult:
    """Find, decode and validate the intention in free-form provider text."""

    payload = extract_json_payload(text)
    if payload is None:
        return ParseFailure(
            kind=FailureKind.MALFORMED_PROVIDER_OUTPUT,
            error="No JSON object found in provider output",
            raw_text=text,
        )
    return parse_intention_response(
        payload.json_text, raw_text=text, message=payload.message,
    )
