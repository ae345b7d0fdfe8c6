"""Intention JSON Schema and the total validator built on it.

The schema is the wire contract for any LLM or external producer of
intentions. Untrusted payloads are validated against it on ingestion; the
validator never raises and reports every violated field at once.
"""
from __future__ import annotations

import copy
from typing import Any, Dict, List, Tuple

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError

from agentic_ui.domains.shared.results import (
    ParseFailure,
    ParseResult,
    ParseSuccess,
    ValidationIssue,
)

from .value_objects import Intention, IconHint, IntentionAction, IntentionPurpose

_OPTION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["value", "label"],
    "properties": {
        "value": {"type": "string"},
        "label": {"type": "string"},
        "description": {"type": "string"},
        "disabled": {"type": "boolean"},
    },
    "additionalProperties": False,
}

INTENTION_JSON_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "$id": "https://agentic-ui.dev/schemas/intention.json",
    "title": "Intention",
    "description": "What the user needs to do, independent of visual form.",
    "type": "object",
    "required": ["action", "subject", "purpose"],
    "additionalProperties": False,
    "properties": {
        "action": {
            "type": "string",
            "enum": [a.value for a in IntentionAction],
        },
        "subject": {
            "type": "object",
            "required": ["type", "label"],
            "properties": {
                "type": {"type": "string", "minLength": 1},
                "label": {"type": "string", "minLength": 1},
                "value": {},
                "description": {"type": "string"},
                "iconHint": {
                    "type": "string",
                    "enum": [h.value for h in IconHint],
                },
                "constraints": {
                    "type": "object",
                    "properties": {
                        "options": {"type": "array", "items": _OPTION_SCHEMA},
                        "required": {"type": "boolean"},
                        "min": {"type": "number"},
                        "max": {"type": "number"},
                        "pattern": {"type": "string", "format": "regex"},
                    },
                    "additionalProperties": False,
                },
            },
            "additionalProperties": False,
        },
        "purpose": {
            "type": "string",
            "enum": [p.value for p in IntentionPurpose],
        },
        "flow": {
            "type": "object",
            "properties": {
                "id": {"type": "string", "minLength": 1},
                "parentId": {"type": "string"},
                "isBranch": {"type": "boolean"},
                "sequence": {"type": "integer", "minimum": 1},
                "totalSteps": {"type": "integer", "minimum": 1},
                "canGoBack": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
        "meta": {
            "type": "object",
            "properties": {
                "timestamp": {"type": "number"},
                "source": {"type": "string", "enum": ["agent", "user", "system"]},
                "correlationId": {"type": "string"},
            },
            "additionalProperties": False,
        },
        "displayMessage": {"type": "string"},
    },
    "allOf": [
        {
            "if": {
                "required": ["action"],
                "properties": {
                    "action": {"enum": ["choose-one", "choose-many"]},
                },
            },
            "then": {
                "properties": {
                    "subject": {
                        "required": ["constraints"],
                        "properties": {
                            "constraints": {"required": ["options"]},
                        },
                    },
                },
            },
        },
    ],
}

Draft7Validator.check_schema(INTENTION_JSON_SCHEMA)

_VALIDATOR = Draft7Validator(
    INTENTION_JSON_SCHEMA,
    format_checker=Draft7Validator.FORMAT_CHECKER,
)


def _path_of(error: ValidationError) -> str:
    return ".".join(str(part) for part in error.absolute_path)


def _join(base: str, name: str) -> str:
    return f"{base}.{name}" if base else name


def _issues_from_error(error: ValidationError) -> List[ValidationIssue]:
    """Flatten one jsonschema error into per-field issues.

    ``required`` and ``additionalProperties`` errors are reported against
    the parent object by jsonschema; they are re-pointed at the missing or
    unexpected property so every issue names the field it is about.
    """
    if error.validator == "if":
        return []

    base = _path_of(error)
    instance = error.instance

    if error.validator == "required" and isinstance(instance, dict):
        return [
            ValidationIssue(
                field=_join(base, name),
                message="is required",
                validator="required",
            )
            for name in error.validator_value
            if name not in instance
        ]

    if error.validator == "additionalProperties" and isinstance(instance, dict):
        allowed = set(error.schema.get("properties", {}))
        return [
            ValidationIssue(
                field=_join(base, name),
                message="is not an allowed property",
                validator="additionalProperties",
            )
            for name in sorted(instance)
            if name not in allowed
        ]

    if error.validator == "enum":
        allowed = ", ".join(str(v) for v in error.validator_value)
        message = f"{instance!r} is not one of: {allowed}"
    else:
        message = error.message

    return [ValidationIssue(field=base, message=message, validator=str(error.validator))]


def _walk(errors) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for error in errors:
        if error.context:
            issues.extend(_walk(error.context))
        else:
            issues.extend(_issues_from_error(error))
    return issues


def collect_schema_issues(
    payload: Any,
    *,
    allow_unknown_action: bool = False,
) -> Tuple[ValidationIssue, ...]:
    """Validate a payload and return every violation, sorted by field.

    Args:
        payload: Decoded JSON (anything; non-objects produce one root issue)
        allow_unknown_action: Accept an ``action`` string outside the
            vocabulary. Used for in-process intentions, which the engine
            degrades to the display pattern instead of rejecting.

    Returns:
        Tuple of ValidationIssue; empty when the payload is valid.
    """
    issues = _walk(_VALIDATOR.iter_errors(payload))
    if allow_unknown_action:
        issues = [
            issue for issue in issues
            if not (issue.field == "action" and issue.validator == "enum")
        ]
    unique = {(i.field, i.validator, i.message): i for i in issues}
    return tuple(unique[key] for key in sorted(unique))


def validate_intention_payload(payload: Any) -> ParseResult:
    """Validate untrusted JSON and build an Intention.

    Total: every input produces a ParseResult; nothing is raised.

    Args:
        payload: Decoded JSON from an LLM or any external producer

    Returns:
        ParseSuccess with the Intention (and ``displayMessage`` if present),
        or a SCHEMA_VIOLATION ParseFailure enumerating every bad field.
    """
    issues = collect_schema_issues(payload)
    if issues:
        return ParseFailure.schema_violation(issues, raw_json=payload)

    intention = Intention.from_dict(payload)
    return ParseSuccess(intention=intention, message=payload.get("displayMessage"))


def intention_schema() -> Dict[str, Any]:
    """A deep copy of the schema, safe to embed or mutate."""
    return copy.deepcopy(INTENTION_JSON_SCHEMA)
