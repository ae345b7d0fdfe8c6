"""Result values shared by every fallible boundary.

Nothing in the pipeline signals an expected failure by raising. Parsers,
validators and the LLM adapter return a ParseResult; callers branch on
``result.success``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Protocol, Tuple, Union

if TYPE_CHECKING:
    from agentic_ui.domains.intention.value_objects import Intention


class FailureKind(str, Enum):
    """Error taxonomy for failures reported as data."""
    SCHEMA_VIOLATION = "schema_violation"
    MALFORMED_PROVIDER_OUTPUT = "malformed_provider_output"
    PROVIDER_FAILURE = "provider_failure"


@dataclass(frozen=True)
class ValidationIssue:
    """One violated field.

    Attributes:
        field: Dotted path of the offending field ("subject.label",
            "subject.constraints.options.0.value"); "" for the root object
        message: Human-readable reason
        validator: The rule that failed ("required", "enum", "type", ...)
    """
    field: str
    message: str
    validator: str = ""

    def __str__(self) -> str:
        where = self.field or "<root>"
        return f"{where}: {self.message}"


@dataclass(frozen=True)
class ParseSuccess:
    """A validated Intention, plus any prose that surrounded it."""
    intention: "Intention"
    message: Optional[str] = None

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class ParseFailure:
    """A typed failure.

    Attributes:
        kind: Which branch of the taxonomy this failure belongs to
        error: One-line summary
        issues: Per-field reasons (schema violations only)
        raw_text: The provider text, kept for diagnostics
        raw_json: The decoded payload, when decoding got that far
    """
    kind: FailureKind
    error: str
    issues: Tuple[ValidationIssue, ...] = ()
    raw_text: Optional[str] = None
    raw_json: Any = None

    @property
    def success(self) -> bool:
        return False

    @property
    def fields(self) -> Tuple[str, ...]:
        """Offending field paths, in issue order."""
        return tuple(issue.field for issue in self.issues)

    @classmethod
    def schema_violation(
        cls,
        issues: Tuple[ValidationIssue, ...],
        raw_json: Any = None,
        raw_text: Optional[str] = None,
    ) -> ParseFailure:
        summary = "; ".join(str(issue) for issue in issues[:3])
        if len(issues) > 3:
            summary += f" (+{len(issues) - 3} more)"
        return cls(
            kind=FailureKind.SCHEMA_VIOLATION,
            error=f"Intention failed schema validation: {summary}",
            issues=issues,
            raw_text=raw_text,
            raw_json=raw_json,
        )


ParseResult = Union[ParseSuccess, ParseFailure]


class EventPublisher(Protocol):
    """Protocol for publishing domain events."""
    def publish(self, event: object) -> None: ...


@dataclass
class CollectingEventPublisher:
    """EventPublisher that keeps every event in memory, in order."""
    events: list = field(default_factory=list)

    def publish(self, event: object) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> list:
        return [e for e in self.events if isinstance(e, event_type)]
