"""Shared kernel and result types used by every bounded context."""

from .kernel import (
    AriaRole,
    LiveRegion,
    ManifestationTraits,
    ResolutionPattern,
    TraitOverrides,
    ensure_exhaustive,
)
from .results import (
    CollectingEventPublisher,
    EventPublisher,
    FailureKind,
    ParseFailure,
    ParseResult,
    ParseSuccess,
    ValidationIssue,
)

__all__ = [
    "AriaRole", "LiveRegion", "ManifestationTraits", "ResolutionPattern",
    "TraitOverrides", "ensure_exhaustive",
    "CollectingEventPublisher", "EventPublisher", "FailureKind",
    "ParseFailure", "ParseResult", "ParseSuccess", "ValidationIssue",
]
