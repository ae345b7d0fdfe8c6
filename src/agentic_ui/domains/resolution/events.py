"""Resolution Domain Events.

Events emitted by the ResolutionEngine for observability and analytics.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class IntentionResolved:
    """Emitted after every successful resolution.

    Consumers:
    - Analytics (pattern frequency per action and constraint profile)
    - Rule tuning (confidence distribution per rule)
    """
    resolution_id: str
    action: str
    pattern: str
    confidence: float
    rule_id: Optional[str]
    variant: Optional[str]
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class PatternFallbackUsed:
    """Emitted when an action is not recognised and display is used instead."""
    resolution_id: str
    action: str
    fallback_pattern: str
    reason: str
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class IntentionRejected:
    """Emitted when an untrusted payload fails schema validation."""
    fields: Tuple[str, ...]
    error: str
    timestamp: datetime = field(default_factory=datetime.now)
