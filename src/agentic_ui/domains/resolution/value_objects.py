"""Resolution Domain Value Objects.

Everything the engine produces. A Resolution is built in one step and
never partially populated; every type here is frozen.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple, Union

from agentic_ui.domains.constraint.value_objects import (
    ConstraintDimension,
    ConstraintSet,
)
from agentic_ui.domains.intention.value_objects import Intention
from agentic_ui.domains.shared.kernel import ManifestationTraits, ResolutionPattern
from agentic_ui.domains.shared.results import ParseFailure

StyleMap = Dict[str, Union[str, int, float]]
AriaValue = Union[str, bool, int]


@dataclass(frozen=True)
class AnimationSpec:
    """Enter/exit animation hints. Absent when motion is reduced."""
    enter: str
    exit: str
    duration_ms: int

    def to_dict(self) -> Dict[str, Any]:
        return {"enter": self.enter, "exit": self.exit, "duration": self.duration_ms}


@dataclass(frozen=True)
class RenderInstructions:
    """Declarative rendering hints derived from traits and tokens.

    Attributes:
        styles: Base style declarations (camelCase CSS property names)
        states: Per-state style overrides keyed by "hover", "focus",
            "active", "disabled", "selected"
        class_names: Utility class names, in emission order
        aria: ARIA attributes, including ``role``
        data_attributes: ``data-*`` attributes for styling and testing
        animation: Animation hints, or None
    """
    styles: StyleMap = field(default_factory=dict)
    states: Dict[str, StyleMap] = field(default_factory=dict)
    class_names: Tuple[str, ...] = ()
    aria: Dict[str, AriaValue] = field(default_factory=dict)
    data_attributes: Dict[str, str] = field(default_factory=dict)
    animation: Optional[AnimationSpec] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "styles": dict(self.styles),
            "states": {k: dict(v) for k, v in self.states.items()},
            "classNames": list(self.class_names),
            "aria": dict(self.aria),
            "dataAttributes": dict(self.data_attributes),
        }
        if self.animation is not None:
            data["animation"] = self.animation.to_dict()
        return data


@dataclass(frozen=True)
class Manifestation:
    """The concrete form chosen for an intention."""
    pattern: ResolutionPattern
    traits: ManifestationTraits
    render: RenderInstructions
    confidence: float
    variant: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "pattern": self.pattern.value,
            "traits": self.traits.to_dict(),
            "render": self.render.to_dict(),
            "confidence": self.confidence,
        }
        if self.variant is not None:
            data["variant"] = self.variant
        return data


@dataclass(frozen=True)
class ResolutionReasoning:
    """Why the engine chose what it chose.

    Attributes:
        dominant_constraints: Non-default dimensions that shaped the result
        considered_patterns: Every pattern that was in the running
        confidence: Confidence of the chosen manifestation, in [0, 1]
        explanation: Human-readable account of the decision
        applied_rules: Ids of the rules merged into the chosen traits
        fallback_used: The action was not recognised and display was used
    """
    dominant_constraints: Tuple[ConstraintDimension, ...]
    considered_patterns: Tuple[ResolutionPattern, ...]
    confidence: float
    explanation: str
    applied_rules: Tuple[str, ...] = ()
    fallback_used: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dominantConstraints": [d.value for d in self.dominant_constraints],
            "consideredPatterns": [p.value for p in self.considered_patterns],
            "confidence": self.confidence,
            "explanation": self.explanation,
            "appliedRules": list(self.applied_rules),
            "fallbackUsed": self.fallback_used,
        }


@dataclass(frozen=True)
class Resolution:
    """Complete output of one resolve call."""
    manifestation: Manifestation
    reasoning: ResolutionReasoning
    alternatives: Tuple[Manifestation, ...]
    source_intention: Intention
    applied_constraints: ConstraintSet
    id: str
    timestamp: datetime

    @property
    def pattern(self) -> ResolutionPattern:
        return self.manifestation.pattern

    @property
    def confidence(self) -> float:
        return self.manifestation.confidence

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "manifestation": self.manifestation.to_dict(),
            "reasoning": self.reasoning.to_dict(),
            "alternatives": [a.to_dict() for a in self.alternatives],
            "sourceIntention": self.source_intention.to_dict(),
        }


@dataclass(frozen=True)
class ResolvedUI:
    """Flattened contract handed to a materializer."""
    pattern: ResolutionPattern
    class_name: str
    style: StyleMap
    aria: Dict[str, AriaValue]
    data: Dict[str, str]
    traits: ManifestationTraits
    resolution_id: str
    variant: Optional[str] = None


def to_resolved_ui(resolution: Resolution) -> ResolvedUI:
    """Convert a Resolution into the materializer contract."""
    manifestation = resolution.manifestation
    render = manifestation.render
    return ResolvedUI(
        pattern=manifestation.pattern,
        class_name=" ".join(render.class_names),
        style=dict(render.styles),
        aria=dict(render.aria),
        data=dict(render.data_attributes),
        traits=manifestation.traits,
        resolution_id=resolution.id,
        variant=manifestation.variant,
    )


@dataclass(frozen=True)
class ResolutionOutcome:
    """Result of a resolve call. Exactly one of resolution and failure is set."""
    resolution: Optional[Resolution] = None
    failure: Optional[ParseFailure] = None
    message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.resolution is not None
