"""Resolution Bounded Context.

The engine that turns an Intention and a ConstraintSet into a Resolution,
the render instruction builder, and the ResolvedUI contract handed to
materializers.
"""
from .value_objects import (
    AnimationSpec, Manifestation, RenderInstructions, Resolution,
    ResolutionOutcome, ResolutionReasoning, ResolvedUI, to_resolved_ui,
)
from .render import RenderInstructionBuilder, is_touch_context
from .events import IntentionRejected, IntentionResolved, PatternFallbackUsed
from .services import ResolutionEngine, effective_constraints

__all__ = [
    "AnimationSpec", "Manifestation", "RenderInstructions", "Resolution",
    "ResolutionOutcome", "ResolutionReasoning", "ResolvedUI",
    "to_resolved_ui",
    "RenderInstructionBuilder", "is_touch_context",
    "IntentionRejected", "IntentionResolved", "PatternFallbackUsed",
    "ResolutionEngine", "effective_constraints",
]
