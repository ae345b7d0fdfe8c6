"""Affinity Domain Entities."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Tuple, Union

from agentic_ui.domains.constraint.value_objects import (
    ConstraintDimension,
    ConstraintSet,
)
from agentic_ui.domains.intention.value_objects import IntentionAction
from agentic_ui.domains.shared.kernel import ResolutionPattern, TraitOverrides

from .value_objects import ConstraintCondition


@dataclass(frozen=True)
class AffinityRule:
    """A declarative rule: when an action meets these constraints, this
    pattern (and these traits) emerge.

    Identity is the ``id``; it must be unique within a rule table.

    Attributes:
        id: Stable identifier ("selection-touch-buttons")
        name: Human-readable name used in explanations
        pattern: Pattern the rule nominates. None marks a modifier rule,
            which only adjusts the traits of whichever pattern wins
        actions: Actions the rule applies to; empty means every action
        conditions: All must hold for the rule to apply
        priority: Higher wins when several rules apply
        required_traits: Trait overrides applied when the rule is used
        variant: Optional sub-form hint for materializers ("touch-buttons")
    """
    id: str
    name: str
    conditions: Tuple[ConstraintCondition, ...]
    pattern: Optional[ResolutionPattern] = None
    actions: FrozenSet[IntentionAction] = frozenset()
    priority: int = 0
    required_traits: TraitOverrides = field(default_factory=TraitOverrides)
    variant: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("AffinityRule.id must not be empty")
        if not self.conditions:
            raise ValueError(f"AffinityRule '{self.id}' must declare a condition")
        object.__setattr__(self, "conditions", tuple(self.conditions))
        object.__setattr__(self, "actions", frozenset(self.actions))

    @property
    def is_modifier(self) -> bool:
        return self.pattern is None

    @property
    def dimensions(self) -> List[ConstraintDimension]:
        """Dimensions referenced by the conditions, in catalogue order."""
        referenced = {c.dimension for c in self.conditions}
        return [d for d in ConstraintDimension if d in referenced]

    @property
    def declared_specificity(self) -> float:
        return sum(d.weight for d in self.dimensions)

    @property
    def excludes_defaults(self) -> bool:
        """True if the default constraint set can never satisfy this rule."""
        return any(c.excludes_default for c in self.conditions)

    def handles(self, action: Union[IntentionAction, str]) -> bool:
        if not self.actions:
            return True
        return action in self.actions

    def applies_to(
        self,
        action: Union[IntentionAction, str],
        constraints: ConstraintSet,
    ) -> bool:
        """True when the rule handles ``action`` and every condition holds."""
        return self.handles(action) and all(
            c.matches(constraints) for c in self.conditions
        )

    def describe(self) -> str:
        conditions = ", ".join(c.describe() for c in self.conditions)
        return f"{self.id} [{conditions}]"
