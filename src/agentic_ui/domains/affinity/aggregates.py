"""Affinity Domain Aggregate Root.

The AffinityRuleTable owns every AffinityRule and enforces the invariants
across the collection.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from agentic_ui.domains.constraint.value_objects import (
    AvailableSpace,
    ConstraintDimension,
    Density,
    JourneyPhase,
    PointerType,
    Urgency,
    ViewportClass,
)
from agentic_ui.domains.intention.value_objects import IntentionAction
from agentic_ui.domains.shared.kernel import (
    AriaRole,
    LiveRegion,
    ResolutionPattern,
    TraitOverrides,
)

from .entities import AffinityRule
from .value_objects import ConstraintCondition


@dataclass
class AffinityRuleTable:
    """Ordered collection of affinity rules.

    The table is built once at startup, frozen, and then shared.

    Invariants:
        - Rule ids are unique
        - Every rule has a condition the default constraint set fails, so
          an empty constraint set matches no rule
        - Nothing can be registered once the table is frozen

    Concurrency:
        Reads only after freeze(); safe to share across threads and tasks
        without locking.
    """
    _rules: List[AffinityRule] = field(default_factory=list)
    _index: Dict[str, int] = field(default_factory=dict)
    _frozen: bool = False

    def register(self, rule: AffinityRule) -> None:
        """Append a rule.

        Raises:
            ValueError: If the table is frozen, the id is taken, or the rule
                would match the default constraint set
        """
        if self._frozen:
            raise ValueError(
                f"Cannot register rule '{rule.id}': the rule table is frozen"
            )
        if rule.id in self._index:
            raise ValueError(f"Duplicate affinity rule id: '{rule.id}'")
        if not rule.excludes_defaults:
            raise ValueError(
                f"Rule '{rule.id}' matches the default constraint set; at least "
                f"one condition must exclude a dimension's default value"
            )
        self._index[rule.id] = len(self._rules)
        self._rules.append(rule)

    def register_all(self, rules: Iterable[AffinityRule]) -> None:
        for rule in rules:
            self.register(rule)

    def freeze(self) -> AffinityRuleTable:
        """Stop accepting registrations. Returns the table for chaining."""
        self._frozen = True
        return self

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    @property
    def rules(self) -> Tuple[AffinityRule, ...]:
        return tuple(self._rules)

    def get(self, rule_id: str) -> Optional[AffinityRule]:
        position = self._index.get(rule_id)
        return self._rules[position] if position is not None else None

    def position_of(self, rule: AffinityRule) -> int:
        """Insertion index of a registered rule (the last ranking tie-break)."""
        return self._index[rule.id]

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[AffinityRule]:
        return iter(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._index

    @classmethod
    def from_rules(cls, rules: Iterable[AffinityRule]) -> AffinityRuleTable:
        """Build and freeze a table from an explicit rule list."""
        table = cls()
        table.register_all(rules)
        return table.freeze()

    @classmethod
    def with_builtins(cls) -> AffinityRuleTable:
        """Create a frozen table holding the built-in rules."""
        return cls.from_rules([
            *_builtin_selection_rules(),
            *_builtin_input_rules(),
            *_builtin_action_rules(),
            *_builtin_display_rules(),
            *_builtin_feedback_rules(),
            *_builtin_flow_rules(),
            *_builtin_modifier_rules(),
        ])


# ============================================================
# Built-in rules
# ============================================================

_when = ConstraintCondition.one_of

_URGENT = _when(ConstraintDimension.URGENCY, Urgency.HIGH, Urgency.CRITICAL)
_MOBILE = _when(ConstraintDimension.VIEWPORT, ViewportClass.MOBILE)
_INLINE = _when(ConstraintDimension.AVAILABLE_SPACE, AvailableSpace.INLINE)
_SCREEN_READER = _when(ConstraintDimension.SCREEN_READER, True)

_SELECT = frozenset({IntentionAction.CHOOSE_ONE, IntentionAction.CHOOSE_MANY})
_INPUT = frozenset({IntentionAction.PROVIDE_TEXT, IntentionAction.PROVIDE_DATA})


def _builtin_selection_rules() -> List[AffinityRule]:
    return [
        AffinityRule(
            id="selection-touch-buttons",
            name="Touch selection buttons",
            pattern=ResolutionPattern.SELECTION,
            actions=frozenset({IntentionAction.CHOOSE_ONE}),
            conditions=(_MOBILE,),
            priority=15,
            required_traits=TraitOverrides(
                contained=True, emphasized=True, role=AriaRole.RADIOGROUP,
            ),
            variant="touch-buttons",
        ),
        AffinityRule(
            id="multi-selection-touch",
            name="Touch checkbox group",
            pattern=ResolutionPattern.SELECTION,
            actions=frozenset({IntentionAction.CHOOSE_MANY}),
            conditions=(_MOBILE,),
            priority=15,
            required_traits=TraitOverrides(
                contained=True, emphasized=True, role=AriaRole.GROUP,
            ),
            variant="touch-checkboxes",
        ),
        AffinityRule(
            id="selection-screen-reader",
            name="Native selection controls",
            pattern=ResolutionPattern.SELECTION,
            actions=_SELECT,
            conditions=(_SCREEN_READER,),
            priority=12,
            required_traits=TraitOverrides(focusable=True, contained=True),
            variant="native-controls",
        ),
        AffinityRule(
            id="selection-inline-pills",
            name="Inline selection pills",
            pattern=ResolutionPattern.SELECTION,
            actions=_SELECT,
            conditions=(_when(ConstraintDimension.DENSITY, Density.COMPACT),),
            priority=10,
            required_traits=TraitOverrides(contained=False, role=AriaRole.LISTBOX),
            variant="inline-pills",
        ),
        AffinityRule(
            id="selection-compact-dropdown",
            name="Compact dropdown",
            pattern=ResolutionPattern.SELECTION,
            actions=frozenset({IntentionAction.CHOOSE_ONE}),
            conditions=(
                _when(ConstraintDimension.DENSITY, Density.COMPACT),
                _INLINE,
            ),
            priority=10,
            required_traits=TraitOverrides(
                contained=True, elevated=False, role=AriaRole.COMBOBOX,
            ),
            variant="dropdown",
        ),
    ]


def _builtin_input_rules() -> List[AffinityRule]:
    return [
        AffinityRule(
            id="text-area-spacious",
            name="Multi-line text area",
            pattern=ResolutionPattern.INPUT,
            actions=frozenset({IntentionAction.PROVIDE_TEXT}),
            conditions=(_when(ConstraintDimension.DENSITY, Density.SPACIOUS),),
            priority=10,
            required_traits=TraitOverrides(contained=True, role=AriaRole.TEXTBOX),
            variant="multiline",
        ),
        AffinityRule(
            id="data-input-mobile",
            name="Stepped form",
            pattern=ResolutionPattern.FLOW,
            actions=frozenset({IntentionAction.PROVIDE_DATA}),
            conditions=(_MOBILE,),
            priority=10,
            required_traits=TraitOverrides(dismissable=False, role=AriaRole.FORM),
            variant="stepped-form",
        ),
        AffinityRule(
            id="input-large-text",
            name="Large text input",
            pattern=ResolutionPattern.INPUT,
            actions=_INPUT,
            conditions=(_when(ConstraintDimension.LARGE_TEXT, True),),
            priority=8,
            required_traits=TraitOverrides(emphasized=True),
            variant="large",
        ),
    ]


def _builtin_action_rules() -> List[AffinityRule]:
    return [
        AffinityRule(
            id="confirmation-dialog",
            name="Confirmation dialog",
            pattern=ResolutionPattern.ACTION,
            actions=frozenset({IntentionAction.CONFIRM}),
            conditions=(_URGENT,),
            priority=20,
            required_traits=TraitOverrides(
                interactive=True, focusable=True, dismissable=True,
                elevated=True, contained=True, emphasized=True,
                role=AriaRole.ALERTDIALOG,
            ),
            variant="dialog",
        ),
        AffinityRule(
            id="inline-confirmation",
            name="Inline confirmation",
            pattern=ResolutionPattern.ACTION,
            actions=frozenset({IntentionAction.CONFIRM, IntentionAction.ACKNOWLEDGE}),
            conditions=(_INLINE,),
            priority=15,
            required_traits=TraitOverrides(
                elevated=False, emphasized=False, role=AriaRole.GROUP,
            ),
            variant="inline",
        ),
        AffinityRule(
            id="navigate-mobile",
            name="Touch navigation bar",
            pattern=ResolutionPattern.ACTION,
            actions=frozenset({IntentionAction.NAVIGATE}),
            conditions=(_MOBILE,),
            priority=10,
            required_traits=TraitOverrides(
                contained=True, role=AriaRole.NAVIGATION,
            ),
            variant="tab-bar",
        ),
    ]


def _builtin_display_rules() -> List[AffinityRule]:
    return [
        AffinityRule(
            id="review-collapsible-compact",
            name="Collapsible summary",
            pattern=ResolutionPattern.DISPLAY,
            actions=frozenset({IntentionAction.REVIEW}),
            conditions=(_when(ConstraintDimension.DENSITY, Density.COMPACT),),
            priority=10,
            required_traits=TraitOverrides(
                interactive=True, focusable=True, elevated=False,
            ),
            variant="collapsible",
        ),
        AffinityRule(
            id="review-screen-reader",
            name="Structured summary",
            pattern=ResolutionPattern.DISPLAY,
            actions=frozenset({IntentionAction.REVIEW}),
            conditions=(_SCREEN_READER,),
            priority=10,
            required_traits=TraitOverrides(focusable=True, role=AriaRole.REGION),
            variant="structured",
        ),
        AffinityRule(
            id="wait-reduced-motion",
            name="Static progress",
            pattern=ResolutionPattern.DISPLAY,
            actions=frozenset({IntentionAction.WAIT}),
            conditions=(_when(ConstraintDimension.REDUCED_MOTION, True),),
            priority=8,
            required_traits=TraitOverrides(role=AriaRole.STATUS),
            variant="static-progress",
        ),
    ]


def _builtin_feedback_rules() -> List[AffinityRule]:
    return [
        AffinityRule(
            id="alert-assertive",
            name="Assertive alert",
            pattern=ResolutionPattern.FEEDBACK,
            actions=frozenset({IntentionAction.ALERT}),
            conditions=(_URGENT,),
            priority=20,
            required_traits=TraitOverrides(
                focusable=True, dismissable=True, elevated=True,
                emphasized=True, role=AriaRole.ALERT,
                live_region=LiveRegion.ASSERTIVE,
            ),
            variant="banner",
        ),
        AffinityRule(
            id="wait-critical",
            name="Blocking progress",
            pattern=ResolutionPattern.FEEDBACK,
            actions=frozenset({IntentionAction.WAIT}),
            conditions=(_URGENT,),
            priority=15,
            required_traits=TraitOverrides(
                dismissable=False, emphasized=True,
                role=AriaRole.PROGRESSBAR, live_region=LiveRegion.ASSERTIVE,
            ),
            variant="blocking-progress",
        ),
        AffinityRule(
            id="acknowledge-banner",
            name="Acknowledgement banner",
            pattern=ResolutionPattern.FEEDBACK,
            actions=frozenset({IntentionAction.ACKNOWLEDGE}),
            conditions=(_URGENT,),
            priority=12,
            required_traits=TraitOverrides(
                interactive=True, focusable=True, dismissable=True,
                role=AriaRole.ALERT, live_region=LiveRegion.ASSERTIVE,
            ),
            variant="banner",
        ),
        AffinityRule(
            id="alert-inline-status",
            name="Inline status message",
            pattern=ResolutionPattern.FEEDBACK,
            actions=frozenset({IntentionAction.ALERT}),
            conditions=(_INLINE,),
            priority=10,
            required_traits=TraitOverrides(
                elevated=False, role=AriaRole.STATUS,
                live_region=LiveRegion.POLITE,
            ),
            variant="inline",
        ),
    ]


def _builtin_flow_rules() -> List[AffinityRule]:
    return [
        AffinityRule(
            id="onboarding-step",
            name="Guided onboarding step",
            pattern=ResolutionPattern.FLOW,
            actions=_SELECT | _INPUT,
            conditions=(
                _when(ConstraintDimension.JOURNEY_PHASE, JourneyPhase.ONBOARDING),
            ),
            priority=8,
            required_traits=TraitOverrides(role=AriaRole.FORM),
            variant="guided-step",
        ),
    ]


def _builtin_modifier_rules() -> List[AffinityRule]:
    """Rules without a pattern. They adjust the winner's traits only."""
    return [
        AffinityRule(
            id="inline-flatten",
            name="Flatten inline content",
            conditions=(_INLINE,),
            priority=3,
            required_traits=TraitOverrides(elevated=False),
        ),
        AffinityRule(
            id="urgent-emphasis",
            name="Emphasize urgent content",
            conditions=(_URGENT,),
            priority=2,
            required_traits=TraitOverrides(emphasized=True),
        ),
        AffinityRule(
            id="high-contrast-borders",
            name="High-contrast boundaries",
            conditions=(_when(ConstraintDimension.HIGH_CONTRAST, True),),
            priority=2,
            required_traits=TraitOverrides(contained=True),
        ),
        AffinityRule(
            id="screen-reader-focus",
            name="Screen-reader focus",
            conditions=(_SCREEN_READER,),
            priority=2,
            required_traits=TraitOverrides(focusable=True),
        ),
        AffinityRule(
            id="touch-pointer",
            name="Touch target boundaries",
            conditions=(_when(ConstraintDimension.POINTER, PointerType.COARSE),),
            priority=2,
            required_traits=TraitOverrides(contained=True),
        ),
        AffinityRule(
            id="nested-flatten",
            name="Flatten nested content",
            conditions=(
                ConstraintCondition.minimum(ConstraintDimension.NESTING_LEVEL, 2),
            ),
            priority=1,
            required_traits=TraitOverrides(elevated=False),
        ),
    ]
