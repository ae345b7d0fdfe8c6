"""Affinity Domain Services.

Rule matching plus the action → pattern and action → traits baselines the
resolution engine starts from.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple, Union

from agentic_ui.domains.constraint.value_objects import ConstraintSet
from agentic_ui.domains.intention.value_objects import IntentionAction
from agentic_ui.domains.shared.kernel import (
    AriaRole,
    LiveRegion,
    ManifestationTraits,
    ResolutionPattern,
    TraitOverrides,
    ensure_exhaustive,
)

from .aggregates import AffinityRuleTable
from .entities import AffinityRule

logger = logging.getLogger(__name__)

ActionLike = Union[IntentionAction, str]


_ACTION_PATTERNS: Dict[IntentionAction, ResolutionPattern] = {
    IntentionAction.CHOOSE_ONE: ResolutionPattern.SELECTION,
    IntentionAction.CHOOSE_MANY: ResolutionPattern.SELECTION,
    IntentionAction.PROVIDE_TEXT: ResolutionPattern.INPUT,
    IntentionAction.PROVIDE_DATA: ResolutionPattern.INPUT,
    IntentionAction.CONFIRM: ResolutionPattern.ACTION,
    IntentionAction.ACKNOWLEDGE: ResolutionPattern.ACTION,
    IntentionAction.NAVIGATE: ResolutionPattern.ACTION,
    IntentionAction.REVIEW: ResolutionPattern.DISPLAY,
    IntentionAction.WAIT: ResolutionPattern.DISPLAY,
    IntentionAction.ALERT: ResolutionPattern.FEEDBACK,
}

# Per-action adjustments on top of the pattern's default traits.
_ACTION_TRAIT_ADJUSTMENTS: Dict[IntentionAction, TraitOverrides] = {
    IntentionAction.CHOOSE_ONE: TraitOverrides(),
    IntentionAction.CHOOSE_MANY: TraitOverrides(role=AriaRole.GROUP),
    IntentionAction.PROVIDE_TEXT: TraitOverrides(),
    IntentionAction.PROVIDE_DATA: TraitOverrides(role=AriaRole.FORM),
    IntentionAction.CONFIRM: TraitOverrides(dismissable=True),
    IntentionAction.ACKNOWLEDGE: TraitOverrides(emphasized=False),
    IntentionAction.NAVIGATE: TraitOverrides(
        contained=False, emphasized=False, role=AriaRole.LINK,
    ),
    IntentionAction.REVIEW: TraitOverrides(),
    IntentionAction.WAIT: TraitOverrides(
        contained=False, role=AriaRole.STATUS, live_region=LiveRegion.POLITE,
    ),
    IntentionAction.ALERT: TraitOverrides(),
}

ensure_exhaustive(_ACTION_PATTERNS, IntentionAction, "action patterns")
ensure_exhaustive(_ACTION_TRAIT_ADJUSTMENTS, IntentionAction, "action traits")


def action_to_pattern(action: ActionLike) -> ResolutionPattern:
    """Default pattern for an action. Unknown actions map to DISPLAY."""
    known = IntentionAction.parse(action)
    if known is None:
        return ResolutionPattern.DISPLAY
    return _ACTION_PATTERNS[known]


def action_to_traits(action: ActionLike) -> ManifestationTraits:
    """Minimal trait baseline for an action, before any rule applies."""
    pattern = action_to_pattern(action)
    known = IntentionAction.parse(action)
    base = ManifestationTraits.for_pattern(pattern)
    if known is None:
        return base
    return base.merged(_ACTION_TRAIT_ADJUSTMENTS[known])


def enhance_traits_for_constraints(
    base: ManifestationTraits,
    *overrides: TraitOverrides,
) -> ManifestationTraits:
    """Apply trait overrides onto ``base`` in order; later ones win."""
    traits = base
    for override in overrides:
        traits = traits.merged(override)
    return traits


def rule_rank_key(
    rule: AffinityRule, table: AffinityRuleTable
) -> Tuple[int, float, int]:
    """Sort key: priority desc, declared specificity desc, insertion order."""
    return (-rule.priority, -rule.declared_specificity, table.position_of(rule))


def find_matching_rules(
    action: ActionLike,
    constraints: ConstraintSet,
    table: AffinityRuleTable,
) -> List[AffinityRule]:
    """Every rule that applies, best first.

    Includes modifier rules (``pattern is None``); callers that only want
    pattern nominations filter on ``rule.is_modifier``.
    """
    matches = [rule for rule in table if rule.applies_to(action, constraints)]
    matches.sort(key=lambda rule: rule_rank_key(rule, table))
    if matches:
        logger.debug(
            "Rules matching %s: %s",
            action, ", ".join(rule.id for rule in matches),
        )
    return matches


def find_best_rule(
    action: ActionLike,
    constraints: ConstraintSet,
    table: AffinityRuleTable,
) -> Optional[AffinityRule]:
    """Highest-ranked pattern-nominating rule, or None when nothing matched."""
    for rule in find_matching_rules(action, constraints, table):
        if not rule.is_modifier:
            return rule
    return None
