"""Resolution Domain Service.

The ResolutionEngine is the core domain service that turns an Intention
and a ConstraintSet into a Resolution. It coordinates between:
- AffinityRuleTable (which rules apply)
- Constraint specificity (how much of the set the rules explain)
- RenderInstructionBuilder (style, ARIA and data attribute output)
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from agentic_ui.config import ResolutionSettings
from agentic_ui.domains.affinity.aggregates import AffinityRuleTable
from agentic_ui.domains.affinity.entities import AffinityRule
from agentic_ui.domains.affinity.services import (
    action_to_pattern,
    action_to_traits,
    enhance_traits_for_constraints,
    find_matching_rules,
)
from agentic_ui.domains.constraint.services import (
    calculate_constraint_specificity,
    dimension_score,
)
from agentic_ui.domains.constraint.value_objects import (
    ConstraintDimension,
    ConstraintSet,
    Urgency,
)
from agentic_ui.domains.intention.schema import (
    collect_schema_issues,
    validate_intention_payload,
)
from agentic_ui.domains.intention.value_objects import Intention, IntentionPurpose
from agentic_ui.domains.shared.kernel import ManifestationTraits, ResolutionPattern
from agentic_ui.domains.shared.results import (
    EventPublisher,
    ParseFailure,
    ParseResult,
)

from .events import IntentionRejected, IntentionResolved, PatternFallbackUsed
from .render import RenderInstructionBuilder
from .value_objects import (
    Manifestation,
    Resolution,
    ResolutionOutcome,
    ResolutionReasoning,
)

logger = logging.getLogger(__name__)


def _new_resolution_id() -> str:
    return str(uuid.uuid4())


def effective_constraints(
    intention: Intention,
    constraints: ConstraintSet,
    alert_raises_urgency: bool = False,
) -> ConstraintSet:
    """Constraints the intention is actually resolved under.

    With ``alert_raises_urgency`` an alert purpose lifts context urgency to
    at least HIGH. Otherwise the constraints pass through unchanged.
    """
    context = constraints.context
    if (
        alert_raises_urgency
        and intention.purpose is IntentionPurpose.ALERT
        and context.urgency.level < Urgency.HIGH.level
    ):
        return replace(constraints, context=replace(context, urgency=Urgency.HIGH))
    return constraints


@dataclass(frozen=True)
class _Candidate:
    """One pattern in the running, with the rules that shaped it."""
    pattern: ResolutionPattern
    traits: ManifestationTraits
    rules: Tuple[AffinityRule, ...]
    confidence: float
    variant: Optional[str]

    @property
    def lead_rule(self) -> Optional[AffinityRule]:
        for rule in self.rules:
            if not rule.is_modifier:
                return rule
        return None


@dataclass
class ResolutionEngine:
    """Resolves intentions into manifestations.

    This is the primary domain service. It:
    1. Rejects in-process intentions that break the wire schema
    2. Derives the effective constraints (alert purpose raises urgency
       when the settings opt in)
    3. Ranks every applicable affinity rule
    4. Picks the pattern of the best pattern-nominating rule, or the
       action's default pattern when none applies
    5. Scores every considered pattern and keeps close runners-up as
       alternatives
    6. Builds render instructions and returns an immutable Resolution

    The engine holds no per-call state; one instance may serve concurrent
    callers.

    Usage:

        engine = ResolutionEngine(AffinityRuleTable.with_builtins())
        outcome = engine.resolve(
            create_selection_intention(options, "Pick one"),
            with_mobile_device(ConstraintSet()),
        )
        resolution = outcome.resolution
        # resolution.pattern == ResolutionPattern.SELECTION
        # "touch-target" in resolution.manifestation.render.class_names
    """
    rule_table: AffinityRuleTable
    settings: ResolutionSettings = field(default_factory=ResolutionSettings)
    render_builder: RenderInstructionBuilder = field(
        default_factory=RenderInstructionBuilder
    )
    event_publisher: Optional[EventPublisher] = None
    id_factory: Callable[[], str] = _new_resolution_id
    clock: Callable[[], datetime] = datetime.now

    def resolve(
        self,
        intention: Intention,
        constraints: Optional[ConstraintSet] = None,
    ) -> ResolutionOutcome:
        """Resolve an in-process Intention. Never raises.

        Args:
            intention: What the user must accomplish
            constraints: Presentation limits; the default set when omitted

        Returns:
            ResolutionOutcome holding either the Resolution (chosen
            manifestation, reasoning and alternatives) or a SCHEMA_VIOLATION
            failure listing every bad field. An unknown action is not a
            failure: it degrades to the display pattern.
        """
        issues = collect_schema_issues(
            intention.to_dict(), allow_unknown_action=True,
        )
        if issues:
            return self._reject(ParseFailure.schema_violation(issues))
        resolution = self._resolve_valid(intention, constraints or ConstraintSet())
        return ResolutionOutcome(resolution=resolution)

    def resolve_payload(
        self,
        payload: Any,
        constraints: Optional[ConstraintSet] = None,
    ) -> ResolutionOutcome:
        """Validate untrusted JSON and resolve it. Never raises."""
        return self.resolve_result(validate_intention_payload(payload), constraints)

    def resolve_result(
        self,
        result: ParseResult,
        constraints: Optional[ConstraintSet] = None,
    ) -> ResolutionOutcome:
        """Resolve the output of a parser or the LLM adapter. Never raises."""
        if not result.success:
            return self._reject(result)
        resolution = self._resolve_valid(result.intention, constraints or ConstraintSet())
        return ResolutionOutcome(resolution=resolution, message=result.message)

    def _reject(self, failure: ParseFailure) -> ResolutionOutcome:
        self._publish(IntentionRejected(fields=failure.fields, error=failure.error))
        logger.info("Intention rejected: %s", failure.error)
        return ResolutionOutcome(failure=failure)

    def _resolve_valid(
        self, intention: Intention, constraints: ConstraintSet
    ) -> Resolution:
        resolution_id = self.id_factory()
        action = intention.action
        effective = effective_constraints(
            intention, constraints, self.settings.alert_raises_urgency,
        )
        default_pattern = action_to_pattern(action)
        fallback_used = intention.known_action is None

        # Step 1: Rank every applicable rule
        matches = find_matching_rules(action, effective, self.rule_table)
        modifiers = [rule for rule in matches if rule.is_modifier]
        nominating = [rule for rule in matches if not rule.is_modifier]

        # Step 2: The best nominating rule decides the pattern
        winner_pattern = nominating[0].pattern if nominating else default_pattern
        considered = sorted(
            {default_pattern, *(rule.pattern for rule in nominating)},
            key=lambda pattern: pattern.rank,
        )

        # Step 3: Score every considered pattern
        total = calculate_constraint_specificity(effective)
        candidates: Dict[ResolutionPattern, _Candidate] = {
            pattern: self._candidate(
                pattern, intention, effective, matches, default_pattern, total,
            )
            for pattern in considered
        }
        winner = candidates[winner_pattern]

        # Step 4: Close runners-up become alternatives
        runners_up = [
            candidate for pattern, candidate in candidates.items()
            if pattern is not winner_pattern
            and winner.confidence - candidate.confidence <= self.settings.alternative_margin
        ]
        runners_up.sort(key=lambda c: (-c.confidence, c.pattern.rank))

        # Step 5: Reasoning
        dominant = _dominant_dimensions(effective, matches)
        explanation = self._explain(
            intention, effective, constraints, winner, dominant, fallback_used,
        )
        reasoning = ResolutionReasoning(
            dominant_constraints=tuple(dominant),
            considered_patterns=tuple(considered),
            confidence=winner.confidence,
            explanation=explanation,
            applied_rules=tuple(rule.id for rule in winner.rules),
            fallback_used=fallback_used,
        )

        resolution = Resolution(
            manifestation=self._manifest(winner, intention, effective, resolution_id),
            reasoning=reasoning,
            alternatives=tuple(
                self._manifest(c, intention, effective, resolution_id)
                for c in runners_up
            ),
            source_intention=intention,
            applied_constraints=effective,
            id=resolution_id,
            timestamp=self.clock(),
        )

        # Step 6: Emit events
        if fallback_used:
            self._publish(PatternFallbackUsed(
                resolution_id=resolution_id,
                action=intention.action_name,
                fallback_pattern=default_pattern.value,
                reason="action is not in the intention vocabulary",
            ))
            logger.warning(
                "Unknown action %r resolved with the %s fallback",
                intention.action_name, default_pattern.value,
            )
        lead = winner.lead_rule
        self._publish(IntentionResolved(
            resolution_id=resolution_id,
            action=intention.action_name,
            pattern=winner.pattern.value,
            confidence=winner.confidence,
            rule_id=lead.id if lead else None,
            variant=winner.variant,
        ))
        logger.debug(
            "Resolved %s -> %s (confidence %.3f, rules: %s)",
            intention.action_name, winner.pattern.value, winner.confidence,
            ", ".join(reasoning.applied_rules) or "none",
        )
        return resolution

    def _candidate(
        self,
        pattern: ResolutionPattern,
        intention: Intention,
        constraints: ConstraintSet,
        matches: Sequence[AffinityRule],
        default_pattern: ResolutionPattern,
        total: float,
    ) -> _Candidate:
        """Traits, variant and confidence for one pattern.

        ``matches`` is ranked best first; overrides are applied lowest rank
        first so the best rule wins any disagreement.
        """
        rules = tuple(
            rule for rule in matches
            if rule.is_modifier or rule.pattern is pattern
        )
        if pattern is default_pattern:
            baseline = action_to_traits(intention.action)
        else:
            baseline = ManifestationTraits.for_pattern(pattern)
        traits = enhance_traits_for_constraints(
            baseline, *(rule.required_traits for rule in reversed(rules))
        )
        lead = next((rule for rule in rules if not rule.is_modifier), None)
        return _Candidate(
            pattern=pattern,
            traits=traits,
            rules=rules,
            confidence=self._confidence(constraints, rules, total),
            variant=lead.variant if lead else None,
        )

    def _confidence(
        self,
        constraints: ConstraintSet,
        rules: Sequence[AffinityRule],
        total: float,
    ) -> float:
        base = self.settings.base_confidence
        if total <= 0:
            return base
        referenced = {d for rule in rules for d in rule.dimensions}
        explained = sum(dimension_score(constraints, d) for d in referenced)
        score = base + (1.0 - base) * (explained / total)
        return min(1.0, max(0.0, score))

    def _manifest(
        self,
        candidate: _Candidate,
        intention: Intention,
        constraints: ConstraintSet,
        resolution_id: str,
    ) -> Manifestation:
        render = self.render_builder.build(
            candidate.pattern,
            candidate.traits,
            intention,
            constraints,
            resolution_id,
            candidate.variant,
        )
        return Manifestation(
            pattern=candidate.pattern,
            traits=candidate.traits,
            render=render,
            confidence=candidate.confidence,
            variant=candidate.variant,
        )

    def _explain(
        self,
        intention: Intention,
        effective: ConstraintSet,
        supplied: ConstraintSet,
        winner: _Candidate,
        dominant: Sequence[ConstraintDimension],
        fallback_used: bool,
    ) -> str:
        parts: List[str] = [
            f'Intent "{intention.action_name}" on "{intention.subject.label}"'
        ]
        if fallback_used:
            parts.append(
                f'Unrecognised action "{intention.action_name}", degraded to '
                f'the {winner.pattern.value} pattern'
            )
        if effective.context.urgency is not supplied.context.urgency:
            parts.append(
                f"Alert purpose raised urgency to {effective.context.urgency.value}"
            )
        lead = winner.lead_rule
        if lead is not None:
            parts.append(f'Matched rule "{lead.name}" (priority {lead.priority})')
        else:
            parts.append("No specific rule matched, using the default pattern")
        pattern_text = f'Resolved to pattern "{winner.pattern.value}"'
        if winner.variant:
            pattern_text += f' ({winner.variant})'
        parts.append(pattern_text)
        if dominant:
            shaped = ", ".join(
                f"{d.value}={_display_value(effective.value_of(d))}"
                for d in dominant
            )
            parts.append(f"Shaped by {shaped}")
        return ". ".join(parts) + "."

    def _publish(self, event: object) -> None:
        """Publish a domain event if a publisher is configured."""
        if self.event_publisher:
            self.event_publisher.publish(event)


def _dominant_dimensions(
    constraints: ConstraintSet, matches: Sequence[AffinityRule]
) -> List[ConstraintDimension]:
    """Non-default dimensions referenced by any matching rule, catalogue order."""
    referenced = {d for rule in matches for d in rule.dimensions}
    return [
        d for d in ConstraintDimension
        if d in referenced and not constraints.is_default(d)
    ]


def _display_value(value: Any) -> str:
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(getattr(value, "value", value))

