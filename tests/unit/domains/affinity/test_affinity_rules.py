"""Unit tests for the Affinity context.

Tests cover: ConstraintCondition, AffinityRule, AffinityRuleTable
invariants and built-ins, action baselines, and rule ranking.

Run with: uv run pytest tests/unit/domains/affinity/ -v
"""

__test__ = True

import pytest

from agentic_ui.domains.affinity import (
    AffinityRule,
    AffinityRuleTable,
    ConstraintCondition,
    action_to_pattern,
    action_to_traits,
    enhance_traits_for_constraints,
    find_best_rule,
    find_matching_rules,
)
from agentic_ui.domains.constraint import (
    AvailableSpace,
    ConstraintDimension,
    ConstraintSet,
    ContextConstraints,
    Density,
    Urgency,
    ViewportClass,
    with_available_space,
    with_compact_density,
    with_high_urgency,
    with_mobile_device,
    with_screen_reader,
)
from agentic_ui.domains.intention import IntentionAction
from agentic_ui.domains.shared import (
    AriaRole,
    LiveRegion,
    ManifestationTraits,
    ResolutionPattern,
    TraitOverrides,
)


def make_rule(rule_id="r1", **overrides):
    kwargs = dict(
        id=rule_id,
        name=rule_id,
        conditions=(
            ConstraintCondition.one_of(ConstraintDimension.VIEWPORT, ViewportClass.MOBILE),
        ),
        pattern=ResolutionPattern.SELECTION,
    )
    kwargs.update(overrides)
    return AffinityRule(**kwargs)


# =============================================================================
# ConstraintCondition
# =============================================================================


class TestConstraintCondition:
    """Test single-dimension predicates."""

    def test_one_of_matches(self):
        cond = ConstraintCondition.one_of(ConstraintDimension.URGENCY, Urgency.HIGH, Urgency.CRITICAL)
        assert cond.matches(with_high_urgency(ConstraintSet()))
        assert not cond.matches(ConstraintSet())

    def test_minimum_matches(self):
        cond = ConstraintCondition.minimum(ConstraintDimension.NESTING_LEVEL, 2)
        assert not cond.matches(ConstraintSet(context=ContextConstraints(nesting_level=1)))
        assert cond.matches(ConstraintSet(context=ContextConstraints(nesting_level=2)))

    def test_needs_exactly_one_form(self):
        with pytest.raises(ValueError):
            ConstraintCondition(dimension=ConstraintDimension.VIEWPORT)
        with pytest.raises(ValueError):
            ConstraintCondition(
                dimension=ConstraintDimension.NESTING_LEVEL,
                values=frozenset({1}),
                at_least=1,
            )

    def test_minimum_rejected_for_boolean_dimension(self):
        with pytest.raises(ValueError):
            ConstraintCondition.minimum(ConstraintDimension.SCREEN_READER, 1)

    def test_excludes_default(self):
        assert ConstraintCondition.one_of(ConstraintDimension.SCREEN_READER, True).excludes_default
        assert not ConstraintCondition.one_of(
            ConstraintDimension.DENSITY, Density.DEFAULT, Density.COMPACT,
        ).excludes_default
        assert not ConstraintCondition.minimum(ConstraintDimension.NESTING_LEVEL, 0).excludes_default

    def test_describe(self):
        cond = ConstraintCondition.one_of(ConstraintDimension.URGENCY, Urgency.CRITICAL, Urgency.HIGH)
        assert cond.describe() == "urgency=critical|high"
        assert ConstraintCondition.minimum(
            ConstraintDimension.NESTING_LEVEL, 2
        ).describe() == "nesting-level>=2"


# =============================================================================
# AffinityRule
# =============================================================================


class TestAffinityRule:
    """Test rule entities."""

    def test_empty_id_rejected(self):
        with pytest.raises(ValueError):
            make_rule(rule_id="")

    def test_no_conditions_rejected(self):
        with pytest.raises(ValueError):
            make_rule(conditions=())

    def test_empty_actions_handles_everything(self):
        rule = make_rule()
        assert rule.handles(IntentionAction.CONFIRM)
        assert rule.handles("teleport")

    def test_restricted_actions(self):
        rule = make_rule(actions=frozenset({IntentionAction.CHOOSE_ONE}))
        assert rule.handles(IntentionAction.CHOOSE_ONE)
        assert not rule.handles(IntentionAction.CHOOSE_MANY)
        assert not rule.handles("teleport")

    def test_applies_to_requires_all_conditions(self):
        rule = make_rule(conditions=(
            ConstraintCondition.one_of(ConstraintDimension.VIEWPORT, ViewportClass.MOBILE),
            ConstraintCondition.one_of(ConstraintDimension.SCREEN_READER, True),
        ))
        mobile = with_mobile_device(ConstraintSet())
        assert not rule.applies_to(IntentionAction.CHOOSE_ONE, mobile)
        assert rule.applies_to(IntentionAction.CHOOSE_ONE, with_screen_reader(mobile))

    def test_declared_specificity_sums_weights(self):
        rule = make_rule(conditions=(
            ConstraintCondition.one_of(ConstraintDimension.VIEWPORT, ViewportClass.MOBILE),
            ConstraintCondition.one_of(ConstraintDimension.SCREEN_READER, True),
        ))
        assert rule.declared_specificity == 5.0
        assert rule.dimensions == [
            ConstraintDimension.VIEWPORT, ConstraintDimension.SCREEN_READER,
        ]

    def test_modifier(self):
        assert make_rule(pattern=None).is_modifier
        assert not make_rule().is_modifier


# =============================================================================
# AffinityRuleTable
# =============================================================================


class TestAffinityRuleTable:
    """Test the aggregate's invariants."""

    def test_register_and_get(self):
        table = AffinityRuleTable()
        rule = make_rule()
        table.register(rule)
        assert table.get("r1") is rule
        assert "r1" in table
        assert len(table) == 1

    def test_duplicate_id_rejected(self):
        table = AffinityRuleTable()
        table.register(make_rule())
        with pytest.raises(ValueError, match="Duplicate"):
            table.register(make_rule())

    def test_rule_matching_defaults_rejected(self):
        table = AffinityRuleTable()
        rule = make_rule(conditions=(
            ConstraintCondition.one_of(
                ConstraintDimension.VIEWPORT, ViewportClass.DESKTOP, ViewportClass.MOBILE,
            ),
        ))
        with pytest.raises(ValueError, match="default constraint set"):
            table.register(rule)

    def test_frozen_table_rejects_registration(self):
        table = AffinityRuleTable().freeze()
        assert table.is_frozen
        with pytest.raises(ValueError, match="frozen"):
            table.register(make_rule())

    def test_from_rules_freezes(self):
        table = AffinityRuleTable.from_rules([make_rule("a"), make_rule("b")])
        assert table.is_frozen
        assert [r.id for r in table] == ["a", "b"]
        assert table.position_of(table.get("b")) == 1

    def test_get_missing(self):
        assert AffinityRuleTable().get("nope") is None


class TestBuiltins:
    """Test the built-in rule set."""

    def test_frozen(self, rule_table):
        assert rule_table.is_frozen

    def test_ids_unique(self, rule_table):
        ids = [rule.id for rule in rule_table]
        assert len(ids) == len(set(ids))

    def test_no_rule_matches_default_constraints(self, rule_table):
        for action in IntentionAction:
            assert find_matching_rules(action, ConstraintSet(), rule_table) == []

    def test_every_rule_has_positive_specificity(self, rule_table):
        for rule in rule_table:
            assert rule.declared_specificity > 0

    def test_modifiers_have_no_variant(self, rule_table):
        for rule in rule_table:
            if rule.is_modifier:
                assert rule.variant is None
                assert not rule.actions

    @pytest.mark.parametrize("rule_id", [
        "selection-touch-buttons", "selection-inline-pills",
        "confirmation-dialog", "alert-assertive", "onboarding-step",
        "inline-flatten", "nested-flatten",
    ])
    def test_expected_rules_present(self, rule_table, rule_id):
        assert rule_id in rule_table


# =============================================================================
# Action baselines
# =============================================================================


class TestActionBaselines:
    """Test action_to_pattern and action_to_traits."""

    @pytest.mark.parametrize("action,pattern", [
        (IntentionAction.CHOOSE_ONE, ResolutionPattern.SELECTION),
        (IntentionAction.CHOOSE_MANY, ResolutionPattern.SELECTION),
        (IntentionAction.PROVIDE_TEXT, ResolutionPattern.INPUT),
        (IntentionAction.PROVIDE_DATA, ResolutionPattern.INPUT),
        (IntentionAction.CONFIRM, ResolutionPattern.ACTION),
        (IntentionAction.ACKNOWLEDGE, ResolutionPattern.ACTION),
        (IntentionAction.NAVIGATE, ResolutionPattern.ACTION),
        (IntentionAction.REVIEW, ResolutionPattern.DISPLAY),
        (IntentionAction.WAIT, ResolutionPattern.DISPLAY),
        (IntentionAction.ALERT, ResolutionPattern.FEEDBACK),
    ])
    def test_action_to_pattern(self, action, pattern):
        assert action_to_pattern(action) is pattern

    def test_unknown_action_falls_back_to_display(self):
        assert action_to_pattern("teleport") is ResolutionPattern.DISPLAY
        assert action_to_traits("teleport") == ManifestationTraits.for_pattern(
            ResolutionPattern.DISPLAY
        )

    def test_multi_select_is_group(self):
        assert action_to_traits(IntentionAction.CHOOSE_MANY).role is AriaRole.GROUP

    def test_wait_is_polite_status(self):
        traits = action_to_traits(IntentionAction.WAIT)
        assert traits.role is AriaRole.STATUS
        assert traits.live_region is LiveRegion.POLITE
        assert not traits.interactive

    def test_navigate_is_link(self):
        traits = action_to_traits(IntentionAction.NAVIGATE)
        assert traits.role is AriaRole.LINK
        assert not traits.contained

    def test_every_action_has_interactive_baseline_except_display(self):
        for action in IntentionAction:
            traits = action_to_traits(action)
            expected = action_to_pattern(action) not in (
                ResolutionPattern.DISPLAY, ResolutionPattern.FEEDBACK,
            )
            assert traits.interactive is expected, action

    def test_enhance_applies_in_order(self):
        base = ManifestationTraits.for_pattern(ResolutionPattern.SELECTION)
        traits = enhance_traits_for_constraints(
            base,
            TraitOverrides(elevated=True, role=AriaRole.LISTBOX),
            TraitOverrides(elevated=False),
        )
        assert traits.elevated is False
        assert traits.role is AriaRole.LISTBOX
        assert traits.interactive is base.interactive


# =============================================================================
# Matching and ranking
# =============================================================================


class TestMatching:
    """Test find_matching_rules and find_best_rule."""

    def test_mobile_choose_one(self, rule_table):
        matches = find_matching_rules(
            IntentionAction.CHOOSE_ONE, with_mobile_device(ConstraintSet()), rule_table,
        )
        assert [r.id for r in matches] == ["selection-touch-buttons", "touch-pointer"]

    def test_best_rule_skips_modifiers(self, rule_table):
        c = with_available_space(ConstraintSet(), AvailableSpace.INLINE)
        best = find_best_rule(IntentionAction.REVIEW, c, rule_table)
        assert best is None
        matches = find_matching_rules(IntentionAction.REVIEW, c, rule_table)
        assert [r.id for r in matches] == ["inline-flatten"]

    def test_priority_wins(self, rule_table):
        c = with_available_space(with_high_urgency(ConstraintSet()), AvailableSpace.INLINE)
        best = find_best_rule(IntentionAction.CONFIRM, c, rule_table)
        assert best.id == "confirmation-dialog"

    def test_specificity_breaks_priority_ties(self):
        broad = make_rule(
            "broad",
            conditions=(ConstraintCondition.one_of(ConstraintDimension.DENSITY, Density.COMPACT),),
            priority=5,
        )
        narrow = make_rule(
            "narrow",
            conditions=(ConstraintCondition.one_of(ConstraintDimension.SCREEN_READER, True),),
            priority=5,
        )
        table = AffinityRuleTable.from_rules([broad, narrow])
        c = with_screen_reader(with_compact_density(ConstraintSet()))
        assert [r.id for r in find_matching_rules("choose-one", c, table)] == [
            "narrow", "broad",
        ]

    def test_insertion_order_breaks_full_ties(self):
        first = make_rule("first", priority=5)
        second = make_rule("second", priority=5)
        table = AffinityRuleTable.from_rules([first, second])
        c = with_mobile_device(ConstraintSet())
        assert [r.id for r in find_matching_rules("choose-one", c, table)] == [
            "first", "second",
        ]

    def test_ranking_is_deterministic(self, rule_table):
        c = with_compact_density(with_available_space(
            with_mobile_device(ConstraintSet()), AvailableSpace.INLINE,
        ))
        runs = {
            tuple(r.id for r in find_matching_rules(IntentionAction.CHOOSE_ONE, c, rule_table))
            for _ in range(5)
        }
        assert len(runs) == 1
