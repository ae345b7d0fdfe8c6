"""Affinity Bounded Context.

Declarative rules that say which pattern emerges when an action meets a
given set of constraints, and the matching services that rank them.
"""
from .value_objects import ConstraintCondition
from .entities import AffinityRule
from .aggregates import AffinityRuleTable
from .services import (
    action_to_pattern, action_to_traits, enhance_traits_for_constraints,
    find_best_rule, find_matching_rules, rule_rank_key,
)

__all__ = [
    "ConstraintCondition", "AffinityRule", "AffinityRuleTable",
    "action_to_pattern", "action_to_traits",
    "enhance_traits_for_constraints", "find_best_rule",
    "find_matching_rules", "rule_rank_key",
]
