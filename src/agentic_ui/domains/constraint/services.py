"""Constraint Domain Services.

Specificity scoring and the modifier helpers that derive new constraint
sets from existing ones. Everything here is pure.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List

from .value_objects import (
    AvailableSpace,
    ConstraintDimension,
    ConstraintSet,
    Density,
    InputMethod,
    PointerType,
    Theme,
    Urgency,
    ViewportClass,
)


def active_dimensions(constraints: ConstraintSet) -> List[ConstraintDimension]:
    """Dimensions whose value differs from the default, in catalogue order."""
    return [d for d in ConstraintDimension if not constraints.is_default(d)]


def dimension_score(
    constraints: ConstraintSet, dimension: ConstraintDimension
) -> float:
    """Contribution of one dimension to the specificity of ``constraints``."""
    if constraints.is_default(dimension):
        return 0.0
    if dimension is ConstraintDimension.NESTING_LEVEL:
        return dimension.weight * constraints.context.nesting_level
    return dimension.weight


def calculate_constraint_specificity(constraints: ConstraintSet) -> float:
    """How narrowly ``constraints`` pins down the presentation.

    The sum of the weights of every non-default dimension; nesting level
    counts once per level. The default set scores 0, and adding a
    non-default dimension always increases the score.
    """
    return sum(dimension_score(constraints, d) for d in ConstraintDimension)


def with_mobile_device(constraints: ConstraintSet) -> ConstraintSet:
    """Same set, on a touch-driven phone."""
    return replace(
        constraints,
        device=replace(
            constraints.device,
            viewport_class=ViewportClass.MOBILE,
            pointer_type=PointerType.COARSE,
            input_method=InputMethod.TOUCH,
        ),
    )


def with_screen_reader(constraints: ConstraintSet) -> ConstraintSet:
    return replace(
        constraints,
        accessibility=replace(constraints.accessibility, screen_reader=True),
    )


def with_high_urgency(constraints: ConstraintSet) -> ConstraintSet:
    return with_urgency(constraints, Urgency.HIGH)


def with_urgency(constraints: ConstraintSet, urgency: Urgency) -> ConstraintSet:
    return replace(constraints, context=replace(constraints.context, urgency=urgency))


def with_compact_density(constraints: ConstraintSet) -> ConstraintSet:
    return replace(
        constraints,
        design_system=replace(constraints.design_system, density=Density.COMPACT),
    )


def with_dark_theme(constraints: ConstraintSet) -> ConstraintSet:
    return replace(
        constraints,
        design_system=replace(constraints.design_system, theme=Theme.DARK),
    )


def with_available_space(
    constraints: ConstraintSet, space: AvailableSpace
) -> ConstraintSet:
    return replace(
        constraints,
        context=replace(constraints.context, available_space=space),
    )
