"""Constraint Bounded Context.

What limits the presentation of an intention: device capabilities,
accessibility needs, design-system settings and situational context, plus
the specificity score the resolution engine uses to weigh them.
"""
from .value_objects import (
    AccessibilityConstraints, AvailableSpace, ConnectionQuality,
    ConstraintDimension, ConstraintSet, ContextConstraints, Density,
    DesignSystemConstraints, DeviceConstraints, InputMethod, JourneyPhase,
    Orientation, PointerType, Theme, Urgency, ViewportClass, WcagLevel,
)
from .services import (
    active_dimensions, calculate_constraint_specificity, dimension_score,
    with_available_space, with_compact_density, with_dark_theme,
    with_high_urgency, with_mobile_device, with_screen_reader, with_urgency,
)

__all__ = [
    "AccessibilityConstraints", "AvailableSpace", "ConnectionQuality",
    "ConstraintDimension", "ConstraintSet", "ContextConstraints", "Density",
    "DesignSystemConstraints", "DeviceConstraints", "InputMethod",
    "JourneyPhase", "Orientation", "PointerType", "Theme", "Urgency",
    "ViewportClass", "WcagLevel",
    "active_dimensions", "calculate_constraint_specificity",
    "dimension_score", "with_available_space", "with_compact_density",
    "with_dark_theme", "with_high_urgency", "with_mobile_device",
    "with_screen_reader", "with_urgency",
]
