"""Render instruction builder.

Turns a pattern and its final traits into neutral style, ARIA and data
attribute instructions. It speaks only in style and ARIA primitives and
never special-cases a concrete component.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional

from agentic_ui.domains.constraint.value_objects import (
    ConstraintSet,
    Density,
    PointerType,
    ViewportClass,
)
from agentic_ui.domains.intention.value_objects import Intention
from agentic_ui.domains.shared.kernel import (
    LiveRegion,
    ManifestationTraits,
    ResolutionPattern,
)

from .value_objects import AnimationSpec, AriaValue, RenderInstructions, StyleMap

# Density → (padding token, gap token, padding class, gap class)
_DENSITY_SPACING = {
    Density.COMPACT: ("spacing.tight", "spacing.tight", "p-2", "gap-2"),
    Density.DEFAULT: ("spacing.comfortable", "spacing.base", "p-4", "gap-3"),
    Density.SPACIOUS: ("spacing.spacious", "spacing.comfortable", "p-6", "gap-4"),
}

_DURATION_RE = re.compile(r"^\s*(\d+)\s*(ms)?\s*$")


def is_touch_context(constraints: ConstraintSet) -> bool:
    """True on a mobile viewport or with a coarse pointer."""
    return (
        constraints.device.viewport_class is ViewportClass.MOBILE
        or constraints.device.pointer_type is PointerType.COARSE
    )


@dataclass
class RenderInstructionBuilder:
    """Builds RenderInstructions deterministically.

    The same (pattern, traits, intention, constraints, resolution id)
    always yields an equal result.

    Attributes:
        touch_target_height: Minimum height on touch devices
        pointer_target_height: Minimum height for interactive forms
            elsewhere
        default_duration_ms: Animation duration when the
            ``transition.duration.normal`` token is absent or unparsable
    """
    touch_target_height: str = "48px"
    pointer_target_height: str = "44px"
    default_duration_ms: int = 200

    def build(
        self,
        pattern: ResolutionPattern,
        traits: ManifestationTraits,
        intention: Intention,
        constraints: ConstraintSet,
        resolution_id: str,
        variant: Optional[str] = None,
    ) -> RenderInstructions:
        return RenderInstructions(
            styles=self._base_styles(pattern, traits, constraints),
            states=self._state_styles(constraints),
            class_names=tuple(self._class_names(pattern, traits, constraints)),
            aria=self._aria(traits, intention),
            data_attributes=self._data_attributes(
                pattern, intention, constraints, resolution_id, variant,
            ),
            animation=self._animation(constraints),
        )

    def _base_styles(
        self,
        pattern: ResolutionPattern,
        traits: ManifestationTraits,
        constraints: ConstraintSet,
    ) -> StyleMap:
        design = constraints.design_system
        token = design.token
        styles: StyleMap = {"display": "flex", "flexDirection": "column"}

        if traits.contained:
            styles["backgroundColor"] = token("color.background.surface")
            styles["borderRadius"] = token(
                "radius.sm" if design.density is Density.COMPACT else "radius.md"
            )
            styles["borderWidth"] = "2px" if constraints.accessibility.high_contrast else "1px"
            styles["borderStyle"] = "solid"
            styles["borderColor"] = token(
                "color.border.strong"
                if constraints.accessibility.high_contrast
                else "color.border.default"
            )
        if traits.elevated:
            styles["boxShadow"] = token("shadow.md")

        padding, gap, _, _ = _DENSITY_SPACING[design.density]
        styles["padding"] = token(padding)
        styles["gap"] = token(gap)

        styles["fontFamily"] = token("typography.font-family.sans")
        styles["fontSize"] = token(
            "typography.font-size.large"
            if constraints.accessibility.large_text
            else "typography.font-size.base"
        )
        styles["lineHeight"] = token("typography.line-height.normal")
        styles["color"] = token("color.text.primary")

        if traits.emphasized:
            styles["fontWeight"] = token("typography.font-weight.semibold")
            styles["color"] = token("color.text.emphasis")

        if is_touch_context(constraints):
            styles["minHeight"] = self.touch_target_height
        elif traits.interactive and pattern is not ResolutionPattern.DISPLAY:
            styles["minHeight"] = self.pointer_target_height

        if traits.interactive:
            styles["cursor"] = "pointer"
        return styles

    def _state_styles(self, constraints: ConstraintSet) -> Dict[str, StyleMap]:
        token = constraints.design_system.token
        return {
            "hover": {
                "backgroundColor": token("color.background.surface-hover"),
                "borderColor": token("color.border.strong"),
            },
            "focus": {
                "borderColor": token("color.border.focus"),
                "outlineStyle": "solid",
                "outlineWidth": "3px",
                "outlineColor": token("color.border.focus"),
            },
            "active": {
                "backgroundColor": token("color.background.surface-active"),
            },
            "disabled": {
                "opacity": 0.5,
                "cursor": "not-allowed",
            },
            "selected": {
                "backgroundColor": token("color.background.accent-subtle"),
                "borderColor": token("color.border.accent"),
            },
        }

    def _class_names(
        self,
        pattern: ResolutionPattern,
        traits: ManifestationTraits,
        constraints: ConstraintSet,
    ) -> List[str]:
        density = constraints.design_system.density
        classes = ["flex", "flex-col", f"pattern-{pattern.value}"]

        if traits.contained:
            classes.extend(["bg-surface", "border", "border-default"])
            classes.append("rounded-sm" if density is Density.COMPACT else "rounded-md")
            if constraints.accessibility.high_contrast:
                classes.append("border-2")

        _, _, padding_class, gap_class = _DENSITY_SPACING[density]
        classes.extend([padding_class, gap_class])

        if traits.elevated:
            classes.append("shadow-md")
        if traits.emphasized:
            classes.append("font-semibold")
        if traits.interactive:
            classes.extend(["cursor-pointer", "hover:bg-surface-hover", "hover:border-strong"])
        if traits.focusable:
            classes.extend(["focus:outline-none", "focus:ring-2", "focus:ring-focus"])
        if constraints.accessibility.large_text:
            classes.append("text-lg")

        if is_touch_context(constraints):
            classes.extend(["touch-target", "min-h-[48px]"])

        if constraints.accessibility.reduced_motion:
            classes.append("motion-reduce:transition-none")
        else:
            classes.extend(["transition-colors", "duration-200"])

        if pattern is ResolutionPattern.SELECTION:
            classes.append("select-none")
        elif pattern is ResolutionPattern.FEEDBACK and traits.live_region is LiveRegion.ASSERTIVE:
            classes.extend(["border-error", "bg-error-light"])
        return classes

    def _aria(
        self, traits: ManifestationTraits, intention: Intention
    ) -> Dict[str, AriaValue]:
        subject = intention.subject
        aria: Dict[str, AriaValue] = {}
        if not traits.role.is_presentational:
            aria["role"] = traits.role.value
        aria["aria-label"] = subject.label
        if subject.description:
            aria["aria-description"] = subject.description
        if traits.live_region is not None and traits.live_region is not LiveRegion.OFF:
            aria["aria-live"] = traits.live_region.value
        if subject.is_required:
            aria["aria-required"] = True
        if not traits.interactive:
            aria["aria-disabled"] = True
        return aria

    def _data_attributes(
        self,
        pattern: ResolutionPattern,
        intention: Intention,
        constraints: ConstraintSet,
        resolution_id: str,
        variant: Optional[str],
    ) -> Dict[str, str]:
        design = constraints.design_system
        data = {
            "data-pattern": pattern.value,
            "data-resolution-id": resolution_id,
            "data-theme": design.theme.value,
            "data-density": design.density.value,
            "data-action": intention.action_name,
        }
        if variant is not None:
            data["data-variant"] = variant
        if design.brand_variant is not None:
            data["data-brand"] = design.brand_variant
        flow = intention.flow
        if flow is not None:
            data["data-flow-id"] = flow.id
            if flow.sequence is not None:
                data["data-flow-step"] = str(flow.sequence)
            if flow.total_steps is not None:
                data["data-flow-total"] = str(flow.total_steps)
        return data

    def _animation(self, constraints: ConstraintSet) -> Optional[AnimationSpec]:
        if constraints.accessibility.reduced_motion:
            return None
        raw = constraints.design_system.tokens.get("transition.duration.normal", "")
        match = _DURATION_RE.match(str(raw))
        duration = int(match.group(1)) if match else self.default_duration_ms
        return AnimationSpec(enter="fade-in", exit="fade-out", duration_ms=duration)
