"""Unit tests for RenderInstructionBuilder.

Render output must be a pure function of its inputs and must only speak
in style, class, ARIA and data-attribute primitives.
"""

__test__ = True

from dataclasses import replace

import pytest

from agentic_ui.domains.constraint import (
    AccessibilityConstraints,
    ConstraintSet,
    Density,
    DesignSystemConstraints,
    DeviceConstraints,
    PointerType,
    with_compact_density,
    with_mobile_device,
)
from agentic_ui.domains.intention import (
    FlowContext,
    create_review_intention,
    create_text_input_intention,
)
from agentic_ui.domains.resolution import RenderInstructionBuilder, is_touch_context
from agentic_ui.domains.shared import (
    AriaRole,
    LiveRegion,
    ManifestationTraits,
    ResolutionPattern,
)


@pytest.fixture
def builder():
    return RenderInstructionBuilder()


@pytest.fixture
def text_intention():
    return create_text_input_intention("Your name", required=True, description="As on your ID")


def build(builder, intention, constraints=None, pattern=ResolutionPattern.INPUT,
          traits=None, variant=None):
    return builder.build(
        pattern,
        traits or ManifestationTraits.for_pattern(pattern),
        intention,
        constraints or ConstraintSet(),
        "res-1",
        variant,
    )


# =============================================================================
# Touch context
# =============================================================================


class TestTouchContext:
    """Test is_touch_context."""

    def test_desktop_is_not_touch(self):
        assert not is_touch_context(ConstraintSet())

    def test_mobile_is_touch(self):
        assert is_touch_context(with_mobile_device(ConstraintSet()))

    def test_coarse_pointer_alone_is_touch(self):
        c = ConstraintSet(device=DeviceConstraints(pointer_type=PointerType.COARSE))
        assert is_touch_context(c)


# =============================================================================
# Styles and classes
# =============================================================================


class TestStyles:
    """Test base style and class derivation."""

    def test_always_flex_column(self, builder, text_intention):
        render = build(builder, text_intention)
        assert render.styles["display"] == "flex"
        assert render.class_names[:3] == ("flex", "flex-col", "pattern-input")

    def test_contained_gets_border(self, builder, text_intention):
        render = build(builder, text_intention)
        assert render.styles["borderWidth"] == "1px"
        assert "border" in render.class_names

    def test_high_contrast_strengthens_border(self, builder, text_intention):
        c = ConstraintSet(accessibility=AccessibilityConstraints(high_contrast=True))
        render = build(builder, text_intention, c)
        assert render.styles["borderWidth"] == "2px"
        assert render.styles["borderColor"] == "var(--color-border-strong)"
        assert "border-2" in render.class_names

    def test_uncontained_has_no_border(self, builder, text_intention):
        traits = replace(
            ManifestationTraits.for_pattern(ResolutionPattern.INPUT), contained=False,
        )
        render = build(builder, text_intention, traits=traits)
        assert "borderWidth" not in render.styles
        assert "border" not in render.class_names

    def test_elevated_gets_shadow(self, builder, text_intention):
        render = build(builder, text_intention, pattern=ResolutionPattern.FLOW)
        assert render.styles["boxShadow"] == "var(--shadow-md)"
        assert "shadow-md" in render.class_names

    @pytest.mark.parametrize("density,padding_class", [
        (Density.COMPACT, "p-2"),
        (Density.DEFAULT, "p-4"),
        (Density.SPACIOUS, "p-6"),
    ])
    def test_density_spacing(self, builder, text_intention, density, padding_class):
        c = ConstraintSet(design_system=DesignSystemConstraints(density=density))
        render = build(builder, text_intention, c)
        assert padding_class in render.class_names

    def test_tokens_are_used_when_present(self, builder, text_intention):
        c = ConstraintSet(design_system=DesignSystemConstraints(
            tokens={"color.background.surface": "#fafafa"},
        ))
        render = build(builder, text_intention, c)
        assert render.styles["backgroundColor"] == "#fafafa"

    def test_touch_target(self, builder, text_intention):
        render = build(builder, text_intention, with_mobile_device(ConstraintSet()))
        assert render.styles["minHeight"] == "48px"
        assert "touch-target" in render.class_names
        assert "min-h-[48px]" in render.class_names

    def test_pointer_target_for_interactive(self, builder, text_intention):
        render = build(builder, text_intention)
        assert render.styles["minHeight"] == "44px"
        assert "touch-target" not in render.class_names

    def test_display_has_no_min_height_on_desktop(self, builder):
        intention = create_review_intention({}, "Summary")
        render = build(builder, intention, pattern=ResolutionPattern.DISPLAY)
        assert "minHeight" not in render.styles

    def test_reduced_motion(self, builder, text_intention):
        c = ConstraintSet(accessibility=AccessibilityConstraints(reduced_motion=True))
        render = build(builder, text_intention, c)
        assert "motion-reduce:transition-none" in render.class_names
        assert "transition-colors" not in render.class_names
        assert render.animation is None

    def test_selection_is_not_text_selectable(self, builder, text_intention):
        render = build(builder, text_intention, pattern=ResolutionPattern.SELECTION)
        assert "select-none" in render.class_names

    def test_compact_radius(self, builder, text_intention):
        render = build(builder, text_intention, with_compact_density(ConstraintSet()))
        assert render.styles["borderRadius"] == "var(--radius-sm)"
        assert "rounded-sm" in render.class_names

    def test_states_present(self, builder, text_intention):
        render = build(builder, text_intention)
        assert set(render.states) == {"hover", "focus", "active", "disabled", "selected"}


# =============================================================================
# ARIA
# =============================================================================


class TestAria:
    """Test ARIA attribute derivation."""

    def test_role_label_description_required(self, builder, text_intention):
        aria = build(builder, text_intention).aria
        assert aria["role"] == "textbox"
        assert aria["aria-label"] == "Your name"
        assert aria["aria-description"] == "As on your ID"
        assert aria["aria-required"] is True
        assert "aria-disabled" not in aria

    def test_presentational_role_omitted(self, builder, text_intention):
        traits = replace(
            ManifestationTraits.for_pattern(ResolutionPattern.INPUT),
            role=AriaRole.PRESENTATION,
        )
        assert "role" not in build(builder, text_intention, traits=traits).aria

    def test_live_region(self, builder, text_intention):
        traits = ManifestationTraits.for_pattern(ResolutionPattern.FEEDBACK)
        aria = build(builder, text_intention, traits=traits,
                     pattern=ResolutionPattern.FEEDBACK).aria
        assert aria["aria-live"] == "polite"

    def test_live_region_off_is_omitted(self, builder, text_intention):
        traits = replace(
            ManifestationTraits.for_pattern(ResolutionPattern.FEEDBACK),
            live_region=LiveRegion.OFF,
        )
        aria = build(builder, text_intention, traits=traits,
                     pattern=ResolutionPattern.FEEDBACK).aria
        assert "aria-live" not in aria

    def test_non_interactive_is_disabled(self, builder):
        intention = create_review_intention({}, "Summary")
        aria = build(builder, intention, pattern=ResolutionPattern.DISPLAY).aria
        assert aria["aria-disabled"] is True
        assert "aria-required" not in aria


# =============================================================================
# Data attributes and animation
# =============================================================================


class TestDataAttributes:
    """Test data-* attributes."""

    def test_core_attributes(self, builder, text_intention):
        data = build(builder, text_intention, variant="multiline").data_attributes
        assert data == {
            "data-pattern": "input",
            "data-resolution-id": "res-1",
            "data-theme": "light",
            "data-density": "default",
            "data-action": "provide-text",
            "data-variant": "multiline",
        }

    def test_brand_and_flow(self, builder, text_intention):
        intention = replace(
            text_intention, flow=FlowContext(id="signup", sequence=2, total_steps=4),
        )
        c = ConstraintSet(design_system=DesignSystemConstraints(brand_variant="acme"))
        data = build(builder, intention, c).data_attributes
        assert data["data-brand"] == "acme"
        assert data["data-flow-id"] == "signup"
        assert data["data-flow-step"] == "2"
        assert data["data-flow-total"] == "4"


class TestAnimation:
    """Test animation hints."""

    def test_default_duration(self, builder, text_intention):
        animation = build(builder, text_intention).animation
        assert animation.duration_ms == 200
        assert animation.to_dict() == {"enter": "fade-in", "exit": "fade-out", "duration": 200}

    def test_duration_from_token(self, builder, text_intention):
        c = ConstraintSet(design_system=DesignSystemConstraints(
            tokens={"transition.duration.normal": "150ms"},
        ))
        assert build(builder, text_intention, c).animation.duration_ms == 150

    def test_numeric_duration_token(self, builder, text_intention):
        c = ConstraintSet(design_system=DesignSystemConstraints(
            tokens={"transition.duration.normal": 150},
        ))
        assert build(builder, text_intention, c).animation.duration_ms == 150

    def test_unparsable_token_uses_default(self, builder, text_intention):
        c = ConstraintSet(design_system=DesignSystemConstraints(
            tokens={"transition.duration.normal": "fast"},
        ))
        assert build(builder, text_intention, c).animation.duration_ms == 200


class TestDeterminism:
    """Identical inputs give identical instructions."""

    def test_same_inputs_equal_output(self, builder, text_intention):
        c = with_mobile_device(ConstraintSet())
        assert build(builder, text_intention, c) == build(builder, text_intention, c)

    def test_to_dict(self, builder, text_intention):
        data = build(builder, text_intention).to_dict()
        assert set(data) == {
            "styles", "states", "classNames", "aria", "dataAttributes", "animation",
        }
