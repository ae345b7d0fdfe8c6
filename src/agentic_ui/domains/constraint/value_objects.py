"""Constraint Domain Value Objects.

Immutable descriptions of the device, accessibility, design-system and
context limits an intention must resolve within. A ConstraintSet is
constructed fresh for every resolution call and never mutated.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from agentic_ui.domains.shared.kernel import ensure_exhaustive


class ViewportClass(str, Enum):
    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"


class PointerType(str, Enum):
    FINE = "fine"
    COARSE = "coarse"
    NONE = "none"


class InputMethod(str, Enum):
    KEYBOARD = "keyboard"
    TOUCH = "touch"
    VOICE = "voice"


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class ConnectionQuality(str, Enum):
    SLOW = "slow"
    FAST = "fast"
    OFFLINE = "offline"


class WcagLevel(str, Enum):
    A = "A"
    AA = "AA"
    AAA = "AAA"


class Density(str, Enum):
    COMPACT = "compact"
    DEFAULT = "default"
    SPACIOUS = "spacious"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def level(self) -> int:
        """Ordinal, so urgencies can be compared (LOW=0 .. CRITICAL=3)."""
        return list(Urgency).index(self)


class JourneyPhase(str, Enum):
    ONBOARDING = "onboarding"
    ACTIVE = "active"
    CRITICAL = "critical"
    REVIEW = "review"


class AvailableSpace(str, Enum):
    INLINE = "inline"
    CONTAINED = "contained"
    FULLSCREEN = "fullscreen"


@dataclass(frozen=True)
class DeviceConstraints:
    """Physical capabilities of the device.

    Orientation and connection are unset (None) unless the host reports them.
    """
    viewport_class: ViewportClass = ViewportClass.DESKTOP
    pointer_type: PointerType = PointerType.FINE
    input_method: InputMethod = InputMethod.KEYBOARD
    orientation: Optional[Orientation] = None
    connection: Optional[ConnectionQuality] = None


@dataclass(frozen=True)
class AccessibilityConstraints:
    """User accessibility needs and preferences."""
    screen_reader: bool = False
    high_contrast: bool = False
    reduced_motion: bool = False
    large_text: bool = False
    voice_control: bool = False
    wcag_level: WcagLevel = WcagLevel.AA


@dataclass(frozen=True)
class DesignSystemConstraints:
    """Design-system settings.

    Attributes:
        density: Spacing preference
        theme: Colour scheme
        brand_variant: Multi-brand selector, opaque
        tokens: Design-token values keyed by dotted token name
            ("color.background.surface"). Opaque to the engine; read-only.
    """
    density: Density = Density.DEFAULT
    theme: Theme = Theme.LIGHT
    brand_variant: Optional[str] = None
    tokens: Mapping[str, str] = field(
        default_factory=dict, compare=False, hash=False,
    )

    def __post_init__(self) -> None:
        if not isinstance(self.tokens, MappingProxyType):
            object.__setattr__(self, "tokens", MappingProxyType(dict(self.tokens)))

    def token(self, name: str) -> str:
        """Token value, or the matching CSS custom property when absent."""
        value = self.tokens.get(name)
        if value is not None:
            return str(value)
        return f"var(--{name.replace('.', '-')})"


@dataclass(frozen=True)
class ContextConstraints:
    """Situational factors.

    Invariants:
        - nesting_level is never negative
    """
    urgency: Urgency = Urgency.MEDIUM
    journey_phase: JourneyPhase = JourneyPhase.ACTIVE
    available_space: AvailableSpace = AvailableSpace.CONTAINED
    nesting_level: int = 0

    def __post_init__(self) -> None:
        if self.nesting_level < 0:
            raise ValueError(
                f"nesting_level must be non-negative, got {self.nesting_level}"
            )


_SECTION_TYPES = {
    "device": DeviceConstraints,
    "accessibility": AccessibilityConstraints,
    "design_system": DesignSystemConstraints,
    "context": ContextConstraints,
}


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


@dataclass(frozen=True)
class ConstraintSet:
    """Everything that shapes how an intention may be presented.

    ``ConstraintSet()`` (or ``ConstraintSet.default()``) is the empty set:
    every dimension at its default, specificity 0.
    """
    device: DeviceConstraints = field(default_factory=DeviceConstraints)
    accessibility: AccessibilityConstraints = field(
        default_factory=AccessibilityConstraints
    )
    design_system: DesignSystemConstraints = field(
        default_factory=DesignSystemConstraints
    )
    context: ContextConstraints = field(default_factory=ContextConstraints)

    @classmethod
    def default(cls) -> ConstraintSet:
        return cls()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ConstraintSet:
        """Build from nested plain data.

        Section and field names may be snake_case or camelCase
        (``designSystem.density``, ``device.viewportClass``). Unknown names
        raise ValueError; enum values are coerced.
        """
        sections: Dict[str, Any] = {}
        for raw_section, values in data.items():
            section = _snake(raw_section)
            section_type = _SECTION_TYPES.get(section)
            if section_type is None:
                raise ValueError(f"Unknown constraint section: {raw_section!r}")
            known = section_type.__dataclass_fields__
            kwargs: Dict[str, Any] = {}
            for raw_name, value in (values or {}).items():
                name = _snake(raw_name)
                if name not in known:
                    raise ValueError(
                        f"Unknown constraint field: {raw_section}.{raw_name}"
                    )
                kwargs[name] = _coerce(known[name].type, value)
            sections[section] = section_type(**kwargs)
        return cls(**sections)

    def value_of(self, dimension: "ConstraintDimension") -> Any:
        """Current value of a scorable dimension."""
        return _DIMENSION_READERS[dimension](self)

    def is_default(self, dimension: "ConstraintDimension") -> bool:
        return self.value_of(dimension) == dimension.default


_ENUM_TYPES = {
    cls.__name__: cls
    for cls in (
        ViewportClass, PointerType, InputMethod, Orientation,
        ConnectionQuality, WcagLevel, Density, Theme, Urgency,
        JourneyPhase, AvailableSpace,
    )
}


def _coerce(type_name: str, value: Any) -> Any:
    """Coerce a raw value to the enum named in a field annotation."""
    for enum_name, enum_cls in _ENUM_TYPES.items():
        if enum_name in str(type_name) and value is not None:
            return enum_cls(value)
    return value


class ConstraintDimension(str, Enum):
    """Closed catalogue of the scorable constraint dimensions.

    Each dimension has a default value (the value ``ConstraintSet()``
    carries) and a positive weight used by specificity scoring.
    Declaration order is the reporting order.
    """
    VIEWPORT = "viewport"
    POINTER = "pointer"
    INPUT_METHOD = "input-method"
    ORIENTATION = "orientation"
    CONNECTION = "connection"
    SCREEN_READER = "screen-reader"
    HIGH_CONTRAST = "high-contrast"
    REDUCED_MOTION = "reduced-motion"
    LARGE_TEXT = "large-text"
    VOICE_CONTROL = "voice-control"
    WCAG_LEVEL = "wcag-level"
    DENSITY = "density"
    THEME = "theme"
    BRAND_VARIANT = "brand-variant"
    URGENCY = "urgency"
    JOURNEY_PHASE = "journey-phase"
    AVAILABLE_SPACE = "available-space"
    NESTING_LEVEL = "nesting-level"

    @property
    def default(self) -> Any:
        return _DIMENSION_READERS[self](_DEFAULT_SET)

    @property
    def weight(self) -> float:
        return _DIMENSION_WEIGHTS[self]


_DIMENSION_READERS: Dict[ConstraintDimension, Callable[[ConstraintSet], Any]] = {
    ConstraintDimension.VIEWPORT: lambda c: c.device.viewport_class,
    ConstraintDimension.POINTER: lambda c: c.device.pointer_type,
    ConstraintDimension.INPUT_METHOD: lambda c: c.device.input_method,
    ConstraintDimension.ORIENTATION: lambda c: c.device.orientation,
    ConstraintDimension.CONNECTION: lambda c: c.device.connection,
    ConstraintDimension.SCREEN_READER: lambda c: c.accessibility.screen_reader,
    ConstraintDimension.HIGH_CONTRAST: lambda c: c.accessibility.high_contrast,
    ConstraintDimension.REDUCED_MOTION: lambda c: c.accessibility.reduced_motion,
    ConstraintDimension.LARGE_TEXT: lambda c: c.accessibility.large_text,
    ConstraintDimension.VOICE_CONTROL: lambda c: c.accessibility.voice_control,
    ConstraintDimension.WCAG_LEVEL: lambda c: c.accessibility.wcag_level,
    ConstraintDimension.DENSITY: lambda c: c.design_system.density,
    ConstraintDimension.THEME: lambda c: c.design_system.theme,
    ConstraintDimension.BRAND_VARIANT: lambda c: c.design_system.brand_variant,
    ConstraintDimension.URGENCY: lambda c: c.context.urgency,
    ConstraintDimension.JOURNEY_PHASE: lambda c: c.context.journey_phase,
    ConstraintDimension.AVAILABLE_SPACE: lambda c: c.context.available_space,
    ConstraintDimension.NESTING_LEVEL: lambda c: c.context.nesting_level,
}

_DIMENSION_WEIGHTS: Dict[ConstraintDimension, float] = {
    ConstraintDimension.VIEWPORT: 2.0,
    ConstraintDimension.POINTER: 1.0,
    ConstraintDimension.INPUT_METHOD: 1.0,
    ConstraintDimension.ORIENTATION: 0.5,
    ConstraintDimension.CONNECTION: 1.0,
    ConstraintDimension.SCREEN_READER: 3.0,
    ConstraintDimension.HIGH_CONTRAST: 2.0,
    ConstraintDimension.REDUCED_MOTION: 1.0,
    ConstraintDimension.LARGE_TEXT: 1.0,
    ConstraintDimension.VOICE_CONTROL: 2.0,
    ConstraintDimension.WCAG_LEVEL: 2.0,
    ConstraintDimension.DENSITY: 1.0,
    ConstraintDimension.THEME: 0.5,
    ConstraintDimension.BRAND_VARIANT: 0.5,
    ConstraintDimension.URGENCY: 3.0,
    ConstraintDimension.JOURNEY_PHASE: 1.0,
    ConstraintDimension.AVAILABLE_SPACE: 2.0,
    ConstraintDimension.NESTING_LEVEL: 1.0,
}

ensure_exhaustive(_DIMENSION_READERS, ConstraintDimension, "dimension readers")
ensure_exhaustive(_DIMENSION_WEIGHTS, ConstraintDimension, "dimension weights")

_DEFAULT_SET = ConstraintSet()
