"""Shared Kernel - Core domain types shared across bounded contexts.

These types are intentionally minimal and shared between:
- Affinity Context (rules declare patterns and trait overrides)
- Resolution Context (produces manifestations from patterns and traits)
- Materializer Context (looks up renderers by pattern and traits)
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Dict, Mapping, Optional, Type


def ensure_exhaustive(mapping: Mapping, enum_cls: Type[Enum], what: str) -> None:
    """Fail at import time when an enum-keyed table misses a member."""
    missing = [member.value for member in enum_cls if member not in mapping]
    if missing:
        raise RuntimeError(f"Missing {what} for: {', '.join(missing)}")


class ResolutionPattern(str, Enum):
    """High-level presentation archetypes.

    Declaration order is significant: it is the final tie-breaker when two
    candidate patterns score the same confidence.
    """
    SELECTION = "selection"
    INPUT = "input"
    DISPLAY = "display"
    ACTION = "action"
    FLOW = "flow"
    FEEDBACK = "feedback"

    @property
    def rank(self) -> int:
        """Position of this pattern in declaration order."""
        return list(ResolutionPattern).index(self)


class AriaRole(str, Enum):
    """ARIA roles a manifestation may take."""
    BUTTON = "button"
    CHECKBOX = "checkbox"
    DIALOG = "dialog"
    ALERT = "alert"
    ALERTDIALOG = "alertdialog"
    FORM = "form"
    GROUP = "group"
    LINK = "link"
    LISTBOX = "listbox"
    MENU = "menu"
    MENUITEM = "menuitem"
    NAVIGATION = "navigation"
    OPTION = "option"
    PROGRESSBAR = "progressbar"
    RADIO = "radio"
    RADIOGROUP = "radiogroup"
    REGION = "region"
    STATUS = "status"
    TABLIST = "tablist"
    TAB = "tab"
    TABPANEL = "tabpanel"
    TEXTBOX = "textbox"
    COMBOBOX = "combobox"
    NONE = "none"
    PRESENTATION = "presentation"

    @property
    def is_presentational(self) -> bool:
        """True for roles that must not be emitted as a ``role`` attribute."""
        return self in (AriaRole.NONE, AriaRole.PRESENTATION)


class LiveRegion(str, Enum):
    """Screen-reader announcement politeness."""
    POLITE = "polite"
    ASSERTIVE = "assertive"
    OFF = "off"


@dataclass(frozen=True)
class ManifestationTraits:
    """Behavioral descriptor of a manifestation.

    Traits are derived by the resolution engine, never supplied by the
    author of an intention.

    Attributes:
        interactive: The user can act on it
        focusable: It can receive keyboard focus
        dismissable: It can be closed or hidden
        elevated: It sits above the surface (shadow)
        contained: It has a visual boundary (border, card)
        emphasized: It carries visual weight (colour, weight)
        role: ARIA role
        live_region: Screen-reader announcement mode, if any
    """
    interactive: bool
    focusable: bool
    dismissable: bool
    elevated: bool
    contained: bool
    emphasized: bool
    role: AriaRole
    live_region: Optional[LiveRegion] = None

    @classmethod
    def for_pattern(cls, pattern: ResolutionPattern) -> ManifestationTraits:
        """Default traits for a pattern."""
        return _PATTERN_DEFAULT_TRAITS[pattern]

    def merged(self, overrides: TraitOverrides) -> ManifestationTraits:
        """Return a copy with every field set in ``overrides`` applied."""
        changes = overrides.as_dict()
        if not changes:
            return self
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "interactive": self.interactive,
            "focusable": self.focusable,
            "dismissable": self.dismissable,
            "elevated": self.elevated,
            "contained": self.contained,
            "emphasized": self.emphasized,
            "role": self.role.value,
        }
        if self.live_region is not None:
            data["liveRegion"] = self.live_region.value
        return data


@dataclass(frozen=True)
class TraitOverrides:
    """Partial ManifestationTraits. ``None`` means "leave unchanged"."""
    interactive: Optional[bool] = None
    focusable: Optional[bool] = None
    dismissable: Optional[bool] = None
    elevated: Optional[bool] = None
    contained: Optional[bool] = None
    emphasized: Optional[bool] = None
    role: Optional[AriaRole] = None
    live_region: Optional[LiveRegion] = None

    def as_dict(self) -> Dict[str, object]:
        """Only the fields that are set."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @property
    def is_empty(self) -> bool:
        return not self.as_dict()


_PATTERN_DEFAULT_TRAITS: Dict[ResolutionPattern, ManifestationTraits] = {
    ResolutionPattern.SELECTION: ManifestationTraits(
        interactive=True, focusable=True, dismissable=False,
        elevated=False, contained=True, emphasized=False,
        role=AriaRole.RADIOGROUP,
    ),
    ResolutionPattern.INPUT: ManifestationTraits(
        interactive=True, focusable=True, dismissable=False,
        elevated=False, contained=True, emphasized=False,
        role=AriaRole.TEXTBOX,
    ),
    ResolutionPattern.DISPLAY: ManifestationTraits(
        interactive=False, focusable=False, dismissable=False,
        elevated=False, contained=True, emphasized=False,
        role=AriaRole.REGION,
    ),
    ResolutionPattern.ACTION: ManifestationTraits(
        interactive=True, focusable=True, dismissable=False,
        elevated=False, contained=True, emphasized=True,
        role=AriaRole.BUTTON,
    ),
    ResolutionPattern.FLOW: ManifestationTraits(
        interactive=True, focusable=True, dismissable=True,
        elevated=True, contained=True, emphasized=True,
        role=AriaRole.FORM,
    ),
    ResolutionPattern.FEEDBACK: ManifestationTraits(
        interactive=False, focusable=False, dismissable=True,
        elevated=True, contained=True, emphasized=True,
        role=AriaRole.ALERT, live_region=LiveRegion.POLITE,
    ),
}

ensure_exhaustive(_PATTERN_DEFAULT_TRAITS, ResolutionPattern, "pattern trait templates")
