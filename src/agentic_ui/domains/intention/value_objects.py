"""Intention Domain Value Objects.

Immutable types that carry no identity. Equality is structural.

An Intention describes what the user must DO, never what they should SEE.
It names no widget; the resolution engine decides the visual form.
"""
from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union


class IntentionAction(str, Enum):
    """What the user wants to accomplish (verb).

    The vocabulary is closed. Actions are universal and reference no
    concrete UI component.
    """
    CHOOSE_ONE = "choose-one"
    CHOOSE_MANY = "choose-many"
    PROVIDE_TEXT = "provide-text"
    PROVIDE_DATA = "provide-data"
    CONFIRM = "confirm"
    ACKNOWLEDGE = "acknowledge"
    REVIEW = "review"
    NAVIGATE = "navigate"
    WAIT = "wait"
    ALERT = "alert"

    @classmethod
    def parse(cls, value: object) -> Optional[IntentionAction]:
        """Return the matching member, or None for anything unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class IntentionPurpose(str, Enum):
    """Why the intention exists. Governs urgency framing, not layout."""
    REQUEST = "request"
    CONFIRM = "confirm"
    INFORM = "inform"
    ALERT = "alert"
    PROGRESS = "progress"


class IconHint(str, Enum):
    """Semantic icon hint; never a concrete icon name."""
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"
    QUESTION = "question"
    ACTION = "action"


class IntentionSource(str, Enum):
    """Who produced the intention."""
    AGENT = "agent"
    USER = "user"
    SYSTEM = "system"


def is_selection_action(action: Union[IntentionAction, str]) -> bool:
    return action in (IntentionAction.CHOOSE_ONE, IntentionAction.CHOOSE_MANY)


def is_input_action(action: Union[IntentionAction, str]) -> bool:
    return action in (IntentionAction.PROVIDE_TEXT, IntentionAction.PROVIDE_DATA)


def is_display_action(action: Union[IntentionAction, str]) -> bool:
    return action in (
        IntentionAction.REVIEW, IntentionAction.WAIT, IntentionAction.ALERT,
    )


def is_confirmation_action(action: Union[IntentionAction, str]) -> bool:
    return action in (IntentionAction.CONFIRM, IntentionAction.ACKNOWLEDGE)


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None."""
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class OptionItem:
    """One choice offered by a selection intention."""
    value: str
    label: str
    description: Optional[str] = None
    disabled: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "value": self.value,
            "label": self.label,
            "description": self.description,
            "disabled": self.disabled,
        })

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OptionItem:
        return cls(
            value=data["value"],
            label=data["label"],
            description=data.get("description"),
            disabled=data.get("disabled"),
        )

    @classmethod
    def coerce(cls, item: Union[OptionItem, Mapping[str, Any]]) -> OptionItem:
        """Accept either an OptionItem or its dict form."""
        if isinstance(item, cls):
            return item
        return cls.from_dict(item)


@dataclass(frozen=True)
class SubjectConstraints:
    """Constraints on valid values for a subject.

    Attributes:
        options: Choices for selection actions
        required: Whether a value must be supplied
        min: Minimum value or length
        max: Maximum value or length
        pattern: Regular expression the value must match
        validate: In-process check returning True, False, or an error
            message. Never serialised.
    """
    options: Optional[Tuple[OptionItem, ...]] = None
    required: Optional[bool] = None
    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[str] = None
    validate: Optional[Callable[[Any], Union[bool, str]]] = field(
        default=None, compare=False, repr=False,
    )

    def check(self, value: Any) -> List[str]:
        """Check a candidate value and return every reason it is rejected."""
        errors: List[str] = []
        if value is None or value == "" or value == []:
            if self.required:
                errors.append("a value is required")
            return errors

        size = len(value) if isinstance(value, (str, list, tuple)) else value
        if isinstance(size, (int, float)) and not isinstance(size, bool):
            if self.min is not None and size < self.min:
                errors.append(f"must be at least {self.min:g}")
            if self.max is not None and size > self.max:
                errors.append(f"must be at most {self.max:g}")

        if self.pattern is not None and isinstance(value, str):
            if not re.fullmatch(self.pattern, value):
                errors.append(f"must match pattern {self.pattern!r}")

        if self.options is not None:
            allowed = {o.value for o in self.options if not o.disabled}
            chosen = value if isinstance(value, (list, tuple)) else [value]
            for item in chosen:
                if item not in allowed:
                    errors.append(f"{item!r} is not an available option")

        if self.validate is not None:
            outcome = self.validate(value)
            if isinstance(outcome, str):
                errors.append(outcome)
            elif not outcome:
                errors.append("failed custom validation")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "options": (
                [o.to_dict() for o in self.options]
                if self.options is not None else None
            ),
            "required": self.required,
            "min": self.min,
            "max": self.max,
            "pattern": self.pattern,
        })

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SubjectConstraints:
        options = data.get("options")
        return cls(
            options=(
                tuple(OptionItem.from_dict(o) for o in options)
                if options is not None else None
            ),
            required=data.get("required"),
            min=data.get("min"),
            max=data.get("max"),
            pattern=data.get("pattern"),
        )


@dataclass(frozen=True)
class IntentionSubject:
    """The domain data the action operates on (noun).

    ``type`` is an open semantic tag ("severity", "date", "person", ...),
    never a widget name.
    """
    type: str
    label: str
    value: Any = None
    constraints: Optional[SubjectConstraints] = None
    description: Optional[str] = None
    icon_hint: Optional[IconHint] = None

    @property
    def options(self) -> Tuple[OptionItem, ...]:
        if self.constraints is None or self.constraints.options is None:
            return ()
        return self.constraints.options

    @property
    def is_required(self) -> bool:
        return bool(self.constraints and self.constraints.required)

    def to_dict(self) -> Dict[str, Any]:
        constraints = self.constraints.to_dict() if self.constraints else None
        return _compact({
            "type": self.type,
            "label": self.label,
            "value": self.value,
            "constraints": constraints,
            "description": self.description,
            "iconHint": self.icon_hint.value if self.icon_hint else None,
        })

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IntentionSubject:
        constraints = data.get("constraints")
        icon_hint = data.get("iconHint")
        return cls(
            type=data["type"],
            label=data["label"],
            value=data.get("value"),
            constraints=(
                SubjectConstraints.from_dict(constraints)
                if constraints is not None else None
            ),
            description=data.get("description"),
            icon_hint=IconHint(icon_hint) if icon_hint else None,
        )


@dataclass(frozen=True)
class FlowContext:
    """Sequencing metadata for multi-step resolution."""
    id: str
    parent_id: Optional[str] = None
    is_branch: Optional[bool] = None
    sequence: Optional[int] = None
    total_steps: Optional[int] = None
    can_go_back: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "id": self.id,
            "parentId": self.parent_id,
            "isBranch": self.is_branch,
            "sequence": self.sequence,
            "totalSteps": self.total_steps,
            "canGoBack": self.can_go_back,
        })

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FlowContext:
        return cls(
            id=data.get("id") or str(uuid.uuid4()),
            parent_id=data.get("parentId"),
            is_branch=data.get("isBranch"),
            sequence=data.get("sequence"),
            total_steps=data.get("totalSteps"),
            can_go_back=data.get("canGoBack"),
        )


@dataclass(frozen=True)
class IntentionMeta:
    """Debugging and analytics metadata."""
    timestamp: Optional[float] = None
    source: Optional[IntentionSource] = None
    correlation_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "timestamp": self.timestamp,
            "source": self.source.value if self.source else None,
            "correlationId": self.correlation_id,
        })

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IntentionMeta:
        source = data.get("source")
        return cls(
            timestamp=data.get("timestamp"),
            source=IntentionSource(source) if source else None,
            correlation_id=data.get("correlationId"),
        )


@dataclass(frozen=True)
class Intention:
    """What the user must accomplish.

    ``action`` and ``subject.type`` are set independently by the author;
    the resolution engine decides what they mean visually.

    Attributes:
        action: The verb. Known strings are coerced to IntentionAction; an
            unknown string is kept as-is so the engine can degrade it
        subject: The noun
        purpose: Urgency framing
        flow: Position in a multi-step flow
        meta: Provenance

    Examples:
        >>> Intention(
        ...     action=IntentionAction.CONFIRM,
        ...     subject=IntentionSubject(type="action", label="Delete item"),
        ...     purpose=IntentionPurpose.CONFIRM,
        ... )
    """
    action: Union[IntentionAction, str]
    subject: IntentionSubject
    purpose: IntentionPurpose
    flow: Optional[FlowContext] = None
    meta: Optional[IntentionMeta] = None

    def __post_init__(self) -> None:
        known = IntentionAction.parse(self.action)
        if known is not None:
            object.__setattr__(self, "action", known)
        if not isinstance(self.purpose, IntentionPurpose):
            try:
                object.__setattr__(self, "purpose", IntentionPurpose(self.purpose))
            except ValueError:
                # Left as a raw string; schema validation reports it.
                pass

    @property
    def known_action(self) -> Optional[IntentionAction]:
        """The action as an enum member, or None if it is not in the vocabulary."""
        return self.action if isinstance(self.action, IntentionAction) else None

    @property
    def action_name(self) -> str:
        return self.action.value if isinstance(self.action, Enum) else str(self.action)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form, as validated by INTENTION_JSON_SCHEMA."""
        purpose = self.purpose
        return _compact({
            "action": self.action_name,
            "subject": self.subject.to_dict(),
            "purpose": purpose.value if isinstance(purpose, Enum) else purpose,
            "flow": self.flow.to_dict() if self.flow else None,
            "meta": self.meta.to_dict() if self.meta else None,
        })

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Intention:
        """Build from wire data that has already passed schema validation."""
        flow = data.get("flow")
        meta = data.get("meta")
        return cls(
            action=IntentionAction(data["action"]),
            subject=IntentionSubject.from_dict(data["subject"]),
            purpose=IntentionPurpose(data["purpose"]),
            flow=FlowContext.from_dict(flow) if flow is not None else None,
            meta=IntentionMeta.from_dict(meta) if meta is not None else None,
        )
