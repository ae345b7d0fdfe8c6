"""Builder functions that produce fully-formed, schema-valid intentions.

Each builder takes a label and keyword options and fills in the purpose the
action conventionally carries.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Union

from .value_objects import (
    IconHint,
    Intention,
    IntentionAction,
    IntentionPurpose,
    IntentionSubject,
    OptionItem,
    SubjectConstraints,
)

OptionLike = Union[OptionItem, Mapping[str, Any]]


def create_selection_intention(
    options: Iterable[OptionLike],
    label: str,
    *,
    multi_select: bool = False,
    required: bool = True,
    description: Optional[str] = None,
    type: str = "item",
) -> Intention:
    """Ask the user to pick one (or several) of ``options``.

    Args:
        options: OptionItem instances or ``{"value", "label", ...}`` dicts
        label: Human-readable label for the choice
        multi_select: Allow several options (``choose-many``)
        required: Whether a choice must be made
        description: Extra context shown with the label
        type: Semantic subject type

    Returns:
        A ``request`` intention.
    """
    return Intention(
        action=(
            IntentionAction.CHOOSE_MANY if multi_select
            else IntentionAction.CHOOSE_ONE
        ),
        subject=IntentionSubject(
            type=type,
            label=label,
            description=description,
            constraints=SubjectConstraints(
                options=tuple(OptionItem.coerce(o) for o in options),
                required=required,
            ),
        ),
        purpose=IntentionPurpose.REQUEST,
    )


def create_text_input_intention(
    label: str,
    *,
    required: bool = False,
    max_length: Optional[int] = None,
    description: Optional[str] = None,
    placeholder: Optional[str] = None,
) -> Intention:
    """Ask the user for free-form text.

    ``placeholder`` is carried as the subject's initial description when no
    description is given; it has no wire field of its own.
    """
    return Intention(
        action=IntentionAction.PROVIDE_TEXT,
        subject=IntentionSubject(
            type="text",
            label=label,
            description=description if description is not None else placeholder,
            constraints=SubjectConstraints(required=required, max=max_length),
        ),
        purpose=IntentionPurpose.REQUEST,
    )


def create_confirmation_intention(
    label: str,
    *,
    description: Optional[str] = None,
    urgent: bool = False,
) -> Intention:
    """Ask for a yes/no decision. Urgent confirmations carry an alert purpose."""
    return Intention(
        action=IntentionAction.CONFIRM,
        subject=IntentionSubject(
            type="action",
            label=label,
            description=description,
            icon_hint=IconHint.WARNING if urgent else IconHint.QUESTION,
        ),
        purpose=IntentionPurpose.ALERT if urgent else IntentionPurpose.CONFIRM,
    )


def create_review_intention(
    data: Any,
    label: str,
    *,
    description: Optional[str] = None,
) -> Intention:
    """Show a summary of ``data`` for the user to look over."""
    return Intention(
        action=IntentionAction.REVIEW,
        subject=IntentionSubject(
            type="summary",
            label=label,
            value=data,
            description=description,
        ),
        purpose=IntentionPurpose.INFORM,
    )


def create_alert_intention(
    message: str,
    *,
    type: Union[IconHint, str] = IconHint.INFO,
    dismissable: bool = False,
) -> Intention:
    """Tell the user something.

    Dismissable alerts become ``acknowledge`` intentions. Errors and
    warnings carry an alert purpose; everything else informs.
    """
    hint = IconHint(type)
    return Intention(
        action=(
            IntentionAction.ACKNOWLEDGE if dismissable else IntentionAction.ALERT
        ),
        subject=IntentionSubject(type="message", label=message, icon_hint=hint),
        purpose=(
            IntentionPurpose.ALERT
            if hint in (IconHint.ERROR, IconHint.WARNING)
            else IntentionPurpose.INFORM
        ),
    )
