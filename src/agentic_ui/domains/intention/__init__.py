"""Intention Bounded Context.

Value objects describing what a user must accomplish, builder functions
for common intentions, and the JSON Schema every external producer of
intentions is validated against.
"""
from .value_objects import (
    IconHint, Intention, IntentionAction, IntentionMeta, IntentionPurpose,
    IntentionSource, IntentionSubject, FlowContext, OptionItem,
    SubjectConstraints, is_confirmation_action, is_display_action,
    is_input_action, is_selection_action,
)
from .builders import (
    create_alert_intention, create_confirmation_intention,
    create_review_intention, create_selection_intention,
    create_text_input_intention,
)
from .schema import (
    INTENTION_JSON_SCHEMA, collect_schema_issues, intention_schema,
    validate_intention_payload,
)

__all__ = [
    "IconHint", "Intention", "IntentionAction", "IntentionMeta",
    "IntentionPurpose", "IntentionSource", "IntentionSubject", "FlowContext",
    "OptionItem", "SubjectConstraints",
    "is_confirmation_action", "is_display_action", "is_input_action",
    "is_selection_action",
    "create_alert_intention", "create_confirmation_intention",
    "create_review_intention", "create_selection_intention",
    "create_text_input_intention",
    "INTENTION_JSON_SCHEMA", "collect_schema_issues", "intention_schema",
    "validate_intention_payload",
]
