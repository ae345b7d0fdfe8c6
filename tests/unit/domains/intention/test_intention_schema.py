"""Unit tests for the intention JSON Schema validator.

The validator is total: any input yields a ParseResult, and failures name
every offending field at once.
"""

__test__ = True

import pytest

from agentic_ui.domains.intention import (
    INTENTION_JSON_SCHEMA,
    IntentionAction,
    collect_schema_issues,
    create_confirmation_intention,
    create_review_intention,
    create_selection_intention,
    create_text_input_intention,
    intention_schema,
    validate_intention_payload,
)
from agentic_ui.domains.shared import FailureKind


def make_payload(**overrides):
    payload = {
        "action": "provide-text",
        "subject": {"type": "text", "label": "Name"},
        "purpose": "request",
    }
    payload.update(overrides)
    return payload


# =============================================================================
# Valid payloads
# =============================================================================


class TestValidPayloads:
    """Payloads that must be accepted."""

    def test_minimal(self):
        result = validate_intention_payload(make_payload())
        assert result.success
        assert result.intention.action is IntentionAction.PROVIDE_TEXT
        assert result.message is None

    def test_display_message_is_carried(self):
        result = validate_intention_payload(make_payload(displayMessage="Hi there"))
        assert result.success
        assert result.message == "Hi there"

    def test_selection_with_options(self):
        payload = make_payload(
            action="choose-one",
            subject={
                "type": "item",
                "label": "Pick",
                "constraints": {"options": [{"value": "a", "label": "A"}]},
            },
        )
        assert validate_intention_payload(payload).success

    @pytest.mark.parametrize(
        "intention",
        [
            create_selection_intention([{"value": "a", "label": "A"}], "Pick"),
            create_text_input_intention("Bio", max_length=100, required=True),
            create_confirmation_intention("Delete?", urgent=True),
            create_review_intention({"n": 1}, "Summary"),
        ],
        ids=["selection", "text", "confirm", "review"],
    )
    def test_builder_output_is_schema_valid(self, intention):
        result = validate_intention_payload(intention.to_dict())
        assert result.success
        assert result.intention == intention


# =============================================================================
# Invalid payloads
# =============================================================================


class TestInvalidPayloads:
    """Payloads that must be rejected, with per-field reasons."""

    def test_non_object(self):
        result = validate_intention_payload(["not", "an", "object"])
        assert not result.success
        assert result.kind is FailureKind.SCHEMA_VIOLATION
        assert result.fields == ("",)

    def test_none(self):
        result = validate_intention_payload(None)
        assert not result.success
        assert result.kind is FailureKind.SCHEMA_VIOLATION

    def test_empty_object_lists_every_missing_field(self):
        result = validate_intention_payload({})
        assert not result.success
        assert set(result.fields) == {"action", "subject", "purpose"}

    def test_unknown_action(self):
        result = validate_intention_payload(make_payload(action="teleport"))
        assert result.fields == ("action",)
        assert "teleport" in result.issues[0].message

    def test_multiple_fields_reported_together(self):
        payload = make_payload(
            action="fly",
            subject={"type": "x"},
            purpose="chitchat",
        )
        result = validate_intention_payload(payload)
        assert set(result.fields) == {"action", "subject.label", "purpose"}

    def test_empty_label(self):
        result = validate_intention_payload(
            make_payload(subject={"type": "text", "label": ""})
        )
        assert result.fields == ("subject.label",)

    def test_selection_without_options(self):
        payload = make_payload(
            action="choose-many", subject={"type": "item", "label": "Pick"},
        )
        result = validate_intention_payload(payload)
        assert "subject.constraints" in result.fields

    def test_selection_with_constraints_but_no_options(self):
        payload = make_payload(
            action="choose-one",
            subject={"type": "item", "label": "Pick", "constraints": {"required": True}},
        )
        result = validate_intention_payload(payload)
        assert result.fields == ("subject.constraints.options",)

    def test_unexpected_property(self):
        result = validate_intention_payload(make_payload(widget="dropdown"))
        assert result.fields == ("widget",)
        assert result.issues[0].validator == "additionalProperties"

    def test_bad_option_item(self):
        payload = make_payload(
            action="choose-one",
            subject={
                "type": "item",
                "label": "Pick",
                "constraints": {"options": [{"value": "a"}]},
            },
        )
        result = validate_intention_payload(payload)
        assert result.fields == ("subject.constraints.options.0.label",)

    def test_invalid_regex_pattern(self):
        payload = make_payload(
            subject={"type": "text", "label": "Code", "constraints": {"pattern": "("}},
        )
        result = validate_intention_payload(payload)
        assert result.fields == ("subject.constraints.pattern",)

    def test_flow_sequence_must_be_positive(self):
        result = validate_intention_payload(make_payload(flow={"id": "f", "sequence": 0}))
        assert result.fields == ("flow.sequence",)

    def test_raw_json_is_kept(self):
        payload = make_payload(action="fly")
        result = validate_intention_payload(payload)
        assert result.raw_json is payload

    def test_error_summary_names_fields(self):
        result = validate_intention_payload({})
        assert result.error.startswith("Intention failed schema validation")
        assert "action" in result.error


# =============================================================================
# collect_schema_issues
# =============================================================================


class TestCollectSchemaIssues:
    """Test the in-process validation entry point."""

    def test_valid_payload_has_no_issues(self):
        assert collect_schema_issues(make_payload()) == ()

    def test_unknown_action_allowed_when_requested(self):
        payload = make_payload(action="teleport")
        assert collect_schema_issues(payload, allow_unknown_action=True) == ()

    def test_other_issues_survive_unknown_action_allowance(self):
        payload = make_payload(action="teleport", purpose="nope")
        issues = collect_schema_issues(payload, allow_unknown_action=True)
        assert [issue.field for issue in issues] == ["purpose"]

    def test_issues_are_sorted_by_field(self):
        issues = collect_schema_issues({"subject": {}})
        fields = [issue.field for issue in issues]
        assert fields == sorted(fields)


# =============================================================================
# intention_schema
# =============================================================================


class TestIntentionSchema:
    """Test the exported schema document."""

    def test_returns_copy(self):
        schema = intention_schema()
        schema["properties"]["action"]["enum"].append("teleport")
        assert "teleport" not in INTENTION_JSON_SCHEMA["properties"]["action"]["enum"]

    def test_lists_every_action(self):
        assert INTENTION_JSON_SCHEMA["properties"]["action"]["enum"] == [
            a.value for a in IntentionAction
        ]
