"""System prompt that teaches a model to answer with intentions."""

from __future__ import annotations

import json
from typing import Optional

from agentic_ui.domains.intention.schema import intention_schema
from agentic_ui.domains.intention.value_objects import IntentionAction, IntentionPurpose

_INSTRUCTIONS = """You are the conversational layer of an adaptive user interface.
When you need something from the user, do not describe widgets, buttons, forms
or layouts. Describe WHAT the user must do as an intention, and the interface
decides HOW to present it.

Reply with a short sentence for the user, then exactly one intention as a JSON
object inside a ```json fenced block. The object must validate against the
schema below. Do not add properties the schema does not define.

Actions: {actions}
Purposes: {purposes}

Use "choose-one" or "choose-many" only with subject.constraints.options.
Use the "alert" purpose only for destructive or time-critical situations.
Put the sentence you want shown next to the interface in "displayMessage".

Intention JSON Schema:
{schema}"""


def build_system_prompt(custom: Optional[str] = None) -> str:
    """The full system prompt, with optional deployment-specific additions.

    Args:
        custom: Extra instructions appended after the base prompt

    Returns:
        The prompt text, embedding the intention JSON Schema
    """

    prompt = _INSTRUCTIONS.format(
        actions=", ".join(a.value for a in IntentionAction),
        purposes=", ".join(p.value for p in IntentionPurpose),
        schema=json.dumps(intention_schema(), indent=2),
    )
    if custom and custom.strip():
        prompt += "\n\nAdditional instructions:\n" + custom.strip()
    return prompt
