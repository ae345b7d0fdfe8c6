"""Deterministic provider for demos and tests.

Replies are chosen by keywords in the latest user message. Every reply
wraps its intention in a fenced ``json`` block with prose around it, the
way a real model answers.
"""

from __future__ import annotations

import asyncio
import re
from typing import List, Sequence, Tuple

from .providers import ChatMessage, ProviderReply

_SCHEDULE_REPLY = """Great! Let me help you schedule an appointment.

```json
{
  "action": "choose-one",
  "subject": {
    "type": "appointment_time",
    "label": "Preferred Time",
    "description": "Select when you'd like to meet",
    "constraints": {
      "options": [
        {"value": "morning", "label": "Morning", "description": "9:00 AM - 12:00 PM"},
        {"value": "afternoon", "label": "Afternoon", "description": "1:00 PM - 5:00 PM"},
        {"value": "evening", "label": "Evening", "description": "6:00 PM - 9:00 PM"}
      ]
    }
  },
  "purpose": "request",
  "displayMessage": "What time works best for you?"
}
```"""

_FEEDBACK_REPLY = """I'd love to hear your thoughts!

```json
{
  "action": "provide-text",
  "subject": {
    "type": "feedback",
    "label": "Your Feedback",
    "description": "Share your experience with us",
    "constraints": {"min": 10, "max": 500}
  },
  "purpose": "request",
  "displayMessage": "Please tell us what you think."
}
```"""

_DELETE_REPLY = """I understand you want to delete something. This is a significant action.

```json
{
  "action": "confirm",
  "subject": {
    "type": "delete_action",
    "label": "Confirm Deletion",
    "description": "This action cannot be undone. Are you sure you want to proceed?",
    "iconHint": "warning"
  },
  "purpose": "confirm",
  "displayMessage": "Please confirm this action."
}
```"""

_PRIORITY_REPLY = """Let me help you set priorities.

```json
{
  "action": "choose-many",
  "subject": {
    "type": "priority_levels",
    "label": "Priority Levels",
    "description": "Select all that apply",
    "constraints": {
      "options": [
        {"value": "urgent", "label": "Urgent"},
        {"value": "high", "label": "High Priority"},
        {"value": "medium", "label": "Medium Priority"},
        {"value": "low", "label": "Low Priority"}
      ]
    }
  },
  "purpose": "request"
}
```"""

_GREETING_REPLY = """Hello! I'm here to help. What would you like to do today?

I can help you with:
- Scheduling appointments
- Collecting feedback
- Managing settings

Just let me know what you need."""

_DEFAULT_REPLY = """I'd be happy to help! Could you tell me more about what you're looking for?

```json
{
  "action": "provide-text",
  "subject": {
    "type": "user_request",
    "label": "How can I help?",
    "description": "Describe what you'd like to accomplish"
  },
  "purpose": "request"
}
```"""

# First match wins.
_KEYWORD_REPLIES: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r"appointment|schedule|book"), _SCHEDULE_REPLY),
    (re.compile(r"feedback|comment"), _FEEDBACK_REPLY),
    (re.compile(r"delete|remove"), _DELETE_REPLY),
    (re.compile(r"priority|categories"), _PRIORITY_REPLY),
    (re.compile(r"\b(hello|hi|hey)\b"), _GREETING_REPLY),
)


class MockLLMProvider:
    """Canned-response provider.

    Args:
        delay: Seconds to wait before replying, to simulate latency
    """

    name = "mock"

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.calls: List[Tuple[ChatMessage, ...]] = []

    async def complete(self, messages: Sequence[ChatMessage]) -> ProviderReply:
        self.calls.append(tuple(messages))
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        return ProviderReply(content=self.reply_for(messages))

    @staticmethod
    def reply_for(messages: Sequence[ChatMessage]) -> str:
        last_user = next(
            (m.content for m in reversed(messages) if m.role == "user"), ""
        )
        lowered = last_user.lower()
        for pattern, reply in _KEYWORD_REPLIES:
            if pattern.search(lowered):
                return reply
        return _DEFAULT_REPLY
