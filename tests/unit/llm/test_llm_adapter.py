"""Unit tests for AgenticLLMAdapter.

Tests cover: successful turns with the mock provider, conversation
history, timeouts, caller cancellation, provider exceptions, and the
system prompt.
"""

__test__ = True

import asyncio

import pytest

from agentic_ui.domains.intention import IntentionAction
from agentic_ui.domains.shared import FailureKind
from agentic_ui.llm import (
    AgenticLLMAdapter,
    ChatMessage,
    LLMRuntimeConfig,
    MockLLMProvider,
    ProviderReply,
)


# =============================================================================
# Test providers
# =============================================================================


class FailingProvider:
    """Provider whose every call raises."""

    name = "failing"

    def __init__(self, exc=None):
        self.exc = exc or ConnectionError("connection refused")
        self.calls = 0

    async def complete(self, messages):
        self.calls += 1
        raise self.exc


class ScriptedProvider:
    """Provider returning a fixed reply."""

    name = "scripted"

    def __init__(self, content):
        self.content = content
        self.messages = None

    async def complete(self, messages):
        self.messages = list(messages)
        return ProviderReply(content=self.content)


class HangingProvider:
    """Provider that never replies until cancelled."""

    name = "hanging"

    def __init__(self):
        self.started = asyncio.Event()
        self.cancelled = False

    async def complete(self, messages):
        self.started.set()
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return ProviderReply(content="")


@pytest.fixture
def mock_provider():
    return MockLLMProvider()


@pytest.fixture
def adapter(mock_provider):
    return AgenticLLMAdapter(mock_provider)


# =============================================================================
# Successful turns
# =============================================================================


class TestSendMessage:
    """Test conversational turns."""

    @pytest.mark.asyncio
    async def test_schedule_request_yields_choice(self, adapter):
        reply = await adapter.send_message("I want to book an appointment")

        assert reply.has_intention
        assert reply.intention.action is IntentionAction.CHOOSE_ONE
        assert len(reply.intention.subject.options) == 3
        assert reply.message == "What time works best for you?"
        assert reply.error is None

    @pytest.mark.asyncio
    async def test_prose_is_message_when_no_display_message(self, adapter):
        reply = await adapter.send_message("set my priority levels")
        assert reply.intention.action is IntentionAction.CHOOSE_MANY
        assert reply.message == "Let me help you set priorities."

    @pytest.mark.asyncio
    async def test_greeting_has_no_intention(self, adapter):
        reply = await adapter.send_message("hi there")

        assert not reply.has_intention
        assert reply.intention is None
        assert reply.result.kind is FailureKind.MALFORMED_PROVIDER_OUTPUT
        assert reply.message.startswith("Hello!")

    @pytest.mark.asyncio
    async def test_history_records_both_sides(self, adapter):
        reply = await adapter.send_message("delete my account")

        history = adapter.conversation_history
        assert [m.role for m in history] == ["user", "assistant"]
        assert history[0].content == "delete my account"
        assert history[1].content == reply.text

    @pytest.mark.asyncio
    async def test_history_is_sent_on_next_turn(self, adapter, mock_provider):
        await adapter.send_message("delete my account")
        await adapter.send_message("leave feedback")

        sent = mock_provider.calls[-1]
        assert [m.role for m in sent] == ["system", "user", "assistant", "user"]
        assert sent[-1].content == "leave feedback"

    @pytest.mark.asyncio
    async def test_reset_conversation(self, adapter):
        await adapter.send_message("hello")
        adapter.reset_conversation()
        assert adapter.conversation_history == ()

    @pytest.mark.asyncio
    async def test_schema_violation_is_reported(self):
        provider = ScriptedProvider('```json\n{"action": "explode"}\n```')
        adapter = AgenticLLMAdapter(provider)

        reply = await adapter.send_message("anything")
        assert reply.result.kind is FailureKind.SCHEMA_VIOLATION
        assert "action" in reply.result.fields
        # The provider did answer, so the turn is kept.
        assert len(adapter.conversation_history) == 2


class TestInterpret:
    """Test the stateless entry point."""

    @pytest.mark.asyncio
    async def test_interpret_prepends_system_prompt(self):
        provider = ScriptedProvider(
            '{"action": "wait", "subject": {"type": "job", "label": "Exporting"},'
            ' "purpose": "progress"}'
        )
        adapter = AgenticLLMAdapter(provider)

        result = await adapter.interpret([ChatMessage(role="user", content="export it")])

        assert result.success
        assert result.intention.action is IntentionAction.WAIT
        assert provider.messages[0].role == "system"
        assert provider.messages[0].content == adapter.system_prompt
        assert adapter.conversation_history == ()

    @pytest.mark.asyncio
    async def test_undecodable_reply_is_malformed(self):
        reply_text = '{"action": 9' + "9" * 5000 + '}'
        adapter = AgenticLLMAdapter(ScriptedProvider(reply_text))

        result = await adapter.interpret([ChatMessage(role="user", content="go")])

        assert not result.success
        assert result.kind is FailureKind.MALFORMED_PROVIDER_OUTPUT
        assert result.raw_text == reply_text

    @pytest.mark.asyncio
    async def test_deeply_nested_reply_is_malformed(self):
        adapter = AgenticLLMAdapter(
            ScriptedProvider('{"a":' * 100000 + "1" + "}" * 100000)
        )

        reply = await adapter.send_message("go")

        assert reply.result.kind is FailureKind.MALFORMED_PROVIDER_OUTPUT
        assert len(adapter.conversation_history) == 2


# =============================================================================
# Failures
# =============================================================================


class TestProviderFailures:
    """Every provider failure becomes a PROVIDER_FAILURE result."""

    @pytest.mark.asyncio
    async def test_exception_becomes_failure(self):
        adapter = AgenticLLMAdapter(FailingProvider())
        reply = await adapter.send_message("hello")

        assert reply.result.kind is FailureKind.PROVIDER_FAILURE
        assert "failing provider failed" in reply.error
        assert "connection refused" in reply.error
        assert reply.text == ""
        assert reply.message is None

    @pytest.mark.asyncio
    async def test_failure_leaves_history_unchanged(self, mock_provider):
        adapter = AgenticLLMAdapter(mock_provider)
        await adapter.send_message("book a table")
        before = adapter.conversation_history

        adapter._provider = FailingProvider()
        await adapter.send_message("and another")
        assert adapter.conversation_history == before

    @pytest.mark.asyncio
    async def test_timeout(self):
        adapter = AgenticLLMAdapter(MockLLMProvider(delay=1.0))
        reply = await adapter.send_message("book", timeout=0.01)

        assert reply.result.kind is FailureKind.PROVIDER_FAILURE
        assert "timed out after 0.01s" in reply.error
        assert adapter.conversation_history == ()

    @pytest.mark.asyncio
    async def test_configured_timeout_is_default(self):
        config = LLMRuntimeConfig(timeout=0.01)
        adapter = AgenticLLMAdapter(MockLLMProvider(delay=1.0), config)
        result = await adapter.interpret([ChatMessage(role="user", content="book")])
        assert result.kind is FailureKind.PROVIDER_FAILURE

    @pytest.mark.asyncio
    async def test_timeout_with_cancel_event(self):
        adapter = AgenticLLMAdapter(MockLLMProvider(delay=1.0))
        reply = await adapter.send_message(
            "book", timeout=0.01, cancel_event=asyncio.Event(),
        )
        assert "timed out" in reply.error

    @pytest.mark.asyncio
    async def test_cancel_event_already_set(self):
        provider = FailingProvider()
        adapter = AgenticLLMAdapter(provider)
        event = asyncio.Event()
        event.set()

        reply = await adapter.send_message("book", cancel_event=event)

        assert reply.result.kind is FailureKind.PROVIDER_FAILURE
        assert "cancelled before it started" in reply.error
        assert provider.calls == 0

    @pytest.mark.asyncio
    async def test_cancel_event_during_call(self):
        provider = HangingProvider()
        adapter = AgenticLLMAdapter(provider)
        event = asyncio.Event()

        async def cancel_soon():
            await provider.started.wait()
            event.set()

        canceller = asyncio.ensure_future(cancel_soon())
        reply = await adapter.send_message("book", timeout=5.0, cancel_event=event)
        await canceller

        assert reply.result.kind is FailureKind.PROVIDER_FAILURE
        assert "cancelled" in reply.error
        assert provider.cancelled
        assert adapter.conversation_history == ()

    @pytest.mark.asyncio
    async def test_cancel_event_unused_when_reply_arrives(self, adapter):
        reply = await adapter.send_message("book", cancel_event=asyncio.Event())
        assert reply.has_intention

    @pytest.mark.asyncio
    async def test_outer_cancellation_propagates(self):
        provider = HangingProvider()
        adapter = AgenticLLMAdapter(provider)
        task = asyncio.ensure_future(adapter.send_message("book", timeout=5.0))
        await provider.started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task


# =============================================================================
# System prompt
# =============================================================================


class TestSystemPrompt:
    """Test prompt assembly."""

    def test_mentions_schema_and_actions(self, adapter):
        prompt = adapter.system_prompt
        assert "Intention JSON Schema" in prompt
        for action in IntentionAction:
            assert action.value in prompt

    def test_custom_instructions_appended(self):
        config = LLMRuntimeConfig(custom_system_prompt="Always be brief.")
        adapter = AgenticLLMAdapter(MockLLMProvider(), config)
        assert adapter.system_prompt.endswith("Additional instructions:\nAlways be brief.")

    def test_provider_name(self, adapter):
        assert adapter.provider_name == "mock"
