"""Adapter between a chat provider and the intention pipeline.

The provider call is the only suspendable step in the system. The adapter
bounds it with a timeout and an optional cancellation event, and turns
every way it can go wrong into a PROVIDER_FAILURE result.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from agentic_ui.domains.intention.value_objects import Intention
from agentic_ui.domains.shared.results import FailureKind, ParseFailure, ParseResult

from .config import LLMRuntimeConfig
from .parser import extract_and_parse_intention
from .prompt_template import build_system_prompt
from .providers import ChatMessage, LLMProvider, ProviderReply

logger = logging.getLogger(__name__)


class _CallCancelled(Exception):
    """The caller's cancellation event fired before the provider replied."""


@dataclass(frozen=True)
class AdapterReply:
    """One conversational turn.

    Attributes:
        text: The provider's raw reply; empty when the call failed
        result: The parsed intention, or why there is none
    """

    text: str
    result: ParseResult

    @property
    def has_intention(self) -> bool:
        return self.result.success

    @property
    def intention(self) -> Optional[Intention]:
        return self.result.intention if self.result.success else None

    @property
    def message(self) -> Optional[str]:
        """Prose to show the user alongside (or instead of) the intention."""
        if self.result.success:
            return self.result.message
        return self.text or None

    @property
    def error(self) -> Optional[str]:
        return None if self.result.success else self.result.error


class AgenticLLMAdapter:
    """Wraps a provider with the intention system prompt and parsing.

    Usage:

        adapter = AgenticLLMAdapter(MockLLMProvider())
        reply = await adapter.send_message("I want to book an appointment")
        # reply.intention.action == IntentionAction.CHOOSE_ONE
    """

    def __init__(
        self,
        provider: LLMProvider,
        config: Optional[LLMRuntimeConfig] = None,
    ) -> None:
        self._provider = provider
        self._config = config or LLMRuntimeConfig()
        self._system_prompt = build_system_prompt(self._config.custom_system_prompt)
        self._history: List[ChatMessage] = []

    @property
    def provider_name(self) -> str:
        return self._provider.name

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    @property
    def conversation_history(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._history)

    def reset_conversation(self) -> None:
        self._history = []

    async def interpret(
        self,
        messages: Sequence[ChatMessage],
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ParseResult:
        """Ask the provider for an intention. Stateless; never raises.

        Args:
            messages: Conversation so far; the system prompt is prepended
            timeout: Seconds to wait; defaults to the configured timeout
            cancel_event: Set it to abandon the call

        Returns:
            ParseSuccess, or a ParseFailure of kind PROVIDER_FAILURE,
            MALFORMED_PROVIDER_OUTPUT or SCHEMA_VIOLATION.
        """
        outcome = await self._complete(
            [self._system_message(), *messages], timeout, cancel_event,
        )
        if isinstance(outcome, ParseFailure):
            return outcome
        return extract_and_parse_intention(outcome.content)

    async def send_message(
        self,
        text: str,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> AdapterReply:
        """Send a user message in the running conversation.

        History only changes when the provider replies: a failed call
        leaves it exactly as it was.
        """
        user_message = ChatMessage(role="user", content=text)
        outcome = await self._complete(
            [self._system_message(), *self._history, user_message],
            timeout,
            cancel_event,
        )
        if isinstance(outcome, ParseFailure):
            return AdapterReply(text="", result=outcome)

        self._history.append(user_message)
        self._history.append(ChatMessage(role="assistant", content=outcome.content))
        return AdapterReply(
            text=outcome.content,
            result=extract_and_parse_intention(outcome.content),
        )

    def _system_message(self) -> ChatMessage:
        return ChatMessage(role="system", content=self._system_prompt)

    async def _complete(
        self,
        messages: Sequence[ChatMessage],
        timeout: Optional[float],
        cancel_event: Optional[asyncio.Event],
    ):
        """Provider reply, or a PROVIDER_FAILURE describing why there is none."""
        effective_timeout = timeout if timeout is not None else self._config.timeout
        name = self._provider.name

        if cancel_event is not None and cancel_event.is_set():
            return self._failure(f"{name} provider call was cancelled before it started")

        try:
            return await self._await_reply(messages, effective_timeout, cancel_event)
        except asyncio.TimeoutError:
            logger.warning("%s provider timed out after %ss", name, effective_timeout)
            return self._failure(
                f"{name} provider timed out after {effective_timeout}s"
            )
        except _CallCancelled:
            logger.info("%s provider call cancelled by caller", name)
            return self._failure(f"{name} provider call was cancelled")
        except asyncio.CancelledError:
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            logger.info("%s provider call was cancelled", name)
            return self._failure(f"{name} provider call was cancelled")
        except Exception as exc:
            logger.warning("%s provider failed: %s", name, exc)
            return self._failure(f"{name} provider failed: {exc}")

    async def _await_reply(
        self,
        messages: Sequence[ChatMessage],
        timeout: Optional[float],
        cancel_event: Optional[asyncio.Event],
    ) -> ProviderReply:
        call = self._provider.complete(messages)
        if cancel_event is None:
            return await asyncio.wait_for(call, timeout)

        provider_task = asyncio.ensure_future(call)
        cancel_task = asyncio.ensure_future(cancel_event.wait())
        pending = {provider_task, cancel_task}
        done: set = set()
        try:
            done, pending = await asyncio.wait(
                pending, timeout=timeout, return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        if cancel_task in done:
            if provider_task.done() and not provider_task.cancelled():
                provider_task.exception()  # mark retrieved; the reply is discarded
            raise _CallCancelled()
        if provider_task in done:
            return provider_task.result()
        raise asyncio.TimeoutError()

    @staticmethod
    def _failure(error: str) -> ParseFailure:
        return ParseFailure(kind=FailureKind.PROVIDER_FAILURE, error=error)
