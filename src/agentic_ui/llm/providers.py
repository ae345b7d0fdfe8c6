"""LLM provider protocol and the OpenAI chat completion provider."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from openai import AsyncOpenAI, OpenAIError

from .config import LLMRuntimeConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatMessage:
    """A message in the conversation. ``role`` is user, assistant or system."""

    role: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ProviderReply:
    """Raw text returned by a provider."""

    content: str
    raw_response: Any = None


class LLMProvider(Protocol):
    """Anything that can turn a conversation into a reply.

    Implementations may raise any exception; the adapter converts every
    failure into a PROVIDER_FAILURE result.
    """

    name: str

    async def complete(self, messages: Sequence[ChatMessage]) -> ProviderReply: ...


class ProviderError(RuntimeError):
    """Raised by providers when the upstream service call fails."""


class OpenAIProvider:
    """Chat completion provider backed by ``openai.AsyncOpenAI``."""

    name = "openai"

    def __init__(
        self,
        config: LLMRuntimeConfig,
        *,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self._config = config
        if client is None:
            if not config.api_key:
                raise RuntimeError(
                    "OPENAI_API_KEY (or AGENTIC_UI_LLM_API_KEY) must be set to "
                    "use the OpenAI provider"
                )
            client_kwargs: Dict[str, Any] = {"api_key": config.api_key}
            if config.base_url:
                client_kwargs["base_url"] = config.base_url
            if config.timeout is not None:
                client_kwargs["timeout"] = config.timeout
            self._mute_http_logging()
            client = AsyncOpenAI(**client_kwargs)
        self._client = client

    async def complete(self, messages: Sequence[ChatMessage]) -> ProviderReply:
        """Call the chat completions API and return the first choice's text."""

        payload: List[Dict[str, str]] = [m.to_dict() for m in messages]
        try:
            completion = await self._client.chat.completions.create(
                model=self._config.model,
                messages=payload,
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
            )
        except OpenAIError as exc:
            raise ProviderError(f"OpenAI chat completion failed: {exc}") from exc

        choice = completion.choices[0].message
        logger.debug("OpenAI reply received (model=%s)", self._config.model)
        return ProviderReply(content=choice.content or "", raw_response=completion)

    @staticmethod
    def _mute_http_logging() -> None:
        noisy_loggers = [
            "httpx",
            "httpcore",
            "openai",
            "openai._base_client",
        ]
        for name in noisy_loggers:
            noisy = logging.getLogger(name)
            noisy.setLevel(logging.WARNING)
            noisy.propagate = False
            if not noisy.handlers:
                noisy.addHandler(logging.NullHandler())
