"""LLM integration: providers, prompt, response parsing and the adapter."""

from .config import LLMRuntimeConfig, load_llm_config
from .providers import (
    ChatMessage,
    LLMProvider,
    OpenAIProvider,
    ProviderError,
    ProviderReply,
)
from .mock_provider import MockLLMProvider
from .parser import (
    JsonPayload,
    extract_and_parse_intention,
    extract_json_payload,
    parse_intention_response,
)
from .prompt_template import build_system_prompt
from .adapter import AdapterReply, AgenticLLMAdapter

__all__ = [
    "LLMRuntimeConfig", "load_llm_config",
    "ChatMessage", "LLMProvider", "OpenAIProvider", "ProviderError",
    "ProviderReply", "MockLLMProvider",
    "JsonPayload", "extract_and_parse_intention", "extract_json_payload",
    "parse_intention_response", "build_system_prompt",
    "AdapterReply", "AgenticLLMAdapter",
]
