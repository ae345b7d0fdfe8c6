"""Configuration helpers for the LLM adapter."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_DEFAULT_MODEL = "gpt-4o-mini"
_DEFAULT_MAX_TOKENS = 800
_DEFAULT_TEMPERATURE = 0.2
_DEFAULT_TIMEOUT = 30.0
_ENV_LOADED = False


@dataclass(frozen=True)
class LLMRuntimeConfig:
    """Holds runtime settings for the LLM adapter and providers.

    ``api_key`` may be empty; only the OpenAI provider needs one, and it
    checks when it is constructed.
    """

    api_key: str = ""
    model: str = _DEFAULT_MODEL
    base_url: Optional[str] = None
    temperature: float = _DEFAULT_TEMPERATURE
    max_tokens: int = _DEFAULT_MAX_TOKENS
    timeout: Optional[float] = _DEFAULT_TIMEOUT
    custom_system_prompt: Optional[str] = None

    def with_overrides(
        self,
        *,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        custom_system_prompt: Optional[str] = None,
    ) -> "LLMRuntimeConfig":
        """Return a copy with the provided overrides applied."""

        cfg = self
        if api_key:
            cfg = replace(cfg, api_key=api_key)
        if model:
            cfg = replace(cfg, model=model)
        if base_url is not None:
            cfg = replace(cfg, base_url=base_url or None)
        if temperature is not None:
            cfg = replace(cfg, temperature=temperature)
        if max_tokens is not None:
            cfg = replace(cfg, max_tokens=max_tokens)
        if timeout is not None:
            cfg = replace(cfg, timeout=timeout)
        if custom_system_prompt is not None:
            cfg = replace(cfg, custom_system_prompt=custom_system_prompt or None)
        return cfg


def load_llm_config(
    *,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    timeout: Optional[float] = None,
    custom_system_prompt: Optional[str] = None,
) -> LLMRuntimeConfig:
    """Load runtime configuration from environment variables and overrides.

    ``AGENTIC_UI_LLM_*`` variables take precedence over the ``OPENAI_*``
    ones; explicit arguments take precedence over both.
    """

    _ensure_env_loaded()
    resolved_key = (
        api_key
        or os.getenv("AGENTIC_UI_LLM_API_KEY")
        or os.getenv("OPENAI_API_KEY", "")
    ).strip()

    resolved_model = (
        model
        or os.getenv("AGENTIC_UI_LLM_MODEL")
        or os.getenv("OPENAI_MODEL")
        or _DEFAULT_MODEL
    )

    resolved_base_url = base_url
    if resolved_base_url is None:
        resolved_base_url = os.getenv("AGENTIC_UI_LLM_BASE_URL") or os.getenv(
            "OPENAI_BASE_URL"
        )
        if resolved_base_url:
            resolved_base_url = resolved_base_url.strip() or None

    resolved_temperature = (
        temperature if temperature is not None
        else _env_number("AGENTIC_UI_LLM_TEMPERATURE", float, _DEFAULT_TEMPERATURE)
    )
    resolved_tokens = (
        max_tokens if max_tokens is not None
        else _env_number("AGENTIC_UI_LLM_MAX_TOKENS", int, _DEFAULT_MAX_TOKENS)
    )
    resolved_timeout = (
        timeout if timeout is not None
        else _env_number("AGENTIC_UI_LLM_TIMEOUT", float, _DEFAULT_TIMEOUT)
    )

    return LLMRuntimeConfig(
        api_key=resolved_key,
        model=resolved_model,
        base_url=resolved_base_url,
        temperature=resolved_temperature,
        max_tokens=resolved_tokens,
        timeout=resolved_timeout,
        custom_system_prompt=custom_system_prompt,
    )


def _env_number(name: str, kind: type, default):
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return kind(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _ensure_env_loaded() -> None:
    global _ENV_LOADED
    if _ENV_LOADED:
        return
    _ENV_LOADED = True
    dotenv_path = Path.cwd() / ".env"
    if dotenv_path.exists():
        load_dotenv(dotenv_path=dotenv_path)
    else:
        load_dotenv()  # Fallback to default search
