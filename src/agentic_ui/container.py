"""Dependency Injection Container for the agentic UI bounded contexts.

This container wires together:
- Affinity Context: the built-in, frozen rule table
- Resolution Context: the engine and render instruction builder
- Materializer Context: the renderer lookup registry
- LLM integration: runtime config and adapters

Usage:
    from agentic_ui.container import get_container

    container = get_container()
    outcome = container.resolution_engine.resolve(intention, constraints)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from agentic_ui.config import ResolutionSettings
    from agentic_ui.domains.affinity import AffinityRuleTable
    from agentic_ui.domains.materializer import MaterializerRegistry
    from agentic_ui.domains.resolution import (
        RenderInstructionBuilder,
        ResolutionEngine,
    )
    from agentic_ui.domains.shared.results import EventPublisher
    from agentic_ui.llm import AgenticLLMAdapter, LLMProvider, LLMRuntimeConfig

logger = logging.getLogger(__name__)

# Singleton container instance
_container: Optional["ServiceContainer"] = None


@dataclass
class ServiceContainer:
    """Constructs each shared service once, on first use.

    Every field may be supplied up front to replace the default, which is
    how tests inject settings or an event publisher.
    """

    _settings: Optional["ResolutionSettings"] = field(default=None, repr=False)
    _rule_table: Optional["AffinityRuleTable"] = field(default=None, repr=False)
    _render_builder: Optional["RenderInstructionBuilder"] = field(
        default=None, repr=False
    )
    _resolution_engine: Optional["ResolutionEngine"] = field(default=None, repr=False)
    _materializer_registry: Optional["MaterializerRegistry"] = field(
        default=None, repr=False
    )
    _llm_config: Optional["LLMRuntimeConfig"] = field(default=None, repr=False)
    event_publisher: Optional["EventPublisher"] = field(default=None, repr=False)

    @property
    def settings(self) -> "ResolutionSettings":
        """Engine settings from YAML and the environment."""
        if self._settings is None:
            from agentic_ui.config import load_resolution_settings
            self._settings = load_resolution_settings()
        return self._settings

    @property
    def rule_table(self) -> "AffinityRuleTable":
        """The built-in affinity rules, frozen."""
        if self._rule_table is None:
            from agentic_ui.domains.affinity import AffinityRuleTable
            self._rule_table = AffinityRuleTable.with_builtins()
            logger.debug("Loaded %d affinity rules", len(self._rule_table))
        return self._rule_table

    @property
    def render_builder(self) -> "RenderInstructionBuilder":
        if self._render_builder is None:
            from agentic_ui.domains.resolution import RenderInstructionBuilder
            self._render_builder = RenderInstructionBuilder()
        return self._render_builder

    @property
    def resolution_engine(self) -> "ResolutionEngine":
        """The shared engine. Safe for concurrent use."""
        if self._resolution_engine is None:
            from agentic_ui.domains.resolution import ResolutionEngine
            self._resolution_engine = ResolutionEngine(
                rule_table=self.rule_table,
                settings=self.settings,
                render_builder=self.render_builder,
                event_publisher=self.event_publisher,
            )
        return self._resolution_engine

    @property
    def materializer_registry(self) -> "MaterializerRegistry":
        if self._materializer_registry is None:
            from agentic_ui.domains.materializer import MaterializerRegistry
            self._materializer_registry = MaterializerRegistry()
        return self._materializer_registry

    @property
    def llm_config(self) -> "LLMRuntimeConfig":
        if self._llm_config is None:
            from agentic_ui.llm import load_llm_config
            self._llm_config = load_llm_config()
        return self._llm_config

    def create_llm_adapter(
        self, provider: Optional["LLMProvider"] = None
    ) -> "AgenticLLMAdapter":
        """A fresh adapter (adapters hold conversation history).

        Args:
            provider: Provider to wrap; an OpenAIProvider built from
                ``llm_config`` when omitted

        Raises:
            RuntimeError: If no provider is given and no API key is configured
        """
        from agentic_ui.llm import AgenticLLMAdapter, OpenAIProvider

        if provider is None:
            provider = OpenAIProvider(self.llm_config)
        return AgenticLLMAdapter(provider, self.llm_config)


def get_container() -> ServiceContainer:
    """Get the global service container instance.

    Creates the container on first call.
    """
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """Reset the global container.

    Useful for testing. The next get_container() call builds fresh
    services.
    """
    global _container
    _container = None
