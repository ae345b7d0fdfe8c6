"""Materializer Domain Aggregate Root.

The MaterializerRegistry is the lookup boundary between resolution and
the external rendering layer. It stores renderer handles; it never
renders anything itself.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set, Union

from agentic_ui.domains.resolution.value_objects import ResolvedUI
from agentic_ui.domains.shared.kernel import ManifestationTraits, ResolutionPattern

from .value_objects import MaterializerRegistration, RendererHandle, TraitPredicate

logger = logging.getLogger(__name__)


@dataclass
class MaterializerRegistry:
    """Registry of renderer handles keyed by pattern.

    Invariants:
        - Lookups scan registrations in registration order; the first one
          whose pattern matches and whose predicate accepts the traits wins
        - A registration without a predicate accepts any traits, so
          register specialised renderers before the general one
    """
    _registrations: List[MaterializerRegistration] = field(default_factory=list)

    def register(
        self,
        pattern: Union[ResolutionPattern, str],
        handle: RendererHandle,
        can_handle: Optional[TraitPredicate] = None,
    ) -> MaterializerRegistration:
        """Offer ``handle`` for ``pattern``.

        Raises:
            ValueError: If ``handle`` is None
        """
        if handle is None:
            raise ValueError("Materializer handle must not be None")
        registration = MaterializerRegistration(
            pattern=ResolutionPattern(pattern),
            handle=handle,
            can_handle=can_handle,
        )
        self._registrations.append(registration)
        return registration

    def find_materializer(
        self,
        pattern: Union[ResolutionPattern, str],
        traits: ManifestationTraits,
    ) -> Optional[RendererHandle]:
        """Handle for the first registration accepting (pattern, traits).

        Raises:
            ValueError: If ``pattern`` is not a known pattern name
        """
        pattern = ResolutionPattern(pattern)
        for registration in self._registrations:
            if registration.accepts(pattern, traits):
                return registration.handle
        logger.debug("No materializer registered for pattern %s", pattern.value)
        return None

    def find_for(self, resolved: ResolvedUI) -> Optional[RendererHandle]:
        """Lookup keyed by a ResolvedUI."""
        return self.find_materializer(resolved.pattern, resolved.traits)

    @property
    def patterns(self) -> Set[ResolutionPattern]:
        """Patterns with at least one registration."""
        return {r.pattern for r in self._registrations}

    def __len__(self) -> int:
        return len(self._registrations)
