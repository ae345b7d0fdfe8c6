"""Materializer Domain Value Objects."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from agentic_ui.domains.shared.kernel import ManifestationTraits, ResolutionPattern

# Whatever the rendering layer uses to paint a pattern: a component, a
# template name, a callable. Opaque here.
RendererHandle = Any

TraitPredicate = Callable[[ManifestationTraits], bool]


@dataclass(frozen=True)
class MaterializerRegistration:
    """A renderer offered for one pattern, optionally limited by traits."""
    pattern: ResolutionPattern
    handle: RendererHandle
    can_handle: Optional[TraitPredicate] = None

    def accepts(self, pattern: ResolutionPattern, traits: ManifestationTraits) -> bool:
        if pattern is not self.pattern:
            return False
        return self.can_handle is None or bool(self.can_handle(traits))
