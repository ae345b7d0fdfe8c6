"""Materializer Bounded Context.

Lookup contract for the external rendering layer: which renderer paints a
given pattern with given traits.
"""
from .value_objects import MaterializerRegistration, RendererHandle, TraitPredicate
from .aggregates import MaterializerRegistry

__all__ = [
    "MaterializerRegistration", "RendererHandle", "TraitPredicate",
    "MaterializerRegistry",
]
