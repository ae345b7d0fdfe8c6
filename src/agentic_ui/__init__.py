"""agentic-ui: resolve what a user must do into how to present it.

An Intention describes the task without naming a widget. The
ResolutionEngine weighs it against device, accessibility, design-system
and context constraints using a table of affinity rules, and returns a
Resolution with render instructions for an external rendering layer.
"""

__version__ = "0.3.0"

from agentic_ui.domains.constraint import ConstraintSet
from agentic_ui.domains.intention import Intention, IntentionAction
from agentic_ui.domains.resolution import Resolution, ResolutionEngine, to_resolved_ui
from agentic_ui.domains.shared import ResolutionPattern

__all__ = [
    "__version__",
    "ConstraintSet",
    "Intention",
    "IntentionAction",
    "Resolution",
    "ResolutionEngine",
    "ResolutionPattern",
    "to_resolved_ui",
]
