"""Affinity Domain Value Objects."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, Optional

from agentic_ui.domains.constraint.value_objects import (
    ConstraintDimension,
    ConstraintSet,
)


@dataclass(frozen=True)
class ConstraintCondition:
    """A predicate over one constraint dimension.

    Either ``values`` (the dimension must hold one of them) or ``at_least``
    (numeric dimensions only: the value must be at least this) is set,
    never both.

    Examples:
        >>> ConstraintCondition.one_of(ConstraintDimension.VIEWPORT, ViewportClass.MOBILE)
        >>> ConstraintCondition.minimum(ConstraintDimension.NESTING_LEVEL, 2)
    """
    dimension: ConstraintDimension
    values: FrozenSet[Any] = frozenset()
    at_least: Optional[int] = None

    def __post_init__(self) -> None:
        if bool(self.values) == (self.at_least is not None):
            raise ValueError(
                f"Condition on {self.dimension.value} needs exactly one of "
                f"'values' or 'at_least'"
            )
        if self.at_least is not None and isinstance(self.dimension.default, bool):
            raise ValueError(
                f"'at_least' is not valid for boolean dimension "
                f"{self.dimension.value}"
            )

    @classmethod
    def one_of(cls, dimension: ConstraintDimension, *values: Any) -> ConstraintCondition:
        return cls(dimension=dimension, values=frozenset(values))

    @classmethod
    def minimum(cls, dimension: ConstraintDimension, level: int) -> ConstraintCondition:
        return cls(dimension=dimension, at_least=level)

    def _accepts(self, value: Any) -> bool:
        if self.at_least is not None:
            return isinstance(value, int) and value >= self.at_least
        return value in self.values

    def matches(self, constraints: ConstraintSet) -> bool:
        return self._accepts(constraints.value_of(self.dimension))

    @property
    def excludes_default(self) -> bool:
        """True when the default value of the dimension fails this condition."""
        return not self._accepts(self.dimension.default)

    def describe(self) -> str:
        if self.at_least is not None:
            return f"{self.dimension.value}>={self.at_least}"
        shown = sorted(
            str(getattr(v, "value", v)).lower() for v in self.values
        )
        return f"{self.dimension.value}={'|'.join(shown)}"
