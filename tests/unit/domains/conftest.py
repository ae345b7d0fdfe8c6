"""Pytest fixtures for domain tests.

These fixtures support testing the resolution bounded contexts:
- Intention Context
- Constraint Context
- Affinity Context
- Resolution Context
- Materializer Context
"""

from __future__ import annotations

import itertools
from datetime import datetime
from typing import List

import pytest

from agentic_ui.config import ResolutionSettings
from agentic_ui.domains.affinity import AffinityRuleTable
from agentic_ui.domains.intention import (
    OptionItem,
    create_selection_intention,
)
from agentic_ui.domains.resolution import ResolutionEngine


# =============================================================================
# Mock EventPublisher
# =============================================================================


class MockEventPublisher:
    """Collects published events."""

    def __init__(self):
        self.events: list = []

    def publish(self, event: object) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> list:
        return [e for e in self.events if isinstance(e, event_type)]


FIXED_TIME = datetime(2024, 5, 1, 12, 0, 0)


def fixed_ids(prefix: str = "res"):
    """Deterministic id factory: res-1, res-2, ..."""
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def rule_table() -> AffinityRuleTable:
    return AffinityRuleTable.with_builtins()


@pytest.fixture
def event_publisher() -> MockEventPublisher:
    return MockEventPublisher()


@pytest.fixture
def engine(rule_table, event_publisher) -> ResolutionEngine:
    return ResolutionEngine(
        rule_table=rule_table,
        settings=ResolutionSettings(),
        event_publisher=event_publisher,
        id_factory=fixed_ids(),
        clock=lambda: FIXED_TIME,
    )


@pytest.fixture
def two_options() -> List[OptionItem]:
    return [OptionItem(value="a", label="A"), OptionItem(value="b", label="B")]


@pytest.fixture
def pick_one(two_options):
    return create_selection_intention(two_options, "Pick one")
