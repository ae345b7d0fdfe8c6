"""Configuration for the resolution engine."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

_DEFAULT_BASE_CONFIDENCE = 0.5
_DEFAULT_ALTERNATIVE_MARGIN = 0.25

_ENV_PREFIX = "AGENTIC_UI_"


@dataclass(frozen=True)
class ResolutionSettings:
    """Tunables for the ResolutionEngine.

    Attributes:
        base_confidence: Confidence when no constraint is explained
            (also the floor for every candidate)
        alternative_margin: Maximum confidence gap between the winner and
            a pattern listed as an alternative
        alert_raises_urgency: Resolve alert-purpose intentions as if context
            urgency were at least HIGH. Off by default, so empty constraints
            always give the action baseline.
    """

    base_confidence: float = _DEFAULT_BASE_CONFIDENCE
    alternative_margin: float = _DEFAULT_ALTERNATIVE_MARGIN
    alert_raises_urgency: bool = False

    def __post_init__(self) -> None:
        if not 0.0 <= self.base_confidence <= 1.0:
            raise ValueError(
                f"base_confidence must be within [0, 1], got {self.base_confidence}"
            )
        if self.alternative_margin < 0.0:
            raise ValueError(
                f"alternative_margin must be non-negative, got {self.alternative_margin}"
            )

    def with_overrides(
        self,
        *,
        base_confidence: Optional[float] = None,
        alternative_margin: Optional[float] = None,
        alert_raises_urgency: Optional[bool] = None,
    ) -> "ResolutionSettings":
        """Return a copy with the provided overrides applied."""

        cfg = self
        if base_confidence is not None:
            cfg = replace(cfg, base_confidence=float(base_confidence))
        if alternative_margin is not None:
            cfg = replace(cfg, alternative_margin=float(alternative_margin))
        if alert_raises_urgency is not None:
            cfg = replace(cfg, alert_raises_urgency=bool(alert_raises_urgency))
        return cfg

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ResolutionSettings":
        """Build from a plain mapping, e.g. the ``resolution`` section of a YAML file."""

        config = cls()
        return config.with_overrides(
            base_confidence=data.get("base_confidence"),
            alternative_margin=data.get("alternative_margin"),
            alert_raises_urgency=data.get("alert_raises_urgency"),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "ResolutionSettings":
        """Load settings from a YAML file.

        Settings may sit at the top level or under a ``resolution`` key.
        """
        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"{yaml_path}: expected a mapping at the top level")
        section = data.get("resolution", data)
        return cls.from_mapping(section)


def load_resolution_settings(
    yaml_path: Optional[str] = None,
    *,
    base_confidence: Optional[float] = None,
    alternative_margin: Optional[float] = None,
    alert_raises_urgency: Optional[bool] = None,
) -> ResolutionSettings:
    """Load settings from YAML, then environment variables, then arguments.

    The YAML path defaults to ``AGENTIC_UI_CONFIG``. Environment variables
    ``AGENTIC_UI_BASE_CONFIDENCE``, ``AGENTIC_UI_ALTERNATIVE_MARGIN`` and
    ``AGENTIC_UI_ALERT_RAISES_URGENCY`` override the file; explicit arguments override both.
    """

    path = yaml_path or os.getenv(f"{_ENV_PREFIX}CONFIG")
    settings = ResolutionSettings.from_yaml(path) if path else ResolutionSettings()
    if path:
        logger.debug("Loaded resolution settings from %s", path)

    settings = settings.with_overrides(
        base_confidence=_env_float("BASE_CONFIDENCE"),
        alternative_margin=_env_float("ALTERNATIVE_MARGIN"),
        alert_raises_urgency=_env_bool("ALERT_RAISES_URGENCY"),
    )
    return settings.with_overrides(
        base_confidence=base_confidence,
        alternative_margin=alternative_margin,
        alert_raises_urgency=alert_raises_urgency,
    )


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(f"{_ENV_PREFIX}{name}", "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{_ENV_PREFIX}{name} must be a number, got {raw!r}") from exc


def _env_bool(name: str) -> Optional[bool]:
    raw = os.getenv(f"{_ENV_PREFIX}{name}", "").strip().lower()
    if not raw:
        return None
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{_ENV_PREFIX}{name} must be a boolean, got {raw!r}")
