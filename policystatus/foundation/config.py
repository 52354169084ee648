from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, FrozenSet, Mapping

import yaml  # type: ignore[import-untyped]

from policystatus.status.policy import MAX_POLICY_ANCESTORS

logger = logging.getLogger(__name__)

DEFAULT_CONTROLLER_NAME = "gateway.envoyproxy.io/gatewayclass-controller"
STATUS_SECTION = "status"


@dataclass
class StatusConfig:
    """Settings for the controller writing policy ancestor status."""

    controller_name: str = DEFAULT_CONTROLLER_NAME
    max_policy_ancestors: int = MAX_POLICY_ANCESTORS
    aggregate_on_overflow: bool = True

    def __post_init__(self) -> None:
        if not self.controller_name:
            raise ValueError("status.controller_name must not be empty")
        if int(self.max_policy_ancestors) < 1:
            raise ValueError("status.max_policy_ancestors must be positive")


@dataclass
class UnifiedConfig:
    status: StatusConfig = field(default_factory=StatusConfig)
    present_sections: FrozenSet[str] = field(default_factory=frozenset)


def find_config_file(cwd: Path | None = None) -> str | None:
    """Return the first discoverable configuration file in ``cwd``."""

    base = Path.cwd() if cwd is None else cwd

    for name in ("policystatus.yml", "policystatus.yaml"):
        candidate = base / name
        if candidate.is_file():
            return str(candidate)
    return None


def _load_document(path: str) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            try:
                data = yaml.safe_load(fh) or {}
            except yaml.YAMLError as exc:
                logger.error("Failed to parse configuration file %s: %s", path, exc)
                raise ValueError(f"Failed to parse configuration file {path}") from exc
    except OSError as exc:
        logger.error("Unable to open configuration file %s: %s", path, exc)
        raise

    if not isinstance(data, dict):
        raise TypeError("policystatus config must be a mapping")
    return data


def _status_section(data: Mapping[str, Any]) -> dict[str, Any]:
    raw = data.get(STATUS_SECTION)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise TypeError(f"{STATUS_SECTION} section must be a mapping")
    return dict(raw)


def load_config(path: str) -> UnifiedConfig:
    """Parse YAML/JSON and populate :class:`UnifiedConfig`.

    ``present_sections`` records which top-level sections the file actually
    defined, so callers can tell defaults apart from explicit settings.
    """
    data = _load_document(path)
    present = frozenset(
        name for name, value in data.items() if name == STATUS_SECTION and isinstance(value, dict)
    )
    return UnifiedConfig(
        status=StatusConfig(**_status_section(data)),
        present_sections=present,
    )


__all__ = [
    "DEFAULT_CONTROLLER_NAME",
    "STATUS_SECTION",
    "StatusConfig",
    "UnifiedConfig",
    "find_config_file",
    "load_config",
]
