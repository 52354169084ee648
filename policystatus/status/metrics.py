from __future__ import annotations

"""Prometheus metrics for policy status maintenance."""

from policystatus.foundation.common.metrics_factory import (
    get_or_create_counter,
    reset_metrics as reset_registered_metrics,
)

_REGISTERED_METRICS: set[str] = set()


def _counter(name: str, documentation: str, labelnames: tuple[str, ...] | None = None):
    metric = get_or_create_counter(name, documentation, labelnames)
    _REGISTERED_METRICS.add(name)
    return metric


policy_status_message_truncated_total = _counter(
    "policy_status_message_truncated_total",
    "Condition messages truncated to the maximum message length",
    ("controller",),
)

policy_status_ancestors_truncated_total = _counter(
    "policy_status_ancestors_truncated_total",
    "Policy statuses whose ancestor list was cut to the maximum ancestor count",
    ("controller",),
)


def reset_metrics() -> None:
    """Reset metrics for tests."""

    reset_registered_metrics(_REGISTERED_METRICS)


__all__ = [
    "policy_status_ancestors_truncated_total",
    "policy_status_message_truncated_total",
    "reset_metrics",
]
