from __future__ import annotations

"""Utilities for idempotent Prometheus metric registration.

Status helpers are imported from many reconcilers, each of which may reload
modules in tests. Metrics are therefore fetched-or-created against a registry
instead of being constructed unconditionally, and every registered metric
gets a reset hook so tests can start from zero.
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Dict, Tuple

from prometheus_client import CollectorRegistry, Counter, REGISTRY as global_registry
from prometheus_client.metrics import MetricWrapperBase

__all__ = [
    "get_metric_value",
    "get_or_create_counter",
    "reset_metrics",
]

RegistryKey = Tuple[CollectorRegistry, str]

_METRIC_CACHE: Dict[RegistryKey, MetricWrapperBase] = {}
_RESET_CALLBACKS: Dict[RegistryKey, Callable[[], None]] = {}


def get_or_create_counter(
    name: str,
    documentation: str,
    labelnames: Sequence[str] | None = None,
    *,
    registry: CollectorRegistry | None = None,
) -> Counter:
    """Return an existing counter or register a new one."""

    reg = registry or global_registry
    labels = tuple(labelnames or ())
    cache_key = (reg, name)
    cached = _METRIC_CACHE.get(cache_key)
    if isinstance(cached, Counter) and _labels_match(cached, labels):
        return cached

    existing = _lookup_metric(reg, name)
    if existing is not None:
        if not isinstance(existing, Counter):
            raise TypeError(
                f"Metric '{name}' already registered with incompatible type {type(existing)!r}"
            )
        if not _labels_match(existing, labels):
            reg.unregister(existing)
            existing = None
    metric = existing if existing is not None else Counter(
        name, documentation, labels, registry=reg
    )
    _METRIC_CACHE[cache_key] = metric
    _RESET_CALLBACKS[cache_key] = lambda: _default_reset(metric)
    return metric


def reset_metrics(
    names: Iterable[str] | None = None,
    *,
    registry: CollectorRegistry | None = None,
) -> None:
    """Invoke registered reset callbacks for ``names``.

    When ``names`` is ``None`` every registered metric for ``registry`` is
    reset.
    """

    reg = registry or global_registry
    requested = None if names is None else set(names)
    for key, callback in list(_RESET_CALLBACKS.items()):
        if key[0] is not reg:
            continue
        if requested is not None and key[1] not in requested:
            continue
        callback()


def get_metric_value(
    metric: MetricWrapperBase, labels: Mapping[str, str] | None = None
) -> float:
    """Return the most recent sample value for ``metric``.

    When ``labels`` are provided the matching labelled sample is returned,
    otherwise the first unlabelled sample is used. Missing samples read as 0.
    """

    for family in metric.collect():
        for sample in family.samples:
            if sample.name.endswith("_created"):
                continue
            if labels is None and sample.labels:
                continue
            if labels is not None and sample.labels != dict(labels):
                continue
            return float(sample.value)
    return 0.0


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _default_reset(metric: MetricWrapperBase) -> None:
    if tuple(getattr(metric, "_labelnames", ())):
        metric.clear()
        return
    metric._value.set(0)  # type: ignore[attr-defined]


def _lookup_metric(registry: CollectorRegistry, name: str) -> MetricWrapperBase | None:
    try:
        collectors = registry._names_to_collectors  # type: ignore[attr-defined]
    except AttributeError:  # pragma: no cover - registry internals moved
        return None
    return collectors.get(name)


def _labels_match(metric: MetricWrapperBase, expected: Sequence[str]) -> bool:
    return tuple(getattr(metric, "_labelnames", ())) == tuple(expected)
