"""Per-ancestor condition writers for policy status.

A policy attached to several gateways reports one :class:`PolicyAncestorStatus`
per (ancestor reference, controller name) pair. Both the ancestor list and
each condition list behave as insertion-ordered maps: entries are located by
key and updated in place, or appended at the end when missing.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from . import metrics as status_metrics
from .conditions import (
    MAX_CONDITION_MESSAGE_LENGTH,
    Clock,
    error_to_condition_message,
    set_condition,
    truncate_condition_message,
)
from .models import (
    ConditionStatus,
    ParentReference,
    PolicyAncestorStatus,
    PolicyConditionReason,
    PolicyConditionType,
    PolicyStatus,
)

logger = logging.getLogger(__name__)

# Gateway API caps ``PolicyStatus.ancestors`` at 16 entries.
MAX_POLICY_ANCESTORS = 16

POLICY_ACCEPTED_MESSAGE = "Policy has been accepted."
ANCESTORS_AGGREGATED_MESSAGE = (
    "Ancestors have been aggregated because the number of policy ancestors exceeds {max}."
)

RefKey = Tuple[Optional[str], Optional[str], Optional[str], str, Optional[str], Optional[int]]


class PolicyResolveError(Exception):
    """A policy target could not be resolved.

    ``reason`` is reported verbatim as the condition reason.
    """

    def __init__(self, reason: PolicyConditionReason | str, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


def ancestor_ref_key(ref: ParentReference) -> RefKey:
    return (ref.group, ref.kind, ref.namespace, ref.name, ref.section_name, ref.port)


def find_policy_ancestor(
    status: PolicyStatus, ancestor_ref: ParentReference, controller_name: str
) -> PolicyAncestorStatus | None:
    key = ancestor_ref_key(ancestor_ref)
    for ancestor in status.ancestors:
        if ancestor.controller_name == controller_name and ancestor_ref_key(ancestor.ancestor_ref) == key:
            return ancestor
    return None


def set_condition_for_policy_ancestor(
    status: PolicyStatus,
    ancestor_ref: ParentReference,
    controller_name: str,
    condition_type: PolicyConditionType | str,
    condition_status: ConditionStatus | str,
    reason: PolicyConditionReason | str,
    message: str,
    observed_generation: int,
    *,
    now: Clock | None = None,
) -> None:
    """Upsert one condition on the ancestor entry keyed by ``ancestor_ref`` and
    ``controller_name``.

    The message is bounded by :func:`truncate_condition_message` first. A
    missing ancestor entry is appended after the existing ones; the list is
    never evicted from here, see :func:`truncate_policy_ancestors`.
    """

    bounded = truncate_condition_message(message)
    if len(message) > MAX_CONDITION_MESSAGE_LENGTH:
        logger.debug(
            "truncated condition message for %s from %d to %d characters",
            ancestor_ref.name,
            len(message),
            MAX_CONDITION_MESSAGE_LENGTH,
        )
        status_metrics.policy_status_message_truncated_total.labels(
            controller=controller_name
        ).inc()

    ancestor = find_policy_ancestor(status, ancestor_ref, controller_name)
    if ancestor is None:
        ancestor = PolicyAncestorStatus(
            ancestor_ref=ancestor_ref,
            controller_name=controller_name,
        )
        status.ancestors.append(ancestor)

    set_condition(
        ancestor.conditions,
        condition_type,
        condition_status,
        reason,
        bounded,
        observed_generation,
        now=now,
    )


def set_condition_for_policy_ancestors(
    status: PolicyStatus,
    ancestor_refs: Iterable[ParentReference],
    controller_name: str,
    condition_type: PolicyConditionType | str,
    condition_status: ConditionStatus | str,
    reason: PolicyConditionReason | str,
    message: str,
    observed_generation: int,
    *,
    now: Clock | None = None,
) -> None:
    for ref in ancestor_refs:
        set_condition_for_policy_ancestor(
            status,
            ref,
            controller_name,
            condition_type,
            condition_status,
            reason,
            message,
            observed_generation,
            now=now,
        )


def set_accepted_for_policy_ancestors(
    status: PolicyStatus,
    ancestor_refs: Iterable[ParentReference],
    controller_name: str,
    observed_generation: int,
    *,
    now: Clock | None = None,
) -> None:
    set_condition_for_policy_ancestors(
        status,
        ancestor_refs,
        controller_name,
        PolicyConditionType.ACCEPTED,
        ConditionStatus.TRUE,
        PolicyConditionReason.ACCEPTED,
        POLICY_ACCEPTED_MESSAGE,
        observed_generation,
        now=now,
    )


def set_translation_error_for_policy_ancestors(
    status: PolicyStatus,
    ancestor_refs: Iterable[ParentReference],
    controller_name: str,
    observed_generation: int,
    err: BaseException | str,
    *,
    now: Clock | None = None,
) -> None:
    """Mark each ancestor as not accepted because the policy failed to translate."""

    set_condition_for_policy_ancestors(
        status,
        ancestor_refs,
        controller_name,
        PolicyConditionType.ACCEPTED,
        ConditionStatus.FALSE,
        PolicyConditionReason.INVALID,
        error_to_condition_message(err),
        observed_generation,
        now=now,
    )


def set_resolve_error_for_policy_ancestors(
    status: PolicyStatus,
    ancestor_refs: Iterable[ParentReference],
    controller_name: str,
    observed_generation: int,
    err: PolicyResolveError,
    *,
    now: Clock | None = None,
) -> None:
    set_condition_for_policy_ancestors(
        status,
        ancestor_refs,
        controller_name,
        PolicyConditionType.ACCEPTED,
        ConditionStatus.FALSE,
        err.reason,
        err.message,
        observed_generation,
        now=now,
    )


def with_condition_for_policy_ancestor(
    status: PolicyStatus,
    ancestor_ref: ParentReference,
    controller_name: str,
    condition_type: PolicyConditionType | str,
    condition_status: ConditionStatus | str,
    reason: PolicyConditionReason | str,
    message: str,
    observed_generation: int,
    *,
    now: Clock | None = None,
) -> PolicyStatus:
    """Return a copy of ``status`` with the condition applied.

    ``status`` itself is left untouched, so an interrupted update never leaves
    a half-written structure visible to other readers.
    """

    updated = status.model_copy(deep=True)
    set_condition_for_policy_ancestor(
        updated,
        ancestor_ref,
        controller_name,
        condition_type,
        condition_status,
        reason,
        message,
        observed_generation,
        now=now,
    )
    return updated


def truncate_policy_ancestors(
    status: PolicyStatus,
    controller_name: str,
    observed_generation: int,
    *,
    max_ancestors: int = MAX_POLICY_ANCESTORS,
    now: Clock | None = None,
) -> bool:
    """Cut ``status.ancestors`` down to ``max_ancestors`` entries.

    The first ``max_ancestors`` entries in insertion order are kept, and every
    kept entry owned by ``controller_name`` gets an ``Aggregated`` condition
    so readers can tell the list is incomplete. Returns ``True`` when entries
    were dropped.
    """

    total = len(status.ancestors)
    if total <= max_ancestors:
        return False

    logger.warning(
        "policy status lists %d ancestors, keeping the first %d for controller %s",
        total,
        max_ancestors,
        controller_name,
    )
    del status.ancestors[max_ancestors:]
    message = ANCESTORS_AGGREGATED_MESSAGE.format(max=max_ancestors)
    for ancestor in status.ancestors:
        if ancestor.controller_name != controller_name:
            continue
        set_condition(
            ancestor.conditions,
            PolicyConditionType.AGGREGATED,
            ConditionStatus.TRUE,
            PolicyConditionReason.AGGREGATED,
            message,
            observed_generation,
            now=now,
        )
    status_metrics.policy_status_ancestors_truncated_total.labels(
        controller=controller_name
    ).inc()
    return True


__all__ = [
    "ANCESTORS_AGGREGATED_MESSAGE",
    "MAX_POLICY_ANCESTORS",
    "POLICY_ACCEPTED_MESSAGE",
    "PolicyResolveError",
    "ancestor_ref_key",
    "find_policy_ancestor",
    "set_accepted_for_policy_ancestors",
    "set_condition_for_policy_ancestor",
    "set_condition_for_policy_ancestors",
    "set_resolve_error_for_policy_ancestors",
    "set_translation_error_for_policy_ancestors",
    "truncate_policy_ancestors",
    "with_condition_for_policy_ancestor",
]
