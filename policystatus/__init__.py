"""Per-ancestor condition status for gateway extension policies."""

from __future__ import annotations

from .status import (
    MAX_CONDITION_MESSAGE_LENGTH,
    MAX_POLICY_ANCESTORS,
    TRUNCATION_SUFFIX,
    Condition,
    ConditionStatus,
    ParentReference,
    PolicyAncestorStatus,
    PolicyConditionReason,
    PolicyConditionType,
    PolicyResolveError,
    PolicyStatus,
    set_condition_for_policy_ancestor,
    truncate_condition_message,
    truncate_policy_ancestors,
    with_condition_for_policy_ancestor,
)

__all__ = [
    "Condition",
    "ConditionStatus",
    "MAX_CONDITION_MESSAGE_LENGTH",
    "MAX_POLICY_ANCESTORS",
    "ParentReference",
    "PolicyAncestorStatus",
    "PolicyConditionReason",
    "PolicyConditionType",
    "PolicyResolveError",
    "PolicyStatus",
    "TRUNCATION_SUFFIX",
    "set_condition_for_policy_ancestor",
    "truncate_condition_message",
    "truncate_policy_ancestors",
    "with_condition_for_policy_ancestor",
]
