"""Policy ancestor status maintenance."""

from .conditions import (
    MAX_CONDITION_MESSAGE_LENGTH,
    TRUNCATION_SUFFIX,
    error_to_condition_message,
    find_condition,
    set_condition,
    truncate_condition_message,
    utc_now,
)
from .models import (
    Condition,
    ConditionStatus,
    ParentReference,
    PolicyAncestorStatus,
    PolicyConditionReason,
    PolicyConditionType,
    PolicyStatus,
)
from .policy import (
    MAX_POLICY_ANCESTORS,
    PolicyResolveError,
    find_policy_ancestor,
    set_accepted_for_policy_ancestors,
    set_condition_for_policy_ancestor,
    set_condition_for_policy_ancestors,
    set_resolve_error_for_policy_ancestors,
    set_translation_error_for_policy_ancestors,
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
    "error_to_condition_message",
    "find_condition",
    "find_policy_ancestor",
    "set_accepted_for_policy_ancestors",
    "set_condition",
    "set_condition_for_policy_ancestor",
    "set_condition_for_policy_ancestors",
    "set_resolve_error_for_policy_ancestors",
    "set_translation_error_for_policy_ancestors",
    "truncate_condition_message",
    "truncate_policy_ancestors",
    "utc_now",
    "with_condition_for_policy_ancestor",
]
