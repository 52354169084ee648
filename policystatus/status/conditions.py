"""Condition list helpers shared by the policy ancestor status writers."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional

from .models import Condition, ConditionStatus

logger = logging.getLogger(__name__)

# Upper bound accepted by the API server for ``Condition.message``.
MAX_CONDITION_MESSAGE_LENGTH = 32768
TRUNCATION_SUFFIX = " [truncated]"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current UTC time; whole-second precision is applied when serialized."""

    return datetime.now(timezone.utc)


def truncate_condition_message(
    message: str, max_length: int = MAX_CONDITION_MESSAGE_LENGTH
) -> str:
    """Bound ``message`` to ``max_length`` characters.

    Oversized messages keep their first ``max_length`` characters followed by
    :data:`TRUNCATION_SUFFIX`. Length is counted in code points, so multi-byte
    text is never split inside a character.
    """

    if len(message) <= max_length:
        return message
    return message[:max_length] + TRUNCATION_SUFFIX


def error_to_condition_message(err: BaseException | str | None) -> str:
    """Format an error as a sentence suitable for a condition message."""

    if err is None:
        return ""
    message = str(err)
    if not message:
        return message
    if message[0].isalpha():
        message = message[0].upper() + message[1:]
    if not message.endswith("."):
        message += "."
    return message


def enum_value(value: Enum | str) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def find_condition(conditions: List[Condition], condition_type: Enum | str) -> Optional[Condition]:
    wanted = enum_value(condition_type)
    for condition in conditions:
        if condition.type == wanted:
            return condition
    return None


def set_condition(
    conditions: List[Condition],
    condition_type: Enum | str,
    status: ConditionStatus | str,
    reason: Enum | str,
    message: str,
    observed_generation: int,
    *,
    now: Clock | None = None,
) -> Condition:
    """Upsert the condition of ``condition_type`` into ``conditions``.

    ``last_transition_time`` is only stamped when the condition is created or
    its status flips; otherwise reason, message and generation are refreshed
    in place.
    """

    clock = now or utc_now
    new_status = ConditionStatus(enum_value(status))
    reason_text = enum_value(reason)
    existing = find_condition(conditions, condition_type)
    if existing is None:
        condition = Condition(
            type=enum_value(condition_type),
            status=new_status,
            reason=reason_text,
            message=message,
            observed_generation=observed_generation,
            last_transition_time=clock(),
        )
        conditions.append(condition)
        return condition

    if existing.status != new_status:
        logger.debug(
            "condition %s transitioned %s -> %s",
            existing.type,
            existing.status.value,
            new_status.value,
        )
        existing.status = new_status
        existing.last_transition_time = clock()
    existing.reason = reason_text
    existing.message = message
    existing.observed_generation = observed_generation
    return existing


__all__ = [
    "Clock",
    "MAX_CONDITION_MESSAGE_LENGTH",
    "TRUNCATION_SUFFIX",
    "enum_value",
    "error_to_condition_message",
    "find_condition",
    "set_condition",
    "truncate_condition_message",
    "utc_now",
]
