"""Pydantic models for policy ancestor status."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ConditionStatus(str, Enum):
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class PolicyConditionType(str, Enum):
    """Condition types reported on a policy ancestor entry."""

    ACCEPTED = "Accepted"
    OVERRIDDEN = "Overridden"
    MERGED = "Merged"
    AGGREGATED = "Aggregated"


class PolicyConditionReason(str, Enum):
    ACCEPTED = "Accepted"
    CONFLICTED = "Conflicted"
    INVALID = "Invalid"
    TARGET_NOT_FOUND = "TargetNotFound"
    OVERRIDDEN = "Overridden"
    MERGED = "Merged"
    AGGREGATED = "Aggregated"


_ALIASED = ConfigDict(populate_by_name=True)


class ParentReference(BaseModel):
    """Reference to the resource a policy is attached to.

    Optional fields left unset compare unequal to the same field set to its
    implied default, so ``ParentReference(name="gw")`` and
    ``ParentReference(name="gw", kind="Gateway")`` key different entries.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    group: Optional[str] = None
    kind: Optional[str] = None
    namespace: Optional[str] = None
    name: str
    section_name: Optional[str] = Field(default=None, alias="sectionName")
    port: Optional[int] = None


class Condition(BaseModel):
    model_config = _ALIASED

    type: str
    status: ConditionStatus
    reason: str
    message: str = ""
    observed_generation: int = Field(default=0, alias="observedGeneration")
    last_transition_time: datetime = Field(alias="lastTransitionTime")

    @field_serializer("last_transition_time", when_used="json")
    def serialize_transition_time(self, value: datetime) -> str:
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")


class PolicyAncestorStatus(BaseModel):
    model_config = _ALIASED

    ancestor_ref: ParentReference = Field(alias="ancestorRef")
    controller_name: str = Field(alias="controllerName")
    conditions: List[Condition] = Field(default_factory=list)


class PolicyStatus(BaseModel):
    """Ordered per-ancestor condition sets reported for one policy object."""

    model_config = _ALIASED

    ancestors: List[PolicyAncestorStatus] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready, camelCase mapping written to the status subresource."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_payload(cls, data: Mapping[str, Any] | None) -> "PolicyStatus":
        return cls.model_validate(dict(data or {}))


__all__ = [
    "Condition",
    "ConditionStatus",
    "ParentReference",
    "PolicyAncestorStatus",
    "PolicyConditionReason",
    "PolicyConditionType",
    "PolicyStatus",
]
