from datetime import datetime, timezone

from policystatus.status.models import ConditionStatus, ParentReference, PolicyStatus
from policystatus.status.policy import set_condition_for_policy_ancestor


def _stamp() -> datetime:
    return datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_payload_uses_api_field_names():
    status = PolicyStatus()
    ref = ParentReference(
        group="gateway.networking.k8s.io",
        kind="Gateway",
        namespace="default",
        name="eg",
        section_name="http",
    )
    set_condition_for_policy_ancestor(
        status, ref, "ctrl", "Accepted", ConditionStatus.TRUE, "Accepted", "ok", 3, now=_stamp
    )

    payload = status.to_payload()
    ancestor = payload["ancestors"][0]
    assert ancestor["ancestorRef"] == {
        "group": "gateway.networking.k8s.io",
        "kind": "Gateway",
        "namespace": "default",
        "name": "eg",
        "sectionName": "http",
    }
    assert ancestor["controllerName"] == "ctrl"
    condition = ancestor["conditions"][0]
    assert condition["status"] == "True"
    assert condition["observedGeneration"] == 3
    assert condition["lastTransitionTime"] == "2025-01-01T12:00:00Z"


def test_payload_round_trip_preserves_order_and_status():
    payload = {
        "ancestors": [
            {
                "ancestorRef": {"name": "b"},
                "controllerName": "ctrl",
                "conditions": [
                    {
                        "type": "Accepted",
                        "status": "False",
                        "reason": "Invalid",
                        "message": "nope",
                        "observedGeneration": 2,
                        "lastTransitionTime": "2025-01-01T00:00:00Z",
                    }
                ],
            },
            {"ancestorRef": {"name": "a"}, "controllerName": "ctrl"},
        ]
    }

    status = PolicyStatus.from_payload(payload)
    assert [a.ancestor_ref.name for a in status.ancestors] == ["b", "a"]
    assert status.ancestors[0].conditions[0].status is ConditionStatus.FALSE
    assert status.ancestors[1].conditions == []
    assert PolicyStatus.from_payload(None).ancestors == []


def test_parent_reference_is_hashable_value():
    assert ParentReference(name="gw") == ParentReference(name="gw")
    assert ParentReference(name="gw") != ParentReference(name="gw", namespace="ns")
    assert len({ParentReference(name="gw"), ParentReference(name="gw")}) == 1


def test_payload_drops_sub_second_precision():
    status = PolicyStatus()
    stamp = datetime(2025, 1, 1, 12, 0, 0, 987654, tzinfo=timezone.utc)
    set_condition_for_policy_ancestor(
        status, ParentReference(name="eg"), "ctrl", "Accepted", "True", "Accepted", "", 1, now=lambda: stamp
    )

    assert status.ancestors[0].conditions[0].last_transition_time == stamp
    condition = status.to_payload()["ancestors"][0]["conditions"][0]
    assert condition["lastTransitionTime"] == "2025-01-01T12:00:00Z"
