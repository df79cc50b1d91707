"""Event Schemas — externally tagged payloads and event requests.

Tests cover:
    - Payload accepts {"Json": ...} / {"JsonPatch": ...}; non-string JSON is encoded
    - Unknown or multiple tags are rejected
    - EventRequestType selects its variant from the tag only
    - Serialization emits the tagged wire form
"""

import json

import pytest
from pydantic import ValidationError

from ledger_gateway.core.domain_types import PayloadKind, RequestKind
from ledger_gateway.schemas.event import (
    CreateRequest, EventRequest, EventRequestType, Payload, StateRequest,
)
from ledger_gateway.schemas.subject import SubjectData
from tests.fake_node import make_event_request, make_subject


# ─── Payload ─────────────────────────────────────────────────────

def test_json_payload_object_is_encoded():
    payload = Payload.model_validate({"Json": {"temperatura": 10}})
    assert payload.kind == PayloadKind.JSON
    assert json.loads(payload.value) == {"temperatura": 10}


def test_json_payload_string_kept_verbatim():
    payload = Payload.model_validate({"Json": '{"a":1}'})
    assert payload.value == '{"a":1}'


def test_patch_payload():
    ops = [{"op": "replace", "path": "/temperatura", "value": 3}]
    payload = Payload.model_validate({"JsonPatch": ops})
    assert payload.kind == PayloadKind.JSON_PATCH
    assert json.loads(payload.value) == ops


def test_payload_serializes_tagged():
    payload = Payload.model_validate({"Json": {"a": 1}})
    assert payload.model_dump() == {"Json": '{"a":1}'}


@pytest.mark.parametrize("data", [
    {"Yaml": "a: 1"},
    {"Json": {"a": 1}, "JsonPatch": []},
    {},
    "Json",
    {"kind": "Json", "value": "{}"},
])
def test_payload_rejects_unknown_shapes(data):
    with pytest.raises(ValidationError):
        Payload.model_validate(data)


# ─── EventRequestType ────────────────────────────────────────────

def test_create_tag_selects_create_variant():
    req = EventRequestType.model_validate({"Create": {
        "governance_id": "Jgov", "schema_id": "Prueba",
        "namespace": "namespace1", "payload": {"Json": {"a": 1}},
    }})
    assert isinstance(req.variant, CreateRequest)
    assert req.kind == RequestKind.CREATE
    assert req.payload.kind == PayloadKind.JSON


def test_state_tag_selects_state_variant():
    req = EventRequestType.model_validate({"State": {
        "subject_id": "Jsub", "payload": {"JsonPatch": []},
    }})
    assert isinstance(req.variant, StateRequest)
    assert req.kind == RequestKind.STATE


def test_internal_variant_shape_rejected_on_the_wire():
    with pytest.raises(ValidationError):
        EventRequestType.model_validate({"variant": {
            "subject_id": "Jsub", "payload": {"Json": {}},
        }})


def test_of_builds_from_validated_parts():
    payload = Payload.of(PayloadKind.JSON, '{"a":1}')
    req = EventRequestType.of(StateRequest(subject_id="Jsub", payload=payload))
    assert req.model_dump() == {
        "State": {"subject_id": "Jsub", "payload": {"Json": '{"a":1}'}},
    }


def test_variant_never_inferred_from_fields():
    with pytest.raises(ValidationError):
        EventRequestType.model_validate(
            {"subject_id": "Jsub", "payload": {"Json": {}}},
        )


def test_state_request_needs_subject_id():
    with pytest.raises(ValidationError):
        EventRequestType.model_validate({"State": {
            "subject_id": "", "payload": {"Json": {}},
        }})


def test_event_request_type_round_trips_through_wire_form():
    wire = {"State": {"subject_id": "Jsub", "payload": {"Json": '{"a":1}'}}}
    assert EventRequestType.model_validate(wire).model_dump() == wire


def test_event_request_defaults_approvals():
    dumped = make_event_request().model_dump()
    dumped.pop("approvals")
    assert EventRequest.model_validate(dumped).approvals == []


# ─── SubjectData ─────────────────────────────────────────────────

def test_governance_is_subject_without_governance_id():
    assert make_subject(governance_id="").is_governance
    assert not make_subject().is_governance


def test_subject_sn_is_non_negative():
    with pytest.raises(ValidationError):
        SubjectData(**{**make_subject().model_dump(), "sn": -1})
