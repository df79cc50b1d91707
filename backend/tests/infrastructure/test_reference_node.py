"""Reference Node — direct tests of the SQLAlchemy-backed NodeAPI.

Tests cover:
    - Digest and payload application helpers
    - Create / state flows keep sn contiguous and the hash chain linked
    - Pagination and namespace filtering of subject listings
    - Failures surface as NodeError subclasses
"""

import pytest

from ledger_gateway.core.domain_types import Acceptance
from ledger_gateway.core.node_protocol import (
    EventCreationError, NodeNotFound, VoteNotNeeded,
)
from ledger_gateway.infrastructure.reference_node import (
    apply_payload, canonical_json, digest,
)
from ledger_gateway.schemas.event import EventRequestType, Payload


def _json(value) -> Payload:
    return Payload.model_validate({"Json": value})


def _patch(ops) -> Payload:
    return Payload.model_validate({"JsonPatch": ops})


def _state(subject_id: str, payload: Payload) -> EventRequestType:
    return EventRequestType.model_validate({
        "State": {"subject_id": subject_id, "payload": payload.model_dump()},
    })


async def _governance_and_subject(node, properties=None):
    gov = await node.create_governance(_json({"members": []}))
    sub = await node.create_subject(
        gov.subject_id, "Prueba", "namespace1", _json(properties or {"t": 1}),
    )
    return gov.subject_id, sub.subject_id


# ─── Helpers ─────────────────────────────────────────────────────

def test_digest_is_key_order_independent():
    assert digest({"a": 1, "b": 2}) == digest({"b": 2, "a": 1})
    assert digest({"a": 1}) != digest({"a": 2})
    assert digest({"a": 1}).startswith("J")


def test_apply_json_replaces_state():
    assert apply_payload('{"a":1}', _json({"b": 2})) == canonical_json({"b": 2})


def test_apply_patch_edits_state():
    result = apply_payload('{"a":1}', _patch([{"op": "add", "path": "/b", "value": 2}]))
    assert result == canonical_json({"a": 1, "b": 2})


@pytest.mark.parametrize("payload", [
    _patch({"op": "add"}),
    _patch([{"op": "remove", "path": "/nope"}]),
    _patch([{"op": "test", "path": "/a", "value": 5}]),
    Payload.model_validate({"Json": "{not json"}),
])
def test_bad_payloads_raise_event_creation_error(payload):
    with pytest.raises(EventCreationError):
        apply_payload('{"a":1}', payload)


# ─── Create ──────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_created_subject_starts_at_sn_zero(reference_node):
    gov, sid = await _governance_and_subject(reference_node, {"t": 10})
    subject = await reference_node.get_subject(sid)
    assert subject.sn == 0
    assert subject.governance_id == gov
    assert subject.owner == reference_node.public_key
    assert subject.properties == '{"t":10}'

    [event] = await reference_node.get_events_of_subject(sid, None, None)
    assert event.event_content.previous_hash == ""
    assert event.event_content.state_hash == digest({"t": 10})
    assert event.signature.content.signer == reference_node.public_key


@pytest.mark.asyncio
async def test_create_under_plain_subject_is_rejected(reference_node):
    _, sid = await _governance_and_subject(reference_node)
    with pytest.raises(EventCreationError):
        await reference_node.create_subject(sid, "Prueba", "namespace1", _json({}))


@pytest.mark.asyncio
async def test_identical_creates_get_distinct_subjects(reference_node):
    first = await reference_node.create_governance(_json({"m": 1}))
    second = await reference_node.create_governance(_json({"m": 1}))
    assert first.subject_id != second.subject_id
    assert first.request_id != second.request_id


# ─── State & chain ───────────────────────────────────────────────

@pytest.mark.asyncio
async def test_state_events_extend_the_chain(reference_node):
    _, sid = await _governance_and_subject(reference_node)
    for value in (2, 3, 4):
        await reference_node.create_request(_state(sid, _json({"t": value})))

    events = await reference_node.get_events_of_subject(sid, None, None)
    contents = [e.event_content for e in events]
    assert [c.sn for c in contents] == [0, 1, 2, 3]
    for prev, cur in zip(contents, contents[1:]):
        assert cur.previous_hash == prev.state_hash
    assert (await reference_node.get_subject(sid)).sn == 3


@pytest.mark.asyncio
async def test_events_window(reference_node):
    _, sid = await _governance_and_subject(reference_node)
    for value in (2, 3):
        await reference_node.create_request(_state(sid, _json({"t": value})))

    window = await reference_node.get_events_of_subject(sid, 1, 1)
    assert [e.event_content.sn for e in window] == [1]
    assert await reference_node.get_events_of_subject(sid, 2, 0) == []


@pytest.mark.asyncio
async def test_state_on_unknown_subject_is_not_found(reference_node):
    with pytest.raises(NodeNotFound):
        await reference_node.create_request(_state("Jnope", _json({})))


@pytest.mark.asyncio
async def test_simulation_leaves_store_untouched(reference_node):
    _, sid = await _governance_and_subject(reference_node)
    content = await reference_node.simulate_event(sid, _json({"t": 9}))
    assert content.sn == 1
    assert content.state_hash == digest({"t": 9})
    assert (await reference_node.get_subject(sid)).sn == 0
    assert len(await reference_node.get_events_of_subject(sid, None, None)) == 1


# ─── Listings ────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_subject_listing_filters_and_pages(reference_node):
    gov = (await reference_node.create_governance(_json({}))).subject_id
    ids = [
        (await reference_node.create_subject(gov, "S", "namespace1", _json({"n": n}))).subject_id
        for n in range(3)
    ]
    await reference_node.create_subject(gov, "S", "elsewhere", _json({}))

    listed = await reference_node.get_all_subjects("namespace1", None, None)
    assert [s.subject_id for s in listed] == ids
    paged = await reference_node.get_all_subjects("namespace1", 1, 1)
    assert [s.subject_id for s in paged] == [ids[1]]
    governances = await reference_node.get_all_governances()
    assert [g.subject_id for g in governances] == [gov]


@pytest.mark.asyncio
async def test_signatures_need_an_existing_event(reference_node):
    _, sid = await _governance_and_subject(reference_node)
    assert len(await reference_node.get_signatures(sid, 0, None, None)) == 1
    assert await reference_node.get_signatures(sid, 0, 1, None) == []
    with pytest.raises(NodeNotFound):
        await reference_node.get_signatures(sid, 18446744073709551615, None, None)


# ─── Approvals ───────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_pending_request_flow(approval_node):
    _, sid = await _governance_and_subject(approval_node)
    data = await approval_node.create_request(_state(sid, _json({"t": 5})))

    [pending] = await approval_node.get_pending_requests()
    assert pending.request_id == data.request_id

    decided = await approval_node.approval_request(data.request_id, Acceptance.ACCEPT)
    assert [a.acceptance for a in decided.request.approvals] == [Acceptance.ACCEPT]
    assert await approval_node.get_pending_requests() == []
    assert (await approval_node.get_subject(sid)).properties == '{"t":5}'


@pytest.mark.asyncio
async def test_stale_vote_is_vote_not_needed(approval_node):
    _, sid = await _governance_and_subject(approval_node)
    first = await approval_node.create_request(_state(sid, _json({"t": 5})))
    second = await approval_node.create_request(_state(sid, _json({"t": 6})))
    await approval_node.approval_request(first.request_id, Acceptance.REJECT)

    with pytest.raises(VoteNotNeeded):
        await approval_node.approval_request(second.request_id, Acceptance.ACCEPT)
    with pytest.raises(NodeNotFound):
        await approval_node.get_single_request(second.request_id)


@pytest.mark.asyncio
async def test_health_check(reference_node):
    assert await reference_node.health_check() is True
