"""Reference Node — single-node, SQLAlchemy-backed implementation of NodeAPI.

Invariants:
    - Per subject, event sn is contiguous from 0 and each event's previous_hash
      is the preceding event's state_hash (empty for sn 0)
    - Create requests need a Json payload and, when they name a governance_id,
      an existing governance; the new subject starts at sn 0
    - State requests apply Json (replace) or JsonPatch (RFC 6902) payloads; with
      approval_required they wait in pending_requests until a vote decides them
    - Accept appends an approved event with the new state; Reject appends a
      non-approved event that keeps the state
    - Every failure is a NodeError subclass

Design Decisions:
    - Development stand-in for the ledger engine: digests are BLAKE2b-256 over
      canonical JSON, "signatures" are keyed BLAKE2b — not real cryptography
    - External requests are processed like local ones once structurally valid;
      signature verification belongs to a real engine
    - Node values stored as pydantic JSON dumps: the store never re-derives them
"""

import base64
import hashlib
import json
import logging
import time
from collections.abc import Callable
from typing import Any

import jsonpatch
from jsonpointer import JsonPointerException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_gateway.core.domain_types import Acceptance, PayloadKind
from ledger_gateway.core.node_protocol import (
    EventCreationError, NodeNotFound, VoteNotNeeded,
)
from ledger_gateway.infrastructure.database import DatabaseSessionManager
from ledger_gateway.models.event import EventRecord
from ledger_gateway.models.event_signature import EventSignatureRecord
from ledger_gateway.models.pending_request import PendingRequestRecord
from ledger_gateway.models.subject import SubjectRecord
from ledger_gateway.schemas.event import (
    Approval,
    CreateRequest,
    Event,
    EventContent,
    EventRequest,
    EventRequestType,
    Metadata,
    Payload,
    Signature,
    SignatureContent,
    StateRequest,
)
from ledger_gateway.schemas.subject import PendingRequest, RequestData, SubjectData

logger = logging.getLogger(__name__)

GOVERNANCE_SCHEMA_ID = "governance"

# SQLite and PostgreSQL integers are signed 64-bit
_MAX_SQL_INT = 2**63 - 1


def _b64(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def canonical_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def digest(value: Any) -> str:
    """Content digest: 'J' + base64url(BLAKE2b-256(canonical JSON))."""
    raw = hashlib.blake2b(canonical_json(value).encode("utf-8"), digest_size=32)
    return "J" + _b64(raw.digest())


def _clamp(value: int | None) -> int | None:
    return None if value is None else min(value, _MAX_SQL_INT)


def _subject_data(rec: SubjectRecord) -> SubjectData:
    return SubjectData(
        subject_id=rec.subject_id,
        governance_id=rec.governance_id,
        sn=rec.sn,
        public_key=rec.public_key,
        namespace=rec.namespace,
        schema_id=rec.schema_id,
        owner=rec.owner,
        properties=rec.properties,
    )


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise EventCreationError(f"payload is not valid JSON: {e.msg}") from e


def apply_payload(properties: str, payload: Payload) -> str:
    """New subject state (JSON text) after applying payload to properties."""
    data = _parse_json(payload.value)
    if payload.kind == PayloadKind.JSON:
        return canonical_json(data)
    if not isinstance(data, list):
        raise EventCreationError("JsonPatch payload must be a list of operations")
    try:
        patched = jsonpatch.apply_patch(json.loads(properties), data)
    except (jsonpatch.JsonPatchException, JsonPointerException) as e:
        raise EventCreationError(f"JsonPatch could not be applied: {e}") from e
    return canonical_json(patched)


class ReferenceNode:
    """Implements NodeAPI on top of a DatabaseSessionManager."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        node_key: str,
        approval_required: bool = False,
        clock: Callable[[], float] = time.time,
    ):
        self._db = db
        self._key = hashlib.blake2b(node_key.encode("utf-8"), digest_size=32).digest()
        self._approval_required = approval_required
        self._clock = clock
        self.public_key = "E" + _b64(hashlib.blake2b(
            self._key, digest_size=32, person=b"node-public-key",
        ).digest())

    # ─── Identity ────────────────────────────────────────────────

    def _now(self) -> int:
        return int(self._clock())

    def sign(self, content_hash: str, timestamp: int) -> Signature:
        content = SignatureContent(
            signer=self.public_key,
            event_content_hash=content_hash,
            timestamp=timestamp,
        )
        raw = hashlib.blake2b(
            canonical_json(content.model_dump()).encode("utf-8"), key=self._key,
        )
        return Signature(content=content, signature="SE" + _b64(raw.digest()))

    def _subject_key(self, subject_id: str) -> str:
        raw = hashlib.blake2b(subject_id.encode("utf-8"), key=self._key, digest_size=32)
        return "E" + _b64(raw.digest())

    def _sign_request(self, request: EventRequestType) -> EventRequest:
        now = self._now()
        return EventRequest(
            request=request,
            timestamp=now,
            signature=self.sign(digest(request.model_dump()), now),
        )

    # ─── Queries ─────────────────────────────────────────────────

    async def _find_subject(
        self, db: AsyncSession, subject_id: str,
    ) -> SubjectRecord | None:
        result = await db.execute(
            select(SubjectRecord).where(SubjectRecord.subject_id == subject_id),
        )
        return result.scalar_one_or_none()

    async def _require_subject(
        self, db: AsyncSession, subject_id: str,
    ) -> SubjectRecord:
        rec = await self._find_subject(db, subject_id)
        if rec is None:
            raise NodeNotFound(f"subject {subject_id} not found")
        return rec

    async def _find_event(
        self, db: AsyncSession, subject_id: str, sn: int,
    ) -> EventRecord | None:
        result = await db.execute(
            select(EventRecord).where(
                EventRecord.subject_id == subject_id, EventRecord.sn == sn,
            ),
        )
        return result.scalar_one_or_none()

    async def get_subject(self, subject_id: str) -> SubjectData:
        async with self._db.session() as db:
            return _subject_data(await self._require_subject(db, subject_id))

    async def get_all_subjects(
        self, namespace: str, from_: int | None, quantity: int | None,
    ) -> list[SubjectData]:
        query = select(SubjectRecord).order_by(SubjectRecord.id)
        if namespace:
            query = query.where(SubjectRecord.namespace == namespace)
        query = query.offset(_clamp(from_) or 0)
        if quantity is not None:
            query = query.limit(_clamp(quantity))
        async with self._db.session() as db:
            result = await db.execute(query)
            return [_subject_data(r) for r in result.scalars().all()]

    async def get_all_governances(self) -> list[SubjectData]:
        async with self._db.session() as db:
            result = await db.execute(
                select(SubjectRecord)
                .where(SubjectRecord.governance_id == "")
                .order_by(SubjectRecord.id),
            )
            return [_subject_data(r) for r in result.scalars().all()]

    async def get_events_of_subject(
        self, subject_id: str, from_: int | None, quantity: int | None,
    ) -> list[Event]:
        query = (
            select(EventRecord)
            .where(
                EventRecord.subject_id == subject_id,
                EventRecord.sn >= (_clamp(from_) or 0),
            )
            .order_by(EventRecord.sn)
        )
        if quantity is not None:
            query = query.limit(_clamp(quantity))
        async with self._db.session() as db:
            await self._require_subject(db, subject_id)
            result = await db.execute(query)
            return [
                Event.model_validate({
                    "event_content": r.content, "signature": r.signature,
                })
                for r in result.scalars().all()
            ]

    async def get_signatures(
        self, subject_id: str, sn: int, from_: int | None, quantity: int | None,
    ) -> list[Signature]:
        bounded_sn = _clamp(sn)
        async with self._db.session() as db:
            await self._require_subject(db, subject_id)
            if await self._find_event(db, subject_id, bounded_sn) is None:
                raise NodeNotFound(f"event {sn} of subject {subject_id} not found")
            query = (
                select(EventSignatureRecord)
                .where(
                    EventSignatureRecord.subject_id == subject_id,
                    EventSignatureRecord.sn == bounded_sn,
                )
                .order_by(EventSignatureRecord.id)
                .offset(_clamp(from_) or 0)
            )
            if quantity is not None:
                query = query.limit(_clamp(quantity))
            result = await db.execute(query)
            return [
                Signature.model_validate(r.signature)
                for r in result.scalars().all()
            ]

    async def get_pending_requests(self) -> list[PendingRequest]:
        async with self._db.session() as db:
            result = await db.execute(
                select(PendingRequestRecord).order_by(PendingRequestRecord.id),
            )
            return [
                PendingRequest(
                    request_id=r.request_id,
                    request=EventRequest.model_validate(r.request),
                )
                for r in result.scalars().all()
            ]

    async def get_single_request(self, request_id: str) -> PendingRequest:
        async with self._db.session() as db:
            rec = await self._find_pending(db, request_id)
            return PendingRequest(
                request_id=rec.request_id,
                request=EventRequest.model_validate(rec.request),
            )

    async def _find_pending(
        self, db: AsyncSession, request_id: str,
    ) -> PendingRequestRecord:
        result = await db.execute(
            select(PendingRequestRecord)
            .where(PendingRequestRecord.request_id == request_id),
        )
        rec = result.scalar_one_or_none()
        if rec is None:
            raise NodeNotFound(f"request {request_id} not found")
        return rec

    async def health_check(self) -> bool:
        return await self._db.health_check()

    # ─── Commands ────────────────────────────────────────────────

    async def create_subject(
        self, governance_id: str, schema_id: str, namespace: str,
        payload: Payload,
    ) -> RequestData:
        return await self.create_request(EventRequestType.of(CreateRequest(
            governance_id=governance_id, schema_id=schema_id,
            namespace=namespace, payload=payload,
        )))

    async def create_governance(self, payload: Payload) -> RequestData:
        return await self.create_request(EventRequestType.of(CreateRequest(
            governance_id="", schema_id=GOVERNANCE_SCHEMA_ID,
            namespace="", payload=payload,
        )))

    async def create_request(self, request: EventRequestType) -> RequestData:
        return await self._process(self._sign_request(request))

    async def external_request(self, request: EventRequest) -> RequestData:
        return await self._process(request)

    async def _process(self, signed: EventRequest) -> RequestData:
        request_id = digest(signed.model_dump())
        variant = signed.request.variant
        if isinstance(variant, CreateRequest):
            return await self._create(signed, variant, request_id)
        if isinstance(variant, StateRequest):
            return await self._state(signed, variant, request_id)
        raise EventCreationError(f"unsupported request variant {type(variant).__name__}")

    async def _create(
        self, signed: EventRequest, variant: CreateRequest, request_id: str,
    ) -> RequestData:
        if variant.payload.kind != PayloadKind.JSON:
            raise EventCreationError("create requests need a full Json payload")
        properties = canonical_json(_parse_json(variant.payload.value))
        subject_id = digest({"subject_of": request_id})
        async with self._db.session() as db:
            governance_version = 0
            if variant.governance_id:
                governance = await self._find_subject(db, variant.governance_id)
                if governance is None or governance.governance_id != "":
                    raise EventCreationError(
                        f"governance {variant.governance_id} not found",
                    )
                governance_version = governance.sn
            if await self._find_subject(db, subject_id) is not None:
                raise EventCreationError(f"subject {subject_id} already exists")
            rec = SubjectRecord(
                subject_id=subject_id,
                governance_id=variant.governance_id,
                sn=0,
                public_key=self._subject_key(subject_id),
                namespace=variant.namespace,
                schema_id=variant.schema_id,
                owner=signed.signature.content.signer,
                properties=properties,
            )
            db.add(rec)
            content = EventContent(
                subject_id=subject_id,
                event_request=signed,
                sn=0,
                previous_hash="",
                state_hash=digest(json.loads(properties)),
                metadata=self._metadata(rec, governance_version),
                approved=True,
            )
            self._store_event(db, content)
            await db.commit()
        logger.info(f"Subject {subject_id} created", extra={"subject_id": subject_id})
        return RequestData(request_id=request_id, subject_id=subject_id)

    async def _state(
        self, signed: EventRequest, variant: StateRequest, request_id: str,
    ) -> RequestData:
        async with self._db.session() as db:
            rec = await self._require_subject(db, variant.subject_id)
            if self._approval_required:
                existing = await db.execute(
                    select(PendingRequestRecord.id)
                    .where(PendingRequestRecord.request_id == request_id),
                )
                if existing.scalar_one_or_none() is not None:
                    raise EventCreationError(f"request {request_id} already pending")
                db.add(PendingRequestRecord(
                    request_id=request_id,
                    subject_id=rec.subject_id,
                    expected_sn=rec.sn,
                    request=signed.model_dump(mode="json"),
                ))
                await db.commit()
                logger.info(
                    f"Request {request_id} waiting for approval",
                    extra={"request_id": request_id, "subject_id": rec.subject_id},
                )
                return RequestData(request_id=request_id, subject_id=rec.subject_id)
            new_properties = apply_payload(rec.properties, variant.payload)
            await self._append(db, rec, signed, new_properties, approved=True)
            await db.commit()
        return RequestData(request_id=request_id, subject_id=variant.subject_id)

    async def approval_request(
        self, request_id: str, acceptance: Acceptance,
    ) -> PendingRequest:
        async with self._db.session() as db:
            pending = await self._find_pending(db, request_id)
            subject = await self._find_subject(db, pending.subject_id)
            if subject is None or subject.sn != pending.expected_sn:
                await db.delete(pending)
                await db.commit()
                raise VoteNotNeeded(
                    f"request {request_id} is no longer waiting for votes",
                )
            signed = EventRequest.model_validate(pending.request)
            approval = Approval(
                acceptance=acceptance,
                signature=self.sign(request_id, self._now()),
            )
            signed = signed.model_copy(
                update={"approvals": [*signed.approvals, approval]},
            )
            accepted = acceptance == Acceptance.ACCEPT
            new_properties = (
                apply_payload(subject.properties, signed.request.payload)
                if accepted else subject.properties
            )
            await self._append(db, subject, signed, new_properties, approved=accepted)
            await db.delete(pending)
            await db.commit()
        logger.info(
            f"Request {request_id} decided: {acceptance.value}",
            extra={"request_id": request_id},
        )
        return PendingRequest(request_id=request_id, request=signed)

    async def simulate_event(
        self, subject_id: str, payload: Payload,
    ) -> EventContent:
        signed = self._sign_request(EventRequestType.of(
            StateRequest(subject_id=subject_id, payload=payload),
        ))
        async with self._db.session() as db:
            rec = await self._require_subject(db, subject_id)
            new_properties = apply_payload(rec.properties, payload)
            return await self._next_content(db, rec, signed, new_properties, True)

    # ─── Event chain ─────────────────────────────────────────────

    def _metadata(self, rec: SubjectRecord, governance_version: int) -> Metadata:
        return Metadata(
            namespace=rec.namespace,
            governance_id=rec.governance_id,
            governance_version=governance_version,
            schema_id=rec.schema_id,
            owner=rec.owner,
        )

    async def _next_content(
        self, db: AsyncSession, rec: SubjectRecord, signed: EventRequest,
        new_properties: str, approved: bool,
    ) -> EventContent:
        last = await self._find_event(db, rec.subject_id, rec.sn)
        previous_hash = last.content["state_hash"] if last is not None else ""
        governance_version = 0
        if rec.governance_id:
            governance = await self._find_subject(db, rec.governance_id)
            governance_version = governance.sn if governance is not None else 0
        return EventContent(
            subject_id=rec.subject_id,
            event_request=signed,
            sn=rec.sn + 1,
            previous_hash=previous_hash,
            state_hash=digest(json.loads(new_properties)),
            metadata=self._metadata(rec, governance_version),
            approved=approved,
        )

    async def _append(
        self, db: AsyncSession, rec: SubjectRecord, signed: EventRequest,
        new_properties: str, approved: bool,
    ) -> EventContent:
        content = await self._next_content(db, rec, signed, new_properties, approved)
        self._store_event(db, content)
        rec.sn = content.sn
        rec.properties = new_properties
        return content

    def _store_event(self, db: AsyncSession, content: EventContent) -> None:
        signature = self.sign(digest(content.model_dump(mode="json")), self._now())
        dumped_signature = signature.model_dump(mode="json")
        db.add(EventRecord(
            subject_id=content.subject_id,
            sn=content.sn,
            content=content.model_dump(mode="json"),
            signature=dumped_signature,
        ))
        db.add(EventSignatureRecord(
            subject_id=content.subject_id,
            sn=content.sn,
            signer=signature.content.signer,
            signature=dumped_signature,
        ))
