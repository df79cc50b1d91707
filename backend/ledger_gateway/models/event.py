"""Event ORM — append-only, hash-chained event log per subject.

Invariants:
    - (subject_id, sn) is unique; sn contiguous from 0 per subject
    - content/signature hold the serialized EventContent and Signature
"""

from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger, DateTime, ForeignKey, Integer, JSON, String, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from ledger_gateway.db.base import Base


class EventRecord(Base):
    """One event of a subject."""
    __tablename__ = "events"
    __table_args__ = (UniqueConstraint("subject_id", "sn"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subject_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("subjects.subject_id"), nullable=False,
    )
    sn: Mapped[int] = mapped_column(BigInteger, nullable=False)
    content: Mapped[dict] = mapped_column(JSON, nullable=False)
    signature: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
