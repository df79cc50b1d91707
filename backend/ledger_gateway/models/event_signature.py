"""EventSignature ORM — signatures collected for an event.

Invariants:
    - Every stored event has at least the node's own signature
"""

from sqlalchemy import BigInteger, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger_gateway.db.base import Base


class EventSignatureRecord(Base):
    """One signature over an event's content hash."""
    __tablename__ = "event_signatures"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subject_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("subjects.subject_id"), nullable=False,
        index=True,
    )
    sn: Mapped[int] = mapped_column(BigInteger, nullable=False)
    signer: Mapped[str] = mapped_column(String(128), nullable=False)
    signature: Mapped[dict] = mapped_column(JSON, nullable=False)
