"""PendingRequest ORM — state requests waiting for an approval vote.

Invariants:
    - expected_sn is the subject sn the request will be applied on top of;
      a vote on a request whose subject has moved past it is not needed
    - Rows are deleted once a vote decides the request
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger_gateway.db.base import Base


class PendingRequestRecord(Base):
    """Pending state request."""
    __tablename__ = "pending_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    request_id: Mapped[str] = mapped_column(
        String(128), unique=True, index=True, nullable=False,
    )
    subject_id: Mapped[str] = mapped_column(String(128), nullable=False)
    expected_sn: Mapped[int] = mapped_column(BigInteger, nullable=False)
    request: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
