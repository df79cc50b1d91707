"""Subject ORM — current state of every subject known to the reference node.

Invariants:
    - subject_id is unique; id gives the stable listing order
    - governance_id is empty for governances
    - sn equals the sn of the subject's latest event
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ledger_gateway.db.base import Base


class SubjectRecord(Base):
    """Subject row — projection of the subject's event history."""
    __tablename__ = "subjects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subject_id: Mapped[str] = mapped_column(
        String(128), unique=True, index=True, nullable=False,
    )
    governance_id: Mapped[str] = mapped_column(
        String(128), nullable=False, default="", index=True,
    )
    sn: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    public_key: Mapped[str] = mapped_column(String(128), nullable=False)
    namespace: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    schema_id: Mapped[str] = mapped_column(String(200), nullable=False)
    owner: Mapped[str] = mapped_column(String(128), nullable=False)
    properties: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
