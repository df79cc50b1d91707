"""Reference node store — subjects, events, event_signatures, pending_requests.

Revision ID: 001_node_store
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_node_store"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "subjects",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("subject_id", sa.String(128), nullable=False, unique=True),
        sa.Column("governance_id", sa.String(128), nullable=False, server_default=""),
        sa.Column("sn", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("public_key", sa.String(128), nullable=False),
        sa.Column("namespace", sa.String(200), nullable=False, server_default=""),
        sa.Column("schema_id", sa.String(200), nullable=False),
        sa.Column("owner", sa.String(128), nullable=False),
        sa.Column("properties", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_subjects_subject_id", "subjects", ["subject_id"])
    op.create_index("ix_subjects_governance_id", "subjects", ["governance_id"])

    op.create_table(
        "events",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("subject_id", sa.String(128), sa.ForeignKey("subjects.subject_id"), nullable=False),
        sa.Column("sn", sa.BigInteger, nullable=False),
        sa.Column("content", sa.JSON, nullable=False),
        sa.Column("signature", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("subject_id", "sn"),
    )

    op.create_table(
        "event_signatures",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("subject_id", sa.String(128), sa.ForeignKey("subjects.subject_id"), nullable=False),
        sa.Column("sn", sa.BigInteger, nullable=False),
        sa.Column("signer", sa.String(128), nullable=False),
        sa.Column("signature", sa.JSON, nullable=False),
    )
    op.create_index("ix_event_signatures_subject_id", "event_signatures", ["subject_id"])

    op.create_table(
        "pending_requests",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("request_id", sa.String(128), nullable=False, unique=True),
        sa.Column("subject_id", sa.String(128), nullable=False),
        sa.Column("expected_sn", sa.BigInteger, nullable=False),
        sa.Column("request", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_pending_requests_request_id", "pending_requests", ["request_id"])


def downgrade() -> None:
    op.drop_table("pending_requests")
    op.drop_table("event_signatures")
    op.drop_table("events")
    op.drop_table("subjects")
