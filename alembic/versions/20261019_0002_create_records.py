"""create records table

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 09:05:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "records",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("import_run_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("resource_id", sa.String(length=255), nullable=False),
        sa.Column(
            "resource_type",
            sa.String(length=120),
            nullable=False,
            comment="Discriminator value, e.g. Observation, Patient",
        ),
        sa.Column(
            "subject_reference",
            sa.String(length=255),
            nullable=True,
            comment="subject.reference of the raw document",
        ),
        sa.Column(
            "extracted_data",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text("'{}'::jsonb"),
            nullable=False,
        ),
        sa.Column(
            "raw_data",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text("'{}'::jsonb"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(
            ["import_run_id"],
            ["import_runs.id"],
            name="fk_records_import_run_id_import_runs",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_records"),
        sa.UniqueConstraint(
            "resource_id",
            "resource_type",
            name="uq_records_resource_id_resource_type",
        ),
    )
    op.create_index("ix_records_resource_type", "records", ["resource_type"], unique=False)
    op.create_index("ix_records_subject_reference", "records", ["subject_reference"], unique=False)
    op.create_index("ix_records_import_run_id", "records", ["import_run_id"], unique=False)
    op.create_index("ix_records_created_at", "records", ["created_at"], unique=False)
    op.create_index(
        "ix_records_resource_type_subject_reference",
        "records",
        ["resource_type", "subject_reference"],
        unique=False,
    )
    op.create_index(
        "ix_records_extracted_data",
        "records",
        ["extracted_data"],
        unique=False,
        postgresql_using="gin",
    )


def downgrade() -> None:
    op.drop_index("ix_records_extracted_data", table_name="records")
    op.drop_index("ix_records_resource_type_subject_reference", table_name="records")
    op.drop_index("ix_records_created_at", table_name="records")
    op.drop_index("ix_records_import_run_id", table_name="records")
    op.drop_index("ix_records_subject_reference", table_name="records")
    op.drop_index("ix_records_resource_type", table_name="records")
    op.drop_table("records")
