"""
db/models/record.py

Persisted clinical resource: the raw document plus its extracted fields.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin

RECORD_UNIQUE_KEY_CONSTRAINT = "uq_records_resource_id_resource_type"


class Record(Base, TimestampMixin):
    __tablename__ = "records"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    import_run_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("import_runs.id"),
        nullable=False,
    )
    resource_id: Mapped[str] = mapped_column(String(255), nullable=False)
    resource_type: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        comment="Discriminator value, e.g. Observation, Patient",
    )
    subject_reference: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="subject.reference of the raw document",
    )
    extracted_data: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        server_default=text("'{}'::jsonb"),
    )
    raw_data: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        server_default=text("'{}'::jsonb"),
    )

    __table_args__ = (
        UniqueConstraint("resource_id", "resource_type", name=RECORD_UNIQUE_KEY_CONSTRAINT),
        Index("ix_records_resource_type", "resource_type"),
        Index("ix_records_subject_reference", "subject_reference"),
        Index("ix_records_import_run_id", "import_run_id"),
        Index("ix_records_created_at", "created_at"),
        Index("ix_records_resource_type_subject_reference", "resource_type", "subject_reference"),
        Index("ix_records_extracted_data", "extracted_data", postgresql_using="gin"),
    )
