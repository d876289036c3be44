"""
app/repositories/record_repository.py

Persistence and query layer for imported clinical records.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import Session

from app.domain.clinical_record import RecordInput
from db.models.record import RECORD_UNIQUE_KEY_CONSTRAINT, Record

logger = logging.getLogger(__name__)


class RecordPersistenceError(RuntimeError):
    """
    Raised when the store rejects a record for a reason other than an
    already-present (resource_id, resource_type) key.
    """


def normalize_resource_types(resource_types: str | Sequence[str] | None) -> list[str]:
    """
    Coerce a single type or a list of types into a list without blank entries.
    """

    if resource_types is None:
        return []
    if isinstance(resource_types, str):
        resource_types = [resource_types]
    return [str(item).strip() for item in resource_types if str(item).strip()]


def normalize_subject(subject: str | None) -> str | None:
    if subject is None:
        return None
    stripped = subject.strip()
    return stripped or None


class RecordRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def insert_if_absent(self, record: RecordInput) -> bool:
        """
        Insert one record unless its (resource_id, resource_type) already exists.

        Returns True when a row was created, False when the key was already
        present. Runs inside a SAVEPOINT so a rejected row leaves the
        surrounding import transaction usable.
        """

        stmt = (
            insert(Record)
            .values(
                resource_id=record.resource_id,
                resource_type=record.resource_type,
                subject_reference=record.subject_reference,
                extracted_data=record.extracted_data,
                raw_data=record.raw_data,
                import_run_id=record.import_run_id,
            )
            .on_conflict_do_nothing(constraint=RECORD_UNIQUE_KEY_CONSTRAINT)
            .returning(Record.id)
        )
        try:
            with self._session.begin_nested():
                created_id = self._session.scalars(stmt).first()
        except (IntegrityError, DataError) as exc:
            raise RecordPersistenceError(str(exc.orig) if exc.orig is not None else str(exc)) from exc

        if created_id is None:
            logger.debug(
                "Record already present resource_id=%r resource_type=%r",
                record.resource_id,
                record.resource_type,
            )
            return False
        return True

    def get_record(self, record_id: uuid.UUID) -> Record | None:
        return self._session.get(Record, record_id)

    def filter_records(
        self,
        *,
        resource_types: str | Sequence[str] | None = None,
        subject: str | None = None,
        limit: int | None = None,
    ) -> list[Record]:
        """
        Records matching the type set and subject, newest first.
        """

        stmt: Select[tuple[Record]] = select(Record)

        types = normalize_resource_types(resource_types)
        if types:
            stmt = stmt.where(Record.resource_type.in_(types))

        subject = normalize_subject(subject)
        if subject is not None:
            stmt = stmt.where(Record.subject_reference == subject)

        stmt = stmt.order_by(Record.created_at.desc(), Record.id.desc())
        if limit is not None:
            stmt = stmt.limit(max(1, limit))
        return list(self._session.scalars(stmt).all())

    def count_records(self) -> int:
        return int(self._session.scalar(select(func.count()).select_from(Record)) or 0)

    def count_by_resource_type(self) -> dict[str, int]:
        stmt = (
            select(Record.resource_type, func.count())
            .group_by(Record.resource_type)
            .order_by(Record.resource_type)
        )
        return {resource_type: int(count) for resource_type, count in self._session.execute(stmt)}

    def count_unique_subjects(self, *, import_run_id: uuid.UUID | None = None) -> int:
        stmt = select(func.count(func.distinct(Record.subject_reference))).where(
            Record.subject_reference.is_not(None)
        )
        if import_run_id is not None:
            stmt = stmt.where(Record.import_run_id == import_run_id)
        return int(self._session.scalar(stmt) or 0)

    def count_by_subject(self, *, exclude_resource_type: str | None = None) -> dict[str, int]:
        stmt = select(Record.subject_reference, func.count()).where(
            Record.subject_reference.is_not(None)
        )
        if exclude_resource_type is not None:
            stmt = stmt.where(Record.resource_type != exclude_resource_type)
        stmt = stmt.group_by(Record.subject_reference).order_by(Record.subject_reference)
        return {subject: int(count) for subject, count in self._session.execute(stmt)}
