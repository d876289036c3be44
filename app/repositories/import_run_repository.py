"""
app/repositories/import_run_repository.py

Repository for import run lifecycle persistence and status lookup.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from db.models.import_run import ImportRun, ImportRunStatus


class ImportRunRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_run(self) -> ImportRun:
        run = ImportRun(
            status=ImportRunStatus.PROCESSING,
            total_lines=0,
            successful_records=0,
            validation_errors=[],
            warnings=[],
            statistics={},
        )
        self._session.add(run)
        self._session.flush()
        self._session.refresh(run)
        return run

    def get_run(self, run_id: uuid.UUID) -> ImportRun | None:
        return self._session.get(ImportRun, run_id)

    def list_runs(self, *, limit: int = 100, status: str | None = None) -> list[ImportRun]:
        stmt: Select[tuple[ImportRun]] = select(ImportRun)
        if status:
            stmt = stmt.where(ImportRun.status == status)
        stmt = stmt.order_by(ImportRun.created_at.desc()).limit(max(1, limit))
        return list(self._session.scalars(stmt).all())

    def list_runs_with_errors(self) -> list[ImportRun]:
        stmt = (
            select(ImportRun)
            .where(func.jsonb_array_length(ImportRun.validation_errors) > 0)
            .order_by(ImportRun.created_at)
        )
        return list(self._session.scalars(stmt).all())

    def count_runs(self, *, status: str | None = None) -> int:
        stmt = select(func.count()).select_from(ImportRun)
        if status:
            stmt = stmt.where(ImportRun.status == status)
        return int(self._session.scalar(stmt) or 0)

    def mark_completed(
        self,
        run_id: uuid.UUID,
        *,
        total_lines: int,
        successful_records: int,
        validation_errors: list[dict[str, Any]],
        warnings: list[dict[str, Any]],
        statistics: dict[str, Any],
    ) -> ImportRun | None:
        run = self.get_run(run_id)
        if run is None:
            return None
        run.status = ImportRunStatus.COMPLETED
        run.total_lines = total_lines
        run.successful_records = successful_records
        run.validation_errors = validation_errors
        run.warnings = warnings
        run.statistics = statistics
        self._session.flush()
        return run

    def mark_failed(self, run_id: uuid.UUID, *, error_message: str) -> ImportRun | None:
        run = self.get_run(run_id)
        if run is None:
            return None
        run.status = ImportRunStatus.FAILED
        # JSONB columns are not mutation-tracked; assign a new list.
        run.validation_errors = [*(run.validation_errors or []), {"message": error_message}]
        self._session.flush()
        return run
