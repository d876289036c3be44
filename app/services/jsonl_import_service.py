"""
app/services/jsonl_import_service.py

Service layer for line-delimited JSON import of clinical resources.

Each non-blank line goes through:

    parse -> validate -> extract -> insert-if-absent

A bad line is recorded on the run and never aborts the batch. Only
orchestration-level failures do: the run is then marked ``failed`` and the
exception propagates to the caller.

Transaction contract:
  - The run row is committed in ``processing`` state before any line is read.
  - Record inserts run in per-line SAVEPOINTs (see RecordRepository).
  - Completion (records + final run state) is committed once at the end.
  - On failure the work is rolled back and the run is marked failed in a
    separate commit.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from sqlalchemy.orm import Session

from app.config import get_import_settings
from app.domain.clinical_record import (
    RESOURCE_TYPE_FIELD,
    SUBJECT_REFERENCE_PATH,
    RecordInput,
    RecordValidationError,
)
from app.logging_utils import log_event
from app.mappers import json_path
from app.mappers.field_extractor import FieldExtractor
from app.repositories.import_run_repository import ImportRunRepository
from app.repositories.record_repository import RecordPersistenceError, RecordRepository
from app.services.import_context import ImportContext
from app.validators.resource_validator import ResourceValidator
from db.models.import_run import ImportRun

logger = logging.getLogger(__name__)

DOCUMENT_ROOT_PATH = "$"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ImportPayloadError(ValueError):
    """
    Raised when no import payload was supplied at all.
    """


class ImportRunNotFoundError(RuntimeError):
    """
    Raised when the run row disappears between creation and finalization.
    """


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class JsonlImportService:
    """
    Coordinates JSONL parsing, validation, extraction, and persistence.
    """

    def __init__(
        self,
        *,
        log_validation_errors: bool = True,
        validator: ResourceValidator | None = None,
        extractor: FieldExtractor | None = None,
    ) -> None:
        self._log_validation_errors = log_validation_errors
        self._validator = validator or ResourceValidator()
        self._extractor = extractor or FieldExtractor()

    def import_jsonl(
        self,
        text: str | None,
        *,
        db: Session,
        records: RecordRepository | None = None,
        runs: ImportRunRepository | None = None,
    ) -> ImportRun:
        """
        Import one JSONL payload and return the finalized run.

        Args:
            text:     Raw line-delimited JSON. ``None`` is rejected before a
                      run is created.
            db:       Active SQLAlchemy session (caller owns lifecycle; this
                      method commits and rolls back).
            records:  Record repository; defaults to one bound to ``db``.
            runs:     Import run repository; defaults to one bound to ``db``.
        """
        if text is None:
            raise ImportPayloadError("Input cannot be None.")

        records = records or RecordRepository(db)
        runs = runs or ImportRunRepository(db)
        run_id: uuid.UUID | None = None

        try:
            run = runs.create_run()
            db.commit()
            run_id = run.id
            log_event(logger, logging.INFO, "import_run_started", import_run_id=run_id)

            context = ImportContext()
            self._process_lines(text, run_id=run_id, records=records, context=context)

            statistics = {
                "by_resource_type": context.type_statistics(),
                "unique_subjects": records.count_unique_subjects(import_run_id=run_id),
            }
            completed = runs.mark_completed(
                run_id,
                total_lines=context.total_lines,
                successful_records=context.total_imported,
                validation_errors=[error.to_dict() for error in context.errors],
                warnings=[warning.to_dict() for warning in context.warnings],
                statistics=statistics,
            )
            if completed is None:
                raise ImportRunNotFoundError(f"Import run not found: {run_id}")
            db.commit()
        except Exception as exc:
            db.rollback()
            if run_id is not None:
                self._mark_failed_quietly(db=db, runs=runs, run_id=run_id, error=exc)
            raise

        log_event(
            logger,
            logging.INFO,
            "import_run_completed",
            import_run_id=run_id,
            total_lines=completed.total_lines,
            successful_records=completed.successful_records,
            error_count=len(completed.validation_errors),
            warning_count=len(completed.warnings),
        )
        return completed

    # ------------------------------------------------------------------
    # Line processing
    # ------------------------------------------------------------------

    def _process_lines(
        self,
        text: str,
        *,
        run_id: uuid.UUID,
        records: RecordRepository,
        context: ImportContext,
    ) -> None:
        lines = _split_lines(text)
        context.total_lines = len(lines)

        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            self._process_line(
                line,
                line_number=line_number,
                run_id=run_id,
                records=records,
                context=context,
            )

    def _process_line(
        self,
        line: str,
        *,
        line_number: int,
        run_id: uuid.UUID,
        records: RecordRepository,
        context: ImportContext,
    ) -> None:
        try:
            document = json.loads(line, parse_constant=_reject_non_finite)
        except (ValueError, RecursionError) as exc:
            context.add_error(
                RecordValidationError(
                    path=DOCUMENT_ROOT_PATH,
                    message=f"Invalid JSON: {exc}",
                    line=line_number,
                    resource_type=None,
                )
            )
            return

        resource_type = _resource_type_of(document)
        context.increment_seen(resource_type)

        errors = self._validator.validate(document)
        if errors:
            context.increment_errors(resource_type)
            for error in errors:
                located = error.at(line=line_number, resource_type=resource_type)
                self._log_validation_error(located)
                context.add_error(located)
            return

        extracted, warnings = self._extractor.extract(document)
        for warning in warnings:
            context.add_warning(warning.at(line=line_number, resource_type=resource_type))
            context.increment_missing_field(resource_type, warning.field)

        record = RecordInput(
            resource_id=str(document["id"]),
            resource_type=resource_type,
            subject_reference=_subject_reference_of(document),
            extracted_data=extracted,
            raw_data=document,
            import_run_id=run_id,
        )
        try:
            records.insert_if_absent(record)
        except RecordPersistenceError as exc:
            logger.error(
                "Failed to insert record line=%s resource_id=%r resource_type=%r: %s",
                line_number,
                record.resource_id,
                resource_type,
                exc,
            )
            context.add_error(
                RecordValidationError(
                    path=DOCUMENT_ROOT_PATH,
                    message=f"Failed to insert record: {exc}",
                    line=line_number,
                    resource_type=resource_type,
                )
            )
            return

        context.increment_imported(resource_type)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _log_validation_error(self, error: RecordValidationError) -> None:
        if self._log_validation_errors:
            logger.warning(
                "JSONL validation error line=%s resource_type=%s path=%s message=%s",
                error.line,
                error.resource_type,
                error.path,
                error.message,
            )

    def _mark_failed_quietly(
        self,
        *,
        db: Session,
        runs: ImportRunRepository,
        run_id: uuid.UUID,
        error: Exception,
    ) -> None:
        try:
            runs.mark_failed(run_id, error_message=f"Import failed: {error}")
            db.commit()
        except Exception as exc:  # noqa: BLE001
            db.rollback()
            logger.error("Failed to update import run status run_id=%s: %s", run_id, exc)
            return
        log_event(logger, logging.ERROR, "import_run_failed", import_run_id=run_id, error=str(error))


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _split_lines(text: str) -> list[str]:
    """Split on newlines; a trailing newline does not start an extra line."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def _reject_non_finite(token: str) -> Any:
    raise ValueError(f"Non-finite number {token} is not valid JSON")


def _resource_type_of(document: Any) -> str | None:
    if not isinstance(document, Mapping):
        return None
    resource_type = document.get(RESOURCE_TYPE_FIELD)
    return resource_type if isinstance(resource_type, str) else None


def _subject_reference_of(document: Mapping[str, Any]) -> str | None:
    reference = json_path.get(document, SUBJECT_REFERENCE_PATH)
    return reference if isinstance(reference, str) else None


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_jsonl_import_service() -> JsonlImportService:
    """
    Build and cache the import service with env-driven settings.
    """
    settings = get_import_settings()
    return JsonlImportService(log_validation_errors=settings.log_validation_errors)
