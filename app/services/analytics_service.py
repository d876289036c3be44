"""
app/services/analytics_service.py

Cross-run and cross-record statistics over the persisted store.

Counting is pushed to SQL through the repositories; only the per-run error
breakdown is computed here, from each run's stored error list.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from app.domain.clinical_record import SELF_SUBJECT_TYPE
from app.repositories.import_run_repository import ImportRunRepository
from app.repositories.record_repository import RecordRepository
from db.models.import_run import ImportRunStatus

UNKNOWN_RESOURCE_TYPE = "unknown"
DEFAULT_ERROR_PATH = "$"
DEFAULT_ERROR_MESSAGE = "unknown error"


def summarize_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, dict[str, Any]]:
    """
    Group a run's errors by resource type, then by (path, message).

    Groups within a type are sorted by descending count; equal counts keep
    first-seen order.
    """

    by_type: dict[str, dict[tuple[str, str], int]] = {}
    totals: dict[str, int] = {}

    for error in errors:
        resource_type = error.get("resourceType") or UNKNOWN_RESOURCE_TYPE
        key = (
            error.get("path") or DEFAULT_ERROR_PATH,
            error.get("message") or DEFAULT_ERROR_MESSAGE,
        )
        if resource_type not in by_type:
            by_type[resource_type] = {}
        groups = by_type[resource_type]
        groups[key] = groups.get(key, 0) + 1
        totals[resource_type] = totals.get(resource_type, 0) + 1

    summary: dict[str, dict[str, Any]] = {}
    for resource_type, groups in by_type.items():
        ranked = sorted(groups.items(), key=lambda item: -item[1])
        summary[resource_type] = {
            "count": totals[resource_type],
            "error_summary": [
                {"path": path, "message": message, "count": count}
                for (path, message), count in ranked
            ],
        }
    return summary


class AnalyticsService:
    def __init__(self, records: RecordRepository, runs: ImportRunRepository) -> None:
        self._records = records
        self._runs = runs

    def build(self) -> dict[str, Any]:
        return {
            "total_records": self._records.count_records(),
            "records_by_type": self._records.count_by_resource_type(),
            "unique_patients": self._records.count_unique_subjects(),
            "records_per_patient": self._records.count_by_subject(
                exclude_resource_type=SELF_SUBJECT_TYPE
            ),
            "imports_summary": self._imports_summary(),
        }

    def _imports_summary(self) -> dict[str, Any]:
        runs_with_errors = self._runs.list_runs_with_errors()
        return {
            "total_imports": self._runs.count_runs(),
            "successful_imports": self._runs.count_runs(status=ImportRunStatus.COMPLETED),
            "failed_imports": self._runs.count_runs(status=ImportRunStatus.FAILED),
            "imports_with_errors": len(runs_with_errors),
            "error_summary": [
                {
                    "import_id": str(run.id),
                    "error_count": len(run.validation_errors),
                    "errors": summarize_errors(run.validation_errors),
                }
                for run in runs_with_errors
            ],
        }
