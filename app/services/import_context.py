"""
app/services/import_context.py

In-memory accumulator for one JSONL import run.
"""

from __future__ import annotations

from typing import Any

from app.domain.clinical_record import ExtractionWarning, RecordValidationError


def _bump(counter: dict[str, int], key: str) -> None:
    counter[key] = counter.get(key, 0) + 1


class ImportContext:
    """
    Tracks per-resource-type counters plus the run's errors and warnings.

    Counters for a ``None`` resource type are not kept: lines whose
    discriminator is missing still contribute errors, but no type bucket.
    """

    def __init__(self) -> None:
        self.total_lines = 0
        self.errors: list[RecordValidationError] = []
        self.warnings: list[ExtractionWarning] = []
        self._seen_by_type: dict[str, int] = {}
        self._imported_by_type: dict[str, int] = {}
        self._errors_by_type: dict[str, int] = {}
        self._missing_fields_by_type: dict[str, dict[str, int]] = {}

    def increment_seen(self, resource_type: str | None) -> None:
        if resource_type is not None:
            _bump(self._seen_by_type, resource_type)

    def increment_imported(self, resource_type: str | None) -> None:
        if resource_type is not None:
            _bump(self._imported_by_type, resource_type)

    def increment_errors(self, resource_type: str | None) -> None:
        if resource_type is not None:
            _bump(self._errors_by_type, resource_type)

    def increment_missing_field(self, resource_type: str | None, field: str | None) -> None:
        if resource_type is None or not field:
            return
        if resource_type not in self._missing_fields_by_type:
            self._missing_fields_by_type[resource_type] = {}
        _bump(self._missing_fields_by_type[resource_type], field)

    def add_error(self, error: RecordValidationError) -> None:
        self.errors.append(error)

    def add_warning(self, warning: ExtractionWarning) -> None:
        self.warnings.append(warning)

    @property
    def total_imported(self) -> int:
        return sum(self._imported_by_type.values())

    def type_statistics(self) -> dict[str, dict[str, Any]]:
        """
        Snapshot keyed by every resource type seen in any counter, in first-seen order.
        """

        resource_types: list[str] = []
        for counter in (self._seen_by_type, self._imported_by_type, self._errors_by_type):
            for resource_type in counter:
                if resource_type not in resource_types:
                    resource_types.append(resource_type)

        return {
            resource_type: {
                "seen": self._seen_by_type.get(resource_type, 0),
                "imported": self._imported_by_type.get(resource_type, 0),
                "errors": self._errors_by_type.get(resource_type, 0),
                "missing_fields": dict(self._missing_fields_by_type.get(resource_type, {})),
            }
            for resource_type in resource_types
        }
