"""
app/services/transform_service.py

Ad-hoc reshaping of stored documents. Results are returned, never persisted.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from app.mappers import json_path
from app.repositories.record_repository import RecordRepository

WARNING_KEY = "_warning"


class TransformAction:
    EXTRACT = "extract"
    FLATTEN = "flatten"


class TransformError(ValueError):
    """
    Raised when a transformation step cannot be applied as written.

    An ``extract`` step without an output key is rejected outright, failing
    the whole request, rather than storing the value under a null key.
    """


@dataclass(frozen=True)
class TransformStep:
    action: str | None
    field: str | None = None
    output_key: str | None = None


def apply_steps(document: Mapping[str, Any], steps: Sequence[TransformStep]) -> dict[str, Any]:
    """
    Apply ``steps`` in order to one document and return the accumulated row.
    """

    out: dict[str, Any] = {}

    for step in steps:
        if step.action == TransformAction.EXTRACT:
            if not step.output_key:
                raise TransformError(f"extract of {step.field!r} requires 'as'")
            out[step.output_key] = json_path.get(document, step.field)
        elif step.action == TransformAction.FLATTEN:
            value = json_path.get(document, step.field)
            if isinstance(value, Mapping):
                prefix = str(step.field).split(".")[0]
                for key, item in value.items():
                    out[f"{prefix}_{key}"] = item
        else:
            out.setdefault(WARNING_KEY, []).append(f"unknown action {step.action or ''}")

    return out


class TransformService:
    """
    Selects records by type and subject, then reshapes each raw document.
    """

    def __init__(self, records: RecordRepository, *, record_limit: int = 500) -> None:
        self._records = records
        self._record_limit = max(1, record_limit)

    def transform(
        self,
        *,
        resource_types: Sequence[str] | None,
        subject: str | None,
        steps: Sequence[TransformStep],
    ) -> list[dict[str, Any]]:
        records = self._records.filter_records(
            resource_types=resource_types,
            subject=subject,
            limit=self._record_limit,
        )

        rows: list[dict[str, Any]] = []
        for record in records:
            row = apply_steps(record.raw_data or {}, steps)
            row["id"] = record.resource_id
            row["resourceType"] = record.resource_type
            rows.append(row)
        return rows
