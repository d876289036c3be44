"""
app/api/routers/records.py

Read access to extracted record fields.
"""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import get_record_repository, split_csv_param
from app.config import QuerySettings, get_query_settings
from app.repositories.record_repository import RecordRepository
from db.models.record import Record

router = APIRouter(tags=["records"])

ALWAYS_INCLUDED_FIELD = "resourceType"


def project_fields(record: Record, fields: str | None) -> dict[str, Any]:
    """
    Extracted data limited to the requested keys; resourceType is always kept.
    """

    extracted = dict(record.extracted_data or {})
    requested = split_csv_param(fields)
    if requested is None:
        return extracted

    if ALWAYS_INCLUDED_FIELD not in requested:
        requested.append(ALWAYS_INCLUDED_FIELD)
    return {key: extracted[key] for key in requested if key in extracted}


@router.get("/records", response_model=list[dict[str, Any]])
def list_records(
    resource_type: str | None = Query(default=None, alias="resourceType"),
    subject: str | None = Query(default=None),
    fields: str | None = Query(default=None, description="Comma-separated extracted field names"),
    records: RecordRepository = Depends(get_record_repository),
    settings: QuerySettings = Depends(get_query_settings),
) -> list[dict[str, Any]]:
    matched = records.filter_records(
        resource_types=resource_type,
        subject=subject,
        limit=settings.records_limit,
    )
    return [project_fields(record, fields) for record in matched]


@router.get("/records/{record_id}", response_model=dict[str, Any])
def get_record(
    record_id: str,
    fields: str | None = Query(default=None, description="Comma-separated extracted field names"),
    records: RecordRepository = Depends(get_record_repository),
) -> dict[str, Any]:
    try:
        parsed_id = uuid.UUID(record_id)
    except ValueError:
        parsed_id = None

    record = records.get_record(parsed_id) if parsed_id is not None else None
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not_found")
    return project_fields(record, fields)
