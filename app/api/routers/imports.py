"""
app/api/routers/imports.py

JSONL import endpoint and import run lookup.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_import_payload, get_import_run_repository, get_record_repository
from app.repositories.import_run_repository import ImportRunRepository
from app.repositories.record_repository import RecordRepository
from app.schemas.import_run import ImportRunListResponse, ImportRunResponse
from app.services.jsonl_import_service import (
    ImportPayloadError,
    JsonlImportService,
    get_jsonl_import_service,
)
from db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["imports"])


@router.post("/import", response_model=ImportRunResponse)
def import_jsonl(
    payload: str = Depends(get_import_payload),
    db: Session = Depends(get_db),
    records: RecordRepository = Depends(get_record_repository),
    runs: ImportRunRepository = Depends(get_import_run_repository),
    import_service: JsonlImportService = Depends(get_jsonl_import_service),
) -> ImportRunResponse:
    """
    Import line-delimited JSON resources and return the run summary.
    """

    try:
        run = import_service.import_jsonl(payload, db=db, records=records, runs=runs)
    except ImportPayloadError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except Exception as exc:
        logger.exception("JSONL import failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Import failed: {exc}",
        ) from exc

    return ImportRunResponse.from_run(run)


@router.get("/imports", response_model=ImportRunListResponse)
def list_import_runs(
    limit: int = Query(default=100, ge=1, le=500),
    run_status: str | None = Query(default=None, alias="status"),
    runs: ImportRunRepository = Depends(get_import_run_repository),
) -> ImportRunListResponse:
    return ImportRunListResponse(
        runs=[ImportRunResponse.from_run(run) for run in runs.list_runs(limit=limit, status=run_status)]
    )


@router.get("/imports/{run_id}", response_model=ImportRunResponse)
def get_import_run(
    run_id: str,
    runs: ImportRunRepository = Depends(get_import_run_repository),
) -> ImportRunResponse:
    try:
        parsed_id = uuid.UUID(run_id)
    except ValueError:
        parsed_id = None

    run = runs.get_run(parsed_id) if parsed_id is not None else None
    if run is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not_found")
    return ImportRunResponse.from_run(run)
