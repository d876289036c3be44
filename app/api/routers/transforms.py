"""
app/api/routers/transforms.py

Ad-hoc transformation endpoint.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_record_repository
from app.config import QuerySettings, get_query_settings
from app.repositories.record_repository import RecordRepository
from app.schemas.transform import TransformRequest
from app.services.transform_service import TransformError, TransformService

router = APIRouter(tags=["transforms"])


@router.post("/transform", response_model=list[dict[str, Any]])
def transform_records(
    body: TransformRequest,
    records: RecordRepository = Depends(get_record_repository),
    settings: QuerySettings = Depends(get_query_settings),
) -> list[dict[str, Any]]:
    service = TransformService(records, record_limit=settings.transform_limit)
    try:
        return service.transform(
            resource_types=body.resource_types,
            subject=body.filters.subject,
            steps=[item.to_step() for item in body.transformations],
        )
    except TransformError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
