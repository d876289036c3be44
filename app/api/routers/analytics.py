"""
app/api/routers/analytics.py

Store-wide analytics snapshot.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_import_run_repository, get_record_repository
from app.repositories.import_run_repository import ImportRunRepository
from app.repositories.record_repository import RecordRepository
from app.schemas.analytics import AnalyticsResponse
from app.services.analytics_service import AnalyticsService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analytics"])


@router.get("/analytics", response_model=AnalyticsResponse)
def get_analytics(
    records: RecordRepository = Depends(get_record_repository),
    runs: ImportRunRepository = Depends(get_import_run_repository),
) -> AnalyticsResponse:
    try:
        report = AnalyticsService(records, runs).build()
    except Exception as exc:
        logger.exception("Analytics report failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc
    return AnalyticsResponse.model_validate(report)
