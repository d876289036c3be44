"""
app/api/routers/timelines.py

Per-subject clinical timeline endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import get_record_repository, parse_int_param, split_csv_param
from app.config import QuerySettings, get_query_settings
from app.repositories.record_repository import RecordRepository
from app.schemas.timeline import TimelineEventResponse
from app.services.timeline_service import TimelineService, TimelineSubjectRequiredError

router = APIRouter(tags=["timelines"])


@router.get("/timelines", response_model=list[TimelineEventResponse])
def get_timeline(
    subject: str | None = Query(default=None, description="Subject reference, e.g. Patient/123"),
    resource_types: str | None = Query(default=None, alias="resourceTypes"),
    from_: str | None = Query(default=None, alias="from"),
    to: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    records: RecordRepository = Depends(get_record_repository),
    settings: QuerySettings = Depends(get_query_settings),
) -> list[TimelineEventResponse]:
    service = TimelineService(
        records,
        default_limit=settings.timeline_default_limit,
        max_limit=settings.timeline_max_limit,
    )
    try:
        events = service.build(
            subject=subject,
            resource_types=split_csv_param(resource_types),
            from_=from_,
            to=to,
            limit=parse_int_param(limit),
        )
    except TimelineSubjectRequiredError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc

    return [TimelineEventResponse.from_event(event) for event in events]
