"""
app/schemas package marker.
"""

from app.schemas.analytics import AnalyticsResponse
from app.schemas.import_run import (
    ImportErrorResponse,
    ImportRunListResponse,
    ImportRunResponse,
    ImportWarningResponse,
)
from app.schemas.timeline import TimelineEventResponse
from app.schemas.transform import TransformationItem, TransformFilters, TransformRequest

__all__ = [
    "AnalyticsResponse",
    "ImportErrorResponse",
    "ImportRunListResponse",
    "ImportRunResponse",
    "ImportWarningResponse",
    "TimelineEventResponse",
    "TransformationItem",
    "TransformFilters",
    "TransformRequest",
]
