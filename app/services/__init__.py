"""
app/services package marker.
"""

from app.services.analytics_service import AnalyticsService
from app.services.import_context import ImportContext
from app.services.jsonl_import_service import (
    ImportPayloadError,
    JsonlImportService,
    get_jsonl_import_service,
)
from app.services.timeline_service import TimelineService, TimelineSubjectRequiredError
from app.services.transform_service import TransformError, TransformService, TransformStep

__all__ = [
    "AnalyticsService",
    "ImportContext",
    "ImportPayloadError",
    "JsonlImportService",
    "get_jsonl_import_service",
    "TimelineService",
    "TimelineSubjectRequiredError",
    "TransformError",
    "TransformService",
    "TransformStep",
]
