"""
app/domain package marker.
"""

from app.domain.clinical_record import (
    ExtractionWarning,
    RecordInput,
    RecordValidationError,
    TimelineEvent,
)

__all__ = [
    "ExtractionWarning",
    "RecordInput",
    "RecordValidationError",
    "TimelineEvent",
]
