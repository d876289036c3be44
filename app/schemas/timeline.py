"""
app/schemas/timeline.py

Response schema for timeline events.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.clinical_record import TimelineEvent


class TimelineEventResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str
    resource_type: str = Field(..., alias="resourceType")
    id: str
    summary: Any = None
    details: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_event(cls, event: TimelineEvent) -> TimelineEventResponse:
        return cls.model_validate(event.to_dict())
