"""
app/domain/clinical_record.py

Domain models used by the JSONL import flow and the read-side services.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

RESOURCE_TYPE_FIELD = "resourceType"
SUBJECT_REFERENCE_PATH = "subject.reference"

# The one resource type that denotes the subject itself.
SELF_SUBJECT_TYPE = "Patient"


@dataclass(frozen=True)
class RecordValidationError:
    """
    One per-line error: a parse failure, a rule violation, or a
    persistence conflict.
    """

    path: str
    message: str
    line: int | None = None
    resource_type: str | None = None

    def at(self, *, line: int, resource_type: str | None) -> RecordValidationError:
        return replace(self, line=line, resource_type=resource_type)

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "path": self.path,
            "message": self.message,
            "resourceType": self.resource_type,
        }


@dataclass(frozen=True)
class ExtractionWarning:
    """
    A configured field that was absent from the document.
    """

    field: str
    message: str
    line: int | None = None
    resource_type: str | None = None

    def at(self, *, line: int, resource_type: str | None) -> ExtractionWarning:
        return replace(self, line=line, resource_type=resource_type)

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "field": self.field,
            "message": self.message,
            "resourceType": self.resource_type,
        }


@dataclass(frozen=True)
class RecordInput:
    """
    Validated, extracted document prepared for persistence.
    """

    resource_id: str
    resource_type: str
    subject_reference: str | None
    extracted_data: dict[str, Any]
    raw_data: dict[str, Any]
    import_run_id: uuid.UUID


@dataclass(frozen=True)
class TimelineEvent:
    """
    One dated clinical event. occurred_at is the sort key and is not
    serialized; date keeps the document's original string.
    """

    occurred_at: datetime
    date: str
    resource_type: str
    id: str
    summary: Any = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "resourceType": self.resource_type,
            "id": self.id,
            "summary": self.summary,
            "details": self.details,
        }
