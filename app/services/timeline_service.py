"""
app/services/timeline_service.py

Chronological view of one subject's clinical events.

Date handling
-------------
Each configured resource type orders its events by exactly one field
(DATE_FIELDS). Values come in two shapes:

    2025-01-10                    bare calendar date
    2025-01-10T09:30:00+02:00     full timestamp

A bare date is read as 00:00:00 when it is a lower boundary or an event's
own instant, and as 23:59:59 when it is an upper boundary. Timestamps
without an offset are read in the zone passed to ``parse_instant``; the
service always passes UTC. Documents whose date is missing or malformed
are left out of the timeline rather than failing the request.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from datetime import datetime, time, timezone, tzinfo
from typing import Any, Final

from app.domain.clinical_record import TimelineEvent
from app.mappers import json_path
from app.repositories.record_repository import RecordRepository, normalize_subject
from db.models.record import Record

logger = logging.getLogger(__name__)

DATE_FIELDS: Final[Mapping[str, str]] = {
    "Observation": "effectiveDateTime",
    "Procedure": "performedDateTime",
    "MedicationRequest": "authoredOn",
    "Condition": "onsetDateTime",
}

SUMMARY_PATHS: Final[tuple[str, ...]] = (
    "code.text",
    "code.coding[0].display",
    "code.coding[0].code",
    "medicationCodeableConcept.text",
    "medicationCodeableConcept.coding[0].display",
    "medicationCodeableConcept.coding[0].code",
)

_DATE_ONLY = re.compile(r"\A\d{4}-\d{2}-\d{2}\Z")
_TIMESTAMP = re.compile(
    r"\A(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>Z|[+-]\d{2}:?\d{2})?\Z"
)
_END_OF_DAY = time(23, 59, 59)


class Boundary:
    START = "start"
    END = "end"


class TimelineSubjectRequiredError(ValueError):
    """
    Raised when a timeline is requested without a subject.
    """


def parse_instant(
    value: Any,
    *,
    boundary: str = Boundary.START,
    tz: tzinfo = timezone.utc,
) -> datetime | None:
    """
    Parse a bare date or ISO 8601 timestamp into an aware datetime.

    Returns None for anything blank, non-string or malformed.
    """

    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not raw:
        return None

    try:
        if _DATE_ONLY.match(raw):
            day = datetime.strptime(raw, "%Y-%m-%d").date()
            clock = _END_OF_DAY if boundary == Boundary.END else time.min
            return datetime.combine(day, clock, tzinfo=tz)

        match = _TIMESTAMP.match(raw)
        if not match:
            return None
        parsed = datetime.fromisoformat(_normalize_timestamp(match))
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def _normalize_timestamp(match: re.Match[str]) -> str:
    """
    Rewrite a matched timestamp into the form every supported
    ``datetime.fromisoformat`` accepts: microsecond fraction, ``+HH:MM`` offset.
    """

    normalized = match.group("base")

    fraction = match.group("fraction")
    if fraction:
        normalized += "." + fraction[:6].ljust(6, "0")

    offset = match.group("offset")
    if offset == "Z":
        normalized += "+00:00"
    elif offset:
        digits = offset[1:].replace(":", "")
        normalized += f"{offset[0]}{digits[:2]}:{digits[2:]}"

    return normalized


def normalize_limit(limit: int | None, *, default: int = 100, maximum: int = 500) -> int:
    if limit is None or limit <= 0:
        return default
    return min(limit, maximum)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def build_summary(document: Mapping[str, Any]) -> Any:
    for path in SUMMARY_PATHS:
        value = json_path.get(document, path)
        if value is not None:
            return value
    return None


def build_details(resource_type: str, document: Mapping[str, Any]) -> dict[str, Any]:
    if resource_type == "Observation":
        components = json_path.get(document, "component")
        if isinstance(components, list):
            details: dict[str, Any] = {}
            for component in components:
                label = json_path.get(component, "code.coding[0].display")
                if label is None:
                    label = json_path.get(component, "code.coding[0].code")
                value = json_path.get(component, "valueQuantity.value")
                unit = json_path.get(component, "valueQuantity.unit")
                details[_text(label)] = f"{_text(value)} {_text(unit)}".strip()
            return details

        value = json_path.get(document, "valueQuantity.value")
        unit = json_path.get(document, "valueQuantity.unit")
        return {"value": f"{_text(value)} {_text(unit)}".strip()}

    if resource_type == "MedicationRequest":
        return {"dosage": json_path.get(document, "dosageInstruction[0].text")}

    return {}


class TimelineService:
    """
    Builds a subject's dated events, filtered, sorted and truncated.
    """

    def __init__(
        self,
        records: RecordRepository,
        *,
        default_limit: int = 100,
        max_limit: int = 500,
        date_fields: Mapping[str, str] | None = None,
    ) -> None:
        self._records = records
        self._default_limit = default_limit
        self._max_limit = max_limit
        self._date_fields = date_fields if date_fields is not None else DATE_FIELDS

    def build(
        self,
        *,
        subject: str | None,
        resource_types: Sequence[str] | None = None,
        from_: str | None = None,
        to: str | None = None,
        limit: int | None = None,
    ) -> list[TimelineEvent]:
        subject = normalize_subject(subject)
        if subject is None:
            raise TimelineSubjectRequiredError("subject is required")

        from_time = parse_instant(from_, boundary=Boundary.START, tz=timezone.utc)
        to_time = parse_instant(to, boundary=Boundary.END, tz=timezone.utc)

        records = self._records.filter_records(resource_types=resource_types, subject=subject)

        events = [event for event in map(self._to_event, records) if event is not None]
        events = [
            event
            for event in events
            if (from_time is None or event.occurred_at >= from_time)
            and (to_time is None or event.occurred_at <= to_time)
        ]
        events.sort(key=lambda event: event.occurred_at)

        size = normalize_limit(limit, default=self._default_limit, maximum=self._max_limit)
        return events[:size]

    def _to_event(self, record: Record) -> TimelineEvent | None:
        date_path = self._date_fields.get(record.resource_type)
        if date_path is None:
            return None

        document = record.raw_data or {}
        raw_date = json_path.get(document, date_path)
        occurred_at = parse_instant(raw_date, boundary=Boundary.START, tz=timezone.utc)
        if occurred_at is None:
            logger.debug(
                "Skipping timeline record without usable date resource_id=%r field=%s",
                record.resource_id,
                date_path,
            )
            return None

        return TimelineEvent(
            occurred_at=occurred_at,
            date=raw_date,
            resource_type=record.resource_type,
            id=record.resource_id,
            summary=build_summary(document),
            details=build_details(record.resource_type, document),
        )
