"""
tests/test_timeline_service.py

Pytest unit tests for timeline date parsing, event building and filtering.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.services.timeline_service import (
    Boundary,
    TimelineService,
    TimelineSubjectRequiredError,
    build_details,
    build_summary,
    normalize_limit,
    parse_instant,
)
from tests.fakes import InMemoryRecordRepository

SUBJECT = "Patient/1"


def _observation(resource_id: str, when: str | None, **extra):
    document = {
        "resourceType": "Observation",
        "id": resource_id,
        "status": "final",
        "code": {"text": f"obs {resource_id}"},
        "subject": {"reference": SUBJECT},
        "valueQuantity": {"value": 72, "unit": "bpm"},
    }
    if when is not None:
        document["effectiveDateTime"] = when
    document.update(extra)
    return document


class TestParseInstant:
    def test_bare_date_start_and_end(self) -> None:
        assert parse_instant("2025-01-10") == datetime(2025, 1, 10, tzinfo=timezone.utc)
        assert parse_instant("2025-01-10", boundary=Boundary.END) == datetime(
            2025, 1, 10, 23, 59, 59, tzinfo=timezone.utc
        )

    def test_timestamp_with_offset(self) -> None:
        parsed = parse_instant("2025-01-10T09:30:00+02:00")
        assert parsed == datetime(2025, 1, 10, 7, 30, tzinfo=timezone.utc)
        assert parse_instant("2025-01-10T09:30:00+0200") == parsed
        assert parse_instant("2025-01-10T09:30:00-0130") == datetime(2025, 1, 10, 11, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        ("value", "microsecond"),
        [
            ("2025-01-10T09:30:00.5Z", 500_000),
            ("2025-01-10T09:30:00.123Z", 123_000),
            ("2025-01-10T09:30:00.123456789+00:00", 123_456),
        ],
    )
    def test_fractional_seconds_of_any_precision(self, value, microsecond) -> None:
        assert parse_instant(value) == datetime(2025, 1, 10, 9, 30, 0, microsecond, tzinfo=timezone.utc)

    def test_zulu_and_naive_timestamps(self) -> None:
        assert parse_instant("2025-01-10T09:30:00Z") == datetime(2025, 1, 10, 9, 30, tzinfo=timezone.utc)
        assert parse_instant("2025-01-10T09:30:00") == datetime(2025, 1, 10, 9, 30, tzinfo=timezone.utc)

    def test_naive_timestamp_uses_given_zone(self) -> None:
        plus_five = timezone(timedelta(hours=5))
        parsed = parse_instant("2025-01-10T09:30:00", tz=plus_five)
        assert parsed.utcoffset() == timedelta(hours=5)

    @pytest.mark.parametrize(
        "value",
        [
            None, "", "  ", "yesterday", "2025-13-01", "2025/01/10", 20250110,
            "2025-01-10T25:00:00Z", "2025-01-10T09:30:00+2",
        ],
    )
    def test_invalid_values(self, value) -> None:
        assert parse_instant(value) is None


class TestHelpers:
    @pytest.mark.parametrize(
        ("limit", "expected"),
        [(None, 100), (0, 100), (-3, 100), (5, 5), (500, 500), (10_000, 500)],
    )
    def test_normalize_limit(self, limit, expected) -> None:
        assert normalize_limit(limit) == expected

    def test_summary_fallback_chain(self) -> None:
        assert build_summary({"code": {"text": "HR", "coding": [{"display": "x"}]}}) == "HR"
        assert build_summary({"code": {"coding": [{"code": "8867-4"}]}}) == "8867-4"
        assert build_summary({"medicationCodeableConcept": {"coding": [{"display": "Aspirin"}]}}) == "Aspirin"
        assert build_summary({}) is None

    def test_observation_details_from_components(self) -> None:
        document = {
            "component": [
                {"code": {"coding": [{"display": "Systolic"}]}, "valueQuantity": {"value": 120, "unit": "mmHg"}},
                {"code": {"coding": [{"code": "8462-4"}]}, "valueQuantity": {"value": 80}},
            ]
        }
        assert build_details("Observation", document) == {"Systolic": "120 mmHg", "8462-4": "80"}

    def test_observation_details_from_value(self) -> None:
        assert build_details("Observation", {"valueQuantity": {"value": 7.2, "unit": "%"}}) == {"value": "7.2 %"}
        assert build_details("Observation", {}) == {"value": ""}

    def test_medication_request_details(self) -> None:
        document = {"dosageInstruction": [{"text": "1 tablet daily"}]}
        assert build_details("MedicationRequest", document) == {"dosage": "1 tablet daily"}
        assert build_details("MedicationRequest", {}) == {"dosage": None}

    def test_other_types_have_empty_details(self) -> None:
        assert build_details("Procedure", {"code": {"text": "x"}}) == {}


class TestTimelineService:
    @pytest.fixture()
    def records(self) -> InMemoryRecordRepository:
        repository = InMemoryRecordRepository()
        repository.add_document(_observation("late", "2025-03-01T10:00:00Z"))
        repository.add_document(_observation("early", "2025-01-10"))
        repository.add_document(_observation("undated", None))
        repository.add_document(_observation("garbled", "not a date"))
        repository.add_document(
            {
                "resourceType": "MedicationRequest",
                "id": "med-1",
                "status": "active",
                "subject": {"reference": SUBJECT},
                "authoredOn": "2025-02-01T08:00:00Z",
                "medicationCodeableConcept": {"text": "Aspirin"},
                "dosageInstruction": [{"text": "daily"}],
            }
        )
        repository.add_document(
            {"resourceType": "Patient", "id": "1", "name": [{"family": "Doe"}], "active": True,
             "subject": {"reference": SUBJECT}}
        )
        repository.add_document(_observation("other", "2025-01-01", subject={"reference": "Patient/2"}))
        return repository

    def test_subject_required(self, records) -> None:
        service = TimelineService(records)
        for subject in (None, "", "   "):
            with pytest.raises(TimelineSubjectRequiredError):
                service.build(subject=subject)

    def test_sorted_and_filtered_to_dated_configured_types(self, records) -> None:
        events = TimelineService(records).build(subject=SUBJECT)
        assert [event.id for event in events] == ["early", "med-1", "late"]

    def test_event_payload(self, records) -> None:
        events = TimelineService(records).build(subject=SUBJECT, resource_types=["MedicationRequest"])
        assert [event.to_dict() for event in events] == [
            {
                "date": "2025-02-01T08:00:00Z",
                "resourceType": "MedicationRequest",
                "id": "med-1",
                "summary": "Aspirin",
                "details": {"dosage": "daily"},
            }
        ]

    def test_inclusive_date_only_bounds(self, records) -> None:
        events = TimelineService(records).build(subject=SUBJECT, from_="2025-01-10", to="2025-03-01")
        assert [event.id for event in events] == ["early", "med-1", "late"]

        events = TimelineService(records).build(subject=SUBJECT, from_="2025-01-11", to="2025-02-28")
        assert [event.id for event in events] == ["med-1"]

    def test_invalid_bounds_are_ignored(self, records) -> None:
        events = TimelineService(records).build(subject=SUBJECT, from_="soon", to="later")
        assert len(events) == 3

    def test_limit(self, records) -> None:
        service = TimelineService(records, default_limit=2, max_limit=3)
        assert [event.id for event in service.build(subject=SUBJECT, limit=1)] == ["early"]
        assert len(service.build(subject=SUBJECT, limit=0)) == 2
        assert len(service.build(subject=SUBJECT, limit=50)) == 3
