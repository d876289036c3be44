"""
tests/test_field_extractor.py

Pytest unit tests for FieldExtractor and the extraction field table.
"""

from __future__ import annotations

import pytest

from app.mappers import FieldExtractor
from app.mappers.extraction_config import fields_for
from app.mappers.field_extractor import MISSING_FIELD_MESSAGE


@pytest.fixture()
def extractor() -> FieldExtractor:
    return FieldExtractor()


class TestFieldsFor:
    def test_universal_fields_first(self) -> None:
        assert fields_for("Observation")[:3] == ["id", "resourceType", "subject"]

    def test_unknown_type_gets_universal_only(self) -> None:
        assert fields_for("Encounter") == ["id", "resourceType", "subject"]
        assert fields_for(None) == ["id", "resourceType", "subject"]

    def test_medication_request_fields(self) -> None:
        fields = fields_for("MedicationRequest")
        assert "dosageInstruction" in fields
        assert "authoredOn" in fields
        assert "code" not in fields


class TestExtract:
    def test_extracts_configured_fields_only(self, extractor: FieldExtractor) -> None:
        document = {
            "resourceType": "Observation",
            "id": "obs-1",
            "status": "final",
            "code": {"text": "HR"},
            "subject": {"reference": "Patient/1"},
            "effectiveDateTime": "2025-01-10",
            "valueQuantity": {"value": 72, "unit": "bpm"},
            "component": [],
            "note": "ignored",
        }

        extracted, warnings = extractor.extract(document)

        assert "note" not in extracted
        assert extracted["valueQuantity"] == {"value": 72, "unit": "bpm"}
        assert list(extracted)[:3] == ["id", "resourceType", "subject"]
        assert warnings == []

    def test_missing_fields_are_null_and_warned(self, extractor: FieldExtractor) -> None:
        document = {
            "resourceType": "Observation",
            "id": "obs-1",
            "status": "final",
            "code": {"text": "HR"},
            "subject": {"reference": "Patient/1"},
        }

        extracted, warnings = extractor.extract(document)

        assert extracted["effectiveDateTime"] is None
        assert [warning.field for warning in warnings] == [
            "effectiveDateTime",
            "valueQuantity",
            "component",
        ]
        assert all(warning.message == MISSING_FIELD_MESSAGE for warning in warnings)

    def test_falsy_values_do_not_warn(self, extractor: FieldExtractor) -> None:
        document = {
            "resourceType": "Patient",
            "id": "p-1",
            "subject": {"reference": "Patient/p-1"},
            "name": [],
            "gender": "",
            "active": False,
            "birthDate": "1980-01-01",
            "address": [],
            "telecom": [],
        }

        extracted, warnings = extractor.extract(document)

        assert extracted["active"] is False
        assert extracted["gender"] == ""
        assert warnings == []

    def test_custom_field_table(self) -> None:
        extractor = FieldExtractor(fields={"id": "all", "priority": ("Task",)})
        extracted, warnings = extractor.extract({"resourceType": "Task", "id": "t-1"})
        assert extracted == {"id": "t-1", "priority": None}
        assert [warning.field for warning in warnings] == ["priority"]
