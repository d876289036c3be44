"""
tests/test_jsonl_import_service.py

Pytest unit tests for JsonlImportService.

The service runs against in-memory repositories and a fake session, so no
database is needed. Coverage
--------
- Line counting, blank lines and trailing newline
- Parse errors, validation errors and extraction warnings
- Duplicate (id, resourceType) keys
- Persistence rejections
- Run statistics
- Catastrophic failure handling
"""

from __future__ import annotations

import json

import pytest

from app.services.jsonl_import_service import ImportPayloadError, JsonlImportService
from db.models.import_run import ImportRunStatus
from tests.fakes import FakeSession, make_repositories


def _jsonl(*documents) -> str:
    return "\n".join(item if isinstance(item, str) else json.dumps(item) for item in documents) + "\n"


def _observation(resource_id: str = "obs-1", **overrides):
    document = {
        "resourceType": "Observation",
        "id": resource_id,
        "status": "final",
        "code": {"text": "Heart rate"},
        "subject": {"reference": "Patient/1"},
        "effectiveDateTime": "2025-01-10T09:30:00Z",
        "valueQuantity": {"value": 72, "unit": "bpm"},
        "component": [],
    }
    document.update(overrides)
    return document


def _patient(resource_id: str = "1"):
    return {
        "resourceType": "Patient",
        "id": resource_id,
        "subject": {"reference": f"Patient/{resource_id}"},
        "name": [{"family": "Doe"}],
        "gender": "female",
        "active": True,
        "birthDate": "1980-01-01",
        "address": [],
        "telecom": [],
    }


@pytest.fixture()
def service() -> JsonlImportService:
    return JsonlImportService(log_validation_errors=False)


@pytest.fixture()
def env():
    records, runs = make_repositories()
    return FakeSession(), records, runs


def _run(service: JsonlImportService, env, text: str):
    db, records, runs = env
    return service.import_jsonl(text, db=db, records=records, runs=runs)


class TestSuccessfulImport:
    def test_imports_valid_lines(self, service, env) -> None:
        run = _run(service, env, _jsonl(_observation("a"), _observation("b"), _patient()))

        assert run.status == ImportRunStatus.COMPLETED
        assert run.total_lines == 3
        assert run.successful_records == 3
        assert run.validation_errors == []
        assert run.warnings == []
        assert env[1].count_records() == 3

    def test_record_fields(self, service, env) -> None:
        _run(service, env, _jsonl(_observation("a")))
        stored = env[1].rows[0]

        assert stored.resource_id == "a"
        assert stored.resource_type == "Observation"
        assert stored.subject_reference == "Patient/1"
        assert stored.raw_data["valueQuantity"] == {"value": 72, "unit": "bpm"}
        assert stored.extracted_data["code"] == {"text": "Heart rate"}

    def test_numeric_id_is_stored_as_string(self, service, env) -> None:
        _run(service, env, _jsonl(_observation(42)))
        assert env[1].rows[0].resource_id == "42"

    def test_run_is_committed_before_and_after_processing(self, service, env) -> None:
        _run(service, env, _jsonl(_observation()))
        db = env[0]
        assert db.commits == 2
        assert db.rollbacks == 0

    def test_statistics(self, service, env) -> None:
        observation = _observation("a")
        del observation["component"]
        text = _jsonl(observation, _observation("b", status="bogus"), _patient("9"))

        run = _run(service, env, text)

        assert run.statistics == {
            "by_resource_type": {
                "Observation": {
                    "seen": 2,
                    "imported": 1,
                    "errors": 1,
                    "missing_fields": {"component": 1},
                },
                "Patient": {"seen": 1, "imported": 1, "errors": 0, "missing_fields": {}},
            },
            "unique_subjects": 2,
        }


class TestLineHandling:
    def test_blank_lines_count_toward_total_only(self, service, env) -> None:
        text = json.dumps(_observation("a")) + "\n\n   \n" + json.dumps(_observation("b")) + "\n"

        run = _run(service, env, text)

        assert run.total_lines == 4
        assert run.successful_records == 2
        assert run.validation_errors == []

    def test_last_line_without_newline_is_counted(self, service, env) -> None:
        run = _run(service, env, json.dumps(_observation()))
        assert run.total_lines == 1

    def test_invalid_json_is_recorded_and_import_continues(self, service, env) -> None:
        run = _run(service, env, _jsonl("{not json", _observation("b")))

        assert run.successful_records == 1
        assert len(run.validation_errors) == 1
        error = run.validation_errors[0]
        assert error["line"] == 1
        assert error["path"] == "$"
        assert error["message"].startswith("Invalid JSON:")
        assert error["resourceType"] is None

    def test_non_finite_numbers_are_invalid_json(self, service, env) -> None:
        run = _run(service, env, '{"resourceType": "Observation", "id": "x", "value": NaN}\n')
        assert run.successful_records == 0
        assert run.validation_errors[0]["message"].startswith("Invalid JSON:")

    def test_deeply_nested_line_is_recorded_and_import_continues(self, service, env) -> None:
        nested = "[" * 100_000 + "]" * 100_000
        text = _jsonl(_patient("1"), nested, _patient("2"))

        run = _run(service, env, text)

        assert run.status == ImportRunStatus.COMPLETED
        assert run.successful_records == 2
        assert len(run.validation_errors) == 1
        error = run.validation_errors[0]
        assert error["line"] == 2
        assert error["path"] == "$"
        assert error["message"].startswith("Invalid JSON:")

    def test_non_object_line_is_a_validation_error(self, service, env) -> None:
        run = _run(service, env, "[1, 2, 3]\n")
        assert run.validation_errors == [
            {
                "line": 1,
                "path": "resource",
                "message": "Resource must be a valid JSON object",
                "resourceType": None,
            }
        ]

    def test_line_numbers_are_one_based_and_include_blank_lines(self, service, env) -> None:
        text = _jsonl(_observation("a"), "", _observation("b", status="bogus"))
        run = _run(service, env, text)
        assert [error["line"] for error in run.validation_errors] == [3]


class TestValidationAndWarnings:
    def test_invalid_record_is_not_persisted(self, service, env) -> None:
        document = _observation("a")
        del document["code"]

        run = _run(service, env, _jsonl(document))

        assert run.successful_records == 0
        assert env[1].count_records() == 0
        assert run.validation_errors == [
            {
                "line": 1,
                "path": "code",
                "message": "code is required for Observation resource",
                "resourceType": "Observation",
            }
        ]

    def test_every_rule_violation_is_reported(self, service, env) -> None:
        document = _observation("a", status="bogus")
        del document["subject"]

        run = _run(service, env, _jsonl(document))

        assert [error["path"] for error in run.validation_errors] == ["subject", "status"]
        assert run.statistics["by_resource_type"]["Observation"]["errors"] == 1

    def test_missing_optional_fields_warn_but_import(self, service, env) -> None:
        document = _observation("a")
        del document["effectiveDateTime"]

        run = _run(service, env, _jsonl(document))

        assert run.successful_records == 1
        assert run.warnings == [
            {
                "line": 1,
                "field": "effectiveDateTime",
                "message": "missing expected field",
                "resourceType": "Observation",
            }
        ]


class TestUniqueness:
    def test_duplicate_key_in_one_batch_keeps_first(self, service, env) -> None:
        first = _observation("a", status="final")
        second = _observation("a", status="amended")

        run = _run(service, env, _jsonl(first, second))

        records = env[1]
        assert records.count_records() == 1
        assert records.rows[0].raw_data["status"] == "final"
        assert run.validation_errors == []

    def test_reimport_creates_no_new_rows(self, service, env) -> None:
        text = _jsonl(_observation("a"), _patient())
        _run(service, env, text)
        _run(service, env, text)
        assert env[1].count_records() == 2

    def test_same_id_different_type_is_distinct(self, service, env) -> None:
        _run(service, env, _jsonl(_observation("1"), _patient("1")))
        assert env[1].count_records() == 2


class TestPersistenceErrors:
    def test_rejected_insert_is_recorded_not_counted(self, service, env) -> None:
        document = _observation("x" * 300)

        run = _run(service, env, _jsonl(document, _observation("b")))

        assert run.successful_records == 1
        assert len(run.validation_errors) == 1
        error = run.validation_errors[0]
        assert error["path"] == "$"
        assert error["message"].startswith("Failed to insert record:")
        assert error["resourceType"] == "Observation"

    def test_non_string_resource_type_is_rejected_by_store(self, service, env) -> None:
        document = {"resourceType": 7, "id": "a", "subject": {"reference": "Patient/1"}}

        run = _run(service, env, _jsonl(document))

        assert run.successful_records == 0
        assert run.validation_errors[0]["message"].startswith("Failed to insert record:")
        assert run.statistics["by_resource_type"] == {}


class TestFailures:
    def test_none_payload_creates_no_run(self, service, env) -> None:
        db, records, runs = env
        with pytest.raises(ImportPayloadError):
            service.import_jsonl(None, db=db, records=records, runs=runs)
        assert runs.count_runs() == 0

    def test_unexpected_error_marks_run_failed_and_reraises(self, service, env) -> None:
        db, records, runs = env

        def explode(**kwargs):
            raise RuntimeError("boom")

        records.count_unique_subjects = explode

        with pytest.raises(RuntimeError, match="boom"):
            service.import_jsonl(_jsonl(_observation()), db=db, records=records, runs=runs)

        (run,) = runs.list_runs()
        assert run.status == ImportRunStatus.FAILED
        assert run.validation_errors[-1] == {"message": "Import failed: boom"}
        assert db.rollbacks == 1
