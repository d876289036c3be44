"""
app/validators/resource_validator.py

Rule-driven validation of parsed clinical documents.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.domain.clinical_record import RESOURCE_TYPE_FIELD, SELF_SUBJECT_TYPE, RecordValidationError
from app.mappers import json_path
from app.validators.validation_rules import (
    DEFAULT_STATUS_PATH,
    REQUIRED_FIELDS,
    STATUS_PATHS,
    SUBJECT_FIELD,
    UNIVERSAL_REQUIRED_FIELDS,
    VALID_STATUS,
)


class ResourceValidator:
    """
    Checks required fields and enumerated status codes.

    Every applicable check runs; errors accumulate rather than stopping at
    the first failure. A status that is absent is left to the required-field
    check and never reported as an invalid value.
    """

    def __init__(
        self,
        *,
        required_fields: Mapping[str, tuple[str, ...]] | None = None,
        valid_status: Mapping[str, tuple[str, ...]] | None = None,
        status_paths: Mapping[str, str] | None = None,
        universal_fields: tuple[str, ...] = UNIVERSAL_REQUIRED_FIELDS,
        self_subject_type: str = SELF_SUBJECT_TYPE,
    ) -> None:
        self._required_fields = required_fields if required_fields is not None else REQUIRED_FIELDS
        self._valid_status = valid_status if valid_status is not None else VALID_STATUS
        self._status_paths = status_paths if status_paths is not None else STATUS_PATHS
        self._universal_fields = universal_fields
        self._self_subject_type = self_subject_type

    def validate(self, document: Any) -> list[RecordValidationError]:
        if not isinstance(document, Mapping):
            return [
                RecordValidationError(
                    path="resource",
                    message="Resource must be a valid JSON object",
                )
            ]

        errors: list[RecordValidationError] = []
        resource_type = document.get(RESOURCE_TYPE_FIELD)
        rule_key = resource_type if isinstance(resource_type, str) else None

        for path in self.required_fields_for(rule_key):
            if json_path.get(document, path) is None:
                errors.append(
                    RecordValidationError(
                        path=path,
                        message=f"{path} is required for {self._label(resource_type)} resource",
                    )
                )

        status_error = self._validate_status(document, rule_key)
        if status_error is not None:
            errors.append(status_error)

        return errors

    def required_fields_for(self, resource_type: str | None) -> list[str]:
        fields = list(self._universal_fields)
        if resource_type == self._self_subject_type:
            fields = [field for field in fields if field != SUBJECT_FIELD]
        if resource_type is not None:
            fields.extend(self._required_fields.get(resource_type, ()))
        return fields

    def _validate_status(
        self,
        document: Mapping[str, Any],
        resource_type: str | None,
    ) -> RecordValidationError | None:
        if resource_type is None:
            return None
        allowed = self._valid_status.get(resource_type)
        if allowed is None:
            return None

        path = self._status_paths.get(resource_type, DEFAULT_STATUS_PATH)
        status = json_path.get(document, path)
        if status is None:
            return None

        if status not in allowed:
            return RecordValidationError(
                path="status",
                message=f"invalid status '{status}' for {resource_type}",
            )
        return None

    @staticmethod
    def _label(resource_type: Any) -> str:
        return "unknown" if resource_type is None else str(resource_type)
