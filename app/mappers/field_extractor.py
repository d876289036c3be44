"""
app/mappers/field_extractor.py

Projects configured fields out of a clinical document into a flat map.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.domain.clinical_record import RESOURCE_TYPE_FIELD, ExtractionWarning
from app.mappers import json_path
from app.mappers.extraction_config import EXTRACTION_FIELDS, fields_for

MISSING_FIELD_MESSAGE = "missing expected field"


class FieldExtractor:
    """
    Resolves every field path configured for a document's resource type.

    Each path is stored under its own string as the key, including explicit
    nulls. Only a None result produces a warning; empty strings, ``False``
    and ``0`` are present values.
    """

    def __init__(
        self,
        fields: Mapping[str, str | tuple[str, ...]] | None = None,
    ) -> None:
        self._fields = fields if fields is not None else EXTRACTION_FIELDS

    def fields_for(self, resource_type: str | None) -> list[str]:
        return fields_for(resource_type, self._fields)

    def extract(
        self,
        document: Mapping[str, Any],
    ) -> tuple[dict[str, Any], list[ExtractionWarning]]:
        resource_type = document.get(RESOURCE_TYPE_FIELD)
        if not isinstance(resource_type, str):
            resource_type = None

        extracted: dict[str, Any] = {}
        warnings: list[ExtractionWarning] = []

        for path in self.fields_for(resource_type):
            value = json_path.get(document, path)
            extracted[path] = value
            if value is None:
                warnings.append(ExtractionWarning(field=path, message=MISSING_FIELD_MESSAGE))

        return extracted, warnings
