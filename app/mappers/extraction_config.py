"""
app/mappers/extraction_config.py

Which field paths are projected out of each resource type.

Each entry maps a field path either to ALL_RESOURCE_TYPES or to the
resource types it applies to. Declaration order is the extraction order.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

ALL_RESOURCE_TYPES: Final[str] = "all"

EXTRACTION_FIELDS: Final[Mapping[str, str | tuple[str, ...]]] = {
    # Universal
    "id": ALL_RESOURCE_TYPES,
    "resourceType": ALL_RESOURCE_TYPES,
    "subject": ALL_RESOURCE_TYPES,
    # Shared across clinical types
    "code": ("Observation", "Condition", "Procedure", "AllergyIntolerance", "DiagnosticReport"),
    "status": ("Observation", "Procedure", "MedicationRequest", "DiagnosticReport"),
    "category": ("Condition", "AllergyIntolerance", "DiagnosticReport"),
    "clinicalStatus": ("Condition", "AllergyIntolerance"),
    "verificationStatus": ("Condition", "AllergyIntolerance"),
    "onsetDateTime": ("Condition", "AllergyIntolerance"),
    "performer": ("Procedure", "DiagnosticReport"),
    "effectiveDateTime": ("Observation", "DiagnosticReport"),
    # Observation
    "valueQuantity": ("Observation",),
    "component": ("Observation",),
    # Procedure
    "performedDateTime": ("Procedure",),
    "location": ("Procedure",),
    # MedicationRequest
    "dosageInstruction": ("MedicationRequest",),
    "medicationCodeableConcept": ("MedicationRequest",),
    "intent": ("MedicationRequest",),
    "authoredOn": ("MedicationRequest",),
    "requester": ("MedicationRequest",),
    # Patient
    "name": ("Patient",),
    "gender": ("Patient",),
    "active": ("Patient",),
    "birthDate": ("Patient",),
    "address": ("Patient",),
    "telecom": ("Patient",),
    # AllergyIntolerance
    "criticality": ("AllergyIntolerance",),
    "type": ("AllergyIntolerance",),
    "reaction": ("AllergyIntolerance",),
    "recordedDate": ("AllergyIntolerance",),
    "recorder": ("AllergyIntolerance",),
    # DiagnosticReport
    "issued": ("DiagnosticReport",),
    "result": ("DiagnosticReport",),
    "conclusion": ("DiagnosticReport",),
}


def fields_for(
    resource_type: str | None,
    fields: Mapping[str, str | tuple[str, ...]] = EXTRACTION_FIELDS,
) -> list[str]:
    """
    Field paths applicable to ``resource_type``, in declaration order.
    """

    return [
        path
        for path, scope in fields.items()
        if scope == ALL_RESOURCE_TYPES or (resource_type is not None and resource_type in scope)
    ]
