"""
app/validators/validation_rules.py

Required-field and status rules for clinical resources (FHIR R4 value sets).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

from app.domain.clinical_record import SELF_SUBJECT_TYPE

SUBJECT_FIELD: Final[str] = "subject"

# Applied to every resource type; SELF_SUBJECT_TYPE is exempt from SUBJECT_FIELD.
UNIVERSAL_REQUIRED_FIELDS: Final[tuple[str, ...]] = ("id", "resourceType", SUBJECT_FIELD)

REQUIRED_FIELDS: Final[Mapping[str, tuple[str, ...]]] = {
    "Observation": ("code", "status"),
    "MedicationRequest": ("medicationCodeableConcept", "status"),
    "Procedure": ("code", "status"),
    "Condition": ("code", "clinicalStatus"),
    SELF_SUBJECT_TYPE: ("name", "active"),
    "AllergyIntolerance": ("code", "clinicalStatus"),
    "DiagnosticReport": ("code", "status"),
}

VALID_STATUS: Final[Mapping[str, tuple[str, ...]]] = {
    "Observation": (
        "registered", "preliminary", "final", "amended", "corrected",
        "cancelled", "entered-in-error", "unknown",
    ),
    "MedicationRequest": (
        "active", "on-hold", "cancelled", "completed", "entered-in-error",
        "stopped", "draft", "unknown",
    ),
    "Procedure": (
        "preparation", "in-progress", "not-done", "on-hold", "stopped",
        "completed", "entered-in-error", "unknown",
    ),
    "Condition": (
        "active", "recurrence", "relapse", "inactive", "remission", "resolved",
    ),
    "DiagnosticReport": (
        "registered", "partial", "preliminary", "final", "amended", "corrected",
        "appended", "cancelled", "entered-in-error", "unknown",
    ),
    "AllergyIntolerance": (
        "active", "inactive", "resolved",
    ),
}

DEFAULT_STATUS_PATH: Final[str] = "status"

# Types whose status lives in a CodeableConcept rather than a plain code.
STATUS_PATHS: Final[Mapping[str, str]] = {
    "Condition": "clinicalStatus.coding[0].code",
    "AllergyIntolerance": "clinicalStatus.coding[0].code",
}
