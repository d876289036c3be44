"""
app/schemas/analytics.py

Response schemas for the analytics endpoint.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorGroupResponse(BaseModel):
    path: str
    message: str
    count: int = Field(..., ge=1)


class ResourceTypeErrorsResponse(BaseModel):
    count: int = Field(..., ge=0)
    error_summary: list[ErrorGroupResponse] = Field(default_factory=list)


class ImportErrorSummaryResponse(BaseModel):
    import_id: str
    error_count: int = Field(..., ge=0)
    errors: dict[str, ResourceTypeErrorsResponse] = Field(default_factory=dict)


class ImportsSummaryResponse(BaseModel):
    total_imports: int = Field(..., ge=0)
    successful_imports: int = Field(..., ge=0)
    failed_imports: int = Field(..., ge=0)
    imports_with_errors: int = Field(..., ge=0)
    error_summary: list[ImportErrorSummaryResponse] = Field(default_factory=list)


class AnalyticsResponse(BaseModel):
    total_records: int = Field(..., ge=0)
    records_by_type: dict[str, int] = Field(default_factory=dict)
    unique_patients: int = Field(..., ge=0)
    records_per_patient: dict[str, int] = Field(default_factory=dict)
    imports_summary: ImportsSummaryResponse
