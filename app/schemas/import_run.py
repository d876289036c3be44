"""
app/schemas/import_run.py

Response schemas for import endpoints.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from db.models.import_run import ImportRun


class ImportErrorResponse(BaseModel):
    """
    One per-line error. line and path are empty only on the synthetic
    error appended to a failed run.
    """

    model_config = ConfigDict(populate_by_name=True)

    line: int | None = None
    path: str | None = None
    message: str
    resource_type: str | None = Field(default=None, alias="resourceType")


class ImportWarningResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    line: int | None = None
    field: str
    message: str
    resource_type: str | None = Field(default=None, alias="resourceType")


class ImportRunResponse(BaseModel):
    """
    ImportRun snapshot without timestamps.
    """

    id: UUID
    status: str
    total_lines: int = Field(..., ge=0)
    successful_records: int = Field(..., ge=0)
    validation_errors: list[ImportErrorResponse] = Field(default_factory=list)
    warnings: list[ImportWarningResponse] = Field(default_factory=list)
    statistics: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_run(cls, run: ImportRun) -> ImportRunResponse:
        return cls(
            id=run.id,
            status=run.status,
            total_lines=run.total_lines,
            successful_records=run.successful_records,
            validation_errors=[ImportErrorResponse.model_validate(error) for error in run.validation_errors or []],
            warnings=[ImportWarningResponse.model_validate(warning) for warning in run.warnings or []],
            statistics=run.statistics or {},
        )


class ImportRunListResponse(BaseModel):
    runs: list[ImportRunResponse] = Field(default_factory=list)
