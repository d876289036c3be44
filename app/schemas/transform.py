"""
app/schemas/transform.py

Request schema for the transform endpoint.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.services.transform_service import TransformStep


class TransformFilters(BaseModel):
    subject: str | None = None


class TransformationItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action: str | None = None
    field: str | None = None
    as_: str | None = Field(default=None, alias="as")

    def to_step(self) -> TransformStep:
        return TransformStep(action=self.action, field=self.field, output_key=self.as_)


class TransformRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    resource_types: list[str] = Field(default_factory=list, alias="resourceTypes")
    filters: TransformFilters = Field(default_factory=TransformFilters)
    transformations: list[TransformationItem] = Field(default_factory=list)
