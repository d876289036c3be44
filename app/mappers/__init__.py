"""
app/mappers package marker.
"""

from app.mappers import json_path
from app.mappers.extraction_config import ALL_RESOURCE_TYPES, EXTRACTION_FIELDS, fields_for
from app.mappers.field_extractor import MISSING_FIELD_MESSAGE, FieldExtractor

__all__ = [
    "ALL_RESOURCE_TYPES",
    "EXTRACTION_FIELDS",
    "FieldExtractor",
    "MISSING_FIELD_MESSAGE",
    "fields_for",
    "json_path",
]
