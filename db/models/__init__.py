"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.import_run import ImportRun, ImportRunStatus
from db.models.record import RECORD_UNIQUE_KEY_CONSTRAINT, Record

__all__ = [
    "ImportRun",
    "ImportRunStatus",
    "RECORD_UNIQUE_KEY_CONSTRAINT",
    "Record",
]
