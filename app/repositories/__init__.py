"""
app/repositories package marker.
"""

from app.repositories.import_run_repository import ImportRunRepository
from app.repositories.record_repository import RecordPersistenceError, RecordRepository

__all__ = [
    "ImportRunRepository",
    "RecordPersistenceError",
    "RecordRepository",
]
