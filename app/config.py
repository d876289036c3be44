"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from db.config import get_bool_env, get_int_env, load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


@dataclass(frozen=True)
class ImportSettings:
    """
    Runtime settings for JSONL import.
    """

    log_validation_errors: bool = True


@dataclass(frozen=True)
class QuerySettings:
    """
    Row caps for the read-side endpoints.
    """

    records_limit: int = 500
    transform_limit: int = 500
    timeline_default_limit: int = 100
    timeline_max_limit: int = 500


@lru_cache(maxsize=1)
def get_import_settings() -> ImportSettings:
    """
    Return cached import settings from environment variables.
    """

    _load_env_once()
    return ImportSettings(
        log_validation_errors=get_bool_env("IMPORT_LOG_VALIDATION_ERRORS", True),
    )


@lru_cache(maxsize=1)
def get_query_settings() -> QuerySettings:
    """
    Return cached query caps from environment variables.
    """

    _load_env_once()
    timeline_max = max(1, get_int_env("TIMELINE_MAX_LIMIT", 500))
    return QuerySettings(
        records_limit=max(1, get_int_env("RECORDS_QUERY_LIMIT", 500)),
        transform_limit=max(1, get_int_env("TRANSFORM_RECORD_LIMIT", 500)),
        timeline_default_limit=min(timeline_max, max(1, get_int_env("TIMELINE_DEFAULT_LIMIT", 100))),
        timeline_max_limit=timeline_max,
    )
