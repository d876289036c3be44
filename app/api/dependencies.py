"""
app/api/dependencies.py

Shared FastAPI dependencies for request parsing and repository wiring.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from app.repositories.import_run_repository import ImportRunRepository
from app.repositories.record_repository import RecordRepository
from db.session import get_db

NO_IMPORT_DATA_MESSAGE = "No data provided for import"


async def get_import_payload(request: Request) -> str:
    """
    Read the JSONL payload from a multipart ``file`` field or the raw body.

    Whitespace-only payloads are rejected with 400.
    """

    content_type = (request.headers.get("content-type") or "").lower()
    raw: bytes = b""

    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("file")
        if isinstance(upload, UploadFile):
            try:
                raw = await upload.read()
            finally:
                await upload.close()
        elif isinstance(upload, str):
            raw = upload.encode("utf-8")
    else:
        raw = await request.body()

    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Import payload must be UTF-8 encoded.",
        ) from exc

    if not text.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=NO_IMPORT_DATA_MESSAGE,
        )
    return text


def get_record_repository(db: Session = Depends(get_db)) -> RecordRepository:
    return RecordRepository(db)


def get_import_run_repository(db: Session = Depends(get_db)) -> ImportRunRepository:
    return ImportRunRepository(db)


def split_csv_param(value: str | None) -> list[str] | None:
    """
    Split a comma-separated query value; blank tokens are dropped and an
    empty result is None.
    """

    if value is None:
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None


def parse_int_param(value: str | None) -> int:
    """
    Lenient integer parse for query values; anything unparseable is 0.
    """

    if value is None:
        return 0
    try:
        return int(value.strip())
    except ValueError:
        return 0
