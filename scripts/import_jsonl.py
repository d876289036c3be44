"""
Import a JSONL file of clinical resources from CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from app.schemas.import_run import ImportRunResponse
from app.services.jsonl_import_service import get_jsonl_import_service
from db.session import SessionLocal


def main() -> int:
    parser = argparse.ArgumentParser(description="Import line-delimited JSON clinical resources.")
    parser.add_argument(
        "path",
        help="Path to a .jsonl/.ndjson file, or '-' to read standard input.",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default="INFO",
        help="Root logging level (default: INFO).",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.strip().upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if args.path == "-":
        payload = sys.stdin.read()
    else:
        payload = Path(args.path).read_text(encoding="utf-8-sig")

    if not payload.strip():
        print(json.dumps({"error": "No data provided for import"}), file=sys.stderr)
        return 2

    service = get_jsonl_import_service()
    with SessionLocal() as db:
        run = service.import_jsonl(payload, db=db)
        summary = ImportRunResponse.from_run(run).model_dump(mode="json", by_alias=True)

    print(json.dumps(summary, indent=2))
    return 0 if not summary["validation_errors"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
