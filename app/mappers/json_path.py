"""
app/mappers/json_path.py

Minimal path navigation over parsed JSON values.

Supported token forms, joined with dots:

    key            mapping lookup
    key[0]         mapping lookup, then sequence index
    [0]            sequence index

    get(doc, "code.coding[0].display")
    get(doc, "component[1].valueQuantity.value")

Any shape mismatch, missing key, out-of-range index or empty path resolves
to None. Wildcards, filter expressions and recursive descent are not
supported.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

_KEY_WITH_INDEX = re.compile(r"\A(.+?)\[(\d+)\]\Z")
_INDEX_ONLY = re.compile(r"\A\[(\d+)\]\Z")


def parse_token(token: str) -> tuple[str, int | None]:
    """
    Split one path token into (key, index).

    >>> parse_token("coding[0]")
    ('coding', 0)
    >>> parse_token("[3]")
    ('', 3)
    >>> parse_token("text")
    ('text', None)
    """

    match = _KEY_WITH_INDEX.match(token)
    if match:
        return match.group(1), int(match.group(2))
    match = _INDEX_ONLY.match(token)
    if match:
        return "", int(match.group(1))
    return token, None


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def get(value: Any, path: str | None) -> Any:
    """
    Resolve ``path`` against ``value``; None when anything along the way is absent.
    """

    if value is None or path is None or not str(path).strip():
        return None

    current = value
    for token in str(path).split("."):
        if current is None:
            return None

        key, index = parse_token(token)

        if key:
            if not isinstance(current, Mapping):
                return None
            current = current.get(key)

        if index is not None:
            if not _is_sequence(current) or index >= len(current):
                return None
            current = current[index]

    return current
