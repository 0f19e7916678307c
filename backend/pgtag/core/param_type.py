"""
Parameter type inference and text serialization.

infer_type maps a Python value to a PostgreSQL type OID; serialize renders it
in the text form the SQL endpoint expects. Both read OIDs from core.types.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from pgtag.core import types

# Array elements that must be double-quoted inside a '{...}' literal.
_ARRAY_SPECIAL = frozenset('{},"\\ \t\n;')


def _infer_int(x: int) -> int:
    if types.INT4_MIN <= x <= types.INT4_MAX:
        return types.INT4
    return types.INT8


def infer_type(x: Any) -> int:
    """Return the type OID for *x*; 0 (untyped) when nothing better is known."""
    if x is None:
        return types.UNTYPED
    if isinstance(x, datetime):
        return types.TIMESTAMPTZ
    if isinstance(x, date):
        return types.DATE
    if isinstance(x, (bytes, bytearray, memoryview)):
        return types.BYTEA
    if isinstance(x, bool):
        return types.BOOL
    if isinstance(x, int):
        return _infer_int(x)
    if isinstance(x, float):
        return types.FLOAT8
    if isinstance(x, Decimal):
        return types.NUMERIC
    if isinstance(x, str):
        return types.TEXT
    if isinstance(x, (list, tuple)):
        return infer_type(x[0]) if x else types.UNTYPED
    return types.JSONB


def first_element_type(xs: list | tuple) -> int:
    """OID of the first element that is not NULL, searching nested lists depth-first."""
    for x in xs:
        t = first_element_type(x) if isinstance(x, (list, tuple)) else infer_type(x)
        if t:
            return t
    return types.UNTYPED


def array_type_of(element: int) -> int:
    """Array OID for an element OID; text[] when there is none."""
    return types.ELEMENT_ARRAY_TYPES.get(element, types.TEXT_ARRAY)


def infer_array_type(xs: list | tuple) -> int:
    """Array OID for a whole list, typed by its first non-NULL element."""
    if not xs:
        return types.UNTYPED
    return array_type_of(first_element_type(xs))


def _serialize_datetime(x: datetime) -> str:
    if x.tzinfo is None:
        x = x.replace(tzinfo=timezone.utc)
    return x.isoformat()


def _quote_array_element(s: str) -> str:
    if s == "" or s.upper() == "NULL" or any(c in _ARRAY_SPECIAL for c in s):
        return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return s


def _serialize_array_element(x: Any) -> str:
    if x is None:
        return "NULL"
    if isinstance(x, (list, tuple)):
        return _serialize_array(x)
    return _quote_array_element(serialize(x))


def _serialize_array(xs: list | tuple) -> str:
    return "{" + ",".join(_serialize_array_element(x) for x in xs) + "}"


def serialize(x: Any) -> str | None:
    """
    Render *x* as wire text. None stays None (SQL NULL).

    - bool -> 't' / 'f'; int / float / Decimal -> decimal text
    - datetime -> ISO-8601 with offset (naive taken as UTC); date -> ISO date
    - bytes -> '\\x' + hex
    - list / tuple -> '{a,b,...}' array literal
    - everything else -> JSON text
    """
    if x is None:
        return None
    if isinstance(x, str):
        return x
    if isinstance(x, bool):
        return "t" if x else "f"
    if isinstance(x, (int, float, Decimal)):
        return str(x)
    if isinstance(x, datetime):
        return _serialize_datetime(x)
    if isinstance(x, date):
        return x.isoformat()
    if isinstance(x, (bytes, bytearray, memoryview)):
        return "\\x" + bytes(x).hex()
    if isinstance(x, (list, tuple)):
        return _serialize_array(x)
    if isinstance(x, Mapping):
        x = dict(x)
    return json.dumps(x, default=str)
