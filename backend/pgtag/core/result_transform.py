"""
Result decoding: text cells from the SQL endpoint -> Python values.

deserialize(value, type_id) decodes one cell using the OID the server reported
for its column; project / project_batch turn raw JSON results into ResultSets.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from dateutil.parser import isoparse
from pydantic import BaseModel, ConfigDict, Field

from pgtag.core import types
from pgtag.core.array_parser import parse_array


class RawField(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str
    data_type_id: int = Field(default=-1, alias="dataTypeID")


class RawResult(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    command: str = ""
    row_count: int | None = Field(default=None, alias="rowCount")
    rows: list[list[Any]] = Field(default_factory=list)
    fields: list[RawField] = Field(default_factory=list)


class BatchResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    results: list[RawResult] = Field(default_factory=list)


class ResultSet(list):
    """Rows of decoded values, with ``command``, ``count`` and column ``fields``."""

    def __init__(
        self,
        rows: list[list[Any]] | None = None,
        *,
        command: str = "",
        count: int | None = None,
        fields: list[str] | None = None,
    ) -> None:
        super().__init__(rows or [])
        self.command = command
        self.count = count
        self.fields = fields or []

    def __repr__(self) -> str:
        return f"ResultSet({list.__repr__(self)}, command={self.command!r}, count={self.count!r})"


def _parse_untyped(value: str) -> Any:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


def _parse_datetime(value: str, type_id: int) -> Any:
    if value in ("infinity", "-infinity"):
        return value
    dt = isoparse(value)
    if type_id == types.DATE:
        return dt.date()
    return dt


def deserialize(value: str | None, type_id: int) -> Any:
    """
    Decode one text cell by its column type OID. None stays None.

    Unknown OIDs pass the text through unchanged.
    """
    if value is None:
        return None
    if type_id == types.UNTYPED:
        return _parse_untyped(value)
    if type_id in types.INTEGER_TYPES:
        return int(value)
    if type_id in types.FLOAT_TYPES:
        return float(value)
    if type_id == types.NUMERIC:
        return Decimal(value)
    if type_id == types.BOOL:
        return value == "t"
    if type_id == types.BYTEA:
        return bytes.fromhex(value[2:])
    if type_id == types.TEXT:
        return value
    if type_id in types.DATETIME_TYPES:
        return _parse_datetime(value, type_id)
    if type_id in types.JSON_TYPES:
        return json.loads(value)
    element_type = types.ARRAY_ELEMENT_TYPES.get(type_id)
    if element_type is not None:
        return parse_array(value, lambda x: deserialize(x, element_type), type_id)
    return value


def project(result: RawResult | dict[str, Any]) -> ResultSet:
    """Decode every row of a raw single-statement result."""
    raw = result if isinstance(result, RawResult) else RawResult.model_validate(result)
    type_ids = [f.data_type_id for f in raw.fields]
    rows = [
        [
            deserialize(value, type_ids[i] if i < len(type_ids) else -1)
            for i, value in enumerate(row)
        ]
        for row in raw.rows
    ]
    return ResultSet(
        rows,
        command=raw.command,
        count=raw.row_count,
        fields=[f.name for f in raw.fields],
    )


def project_batch(result: BatchResult | dict[str, Any]) -> list[ResultSet]:
    """Decode each sub-result of a batch, preserving statement order."""
    raw = result if isinstance(result, BatchResult) else BatchResult.model_validate(result)
    return [project(r) for r in raw.results]
