"""
Submit prepared statements through a transport and decode the results.

- execute_statement: one statement -> ResultSet
- execute_batch: statements sent in one request -> list[ResultSet] (same order)
- coerce_statement: accept a PreparedStatement or a ``{query, params}`` mapping

The transport is any object with ``async send(body) -> dict``.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from pgtag.core.config import settings
from pgtag.core.errors import TransportError, UsageError
from pgtag.core.param_type import serialize
from pgtag.core.result_transform import ResultSet, project, project_batch
from pgtag.engines.sql.template_engine import PreparedStatement


def _payload(stmt: PreparedStatement) -> dict[str, Any]:
    return stmt.to_payload(
        array_mode=settings.ARRAY_MODE, send_types=settings.SEND_TYPE_HINTS
    )


def coerce_statement(payload: PreparedStatement | Mapping[str, Any]) -> PreparedStatement:
    """
    Turn a raw ``{"query": ..., "params": [...]}`` mapping into a PreparedStatement.

    Params that are not already text are serialized (e.g. datetime -> ISO-8601).
    """
    if isinstance(payload, PreparedStatement):
        return payload
    if not isinstance(payload, Mapping) or not isinstance(payload.get("query"), str):
        raise UsageError("execute() expects a {'query': str, 'params': [...]} payload")
    params = [p if p is None or isinstance(p, str) else serialize(p) for p in payload.get("params") or []]
    return PreparedStatement(
        query=payload["query"], params=params, types=list(payload.get("types") or [])
    )


async def execute_statement(transport: Any, stmt: PreparedStatement) -> ResultSet:
    data = await transport.send(_payload(stmt))
    try:
        return project(data)
    except ValidationError as e:
        raise TransportError(f"Unexpected response shape: {e}") from e


async def execute_batch(transport: Any, stmts: list[PreparedStatement]) -> list[ResultSet]:
    data = await transport.send({"queries": [_payload(s) for s in stmts]})
    try:
        results = project_batch(data)
    except ValidationError as e:
        raise TransportError(f"Unexpected batch response shape: {e}") from e
    if len(results) != len(stmts):
        raise TransportError(
            f"Batch of {len(stmts)} statements returned {len(results)} results"
        )
    return results
