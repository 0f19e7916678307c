"""
Template composition: Query -> PreparedStatement.

A Query pairs literal segments with embedded values. Nothing happens when it
is built; ``finalize()`` walks the segments once, left to right, resolving
each value:

- Builder     -> keyword-context renderer (builders.build), no parameter
- Query       -> composed in place as a fragment, sharing the parameter list
- Identifier  -> escaped name, no parameter
- [Query, ...] -> fragments joined by a space
- anything else (or Parameter) -> ``$k`` placeholder + serialized parameter

The result is cached; awaiting a Query submits it through its handler once
and every later await returns the same outcome.
"""

from __future__ import annotations

import asyncio
import logging
import string
from collections.abc import Awaitable, Callable, Sequence
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

from pgtag.core import types
from pgtag.core.config import settings
from pgtag.core.errors import CompositionError, UsageError
from pgtag.core.param_type import infer_type, serialize
from pgtag.engines.sql.builders import build
from pgtag.engines.sql.values import (
    UNDEFINED,
    Builder,
    ComposeOptions,
    Identifier,
    Parameter,
)

_log = logging.getLogger(__name__)

_FORMATTER = string.Formatter()


class PreparedStatement(BaseModel):
    """Finalized statement: ``$N`` in ``query`` refers to ``params[N-1]``."""

    query: str
    params: list[str | None] = Field(default_factory=list)
    types: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_parallel(self) -> PreparedStatement:
        if self.types and len(self.types) != len(self.params):
            raise ValueError(
                f"types ({len(self.types)}) and params ({len(self.params)}) differ in length"
            )
        return self

    def to_payload(self, *, array_mode: bool = True, send_types: bool = False) -> dict[str, Any]:
        """Request body for a single statement."""
        payload: dict[str, Any] = {"query": self.query, "params": self.params}
        if send_types and self.types:
            payload["types"] = self.types
        if array_mode:
            payload["arrayMode"] = True
        return payload


class QueryState(str, Enum):
    PENDING = "pending"
    FINALIZED = "finalized"


Handler = Callable[[PreparedStatement], Awaitable[Any]]


def split_template(template: str) -> tuple[str, ...]:
    """
    Split ``"a {} b {}"`` into literal segments ``("a ", " b ", "")``.

    ``{{`` and ``}}`` are literal braces. Only bare ``{}`` placeholders are
    accepted.
    """
    if not isinstance(template, str):
        raise UsageError(
            f"Query not called as a template: expected str, got {type(template).__name__}"
        )
    strings: list[str] = []
    current: list[str] = []
    try:
        parsed = list(_FORMATTER.parse(template))
    except ValueError as e:
        raise UsageError(f"Invalid query template: {e}") from e
    for literal, field, spec, conversion in parsed:
        current.append(literal)
        if field is None:
            continue
        if field or spec or conversion:
            raise UsageError(
                f"Only bare {{}} placeholders are supported, got {{{field}}} in template"
            )
        strings.append("".join(current))
        current = []
    strings.append("".join(current))
    return tuple(strings)


class _Composition:
    """Parameter and type accumulators shared by a query and all its fragments."""

    def __init__(self, options: ComposeOptions) -> None:
        self.options = options
        self.parameters: list[str | None] = []
        self.types: list[int] = []

    def value(self, value: Any) -> str:
        """Resolve a value found inside a builder row."""
        return resolve_value("values", value, self)

    def add_parameter(self, x: Any) -> str:
        value = x.value if isinstance(x, Parameter) else x
        substituted = False
        if value is UNDEFINED:
            value = self.options.undefined
            if value is UNDEFINED:
                raise CompositionError("Undefined values are not allowed")
            substituted = True
        if isinstance(x, Parameter) and x.type_id == types.UNTYPED and x.element_types:
            type_id = x.array_type()
        elif isinstance(x, Parameter) and not (substituted and x.type_id == types.UNTYPED):
            type_id = x.type_id
        else:
            type_id = infer_type(value)
        self.parameters.append(serialize(value))
        self.types.append(type_id)
        return "$" + str(len(self.types))


def compose(query: Query, ctx: _Composition) -> str:
    text = query.strings[0]
    for value, literal in zip(query.values, query.strings[1:]):
        text += resolve_value(text, value, ctx) + literal
    return text


def compose_fragment(query: Query, ctx: _Composition) -> str:
    query.is_fragment = True
    return compose(query, ctx)


def resolve_value(before: str, value: Any, ctx: _Composition) -> str:
    """Text for one embedded value; *before* is the SQL composed so far."""
    if isinstance(value, Builder):
        return build(value, before, ctx)
    if isinstance(value, Query):
        return compose_fragment(value, ctx)
    if isinstance(value, Identifier):
        return value.value
    if isinstance(value, (list, tuple)) and value and isinstance(value[0], Query):
        parts = []
        for q in value:
            if not isinstance(q, Query):
                raise CompositionError(
                    f"Fragment list mixes queries with {type(q).__name__}"
                )
            parts.append(compose_fragment(q, ctx))
        return " ".join(parts)
    return ctx.add_parameter(value)


class Query:
    """A composed query: literal ``strings`` around embedded ``values``."""

    def __init__(
        self,
        strings: Sequence[str],
        values: Sequence[Any] = (),
        *,
        handler: Handler | None = None,
        options: ComposeOptions | None = None,
    ) -> None:
        strings = tuple(strings)
        values = tuple(values)
        if not strings or not all(isinstance(s, str) for s in strings):
            raise UsageError("Query not called as a template: strings must be str segments")
        if len(strings) != len(values) + 1:
            raise UsageError(
                f"Template has {len(strings) - 1} placeholders but {len(values)} values"
            )
        self.strings = strings
        self.values = values
        self.is_fragment = False
        self.state = QueryState.PENDING
        self._handler = handler
        self._options = options or ComposeOptions()
        self._prepared: PreparedStatement | None = None
        self._submission: asyncio.Future | None = None

    @classmethod
    def from_template(
        cls,
        template: str,
        values: Sequence[Any] = (),
        *,
        handler: Handler | None = None,
        options: ComposeOptions | None = None,
    ) -> Query:
        return cls(split_template(template), values, handler=handler, options=options)

    def finalize(self) -> PreparedStatement:
        """Compose once and cache; later calls return the cached statement."""
        if self._prepared is None:
            ctx = _Composition(self._options)
            text = compose(self, ctx)
            self._prepared = PreparedStatement(
                query=text, params=ctx.parameters, types=ctx.types
            )
            self.state = QueryState.FINALIZED
            if settings.LOG_STATEMENTS:
                _log.debug("Composed SQL: %s params=%s", text, ctx.parameters)
        return self._prepared

    def __await__(self):
        if self._handler is None:
            raise UsageError("Query is not bound to a client; use finalize() instead")
        if self._submission is None:
            self._submission = asyncio.ensure_future(self._handler(self.finalize()))
        return self._submission.__await__()

    def __repr__(self) -> str:
        template = "{}".join(s.replace("{", "{{").replace("}", "}}") for s in self.strings)
        return f"Query({template!r}, state={self.state.value})"
