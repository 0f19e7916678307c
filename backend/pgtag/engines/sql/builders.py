"""
Keyword-context renderers for dynamic builders: ``sql(record, *columns)``.

The SQL text composed so far decides how a builder renders: the rightmost
whole-word match among ``values``, ``in``, ``select``, ``as``, ``returning``,
``(``, ``update`` and ``insert`` picks the renderer. With no match the
builder renders as a plain list of escaped identifiers.

Renderers take ``(first, columns, ctx)`` where ``ctx`` is the composition in
progress (see template_engine._Composition): ``ctx.value(v)`` resolves a
value into the shared parameter list and ``ctx.options`` holds ComposeOptions.
"""

import re
from collections.abc import Callable, Mapping
from typing import Any

from pgtag.core.errors import CompositionError
from pgtag.engines.sql.values import (
    UNDEFINED,
    Builder,
    escape_identifier,
    escape_identifiers,
)


def _is_row(x: Any) -> bool:
    return isinstance(x, (Mapping, list, tuple))


def _as_rows(first: Any) -> list[Any]:
    """A list whose first item is itself a row is many rows; anything else is one row."""
    if isinstance(first, (list, tuple)) and first and _is_row(first[0]):
        return list(first)
    return [first]


def _row_columns(row: Any) -> list[Any]:
    if isinstance(row, Mapping):
        return list(row.keys())
    if isinstance(row, (list, tuple)):
        return list(range(len(row)))
    raise CompositionError(
        f"Expected a record or a list of values, got {type(row).__name__}"
    )


def _cell(row: Any, column: Any) -> Any:
    if isinstance(row, Mapping):
        return row.get(column, UNDEFINED)
    if isinstance(column, int) and 0 <= column < len(row):
        return row[column]
    return UNDEFINED


def _values_list(rows: list[Any], columns: list[Any], ctx: Any) -> str:
    return ",".join(
        "(" + ",".join(ctx.value(_cell(row, c)) for c in columns) + ")" for row in rows
    )


def render_values(first: Any, columns: list[Any], ctx: Any) -> str:
    """``values (...)``: one parenthesized value list per row."""
    rows = _as_rows(first)
    cols = columns or _row_columns(rows[0])
    return _values_list(rows, cols, ctx)


def render_in(first: Any, columns: list[Any], ctx: Any) -> str:
    """Like values, but ``x in ()`` becomes ``x in (null)``."""
    out = render_values(first, columns, ctx)
    return "(null)" if out == "()" else out


def render_select(first: Any, columns: list[Any], ctx: Any) -> str:
    """Column list, or ``expr as "column"`` pairs for a record."""
    if isinstance(first, str):
        return escape_identifiers([first, *columns], ctx.options)
    if isinstance(first, (list, tuple)):
        return escape_identifiers(first, ctx.options)
    if not isinstance(first, Mapping):
        raise CompositionError(
            f"select builder expects a name, a list of names or a record, got {type(first).__name__}"
        )
    cols = columns or list(first.keys())
    return ",".join(
        ctx.value(first.get(c, UNDEFINED))
        + " as "
        + escape_identifier(ctx.options.column(c))
        for c in cols
    )


def render_update(first: Any, columns: list[Any], ctx: Any) -> str:
    """``"col"=value`` pairs for a SET clause."""
    if not isinstance(first, Mapping):
        raise CompositionError(
            f"update builder expects a record, got {type(first).__name__}"
        )
    cols = columns or list(first.keys())
    return ",".join(
        escape_identifier(ctx.options.column(c)) + "=" + ctx.value(first.get(c, UNDEFINED))
        for c in cols
    )


def render_insert(first: Any, columns: list[Any], ctx: Any) -> str:
    """``(col,...)values(row)[,(row)...]`` for one record or a list of records."""
    rows = list(first) if isinstance(first, (list, tuple)) else [first]
    if not rows:
        raise CompositionError("insert builder needs at least one row")
    cols = columns or _row_columns(rows[0])
    return (
        "("
        + escape_identifiers(cols, ctx.options)
        + ")values"
        + _values_list(rows, cols, ctx)
    )


def render_identifiers(first: Any, columns: list[Any], ctx: Any) -> str:
    """No keyword context: ``"a","b"`` (e.g. an insert column list)."""
    if isinstance(first, str):
        return escape_identifiers([first, *columns], ctx.options)
    if isinstance(first, (list, tuple)) and all(isinstance(x, str) for x in first):
        return escape_identifiers(first, ctx.options)
    raise CompositionError(
        f"Dynamic builder with {type(first).__name__} input matched no keyword "
        "(values, in, select, as, returning, (, update, insert) in the preceding SQL"
    )


Renderer = Callable[[Any, list[Any], Any], str]

_KEYWORDS: list[tuple[str, Renderer]] = [
    ("values", render_values),
    ("in", render_in),
    ("select", render_select),
    ("as", render_select),
    ("returning", render_select),
    ("(", render_select),
    ("update", render_update),
    ("insert", render_insert),
]

KEYWORD_RENDERERS: list[tuple[re.Pattern[str], Renderer]] = [
    (re.compile(r"(?:^|[\s(])" + re.escape(kw) + r"(?=$|[\s(])", re.IGNORECASE), fn)
    for kw, fn in _KEYWORDS
]


def _rightmost(pattern: re.Pattern[str], text: str) -> int:
    at = -1
    for m in pattern.finditer(text):
        at = m.start()
    return at


def find_renderer(before: str) -> Renderer | None:
    """Renderer of the keyword occurring last in *before*; later table entries win ties."""
    best: Renderer | None = None
    best_at = -1
    for pattern, fn in KEYWORD_RENDERERS:
        at = _rightmost(pattern, before)
        if at >= 0 and at >= best_at:
            best, best_at = fn, at
    return best


def build(builder: Builder, before: str, ctx: Any) -> str:
    """Render *builder* for the SQL text that precedes it."""
    fn = find_renderer(before) or render_identifiers
    return fn(builder.first, builder.columns(), ctx)
