"""
Value wrappers embedded in a composed query.

- Parameter: a value with an explicit (or inferred) type OID.
- Identifier: a pre-escaped table/column name, spliced verbatim.
- Builder: a record / list of records / column list rendered by keyword context.
- UNDEFINED: marks a value slot that has no wire representation.

None of these are queries: awaiting one raises UsageError.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pgtag.core import types
from pgtag.core.errors import UsageError
from pgtag.core.param_type import array_type_of, first_element_type, infer_type


class _Undefined:
    """Sentinel type for a value slot with nothing in it."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


def _not_a_query() -> None:
    raise UsageError("Query not called as a template: use sql(\"... {} ...\", value)")


class _NotAQuery:
    def __await__(self):
        _not_a_query()


class Identifier(_NotAQuery):
    __slots__ = ("value",)

    def __init__(self, name: str) -> None:
        if not isinstance(name, str):
            raise UsageError(f"Identifier name must be a string, got {type(name).__name__}")
        self.value = escape_identifier(name)

    def __repr__(self) -> str:
        return f"Identifier({self.value})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Identifier) and other.value == self.value

    def __hash__(self) -> int:
        return hash(self.value)


class Parameter(_NotAQuery):
    """
    A single bound value. ``type_id`` defaults to the inferred OID; for lists,
    ``element_types`` holds the inferred OID of every element.
    """

    __slots__ = ("value", "type_id", "element_types")

    def __init__(self, value: Any, type_id: int | None = None) -> None:
        self.value = value
        if type_id is None:
            type_id = types.UNTYPED if value is UNDEFINED else infer_type(value)
        self.type_id = type_id
        self.element_types = (
            [
                first_element_type(x) if isinstance(x, (list, tuple)) else infer_type(x)
                for x in value
            ]
            if isinstance(value, (list, tuple))
            else None
        )

    def array_type(self) -> int:
        """Array OID from the first typed element (text[] when none is typed)."""
        element = next((t for t in self.element_types or () if t), types.UNTYPED)
        return array_type_of(element)

    def __repr__(self) -> str:
        return f"Parameter({self.value!r}, type_id={self.type_id})"


class Builder(_NotAQuery):
    """Structural input (``first``) plus optional explicit column names (``rest``)."""

    __slots__ = ("first", "rest")

    def __init__(self, first: Any, rest: tuple | list = ()) -> None:
        self.first = first
        self.rest = tuple(rest)

    def columns(self) -> list[Any]:
        """Explicit column names, one level of nesting flattened."""
        out: list[Any] = []
        for c in self.rest:
            if isinstance(c, (list, tuple)):
                out.extend(c)
            else:
                out.append(c)
        return out

    def __repr__(self) -> str:
        return f"Builder({self.first!r}, {self.rest!r})"


class ComposeOptions:
    """
    Per-client composition options.

    - undefined: substitute for UNDEFINED value slots (default: raise).
    - column_to: applied to column names before they are escaped.
    """

    __slots__ = ("undefined", "column_to")

    def __init__(
        self,
        *,
        undefined: Any = UNDEFINED,
        column_to: Callable[[str], str] | None = None,
    ) -> None:
        self.undefined = undefined
        self.column_to = column_to

    def column(self, name: Any) -> str:
        name = str(name)
        return self.column_to(name) if self.column_to else name


def escape_identifier(name: str) -> str:
    """Quote a name: ``a"b`` -> ``"a""b"``, ``a.b`` -> ``"a"."b"``."""
    return '"' + name.replace('"', '""').replace(".", '"."') + '"'


def escape_identifiers(names: list | tuple, options: ComposeOptions) -> str:
    return ",".join(escape_identifier(options.column(x)) for x in names)
