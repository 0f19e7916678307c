"""
Parser for PostgreSQL array literals in text form, e.g. ``{1,2,{3,"a,b"}}``.

Recursive descent over ``{``/``}``. Elements are split on the delimiter
(``;`` for box[], ``,`` otherwise); double-quoted elements support ``\\``
escapes and doubled quotes. Unquoted ``NULL`` is None.

Scan state lives in an ``_ArrayParserState`` created per top-level parse,
so concurrent parses never share state.
"""

from collections.abc import Callable
from typing import Any

from pgtag.core import types


class _ArrayParserState:
    __slots__ = ("pos", "last", "quoted", "prev", "buf")

    def __init__(self) -> None:
        self.pos = 0  # current scan offset
        self.last = 0  # start offset of the current unquoted element
        self.quoted = False
        self.prev: str | None = None  # previous significant character
        self.buf: list[str] = []  # characters of the current quoted element


def _element(raw: str, parser: Callable[[str], Any] | None) -> Any:
    if raw == "NULL":
        return None
    return parser(raw) if parser else raw


def _parse_level(
    s: _ArrayParserState,
    x: str,
    parser: Callable[[str], Any] | None,
    delimiter: str,
) -> list[Any]:
    xs: list[Any] = []
    length = len(x)
    while s.pos < length:
        ch = x[s.pos]

        if s.quoted:
            if ch == "\\" and s.pos + 1 < length:
                s.buf.append(x[s.pos + 1])
                s.pos += 2
                continue
            if ch == '"':
                if s.pos + 1 < length and x[s.pos + 1] == '"':
                    s.buf.append('"')
                    s.pos += 2
                    continue
                text = "".join(s.buf)
                xs.append(parser(text) if parser else text)
                s.buf = []
                s.quoted = False
                s.prev = ch
                s.pos += 1
                continue
            s.buf.append(ch)
            s.pos += 1
            continue

        if ch == '"':
            s.quoted = True
        elif ch == "{":
            s.pos += 1
            s.last = s.pos
            xs.append(_parse_level(s, x, parser, delimiter))
            s.prev = "}"
            continue
        elif ch == "}":
            if s.last < s.pos and s.prev not in ('"', "}"):
                xs.append(_element(x[s.last : s.pos], parser))
            s.pos += 1
            s.last = s.pos
            return xs
        elif ch == delimiter:
            if s.prev not in ('"', "}"):
                xs.append(_element(x[s.last : s.pos], parser))
            s.last = s.pos + 1

        s.prev = ch
        s.pos += 1

    return xs


def _flatten_once(xs: list[Any]) -> list[Any]:
    out: list[Any] = []
    for x in xs:
        if isinstance(x, list):
            out.extend(x)
        else:
            out.append(x)
    return out


def parse_array(
    x: str,
    parser: Callable[[str], Any] | None = None,
    type_id: int = types.UNTYPED,
) -> list[Any]:
    """
    Parse an array literal into nested lists.

    *parser* converts each element's text (None keeps strings). The outermost
    braces are unwrapped: ``{1,2}`` -> ``["1", "2"]``, ``{{1},{2}}`` -> ``[["1"], ["2"]]``.
    """
    delimiter = ";" if type_id == types.BOX_ARRAY else ","
    state = _ArrayParserState()
    return _flatten_once(_parse_level(state, x, parser, delimiter))
