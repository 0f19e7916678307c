"""
Column-name transforms usable as ``ComposeOptions.column_to``.

Both work per dotted segment, so ``public.userId`` maps to ``public.user_id``
and the escaped form stays ``"public"."user_id"``.
"""

import re

# "HTTPServer" -> "HTTP_Server", then "userId" -> "user_Id"
_ACRONYM_TAIL = re.compile(r"([A-Z]+)([A-Z][a-z])")
_LOWER_UPPER = re.compile(r"([a-z\d])([A-Z])")


def _snake_segment(segment: str) -> str:
    segment = _ACRONYM_TAIL.sub(r"\1_\2", segment)
    return _LOWER_UPPER.sub(r"\1_\2", segment).lower()


def _camel_segment(segment: str) -> str:
    head, *words = segment.split("_")
    return head.lower() + "".join(w.capitalize() for w in words if w)


def to_snake(name: str) -> str:
    """``userId`` -> ``user_id``, ``HTTPStatus`` -> ``http_status``, ``userID`` -> ``user_id``."""
    return ".".join(_snake_segment(s) for s in str(name).split("."))


def to_camel(name: str) -> str:
    return ".".join(_camel_segment(s) for s in str(name).split("."))
