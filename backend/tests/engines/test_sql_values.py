"""Unit tests for engines.sql.values: wrappers and identifier escaping."""

import pytest

from pgtag.core import types
from pgtag.core.errors import UsageError
from pgtag.core.naming import to_camel
from pgtag.engines.sql.template_engine import Query
from pgtag.engines.sql.values import (
    UNDEFINED,
    Builder,
    ComposeOptions,
    Identifier,
    Parameter,
    escape_identifier,
    escape_identifiers,
)


class TestEscapeIdentifier:
    def test_plain(self):
        assert escape_identifier("users") == '"users"'

    def test_embedded_quote_doubled(self):
        assert escape_identifier('a"b') == '"a""b"'

    def test_dotted_name_split(self):
        assert escape_identifier("a.b") == '"a"."b"'

    def test_list_with_transform(self):
        opts = ComposeOptions(column_to=to_camel)
        assert escape_identifiers(["user_id", "name"], opts) == '"userId","name"'


def test_identifier_holds_escaped_value() -> None:
    assert Identifier("public.users").value == '"public"."users"'
    assert Identifier("a") == Identifier("a")


def test_identifier_requires_string() -> None:
    with pytest.raises(UsageError):
        Identifier(1)


class TestParameter:
    def test_inferred_type(self):
        assert Parameter("x").type_id == types.TEXT
        assert Parameter(1).element_types is None

    def test_explicit_type(self):
        assert Parameter("1", types.INT8).type_id == types.INT8

    def test_element_types(self):
        p = Parameter([1, "a", None])
        assert p.type_id == types.INT4
        assert p.element_types == [types.INT4, types.TEXT, types.UNTYPED]

    def test_undefined_is_untyped(self):
        assert Parameter(UNDEFINED).type_id == types.UNTYPED

    def test_array_type_skips_null_elements(self):
        assert Parameter([None, 1, 2]).array_type() == types.INT4_ARRAY
        assert Parameter([[None], [2.5]]).array_type() == types.FLOAT8_ARRAY

    def test_array_type_defaults_to_text(self):
        assert Parameter([None]).array_type() == types.TEXT_ARRAY
        assert Parameter(["a", "b"]).array_type() == types.TEXT_ARRAY

    def test_untyped_list_is_tagged_by_elements(self):
        p = Query.from_template("select {}", [Parameter(["a", "b"], types.UNTYPED)]).finalize()
        assert p.types == [types.TEXT_ARRAY]
        assert p.params == ["{a,b}"]

    def test_untyped_list_with_leading_null(self):
        p = Query.from_template("select {}", [Parameter([None, 1, 2], types.UNTYPED)]).finalize()
        assert p.types == [types.INT4_ARRAY]
        assert p.params == ["{NULL,1,2}"]

    def test_explicit_array_type_kept(self):
        p = Query.from_template("select {}", [Parameter([1, 2], types.INT8_ARRAY)]).finalize()
        assert p.types == [types.INT8_ARRAY]


def test_builder_columns_flattened() -> None:
    b = Builder({"a": 1}, ("a", ["b", "c"]))
    assert b.columns() == ["a", "b", "c"]


def test_undefined_is_a_falsy_singleton() -> None:
    assert not UNDEFINED
    assert repr(UNDEFINED) == "UNDEFINED"
    assert type(UNDEFINED)() is UNDEFINED
