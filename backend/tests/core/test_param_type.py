"""Unit tests for core.param_type: infer_type, infer_array_type, serialize."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from pgtag.core import types
from pgtag.core.param_type import infer_array_type, infer_type, serialize
from pgtag.core.result_transform import deserialize


class TestInferType:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, types.UNTYPED),
            (datetime(2024, 1, 2, tzinfo=timezone.utc), types.TIMESTAMPTZ),
            (date(2024, 1, 2), types.DATE),
            (b"\x00", types.BYTEA),
            (True, types.BOOL),
            (False, types.BOOL),
            (1, types.INT4),
            (-(2**31), types.INT4),
            (2**31, types.INT8),
            (1.5, types.FLOAT8),
            (Decimal("1.10"), types.NUMERIC),
            ("a", types.TEXT),
            ({"a": 1}, types.JSONB),
            ([1, 2], types.INT4),
            (["a", "b"], types.TEXT),
            ([[2], [4]], types.INT4),
            ([], types.UNTYPED),
        ],
    )
    def test_infer(self, value, expected):
        assert infer_type(value) == expected

    def test_bool_is_not_int(self):
        assert infer_type(True) != types.INT4


class TestInferArrayType:
    def test_int_elements(self):
        assert infer_array_type([1, 2]) == types.INT4_ARRAY

    def test_nested_int_elements(self):
        assert infer_array_type([[1, 2], [3, 4]]) == types.INT4_ARRAY

    def test_text_elements(self):
        assert infer_array_type(["a"]) == types.TEXT_ARRAY

    def test_defaults_to_text(self):
        assert infer_array_type([None]) == types.TEXT_ARRAY

    def test_skips_leading_nulls(self):
        assert infer_array_type([None, 1, 2]) == types.INT4_ARRAY
        assert infer_array_type([[None, None], [None, "x"]]) == types.TEXT_ARRAY
        assert infer_array_type([[None], [True]]) == types.BOOL_ARRAY

    def test_empty_is_untyped(self):
        assert infer_array_type([]) == types.UNTYPED


class TestSerialize:
    def test_none_is_null(self):
        assert serialize(None) is None

    def test_string_unchanged(self):
        assert serialize("hello") == "hello"

    def test_numbers(self):
        assert serialize(1) == "1"
        assert serialize(1.5) == "1.5"
        assert serialize(2**70) == str(2**70)
        assert serialize(Decimal("12.50")) == "12.50"

    def test_bool(self):
        assert serialize(True) == "t"
        assert serialize(False) == "f"

    def test_datetime_iso_with_offset(self):
        assert serialize(datetime(1970, 1, 1, tzinfo=timezone.utc)) == "1970-01-01T00:00:00+00:00"

    def test_naive_datetime_taken_as_utc(self):
        assert serialize(datetime(1970, 1, 1)) == "1970-01-01T00:00:00+00:00"

    def test_date(self):
        assert serialize(date(2020, 1, 2)) == "2020-01-02"

    def test_bytes_hex(self):
        assert serialize(b"\xde\xad\xbe\xef") == "\\xdeadbeef"

    def test_array(self):
        assert serialize([1, 2, 3]) == "{1,2,3}"

    def test_nested_array(self):
        assert serialize([[1, 2], [3, 4]]) == "{{1,2},{3,4}}"

    def test_array_quotes_special_elements(self):
        assert serialize(["a b", "", None, 'q"', "x,y"]) == '{"a b","",NULL,"q\\"","x,y"}'

    def test_array_quotes_null_string(self):
        assert serialize(["NULL"]) == '{"NULL"}'

    def test_dict_json(self):
        assert serialize({"x": 1}) == '{"x": 1}'


@pytest.mark.parametrize(
    "value",
    [
        1,
        -7,
        2**40,
        1.5,
        True,
        False,
        "hello",
        b"\x00\xffabc",
        datetime(2023, 5, 26, 13, 35, 22, 616000, tzinfo=timezone.utc),
        date(2020, 2, 29),
        Decimal("12.50"),
        {"x": [1, "y"], "z": None},
    ],
)
def test_round_trip(value):
    assert deserialize(serialize(value), infer_type(value)) == value
