"""
PostgreSQL type OIDs known to the codec.

Inference (param_type), serialization and deserialization (result_transform)
all read from this module so both directions can be checked against one table.
"""

UNTYPED = 0

BOOL = 16
BYTEA = 17
INT8 = 20
INT2 = 21
INT4 = 23
TEXT = 25
OID = 26
JSON = 114
FLOAT4 = 700
FLOAT8 = 701
DATE = 1082
TIMESTAMP = 1114
TIMESTAMPTZ = 1184
NUMERIC = 1700
JSONB = 3802

JSON_ARRAY = 199
BOOL_ARRAY = 1000
BYTEA_ARRAY = 1001
INT2_ARRAY = 1005
INT4_ARRAY = 1007
TEXT_ARRAY = 1009
VARCHAR_ARRAY = 1015
INT8_ARRAY = 1016
BOX_ARRAY = 1020
FLOAT4_ARRAY = 1021
FLOAT8_ARRAY = 1022
TIMESTAMP_ARRAY = 1115
DATE_ARRAY = 1182
TIMESTAMPTZ_ARRAY = 1185
NUMERIC_ARRAY = 1231
JSONB_ARRAY = 3807

# Decoded with int(); UNTYPED falls back to float when the text is not integral.
INTEGER_TYPES = frozenset({UNTYPED, INT2, INT4, OID, INT8})
FLOAT_TYPES = frozenset({FLOAT4, FLOAT8})
DATETIME_TYPES = frozenset({DATE, TIMESTAMP, TIMESTAMPTZ})
JSON_TYPES = frozenset({JSON, JSONB})

# array OID -> element OID. INT4_ARRAY decodes its elements untyped.
ARRAY_ELEMENT_TYPES: dict[int, int] = {
    JSON_ARRAY: JSON,
    BOOL_ARRAY: BOOL,
    BYTEA_ARRAY: BYTEA,
    INT2_ARRAY: INT2,
    INT4_ARRAY: UNTYPED,
    TEXT_ARRAY: TEXT,
    VARCHAR_ARRAY: TEXT,
    INT8_ARRAY: INT8,
    FLOAT4_ARRAY: FLOAT4,
    FLOAT8_ARRAY: FLOAT8,
    TIMESTAMP_ARRAY: TIMESTAMP,
    DATE_ARRAY: DATE,
    TIMESTAMPTZ_ARRAY: TIMESTAMPTZ,
    NUMERIC_ARRAY: NUMERIC,
    JSONB_ARRAY: JSONB,
}

# element OID -> array OID, used by the array() helper to tag a whole list.
ELEMENT_ARRAY_TYPES: dict[int, int] = {
    BOOL: BOOL_ARRAY,
    BYTEA: BYTEA_ARRAY,
    INT2: INT2_ARRAY,
    INT4: INT4_ARRAY,
    INT8: INT8_ARRAY,
    TEXT: TEXT_ARRAY,
    FLOAT4: FLOAT4_ARRAY,
    FLOAT8: FLOAT8_ARRAY,
    NUMERIC: NUMERIC_ARRAY,
    DATE: DATE_ARRAY,
    TIMESTAMP: TIMESTAMP_ARRAY,
    TIMESTAMPTZ: TIMESTAMPTZ_ARRAY,
    JSON: JSON_ARRAY,
    JSONB: JSONB_ARRAY,
}

INT4_MIN = -(2**31)
INT4_MAX = 2**31 - 1
