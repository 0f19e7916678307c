"""
pgtag: compose parameterized SQL from templates and run it over a
PostgreSQL SQL-over-HTTP endpoint.
"""

from pgtag.core.errors import (
    BatchShapeError,
    CompositionError,
    PgTagError,
    TransportError,
    UsageError,
)
from pgtag.core.result_transform import ResultSet
from pgtag.engines.executor import SQLClient, connect
from pgtag.engines.sql import (
    UNDEFINED,
    Builder,
    ComposeOptions,
    Identifier,
    Parameter,
    PreparedStatement,
    Query,
)

__all__ = [
    "connect",
    "SQLClient",
    "Query",
    "PreparedStatement",
    "Parameter",
    "Identifier",
    "Builder",
    "ComposeOptions",
    "UNDEFINED",
    "ResultSet",
    "PgTagError",
    "CompositionError",
    "UsageError",
    "BatchShapeError",
    "TransportError",
]
