"""
SQL template engine.

Exports: Query, PreparedStatement, value wrappers, execute_statement, execute_batch.
"""

from pgtag.engines.sql.executor import coerce_statement, execute_batch, execute_statement
from pgtag.engines.sql.template_engine import PreparedStatement, Query, QueryState
from pgtag.engines.sql.values import (
    UNDEFINED,
    Builder,
    ComposeOptions,
    Identifier,
    Parameter,
    escape_identifier,
)

__all__ = [
    "Query",
    "QueryState",
    "PreparedStatement",
    "Parameter",
    "Identifier",
    "Builder",
    "ComposeOptions",
    "UNDEFINED",
    "escape_identifier",
    "execute_statement",
    "execute_batch",
    "coerce_statement",
]
