"""
Engines: SQL template composition and the client facade.
"""

from pgtag.engines.executor import SQLClient, connect
from pgtag.engines.sql import PreparedStatement, Query

__all__ = [
    "SQLClient",
    "connect",
    "Query",
    "PreparedStatement",
]
