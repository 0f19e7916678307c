"""
Error taxonomy for query composition and submission.

- CompositionError: a value position or builder cannot be rendered.
- UsageError: the template interface was used the wrong way (no network call made).
- BatchShapeError: begin() was given something other than a list of queries.
- TransportError: the SQL-over-HTTP endpoint answered with a non-success status.
"""


class PgTagError(Exception):
    """Base class for every error raised by pgtag."""

    pass


class CompositionError(PgTagError, ValueError):
    """Raised when a query cannot be composed into a prepared statement."""

    pass


class UsageError(PgTagError, TypeError):
    """Raised when the template interface is called without a template."""

    pass


class BatchShapeError(PgTagError, ValueError):
    """Raised when a batch is not a plain list of composed queries."""

    pass


class TransportError(PgTagError):
    """Non-success response from the SQL endpoint; message is the response body."""

    def __init__(self, body: str, status_code: int | None = None) -> None:
        super().__init__(body)
        self.body = body
        self.status_code = status_code
