"""
HTTP transport for the SQL endpoint.

Uses one lazily created httpx.AsyncClient per transport. Each call POSTs a
JSON body (a single statement or ``{"queries": [...]}``) and returns the
decoded JSON response. Non-success responses raise TransportError with the
response body; nothing is retried.
"""

import logging
from typing import Any

import httpx

from pgtag.core.config import settings
from pgtag.core.connection import ConnectionInfo
from pgtag.core.errors import TransportError

_log = logging.getLogger(__name__)

CONNECTION_STRING_HEADER = "Neon-Connection-String"
RAW_TEXT_OUTPUT_HEADER = "Neon-Raw-Text-Output"
ARRAY_MODE_HEADER = "Neon-Array-Mode"


class HttpTransport:
    """Sends request bodies to ``info.endpoint``."""

    __slots__ = ("_info", "_client", "_timeout", "_owns_client")

    def __init__(
        self,
        info: ConnectionInfo,
        *,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._info = info
        self._timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT
        self._client = client
        self._owns_client = client is None

    @property
    def endpoint(self) -> str:
        return self._info.endpoint

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._client

    def _headers(self) -> dict[str, str]:
        return {
            CONNECTION_STRING_HEADER: self._info.connection_string,
            # cells come back as text and are decoded by result_transform
            RAW_TEXT_OUTPUT_HEADER: "true",
            ARRAY_MODE_HEADER: "true" if settings.ARRAY_MODE else "false",
        }

    async def send(self, body: dict[str, Any]) -> Any:
        resp = await self._get_client().post(
            self.endpoint, headers=self._headers(), json=body
        )
        if not resp.is_success:
            _log.warning(
                "SQL endpoint %s returned HTTP %s", self.endpoint, resp.status_code
            )
            raise TransportError(resp.text, resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(
                f"SQL endpoint returned invalid JSON: {e}", resp.status_code
            ) from e

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
