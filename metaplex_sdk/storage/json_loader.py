"""
Off-chain JSON metadata fetch.

Resolves a metadata URI to its JSON document over HTTP with httpx. Loading is
an enrichment step only: a malformed URI, a transport error, a non-2xx status
or a non-object body yields None, never an exception, so on-chain data stays
usable when a URI is broken or unreachable.
"""

from __future__ import annotations

from typing import Any

import httpx

from metaplex_sdk.mx_logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SEC = 10.0


class HttpJsonLoader:
    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _client_ensure(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def download_json(self, uri: str) -> dict[str, Any] | None:
        if not uri or not uri.startswith(("http://", "https://")):
            logger.debug("json_fetch_skipped", uri=uri, reason="unsupported_scheme")
            return None
        try:
            resp = await self._client_ensure().get(uri)
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.info("json_fetch_failed", uri=uri, error=str(e))
            return None
        if not isinstance(body, dict):
            logger.info("json_fetch_failed", uri=uri, error="body is not a JSON object")
            return None
        return body

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
