"""
HTTP transport for the Insight API.

A thin layer over httpx.AsyncClient: a GET and a form-encoded POST, both
returning the status code and the decoded body. Connection-level failures
become TransportError; HTTP status codes are left for the caller to judge.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from dashinsight.constants import DEFAULT_TIMEOUT
from dashinsight.errors import TransportError


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return self.status_code == 200


class InsightTransport:
    """
    Executes requests against one explorer base URL.

    Pass an existing httpx.AsyncClient to share a connection pool or to plug
    in an httpx.MockTransport for tests; the transport only closes clients it
    created itself.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def get(self, path: str) -> TransportResponse:
        return await self._request("GET", path)

    async def post_form(self, path: str, data: dict[str, str]) -> TransportResponse:
        return await self._request("POST", path, data)

    async def _request(
        self, method: str, path: str, data: dict[str, str] | None = None
    ) -> TransportResponse:
        logger.debug(f"Insight {method} {path}")
        try:
            if method == "GET":
                response = await self.client.get(self._url(path))
            else:
                # data= makes httpx send application/x-www-form-urlencoded
                response = await self.client.post(self._url(path), data=data)
        except httpx.TimeoutException as e:
            logger.error(f"Insight request timed out: {method} {path} - {e}")
            raise TransportError(f"Timeout contacting explorer: {method} {path}", e) from e
        except httpx.HTTPError as e:
            logger.error(f"Insight request failed: {method} {path} - {e}")
            raise TransportError(f"Could not reach explorer: {method} {path}: {e}", e) from e

        return TransportResponse(response.status_code, decode_body(response))

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()


def decode_body(response: httpx.Response) -> Any:
    """JSON if the body parses as JSON, else the text, None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
