"""
Test configuration for dashinsight tests.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qs

import base58
import httpx
import pytest

from dashinsight.constants import (
    MAINNET_P2PKH_VERSION,
    MAINNET_P2SH_VERSION,
    TESTNET_P2PKH_VERSION,
    TESTNET_P2SH_VERSION,
)


def encode_address(version: int, fill: int) -> str:
    """Base58Check address with a repeated-byte hash160 payload."""
    return base58.b58encode_check(bytes([version]) + bytes([fill]) * 20).decode()


@pytest.fixture
def make_address() -> Callable[[int, int], str]:
    return encode_address


@pytest.fixture
def mainnet_address() -> str:
    return encode_address(MAINNET_P2PKH_VERSION, 0x11)


@pytest.fixture
def mainnet_addresses() -> list[str]:
    return [
        encode_address(MAINNET_P2PKH_VERSION, 0x01),
        encode_address(MAINNET_P2PKH_VERSION, 0x02),
        encode_address(MAINNET_P2SH_VERSION, 0x03),
    ]


@pytest.fixture
def testnet_address() -> str:
    return encode_address(TESTNET_P2PKH_VERSION, 0x22)


@pytest.fixture
def testnet_p2sh_address() -> str:
    return encode_address(TESTNET_P2SH_VERSION, 0x33)


@pytest.fixture
def sample_txid() -> str:
    return "a" * 64


class MockExplorer:
    """
    Canned explorer responses keyed by (method, path-with-query).

    Records every request so tests can assert on what went over the wire.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json_body: Any = None,
        text: str | None = None,
        exc: Exception | None = None,
    ) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if exc is not None:
                raise exc
            if text is not None:
                return httpx.Response(status_code, text=text)
            if json_body is None:
                return httpx.Response(status_code)
            return httpx.Response(status_code, json=json_body)

        self.routes[(method, path)] = respond

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        target = request.url.raw_path.decode()
        route = self.routes.get((request.method, target))
        if route is None:
            return httpx.Response(404, json={"error": f"no route for {target}"})
        return route(request)

    def form(self, index: int = -1) -> dict[str, list[str]]:
        """Decoded form body of a recorded POST."""
        return parse_qs(self.requests[index].content.decode())

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def explorer() -> MockExplorer:
    return MockExplorer()