"""
Insight explorer client.

Every operation validates its arguments locally, performs exactly one HTTP
request and routes the response through a translator. There are no retries,
no pagination and no caching: callers decide how to handle failures.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import httpx
from loguru import logger

from dashinsight.config import ClientConfig, InsightSettings
from dashinsight.constants import (
    ADDRESS_PATH,
    BLOCK_PATH,
    DEFAULT_TIMEOUT,
    SEND_INSTANT_PATH,
    SEND_PATH,
    STATUS_PATH,
    TX_PATH,
    UTXO_PATH,
)
from dashinsight.errors import InvalidArgument, RemoteError
from dashinsight.models import Address, AddressInfo, NetworkType, UnspentOutput, is_hash_hex, is_hex
from dashinsight.transaction import Transaction
from dashinsight.translators import (
    parse_address_info,
    parse_broadcast_txid,
    parse_last_block_hash,
    parse_status,
    parse_utxos,
)
from dashinsight.transport import InsightTransport, TransportResponse


class InsightClient:
    """
    Client for a trusted Insight API server.

    The URL and network are fixed at construction; one instance can be shared
    by any number of concurrent tasks.
    """

    def __init__(
        self,
        url: str | None = None,
        network: NetworkType | str | None = None,
        *,
        transport: InsightTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Args:
            url: Explorer base URL, or a network name to use its default host
            network: "mainnet" or "testnet" (default mainnet)
            transport: Pre-built transport; takes precedence over http_client
            http_client: httpx client to issue requests with
            timeout: Request timeout in seconds when the client creates its own
        """
        self._config = ClientConfig.resolve(url, network)
        self._transport = transport or InsightTransport(
            self._config.url, timeout=timeout, client=http_client
        )

    @classmethod
    def from_settings(
        cls, settings: InsightSettings, http_client: httpx.AsyncClient | None = None
    ) -> InsightClient:
        return cls(
            settings.url,
            settings.network,
            http_client=http_client,
            timeout=settings.timeout,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def url(self) -> str:
        return self._config.url

    @property
    def network(self) -> NetworkType:
        return self._config.network

    async def __aenter__(self) -> InsightClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._transport.close()

    def _check(self, response: TransportResponse, path: str) -> Any:
        if not response.ok:
            logger.warning(f"Explorer returned HTTP {response.status_code} for {path}")
            raise RemoteError(response.status_code, response.body, path)
        return response.body

    async def _get(self, path: str) -> Any:
        return self._check(await self._transport.get(path), path)

    async def _post(self, path: str, data: dict[str, str]) -> Any:
        return self._check(await self._transport.post_form(path, data), path)

    async def get_transaction(self, txid: str) -> Any:
        """Raw transaction record for txid."""
        if not is_hash_hex(txid):
            raise InvalidArgument(f"txid must be 64 hex characters, got {txid!r}")
        return await self._get(f"{TX_PATH}/{txid}")

    async def get_utxos(
        self, addresses: Address | str | Iterable[Address | str]
    ) -> list[UnspentOutput]:
        """
        Unspent outputs for one address or several, fetched in a single request.

        Raises:
            InvalidArgument: If no address is given, an address is invalid for
                this network, or the explorer returns a malformed UTXO
        """
        if isinstance(addresses, (str, Address)):
            addresses = [addresses]
        elif isinstance(addresses, Iterable):
            addresses = list(addresses)
        else:
            raise InvalidArgument(f"Expected address or addresses, got {type(addresses).__name__}")

        if not addresses:
            raise InvalidArgument("At least one address is required")

        parsed = [Address.parse(address, self.network) for address in addresses]
        body = await self._post(UTXO_PATH, {"addrs": ",".join(str(a) for a in parsed)})
        utxos = parse_utxos(body)
        logger.debug(f"Explorer returned {len(utxos)} UTXOs for {len(parsed)} addresses")
        return utxos

    async def broadcast(self, transaction: Transaction | str) -> str | None:
        """Submit a signed transaction. Returns the explorer-assigned txid."""
        return await self._send(SEND_PATH, transaction)

    async def broadcast_instant(self, transaction: Transaction | str) -> str | None:
        """Submit a signed transaction with InstantSend."""
        return await self._send(SEND_INSTANT_PATH, transaction)

    async def _send(self, path: str, transaction: Transaction | str) -> str | None:
        if isinstance(transaction, Transaction):
            try:
                raw_tx = transaction.serialize()
            except ValueError as e:
                raise InvalidArgument(str(e)) from e
        elif is_hex(transaction):
            raw_tx = transaction.lower()
        else:
            raise InvalidArgument("Transaction must be a Transaction or a raw hex string")

        logger.info(f"Broadcasting transaction ({len(raw_tx) // 2} bytes) via {path}")
        body = await self._post(path, {"rawtx": raw_tx})
        return parse_broadcast_txid(body)

    async def address(self, address: Address | str) -> AddressInfo:
        """Balance and history summary for an address."""
        parsed = Address.parse(address, self.network)
        body = await self._get(f"{ADDRESS_PATH}/{parsed}")
        return parse_address_info(body, self.network)

    async def status(self) -> str:
        """Last block hash as reported by the explorer's getInfo status."""
        body = await self._get(f"{STATUS_PATH}?q=getInfo")
        return parse_status(body)

    async def get_block_by_hash(self, block_hash: str) -> Any:
        """Raw block record for block_hash."""
        if not is_hash_hex(block_hash):
            raise InvalidArgument(f"Block hash must be 64 hex characters, got {block_hash!r}")
        return await self._get(f"{BLOCK_PATH}/{block_hash}")

    async def get_last_block_hash(self) -> str:
        body = await self._get(f"{STATUS_PATH}?q=getLastBlockHash")
        return parse_last_block_hash(body)
