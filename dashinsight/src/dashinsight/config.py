"""
Configuration for the Insight client.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dashinsight.constants import DEFAULT_MAINNET_URL, DEFAULT_TESTNET_URL, DEFAULT_TIMEOUT
from dashinsight.errors import InvalidArgument
from dashinsight.models import NETWORK_ALIASES, NetworkType

DEFAULT_URLS: dict[NetworkType, str] = {
    NetworkType.MAINNET: DEFAULT_MAINNET_URL,
    NetworkType.TESTNET: DEFAULT_TESTNET_URL,
}


class ClientConfig(BaseModel):
    """Explorer URL and network, fixed for the lifetime of a client."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., min_length=1)
    network: NetworkType = NetworkType.MAINNET

    @classmethod
    def resolve(
        cls, url: str | None = None, network: NetworkType | str | None = None
    ) -> ClientConfig:
        """
        Work out the active URL and network.

        url may also be a network name ("mainnet", "livenet", "testnet"...),
        in which case the default explorer host for that network is used.
        With neither argument the mainnet explorer is used.
        """
        if url is not None and not isinstance(url, str):
            raise InvalidArgument(f"Explorer URL must be a string, got {type(url).__name__}")

        if url and url.strip().lower() in NETWORK_ALIASES:
            url_network = NetworkType.parse(url)
            if network is not None and NetworkType.parse(network) is not url_network:
                raise InvalidArgument(f"Conflicting networks: {url!r} and {network!r}")
            network, url = url_network, None

        resolved = NetworkType.parse(network) if network is not None else NetworkType.MAINNET
        return cls(url=(url or DEFAULT_URLS[resolved]).rstrip("/"), network=resolved)


class InsightSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="INSIGHT_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    url: str | None = None
    network: NetworkType = NetworkType.MAINNET
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    log_level: str = "INFO"

    @field_validator("network", mode="before")
    @classmethod
    def parse_network(cls, v: Any) -> NetworkType:
        return NetworkType.parse(v)

    def client_config(self) -> ClientConfig:
        return ClientConfig.resolve(self.url, self.network)


def get_settings() -> InsightSettings:
    return InsightSettings()
