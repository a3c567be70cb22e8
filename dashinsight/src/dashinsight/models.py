"""
Domain value types returned by and passed into the Insight client.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import TYPE_CHECKING, Any

import base58
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    InstanceOf,
    field_serializer,
    field_validator,
    model_validator,
)

from dashinsight.constants import (
    ADDRESS_HASH_LENGTH,
    DUFFS_PER_COIN,
    HASH_HEX_LENGTH,
    MAINNET_P2PKH_VERSION,
    MAINNET_P2SH_VERSION,
    TESTNET_P2PKH_VERSION,
    TESTNET_P2SH_VERSION,
)
from dashinsight.errors import InvalidArgument

if TYPE_CHECKING:
    from dashinsight.transaction import TxInput

HASH_RE = re.compile(rf"^[0-9a-fA-F]{{{HASH_HEX_LENGTH}}}$")
HEX_RE = re.compile(r"^(?:[0-9a-fA-F]{2})*$")


class NetworkType(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"

    @classmethod
    def parse(cls, value: NetworkType | str) -> NetworkType:
        """Resolve a network name, accepting the common bitcore aliases."""
        if isinstance(value, NetworkType):
            return value
        if isinstance(value, str):
            name = NETWORK_ALIASES.get(value.strip().lower())
            if name is not None:
                return name
        raise InvalidArgument(f"Unknown network: {value!r}")

    @property
    def p2pkh_version(self) -> int:
        return MAINNET_P2PKH_VERSION if self is NetworkType.MAINNET else TESTNET_P2PKH_VERSION

    @property
    def p2sh_version(self) -> int:
        return MAINNET_P2SH_VERSION if self is NetworkType.MAINNET else TESTNET_P2SH_VERSION


NETWORK_ALIASES: dict[str, NetworkType] = {
    "mainnet": NetworkType.MAINNET,
    "livenet": NetworkType.MAINNET,
    "main": NetworkType.MAINNET,
    "testnet": NetworkType.TESTNET,
    "testnet3": NetworkType.TESTNET,
    "test": NetworkType.TESTNET,
}


def is_hash_hex(value: Any) -> bool:
    """True if value is a 64-character hex string (txid or block hash)."""
    return isinstance(value, str) and HASH_RE.match(value) is not None


def is_hex(value: Any) -> bool:
    """True if value is a non-empty, even-length hex string."""
    return isinstance(value, str) and bool(value) and HEX_RE.match(value) is not None


def coins_to_duffs(amount: Any) -> int:
    """
    Convert a coin amount as reported by Insight (e.g. 1.5) into duffs.

    The conversion is exact: floats are read through their shortest repr.

    Raises:
        ValueError: If the amount is not a number or has sub-duff precision
    """
    if isinstance(amount, bool) or not isinstance(amount, (int, float, str, Decimal)):
        raise ValueError(f"Amount must be numeric, got {type(amount).__name__}")
    try:
        duffs = Decimal(str(amount)) * DUFFS_PER_COIN
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e
    if not duffs.is_finite() or duffs != duffs.to_integral_value():
        raise ValueError(f"Amount {amount!r} is not a whole number of duffs")
    return int(duffs)


@dataclass(frozen=True)
class Address:
    """
    A Base58Check Dash address, validated against a single network.

    Use Address.parse() rather than the constructor: it decodes the string
    and checks the version byte.
    """

    value: str
    network: NetworkType
    version: int
    hash160: bytes = field(repr=False)

    @classmethod
    def parse(cls, value: Address | str, network: NetworkType | str) -> Address:
        """
        Decode and validate an address for the given network.

        Raises:
            InvalidArgument: If the string is not a valid address for the network
        """
        network = NetworkType.parse(network)

        if isinstance(value, Address):
            if value.network is not network:
                raise InvalidArgument(f"Address {value.value} belongs to {value.network.value}")
            return value

        if not isinstance(value, str) or not value:
            raise InvalidArgument(f"Address must be a non-empty string, got {value!r}")
        if value != value.strip():
            raise InvalidArgument(f"Address has surrounding whitespace: {value!r}")

        try:
            decoded = base58.b58decode_check(value)
        except ValueError as e:
            raise InvalidArgument(f"Invalid address {value}: {e}") from e

        if len(decoded) != ADDRESS_HASH_LENGTH + 1:
            raise InvalidArgument(f"Invalid address payload length for {value}: {len(decoded)}")

        version = decoded[0]
        if version not in (network.p2pkh_version, network.p2sh_version):
            raise InvalidArgument(f"Address {value} is not valid on {network.value}")

        return cls(value=value, network=network, version=version, hash160=decoded[1:])

    @property
    def is_p2sh(self) -> bool:
        return self.version == self.network.p2sh_version

    def script_pubkey(self) -> bytes:
        """Output script paying to this address."""
        if self.is_p2sh:
            # OP_HASH160 <20> OP_EQUAL
            return bytes([0xA9, 0x14]) + self.hash160 + bytes([0x87])
        # OP_DUP OP_HASH160 <20> OP_EQUALVERIFY OP_CHECKSIG
        return bytes([0x76, 0xA9, 0x14]) + self.hash160 + bytes([0x88, 0xAC])

    def __str__(self) -> str:
        return self.value


class UnspentOutput(BaseModel):
    """
    A spendable output as reported by the explorer.

    Accepts Insight's field names (txid/vout/scriptPubKey/amount) as well as
    bitcore's (txId/outputIndex/script/satoshis).
    """

    model_config = ConfigDict(frozen=True)

    txid: str
    vout: int = Field(..., ge=0)
    script_pubkey: str
    satoshis: int = Field(..., ge=0)
    address: str | None = None
    confirmations: int = Field(default=0, ge=0)
    height: int | None = None

    @model_validator(mode="before")
    @classmethod
    def normalize_insight_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError(f"UTXO must be an object, got {type(data).__name__}")

        data = dict(data)
        if "txid" not in data and "txId" in data:
            data["txid"] = data.pop("txId")
        if "vout" not in data and "outputIndex" in data:
            data["vout"] = data.pop("outputIndex")
        if "script_pubkey" not in data:
            for key in ("scriptPubKey", "script"):
                if key in data:
                    data["script_pubkey"] = data.pop(key)
                    break

        if "satoshis" not in data:
            if "amount" not in data:
                raise ValueError("UTXO has neither amount nor satoshis")
            data["satoshis"] = coins_to_duffs(data.pop("amount"))
        elif "amount" in data:
            # Both present: satoshis wins, but they must agree
            if coins_to_duffs(data.pop("amount")) != data["satoshis"]:
                raise ValueError("UTXO amount and satoshis disagree")
        return data

    @field_validator("txid")
    @classmethod
    def validate_txid(cls, v: str) -> str:
        if not is_hash_hex(v):
            raise ValueError(f"Invalid txid: {v!r}")
        return v.lower()

    @field_validator("script_pubkey")
    @classmethod
    def validate_script(cls, v: str) -> str:
        if not isinstance(v, str) or not HEX_RE.match(v):
            raise ValueError("scriptPubKey must be hex")
        return v.lower()

    @property
    def amount(self) -> float:
        """Value in DASH."""
        return self.satoshis / DUFFS_PER_COIN

    @property
    def outpoint(self) -> str:
        return f"{self.txid}:{self.vout}"

    def to_tx_input(self) -> TxInput:
        """Unsigned input spending this output."""
        from dashinsight.transaction import TxInput

        return TxInput(txid=self.txid, vout=self.vout)


class AddressInfo(BaseModel):
    """Summary of an address as reported by the explorer. Amounts are in duffs."""

    model_config = ConfigDict(frozen=True)

    address: InstanceOf[Address]
    balance: int = Field(default=0, ge=0, strict=True)
    total_received: int = Field(default=0, ge=0, strict=True)
    total_sent: int = Field(default=0, ge=0, strict=True)
    # Negative while an unconfirmed spend is pending
    unconfirmed_balance: int = Field(default=0, strict=True)
    tx_count: int = Field(default=0, ge=0, strict=True)
    unconfirmed_tx_count: int = Field(default=0, ge=0, strict=True)
    transaction_ids: tuple[str, ...] = ()

    @field_validator("transaction_ids")
    @classmethod
    def validate_txids(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for txid in v:
            if not is_hash_hex(txid):
                raise ValueError(f"Invalid txid in transaction list: {txid!r}")
        return v

    @field_serializer("address")
    def serialize_address(self, address: Address) -> str:
        return address.value

    @property
    def total_balance(self) -> int:
        """Confirmed plus unconfirmed balance."""
        return self.balance + self.unconfirmed_balance
