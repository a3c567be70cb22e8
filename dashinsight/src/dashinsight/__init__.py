"""
dashinsight - Client for the Dash Insight block explorer API.

Queries transactions, address balances, unspent outputs, network status and
blocks, and broadcasts signed transactions (standard and InstantSend).
"""

__version__ = "0.1.0"

from dashinsight.client import InsightClient
from dashinsight.config import ClientConfig, InsightSettings
from dashinsight.errors import (
    InsightError,
    InvalidArgument,
    RemoteError,
    TransportError,
    TranslationError,
)
from dashinsight.models import Address, AddressInfo, NetworkType, UnspentOutput
from dashinsight.transaction import Transaction, TxInput, TxOutput
from dashinsight.transport import InsightTransport, TransportResponse

__all__ = [
    "Address",
    "AddressInfo",
    "ClientConfig",
    "InsightClient",
    "InsightError",
    "InsightSettings",
    "InsightTransport",
    "InvalidArgument",
    "NetworkType",
    "RemoteError",
    "Transaction",
    "TransportError",
    "TransportResponse",
    "TranslationError",
    "TxInput",
    "TxOutput",
    "UnspentOutput",
]
