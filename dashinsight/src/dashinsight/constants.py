"""
Dash network and Insight API constants.
"""

from __future__ import annotations

# Default explorer hosts, one per network
DEFAULT_MAINNET_URL = "https://insight.dash.org"
DEFAULT_TESTNET_URL = "https://insight.testnet.networks.dash.org:3002"

API_PREFIX = "/insight-api"

TX_PATH = f"{API_PREFIX}/tx"
UTXO_PATH = f"{API_PREFIX}/addrs/utxo"
SEND_PATH = f"{API_PREFIX}/tx/send"
SEND_INSTANT_PATH = f"{API_PREFIX}/tx/sendix"
ADDRESS_PATH = f"{API_PREFIX}/addr"
STATUS_PATH = f"{API_PREFIX}/status"
BLOCK_PATH = f"{API_PREFIX}/block"

# Transaction and block ids are 32-byte hashes in hex
HASH_HEX_LENGTH = 64

# 1 DASH = 100,000,000 duffs
DUFFS_PER_COIN = 100_000_000

# Base58Check version bytes
MAINNET_P2PKH_VERSION = 0x4C  # X...
MAINNET_P2SH_VERSION = 0x10  # 7...
TESTNET_P2PKH_VERSION = 0x8C  # y...
TESTNET_P2SH_VERSION = 0x13  # 8... / 9...

# Address payload is a HASH160
ADDRESS_HASH_LENGTH = 20

DEFAULT_TIMEOUT = 30.0
