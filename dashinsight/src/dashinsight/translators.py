"""
Translate explorer JSON payloads into domain values.

All functions here are pure: no I/O, no retries. A payload that cannot be
interpreted raises TranslationError; anything else escaping is a bug.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from dashinsight.errors import InvalidArgument, TranslationError
from dashinsight.models import (
    Address,
    AddressInfo,
    NetworkType,
    UnspentOutput,
    coins_to_duffs,
    is_hash_hex,
)

# Insight field -> (AddressInfo field, coin-denominated fallback field)
ADDRESS_AMOUNT_FIELDS = {
    "balanceSat": ("balance", "balance"),
    "totalReceivedSat": ("total_received", "totalReceived"),
    "totalSentSat": ("total_sent", "totalSent"),
    "unconfirmedBalanceSat": ("unconfirmed_balance", "unconfirmedBalance"),
}

# Insight spells "appearances" this way
ADDRESS_COUNT_FIELDS = {
    "txApperances": "tx_count",
    "unconfirmedTxApperances": "unconfirmed_tx_count",
}


def parse_json_body(body: Any) -> Any:
    """Decode a body that arrived as text; already-parsed bodies pass through."""
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise TranslationError(f"Malformed JSON from explorer: {e}") from e
    return body


def _expect_object(payload: Any, what: str) -> dict[str, Any]:
    payload = parse_json_body(payload)
    if not isinstance(payload, dict):
        raise TranslationError(f"Expected {what} object, got {type(payload).__name__}")
    return payload


def parse_utxos(payload: Any) -> list[UnspentOutput]:
    """
    Translate the /addrs/utxo response into UnspentOutputs.

    The whole list is rejected if any element is invalid.

    Raises:
        TranslationError: If the payload is not a JSON array
        InvalidArgument: If an element fails UnspentOutput validation
    """
    payload = parse_json_body(payload)
    if not isinstance(payload, list):
        raise TranslationError(f"Expected UTXO array, got {type(payload).__name__}")

    utxos: list[UnspentOutput] = []
    for index, entry in enumerate(payload):
        try:
            utxos.append(UnspentOutput.model_validate(entry))
        except ValidationError as e:
            raise InvalidArgument(f"Invalid UTXO at index {index}: {e}") from e
    return utxos


def parse_address_info(payload: Any, network: NetworkType) -> AddressInfo:
    """
    Translate an /addr/{address} response into AddressInfo.

    Duff-denominated fields (balanceSat, ...) are preferred; when only the
    coin-denominated field is present it is converted. Missing amounts and
    counts become zero.
    """
    data = _expect_object(payload, "address info")

    address_str = data.get("addrStr")
    if not isinstance(address_str, str):
        raise TranslationError("Address info is missing addrStr")
    try:
        address = Address.parse(address_str, network)
    except InvalidArgument as e:
        raise TranslationError(f"Explorer returned an unusable address: {e}") from e

    fields: dict[str, Any] = {"address": address}
    try:
        for sat_key, (name, coin_key) in ADDRESS_AMOUNT_FIELDS.items():
            if data.get(sat_key) is not None:
                fields[name] = data[sat_key]
            elif data.get(coin_key) is not None:
                fields[name] = coins_to_duffs(data[coin_key])
    except ValueError as e:
        raise TranslationError(f"Invalid amount in address info: {e}") from e

    for key, name in ADDRESS_COUNT_FIELDS.items():
        if data.get(key) is not None:
            fields[name] = data[key]

    transactions = data.get("transactions")
    if transactions is not None:
        if not isinstance(transactions, list):
            raise TranslationError("Address info transactions must be a list")
        fields["transaction_ids"] = transactions

    try:
        return AddressInfo(**fields)
    except ValidationError as e:
        raise TranslationError(f"Invalid address info: {e}") from e


def parse_broadcast_txid(payload: Any) -> str | None:
    """txid assigned by the explorer, or None when the body omits it."""
    if payload is None or payload == "":
        return None
    payload = parse_json_body(payload)
    if not isinstance(payload, dict):
        raise TranslationError(f"Expected broadcast result object, got {type(payload).__name__}")

    txid = payload.get("txid")
    if txid is None:
        return None
    if not isinstance(txid, str):
        raise TranslationError(f"Broadcast txid must be a string, got {type(txid).__name__}")
    return txid


def parse_status(payload: Any) -> str:
    """
    Last block hash from a status?q=getInfo response.

    Insight nests the fields under "info"; a flat object is accepted too.
    """
    data = _expect_object(payload, "status")
    info = data.get("info", data)
    if not isinstance(info, dict):
        raise TranslationError("Status info must be an object")

    last_block_hash = info.get("lastblockhash")
    if not isinstance(last_block_hash, str) or not last_block_hash:
        raise TranslationError("Status is missing lastblockhash")
    return last_block_hash


def parse_last_block_hash(payload: Any) -> str:
    """Tip hash from a status?q=getLastBlockHash response."""
    if isinstance(payload, str) and is_hash_hex(payload.strip()):
        return payload.strip()

    payload = parse_json_body(payload)
    if isinstance(payload, str):
        tip = payload.strip()
    elif isinstance(payload, dict):
        tip = payload.get("lastblockhash")
    else:
        tip = None

    if not is_hash_hex(tip):
        raise TranslationError(f"Unrecognized last block hash payload: {payload!r}")
    return tip
