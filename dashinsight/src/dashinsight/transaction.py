"""
Dash transaction structure and raw serialization.

Dash transactions have no witness section. Since DIP2, the 32-bit version
field is split into a 16-bit version and a 16-bit type; special transactions
(version >= 3, type != 0) carry an extra payload after the locktime.
"""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass, field

from dashinsight.models import Address, NetworkType, is_hash_hex, is_hex


class TransactionDecodeError(ValueError):
    pass


@dataclass
class TxInput:
    """Transaction input. txid is in RPC (big-endian) hex."""

    txid: str
    vout: int
    script_sig: bytes = b""
    sequence: int = 0xFFFFFFFF


@dataclass
class TxOutput:
    """Transaction output. value is in duffs."""

    value: int
    script_pubkey: bytes

    @classmethod
    def to_address(cls, address: Address | str, value: int, network: NetworkType | str) -> TxOutput:
        """Build an output paying value duffs to address."""
        return cls(value=value, script_pubkey=Address.parse(address, network).script_pubkey())


@dataclass
class Transaction:
    inputs: list[TxInput] = field(default_factory=list)
    outputs: list[TxOutput] = field(default_factory=list)
    version: int = 2
    tx_type: int = 0
    locktime: int = 0
    extra_payload: bytes = b""

    @property
    def is_special(self) -> bool:
        return self.version >= 3 and self.tx_type != 0

    def to_bytes(self) -> bytes:
        """
        Raw transaction bytes.

        Raises:
            ValueError: If a field does not fit its wire encoding
        """
        try:
            result = struct.pack("<HH", self.version, self.tx_type)

            result += encode_varint(len(self.inputs))
            for inp in self.inputs:
                result += serialize_input(inp)

            result += encode_varint(len(self.outputs))
            for out in self.outputs:
                result += serialize_output(out)

            result += struct.pack("<I", self.locktime)

            if self.is_special:
                result += encode_varint(len(self.extra_payload))
                result += self.extra_payload
        except (struct.error, OverflowError, TypeError) as e:
            raise ValueError(f"Cannot serialize transaction: {e}") from e
        return result

    def serialize(self) -> str:
        """Raw transaction hex, as expected by the explorer's rawtx field."""
        return self.to_bytes().hex()

    @property
    def txid(self) -> str:
        return hash256(self.to_bytes())[::-1].hex()

    @classmethod
    def from_bytes(cls, data: bytes) -> Transaction:
        try:
            version, tx_type = struct.unpack_from("<HH", data, 0)
            offset = 4

            input_count, offset = read_varint(data, offset)
            inputs = []
            for _ in range(input_count):
                txid = data[offset : offset + 32][::-1].hex()
                offset += 32
                (vout,) = struct.unpack_from("<I", data, offset)
                offset += 4
                script_len, offset = read_varint(data, offset)
                script_sig = _take(data, offset, script_len)
                offset += script_len
                (sequence,) = struct.unpack_from("<I", data, offset)
                offset += 4
                inputs.append(TxInput(txid, vout, script_sig, sequence))

            output_count, offset = read_varint(data, offset)
            outputs = []
            for _ in range(output_count):
                (value,) = struct.unpack_from("<q", data, offset)
                offset += 8
                script_len, offset = read_varint(data, offset)
                outputs.append(TxOutput(value, _take(data, offset, script_len)))
                offset += script_len

            (locktime,) = struct.unpack_from("<I", data, offset)
            offset += 4

            tx = cls(inputs, outputs, version, tx_type, locktime)
            if tx.is_special:
                payload_len, offset = read_varint(data, offset)
                tx.extra_payload = _take(data, offset, payload_len)
                offset += payload_len
        except (struct.error, IndexError) as e:
            raise TransactionDecodeError(f"Truncated transaction: {e}") from e

        if offset != len(data):
            raise TransactionDecodeError(f"{len(data) - offset} trailing bytes after transaction")
        return tx

    @classmethod
    def from_hex(cls, tx_hex: str) -> Transaction:
        if not is_hex(tx_hex):
            raise TransactionDecodeError("Transaction must be non-empty hex")
        return cls.from_bytes(bytes.fromhex(tx_hex))


def hash256(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def encode_varint(value: int) -> bytes:
    if value < 0xFD:
        return bytes([value])
    if value <= 0xFFFF:
        return b"\xfd" + value.to_bytes(2, "little")
    if value <= 0xFFFFFFFF:
        return b"\xfe" + value.to_bytes(4, "little")
    return b"\xff" + value.to_bytes(8, "little")


def read_varint(data: bytes, offset: int) -> tuple[int, int]:
    first = data[offset]
    offset += 1

    if first < 0xFD:
        return first, offset
    size = {0xFD: 2, 0xFE: 4, 0xFF: 8}[first]
    return int.from_bytes(_take(data, offset, size), "little"), offset + size


def serialize_input(inp: TxInput) -> bytes:
    if not is_hash_hex(inp.txid):
        raise ValueError(f"Invalid input txid: {inp.txid!r}")
    # txid is in RPC format (big-endian), reversed on the wire
    result = bytes.fromhex(inp.txid)[::-1] + struct.pack("<I", inp.vout)
    result += encode_varint(len(inp.script_sig)) + inp.script_sig
    result += struct.pack("<I", inp.sequence)
    return result


def serialize_output(out: TxOutput) -> bytes:
    return struct.pack("<q", out.value) + encode_varint(len(out.script_pubkey)) + out.script_pubkey


def _take(data: bytes, offset: int, size: int) -> bytes:
    chunk = data[offset : offset + size]
    if len(chunk) != size:
        raise IndexError(f"needed {size} bytes at offset {offset}, got {len(chunk)}")
    return chunk
