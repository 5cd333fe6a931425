# File: src/ledger_gateway/explorer/identifiers.py
import binascii
from dataclasses import dataclass

from ..exceptions import InvalidAddress, InvalidHash
from ..utils.config import Config


def remove_prefix(query: str) -> str:
    """Strip a leading `0x` or an 8-character scheme tag, if present."""
    if query.startswith(Config.ADDRESS_PREFIX):
        return query[len(Config.ADDRESS_PREFIX):]
    if query.startswith(Config.SCHEME_PREFIXES):
        return query[8:]
    return query


def _decode_hex(data: str) -> bytes:
    # unhexlify rejects whitespace and odd lengths, unlike bytes.fromhex
    return binascii.unhexlify(data)


@dataclass(frozen=True)
class Address:
    raw: bytes

    def __post_init__(self):
        if len(self.raw) != Config.ADDRESS_SIZE:
            raise InvalidAddress(f"Address must be {Config.ADDRESS_SIZE} bytes")

    @classmethod
    def parse(cls, query: str) -> "Address":
        """Parse an optionally prefixed hex string into an address."""
        try:
            raw = _decode_hex(remove_prefix(query))
        except ValueError:
            raise InvalidAddress("Address is not valid hex")
        return cls(raw)

    def to_hex(self) -> str:
        return "0x" + self.raw.hex()

    def __str__(self) -> str:
        return self.to_hex()


@dataclass(frozen=True)
class Hash:
    raw: bytes

    def __post_init__(self):
        if len(self.raw) != Config.HASH_SIZE:
            raise InvalidHash(f"Hash must be {Config.HASH_SIZE} bytes")

    @classmethod
    def parse(cls, query: str) -> "Hash":
        """Parse an optionally prefixed hex string into a hash."""
        try:
            raw = _decode_hex(remove_prefix(query))
        except ValueError:
            raise InvalidHash("Hash is not valid hex")
        return cls(raw)

    def to_hex(self) -> str:
        return "0x" + self.raw.hex()

    def __str__(self) -> str:
        return self.to_hex()


def parse_address(query: str) -> Address:
    return Address.parse(query)


def parse_hash(query: str) -> Hash:
    return Hash.parse(query)


def decode_raw_tx_hash(tx_hash_hex: str) -> bytes:
    """Decode an executed-transaction hash.

    The first two characters are dropped unconditionally and the decoded
    length is not checked. This is stricter about the prefix position and
    looser about length than `parse_hash`; the two rules are kept apart.
    """
    if len(tx_hash_hex) < 2:
        raise InvalidHash("Transaction hash is too short")
    try:
        return _decode_hex(tx_hash_hex[2:])
    except ValueError:
        raise InvalidHash("Transaction hash is not valid hex")
