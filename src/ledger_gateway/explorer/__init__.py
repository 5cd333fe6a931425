# File: src/ledger_gateway/explorer/__init__.py
from .identifiers import Address, Hash, parse_address, parse_hash, decode_raw_tx_hash
from .models import NetworkStatus

__all__ = ['Address', 'Hash', 'parse_address', 'parse_hash', 'decode_raw_tx_hash', 'NetworkStatus']
