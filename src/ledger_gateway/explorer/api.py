# File: src/ledger_gateway/explorer/api.py
from fastapi import HTTPException
from typing import Any, Dict, List, Optional

from ..exceptions import InvalidIdentifier, StorageError, StorageTimeoutError
from ..monitoring.metrics import MetricsCollector
from ..storage.pool import ConnectionPool
from ..utils.config import Config
from ..utils.logger import get_logger
from .identifiers import decode_raw_tx_hash, parse_address, parse_hash
from .models import Account, AccountStateResponse, NetworkStatus, TestnetConfigResponse
from .network_status import SharedNetworkStatus

logger = get_logger(__name__)


def bad_request() -> HTTPException:
    return HTTPException(status_code=400, detail="Bad request")

def not_found(what: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{what} not found")

def internal_error(context: str, error: Exception) -> HTTPException:
    # Storage detail goes to the log only
    logger.warning(f"{context} db fail: {str(error)}")
    return HTTPException(status_code=500, detail="Internal server error")


class ExplorerAPI:
    """Read-only ledger queries behind the REST surface.

    Every method validates its input before touching storage, and maps
    failures onto 400 (bad input), 404 (absent), 408 (pool exhausted) and
    500 (any other storage failure).
    """

    def __init__(
        self,
        pool: ConnectionPool,
        network_status: SharedNetworkStatus,
        contract_address: str,
        metrics: Optional[MetricsCollector] = None
    ):
        self.pool = pool
        self.network_status = network_status
        self.contract_address = contract_address
        self.metrics = metrics

    def access_storage(self):
        """Lease a connection without queueing; exhaustion becomes 408."""
        try:
            return self.pool.access_storage_fragile()
        except StorageTimeoutError:
            if self.metrics is not None:
                self.metrics.record_storage_timeout()
            raise HTTPException(status_code=408, detail="Request timeout")
        except StorageError as e:
            raise internal_error("access_storage", e)

    def get_testnet_config(self) -> TestnetConfigResponse:
        return TestnetConfigResponse(contract_address=self.contract_address)

    def get_network_status(self) -> NetworkStatus:
        return self.network_status.read()

    def get_account_state(self, account_address: str) -> AccountStateResponse:
        """Get committed and verified state of an account."""
        try:
            address = parse_address(account_address)
        except InvalidIdentifier:
            raise bad_request()

        with self.access_storage() as storage:
            try:
                stored = storage.account_state_by_address(address.raw)
            except StorageError as e:
                raise internal_error("get_account_state", e)

        empty = Account(address=address.to_hex())
        return AccountStateResponse(
            id=stored.committed[0] if stored.committed is not None else None,
            committed=Account(**stored.committed[1]) if stored.committed is not None else empty,
            verified=Account(**stored.verified[1]) if stored.verified is not None else empty,
        )

    def get_tokens(self) -> List[Dict[str, Any]]:
        """Get all known tokens, ordered by id."""
        with self.access_storage() as storage:
            try:
                tokens = storage.load_tokens()
            except StorageError as e:
                raise internal_error("get_tokens", e)
        return sorted(tokens.values(), key=lambda token: token["id"])

    def get_account_transactions_history(self, account_address: str, offset: int, limit: int) -> List[Dict[str, Any]]:
        if limit > Config.MAX_HISTORY_LIMIT:
            raise bad_request()
        try:
            address = parse_address(account_address)
        except InvalidIdentifier:
            raise bad_request()

        with self.access_storage() as storage:
            try:
                return storage.get_account_transactions_history(address.raw, offset, limit)
            except StorageError as e:
                raise internal_error("get_account_transactions_history", e)

    def get_executed_transaction_by_hash(self, tx_hash_hex: str) -> Optional[Dict[str, Any]]:
        """Get a transaction receipt, or None when there is none to report."""
        try:
            tx_hash = decode_raw_tx_hash(tx_hash_hex)
        except InvalidIdentifier:
            raise bad_request()

        with self.access_storage() as storage:
            try:
                return storage.tx_receipt(tx_hash)
            except StorageError as e:
                logger.debug(f"tx_receipt lookup failed: {str(e)}")
                return None

    def get_tx_by_hash(self, hash_hex_with_prefix: str) -> Optional[Dict[str, Any]]:
        try:
            tx_hash = parse_hash(hash_hex_with_prefix)
        except InvalidIdentifier:
            raise bad_request()

        with self.access_storage() as storage:
            try:
                return storage.get_tx_by_hash(tx_hash.raw)
            except StorageError as e:
                raise internal_error("get_tx_by_hash", e)

    def get_priority_op_receipt(self, op_id: int) -> Dict[str, Any]:
        with self.access_storage() as storage:
            try:
                return storage.get_priority_op_receipt(op_id)
            except StorageError as e:
                raise internal_error("get_priority_op_receipt", e)

    def get_transaction_by_id(self, block_id: int, tx_id: int) -> Dict[str, Any]:
        """Get the executed operation at position `tx_id` within a block."""
        with self.access_storage() as storage:
            try:
                executed_ops = storage.get_block_executed_ops(block_id)
            except StorageError as e:
                raise internal_error("get_transaction_by_id", e)

        if not 0 <= tx_id < len(executed_ops):
            raise not_found("Transaction")
        return executed_ops[tx_id]

    def get_blocks(self, max_block: Optional[int] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Get up to `limit` blocks, highest first, starting at `max_block`."""
        max_block = max_block if max_block is not None else Config.MAX_BLOCK_SENTINEL
        limit = limit if limit is not None else Config.DEFAULT_BLOCKS_LIMIT
        if limit > Config.MAX_BLOCKS_LIMIT:
            raise bad_request()

        with self.access_storage() as storage:
            try:
                return storage.load_block_range(max_block, limit)
            except StorageError as e:
                raise internal_error("get_blocks", e)

    def get_block_by_id(self, block_id: int) -> Dict[str, Any]:
        with self.access_storage() as storage:
            try:
                blocks = storage.load_block_range(block_id, 1)
            except StorageError as e:
                raise internal_error("get_block_by_id", e)

        if not blocks:
            raise not_found("Block")
        return blocks[-1]

    def get_block_transactions(self, block_number: int) -> List[Dict[str, Any]]:
        with self.access_storage() as storage:
            try:
                return storage.get_block_transactions(block_number)
            except StorageError as e:
                raise internal_error("get_block_transactions", e)

    def search(self, query: str) -> Dict[str, Any]:
        """Find a block by height or by one of its hashes."""
        with self.access_storage() as storage:
            try:
                block = storage.find_block_by_height_or_hash(query)
            except StorageError as e:
                raise internal_error("search", e)

        if block is None:
            raise not_found("Block")
        return block
