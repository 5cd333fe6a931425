# src/ledger_gateway/storage/interface.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

Record = Dict[str, Any]


@dataclass
class StoredAccountState:
    """Committed and verified account records, each as (account_id, account)."""
    committed: Optional[Tuple[int, Record]] = None
    verified: Optional[Tuple[int, Record]] = None


class StorageProcessor(ABC):
    """Read-only queries the gateway issues against ledger storage.

    Every method may raise StorageError.
    """

    # Block schema
    @abstractmethod
    def get_last_committed_block(self) -> Optional[int]:
        pass

    @abstractmethod
    def get_last_verified_block(self) -> Optional[int]:
        pass

    @abstractmethod
    def load_block_range(self, max_block: int, limit: int) -> List[Record]:
        """Blocks with number <= max_block, highest first."""
        pass

    @abstractmethod
    def get_block_executed_ops(self, block_number: int) -> List[Record]:
        pass

    @abstractmethod
    def get_block_transactions(self, block_number: int) -> List[Record]:
        pass

    @abstractmethod
    def find_block_by_height_or_hash(self, query: str) -> Optional[Record]:
        pass

    # Stats schema
    @abstractmethod
    def count_total_transactions(self) -> Optional[int]:
        pass

    @abstractmethod
    def count_outstanding_proofs(self, after_block: int) -> Optional[int]:
        pass

    # Account and token schemas
    @abstractmethod
    def account_state_by_address(self, address: bytes) -> StoredAccountState:
        pass

    @abstractmethod
    def load_tokens(self) -> Dict[int, Record]:
        pass

    # Operations schema
    @abstractmethod
    def get_account_transactions_history(self, address: bytes, offset: int, limit: int) -> List[Record]:
        pass

    @abstractmethod
    def tx_receipt(self, tx_hash: bytes) -> Optional[Record]:
        pass

    @abstractmethod
    def get_tx_by_hash(self, tx_hash: bytes) -> Optional[Record]:
        pass

    @abstractmethod
    def get_priority_op_receipt(self, op_id: int) -> Record:
        pass

    def close(self) -> None:
        """Release the underlying connection."""
        pass
