# src/ledger_gateway/storage/database.py
from typing import Any, Dict, List, Optional, Sequence
import sqlite3
import json
import os

from ..exceptions import StorageError
from ..explorer.identifiers import remove_prefix
from ..utils.config import Config
from .interface import Record, StorageProcessor, StoredAccountState

SCHEMA = """
CREATE TABLE IF NOT EXISTS blocks (
    block_number INTEGER PRIMARY KEY,
    new_state_root TEXT NOT NULL,
    block_size INTEGER NOT NULL DEFAULT 0,
    commit_tx_hash TEXT,
    verify_tx_hash TEXT,
    committed_at TEXT,
    verified_at TEXT
);
CREATE TABLE IF NOT EXISTS accounts (
    id INTEGER NOT NULL,
    address BLOB NOT NULL,
    state TEXT NOT NULL CHECK (state IN ('committed', 'verified')),
    nonce INTEGER NOT NULL DEFAULT 0,
    balances TEXT NOT NULL DEFAULT '{}',
    PRIMARY KEY (address, state)
);
CREATE TABLE IF NOT EXISTS tokens (
    id INTEGER PRIMARY KEY,
    address TEXT NOT NULL,
    symbol TEXT
);
CREATE TABLE IF NOT EXISTS executed_transactions (
    tx_hash BLOB PRIMARY KEY,
    block_number INTEGER NOT NULL,
    block_index INTEGER,
    tx TEXT NOT NULL,
    from_account BLOB,
    to_account BLOB,
    success INTEGER NOT NULL,
    fail_reason TEXT,
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS executed_priority_operations (
    priority_op_serialid INTEGER PRIMARY KEY,
    block_number INTEGER NOT NULL,
    block_index INTEGER NOT NULL,
    operation TEXT NOT NULL,
    from_account BLOB,
    to_account BLOB,
    eth_hash BLOB NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_tx_block ON executed_transactions(block_number);
CREATE INDEX IF NOT EXISTS idx_pq_block ON executed_priority_operations(block_number);
CREATE INDEX IF NOT EXISTS idx_pq_eth_hash ON executed_priority_operations(eth_hash);
"""

def _hex(data: Optional[bytes]) -> Optional[str]:
    return "0x" + data.hex() if data is not None else None

class Database(StorageProcessor):
    """SQLite-backed ledger storage. One instance wraps one connection."""

    def __init__(self, db_path: str):
        """Open the database and make sure the schema exists"""
        self.db_path = db_path
        directory = os.path.dirname(db_path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            # Pooled connections move between request threads one at a time
            self.conn = sqlite3.connect(db_path, check_same_thread=False)
            self.conn.row_factory = sqlite3.Row
            with self.conn:
                self.conn.executescript(SCHEMA)
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Error opening database: {str(e)}")

    def _query(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        try:
            cursor = self.conn.execute(sql, params)
            return cursor.fetchall()
        except (sqlite3.Error, OverflowError) as e:
            raise StorageError(f"Error querying storage: {str(e)}")

    def _scalar(self, sql: str, params: Sequence[Any] = ()) -> Any:
        rows = self._query(sql, params)
        return rows[0][0] if rows else None

    def _load_json(self, raw: str) -> Any:
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StorageError(f"Corrupted record: {str(e)}")

    # Block schema

    def get_last_committed_block(self) -> Optional[int]:
        return self._scalar(
            "SELECT MAX(block_number) FROM blocks WHERE committed_at IS NOT NULL"
        )

    def get_last_verified_block(self) -> Optional[int]:
        return self._scalar(
            "SELECT MAX(block_number) FROM blocks WHERE verified_at IS NOT NULL"
        )

    def load_block_range(self, max_block: int, limit: int) -> List[Record]:
        rows = self._query(
            "SELECT * FROM blocks WHERE block_number <= ? "
            "ORDER BY block_number DESC LIMIT ?",
            (max_block, limit)
        )
        return [dict(row) for row in rows]

    def get_block_executed_ops(self, block_number: int) -> List[Record]:
        ops = []
        for row in self._query(
            "SELECT * FROM executed_transactions WHERE block_number = ?",
            (block_number,)
        ):
            ops.append({
                "type": "transaction",
                "block_number": row["block_number"],
                "block_index": row["block_index"],
                "tx_hash": _hex(row["tx_hash"]),
                "tx": self._load_json(row["tx"]),
                "success": bool(row["success"]),
                "fail_reason": row["fail_reason"],
                "created_at": row["created_at"],
            })
        for row in self._query(
            "SELECT * FROM executed_priority_operations WHERE block_number = ?",
            (block_number,)
        ):
            ops.append({
                "type": "priority_op",
                "block_number": row["block_number"],
                "block_index": row["block_index"],
                "serial_id": row["priority_op_serialid"],
                "eth_hash": _hex(row["eth_hash"]),
                "op": self._load_json(row["operation"]),
                "created_at": row["created_at"],
            })
        # Failed transactions carry no block index and go last
        ops.sort(key=lambda op: (op["block_index"] is None, op["block_index"] or 0))
        return ops

    def get_block_transactions(self, block_number: int) -> List[Record]:
        return [
            {
                "tx_hash": op.get("tx_hash") or op.get("eth_hash"),
                "block_number": op["block_number"],
                "op": op["tx"] if op["type"] == "transaction" else op["op"],
                "success": op.get("success", True),
                "fail_reason": op.get("fail_reason"),
                "created_at": op["created_at"],
            }
            for op in self.get_block_executed_ops(block_number)
        ]

    def find_block_by_height_or_hash(self, query: str) -> Optional[Record]:
        query = query.strip()
        # str.isdigit alone also accepts superscripts and non-latin digits
        if query.isascii() and query.isdigit():
            height = int(query)
            if height > Config.MAX_U32:
                return None
            rows = self._query(
                "SELECT * FROM blocks WHERE block_number = ?", (height,)
            )
        else:
            needle = remove_prefix(query).lower()
            rows = self._query(
                "SELECT * FROM blocks WHERE lower(new_state_root) IN (?, ?) "
                "OR lower(commit_tx_hash) IN (?, ?) OR lower(verify_tx_hash) IN (?, ?) "
                "ORDER BY block_number DESC LIMIT 1",
                (needle, "0x" + needle) * 3
            )
        return dict(rows[0]) if rows else None

    # Stats schema

    def count_total_transactions(self) -> Optional[int]:
        return self._scalar(
            "SELECT (SELECT COUNT(*) FROM executed_transactions) + "
            "(SELECT COUNT(*) FROM executed_priority_operations)"
        )

    def count_outstanding_proofs(self, after_block: int) -> Optional[int]:
        return self._scalar(
            "SELECT COUNT(*) FROM blocks "
            "WHERE block_number > ? AND committed_at IS NOT NULL",
            (after_block,)
        )

    # Account and token schemas

    def account_state_by_address(self, address: bytes) -> StoredAccountState:
        state = StoredAccountState()
        for row in self._query(
            "SELECT * FROM accounts WHERE address = ?", (address,)
        ):
            account = {
                "address": _hex(row["address"]),
                "nonce": row["nonce"],
                "balances": self._load_json(row["balances"]),
            }
            if row["state"] == "committed":
                state.committed = (row["id"], account)
            else:
                state.verified = (row["id"], account)
        return state

    def load_tokens(self) -> Dict[int, Record]:
        return {
            row["id"]: dict(row)
            for row in self._query("SELECT id, address, symbol FROM tokens")
        }

    # Operations schema

    def get_account_transactions_history(self, address: bytes, offset: int, limit: int) -> List[Record]:
        last_verified = self.get_last_verified_block() or 0
        rows = self._query(
            """
            SELECT * FROM (
                SELECT tx_hash AS hash, NULL AS pq_id, tx AS body, success,
                       fail_reason, block_number, created_at
                FROM executed_transactions
                WHERE from_account = :address OR to_account = :address
                UNION ALL
                SELECT eth_hash AS hash, priority_op_serialid AS pq_id,
                       operation AS body, 1 AS success, NULL AS fail_reason,
                       block_number, created_at
                FROM executed_priority_operations
                WHERE from_account = :address OR to_account = :address
            )
            ORDER BY created_at DESC, block_number DESC
            LIMIT :limit OFFSET :offset
            """,
            {"address": address, "limit": limit, "offset": offset}
        )
        return [
            {
                "hash": _hex(row["hash"]),
                "pq_id": row["pq_id"],
                "tx": self._load_json(row["body"]),
                "success": bool(row["success"]),
                "fail_reason": row["fail_reason"],
                "committed": True,
                "verified": row["block_number"] <= last_verified,
                "created_at": row["created_at"],
            }
            for row in rows
        ]

    def tx_receipt(self, tx_hash: bytes) -> Optional[Record]:
        rows = self._query(
            "SELECT * FROM executed_transactions WHERE tx_hash = ?", (tx_hash,)
        )
        if not rows:
            return None
        row = rows[0]
        last_verified = self.get_last_verified_block() or 0
        return {
            "tx_hash": _hex(row["tx_hash"]),
            "block_number": row["block_number"],
            "success": bool(row["success"]),
            "verified": row["block_number"] <= last_verified,
            "fail_reason": row["fail_reason"],
            "prover_run": None,
        }

    def get_tx_by_hash(self, tx_hash: bytes) -> Optional[Record]:
        rows = self._query(
            "SELECT * FROM executed_transactions WHERE tx_hash = ?", (tx_hash,)
        )
        if rows:
            row = rows[0]
            tx = self._load_json(row["tx"])
            return {
                "tx_type": tx.get("type") if isinstance(tx, dict) else None,
                "from": _hex(row["from_account"]),
                "to": _hex(row["to_account"]),
                "block_number": row["block_number"],
                "success": bool(row["success"]),
                "fail_reason": row["fail_reason"],
                "created_at": row["created_at"],
                "tx": tx,
            }

        rows = self._query(
            "SELECT * FROM executed_priority_operations WHERE eth_hash = ?", (tx_hash,)
        )
        if rows:
            row = rows[0]
            op = self._load_json(row["operation"])
            return {
                "tx_type": op.get("type") if isinstance(op, dict) else None,
                "from": _hex(row["from_account"]),
                "to": _hex(row["to_account"]),
                "block_number": row["block_number"],
                "success": True,
                "fail_reason": None,
                "created_at": row["created_at"],
                "tx": op,
            }
        return None

    def get_priority_op_receipt(self, op_id: int) -> Record:
        block_number = self._scalar(
            "SELECT block_number FROM executed_priority_operations "
            "WHERE priority_op_serialid = ?",
            (op_id,)
        )
        if block_number is None:
            return {"committed": False, "verified": False, "block": None, "prover_run": None}
        last_verified = self.get_last_verified_block() or 0
        return {
            "committed": True,
            "verified": block_number <= last_verified,
            "block": block_number,
            "prover_run": None,
        }

    def close(self):
        """Close database connection"""
        if self.conn is not None:
            self.conn.close()
            self.conn = None
