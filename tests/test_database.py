# tests/test_database.py
import pytest

from ledger_gateway.exceptions import StorageError
from ledger_gateway.storage.database import Database
from conftest import ADDRESS_A, ADDRESS_B, FAILED_TX_HASH, PRIORITY_OP_HASH, TX_HASH

class TestDatabase:
    def test_empty_database(self, db_path):
        db = Database(db_path)
        try:
            assert db.get_last_committed_block() is None
            assert db.get_last_verified_block() is None
            assert db.count_total_transactions() == 0
            assert db.load_block_range(999_999_999, 20) == []
        finally:
            db.close()

    def test_chain_progress(self, database):
        assert database.get_last_committed_block() == 3
        assert database.get_last_verified_block() == 1
        assert database.count_total_transactions() == 3
        assert database.count_outstanding_proofs(1) == 2
        assert database.count_outstanding_proofs(3) == 0

    def test_block_range_is_descending(self, database):
        blocks = database.load_block_range(999_999_999, 20)
        assert [b["block_number"] for b in blocks] == [3, 2, 1]

        blocks = database.load_block_range(2, 1)
        assert [b["block_number"] for b in blocks] == [2]

    def test_executed_ops_are_ordered_by_block_index(self, database):
        ops = database.get_block_executed_ops(1)
        assert [op["type"] for op in ops] == ["transaction", "priority_op"]
        assert ops[0]["tx_hash"] == "0x" + TX_HASH.hex()
        assert ops[1]["serial_id"] == 7

    def test_failed_transactions_go_last(self, database):
        ops = database.get_block_executed_ops(2)
        assert len(ops) == 1
        assert ops[0]["success"] is False
        assert ops[0]["fail_reason"] == "Not enough balance"

    def test_block_transactions(self, database):
        txs = database.get_block_transactions(1)
        assert [tx["tx_hash"] for tx in txs] == [
            "0x" + TX_HASH.hex(), "0x" + PRIORITY_OP_HASH.hex()
        ]
        assert txs[1]["op"]["type"] == "Deposit"

    @pytest.mark.parametrize("query, expected", [
        ("2", 2),
        ("0x" + "a3" * 32, 3),
        ("sync-bl:" + "01" * 32, 1),
        ("0x" + "B1" * 32, 1),
    ])
    def test_find_block_by_height_or_hash(self, database, query, expected):
        assert database.find_block_by_height_or_hash(query)["block_number"] == expected

    def test_find_block_miss(self, database):
        assert database.find_block_by_height_or_hash("42") is None
        assert database.find_block_by_height_or_hash("0x" + "99" * 32) is None

    @pytest.mark.parametrize("query", ["²", "٣", "99999999999999999999999", str(2**32)])
    def test_find_block_only_takes_ascii_u32_heights(self, database, query):
        assert database.find_block_by_height_or_hash(query) is None

    def test_integer_overflow_is_wrapped(self, database):
        with pytest.raises(StorageError):
            database.load_block_range(2**70, 1)

    def test_account_state(self, database):
        state = database.account_state_by_address(ADDRESS_A)
        assert state.committed == (5, {"address": "0x" + "11" * 20, "nonce": 1, "balances": {"0": "900"}})
        assert state.verified[1]["balances"] == {"0": "1000"}

        state = database.account_state_by_address(ADDRESS_B)
        assert state.committed is None
        assert state.verified is None

    def test_load_tokens(self, database):
        tokens = database.load_tokens()
        assert set(tokens) == {0, 1, 2}
        assert tokens[2]["symbol"] == "DAI"

    def test_account_history(self, database):
        history = database.get_account_transactions_history(ADDRESS_B, 0, 10)
        assert [item["hash"] for item in history] == [
            "0x" + FAILED_TX_HASH.hex(), "0x" + TX_HASH.hex(), "0x" + PRIORITY_OP_HASH.hex()
        ]
        assert [item["verified"] for item in history] == [False, True, True]
        assert history[2]["pq_id"] == 7

        page = database.get_account_transactions_history(ADDRESS_B, 1, 1)
        assert [item["hash"] for item in page] == ["0x" + TX_HASH.hex()]

    def test_tx_receipt(self, database):
        receipt = database.tx_receipt(TX_HASH)
        assert receipt["block_number"] == 1
        assert receipt["success"] is True
        assert receipt["verified"] is True
        assert database.tx_receipt(b"\x00" * 32) is None

    def test_tx_by_hash_covers_priority_ops(self, database):
        tx = database.get_tx_by_hash(PRIORITY_OP_HASH)
        assert tx["tx_type"] == "Deposit"
        assert tx["to"] == "0x" + "22" * 20
        assert database.get_tx_by_hash(FAILED_TX_HASH)["success"] is False
        assert database.get_tx_by_hash(b"\x00" * 32) is None

    def test_priority_op_receipt(self, database):
        assert database.get_priority_op_receipt(7) == {
            "committed": True, "verified": True, "block": 1, "prover_run": None
        }
        assert database.get_priority_op_receipt(99)["committed"] is False

    def test_errors_are_wrapped(self, database):
        with database.conn:
            database.conn.execute("DROP TABLE tokens")
        with pytest.raises(StorageError):
            database.load_tokens()
