# tests/conftest.py
import json
import os
import shutil
import tempfile

import pytest

from ledger_gateway.config.gateway_config import GatewayConfig
from ledger_gateway.storage.database import Database

ADDRESS_A = bytes.fromhex("11" * 20)
ADDRESS_B = bytes.fromhex("22" * 20)
TX_HASH = bytes.fromhex("ab" * 32)
FAILED_TX_HASH = bytes.fromhex("cd" * 32)
PRIORITY_OP_HASH = bytes.fromhex("ef" * 32)
CONTRACT_ADDRESS = "0x" + "aa" * 20

def seed_ledger(db: Database):
    """Three blocks: 1 verified, 2 and 3 committed only."""
    with db.conn:
        db.conn.executemany(
            "INSERT INTO blocks VALUES (?, ?, ?, ?, ?, ?, ?)",
            [
                (1, "0x" + "01" * 32, 2, "0x" + "a1" * 32, "0x" + "b1" * 32,
                 "2026-01-01T00:00:00", "2026-01-01T00:10:00"),
                (2, "0x" + "02" * 32, 1, "0x" + "a2" * 32, None,
                 "2026-01-01T00:01:00", None),
                (3, "0x" + "03" * 32, 0, "0x" + "a3" * 32, None,
                 "2026-01-01T00:02:00", None),
            ]
        )
        db.conn.executemany(
            "INSERT INTO executed_transactions VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            [
                (TX_HASH, 1, 0,
                 json.dumps({"type": "Transfer", "token": 0, "amount": "100"}),
                 ADDRESS_A, ADDRESS_B, 1, None, "2026-01-01T00:00:30"),
                (FAILED_TX_HASH, 2, None,
                 json.dumps({"type": "Transfer", "token": 0, "amount": "5000"}),
                 ADDRESS_A, ADDRESS_B, 0, "Not enough balance", "2026-01-01T00:01:30"),
            ]
        )
        db.conn.execute(
            "INSERT INTO executed_priority_operations VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (7, 1, 1, json.dumps({"type": "Deposit", "token": 0, "amount": "1000"}),
             None, ADDRESS_B, PRIORITY_OP_HASH, "2026-01-01T00:00:10")
        )
        db.conn.executemany(
            "INSERT INTO accounts VALUES (?, ?, ?, ?, ?)",
            [
                (5, ADDRESS_A, "committed", 1, json.dumps({"0": "900"})),
                (5, ADDRESS_A, "verified", 0, json.dumps({"0": "1000"})),
            ]
        )
        db.conn.executemany(
            "INSERT INTO tokens VALUES (?, ?, ?)",
            [
                (2, "0x" + "33" * 20, "DAI"),
                (0, "0x" + "00" * 20, "ETH"),
                (1, "0x" + "44" * 20, "USDC"),
            ]
        )

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test databases"""
    tmp_dir = tempfile.mkdtemp()
    yield tmp_dir
    shutil.rmtree(tmp_dir)

@pytest.fixture
def db_path(temp_dir):
    return os.path.join(temp_dir, "ledger.db")

@pytest.fixture
def database(db_path):
    """A seeded ledger database"""
    db = Database(db_path)
    seed_ledger(db)
    yield db
    db.close()

@pytest.fixture
def gateway_config(database, db_path):
    return GatewayConfig.from_dict({
        "storage": {"db_path": db_path, "pool_size": 4},
        "status": {"refresh_interval_ms": 20},
        "testnet": {"contract_address": CONTRACT_ADDRESS},
    })
