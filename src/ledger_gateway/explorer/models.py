# File: src/ledger_gateway/explorer/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional

class NetworkStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    last_committed: int = 0
    last_verified: int = 0
    total_transactions: int = 0
    outstanding_txs: int = 0
    next_block_eta: Optional[int] = None

class Account(BaseModel):
    address: str
    nonce: int = 0
    balances: Dict[str, Any] = Field(default_factory=dict)

class AccountStateResponse(BaseModel):
    # None if the account is not created yet
    id: Optional[int] = None
    committed: Account
    verified: Account

class TestnetConfigResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    contract_address: str = Field(alias="contractAddress")
