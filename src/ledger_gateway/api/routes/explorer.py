# File: src/ledger_gateway/api/routes/explorer.py
from fastapi import APIRouter, Depends, Path, Query, Request
from typing import Optional
from ledger_gateway.explorer.api import ExplorerAPI
from ledger_gateway.utils.config import Config

router = APIRouter()

def get_explorer(request: Request) -> ExplorerAPI:
    return request.app.state.explorer

# Handlers are plain functions: storage is blocking, so they run in the threadpool

@router.get("/testnet_config")
def get_testnet_config(explorer: ExplorerAPI = Depends(get_explorer)):
    return explorer.get_testnet_config()

@router.get("/status")
def get_network_status(explorer: ExplorerAPI = Depends(get_explorer)):
    return explorer.get_network_status()

@router.get("/account/{address}")
def get_account_state(address: str, explorer: ExplorerAPI = Depends(get_explorer)):
    return explorer.get_account_state(address)

@router.get("/tokens")
def get_tokens(explorer: ExplorerAPI = Depends(get_explorer)):
    return explorer.get_tokens()

@router.get("/account/{address}/history/{offset}/{limit}")
def get_account_transactions_history(
    address: str,
    offset: int = Path(ge=0, le=Config.MAX_U32),
    limit: int = Path(ge=0, le=Config.MAX_U32),
    explorer: ExplorerAPI = Depends(get_explorer)
):
    return explorer.get_account_transactions_history(address, offset, limit)

@router.get("/transactions/{tx_hash}")
def get_executed_transaction_by_hash(tx_hash: str, explorer: ExplorerAPI = Depends(get_explorer)):
    return explorer.get_executed_transaction_by_hash(tx_hash)

@router.get("/transactions_all/{tx_hash}")
def get_tx_by_hash(tx_hash: str, explorer: ExplorerAPI = Depends(get_explorer)):
    return explorer.get_tx_by_hash(tx_hash)

@router.get("/priority_operations/{pq_id}/")
def get_priority_op_receipt(pq_id: int = Path(ge=0, le=Config.MAX_U32), explorer: ExplorerAPI = Depends(get_explorer)):
    return explorer.get_priority_op_receipt(pq_id)

@router.get("/blocks/{block_id}/transactions/{tx_id}")
def get_transaction_by_id(
    block_id: int = Path(ge=0, le=Config.MAX_U32),
    tx_id: int = Path(ge=0, le=Config.MAX_U32),
    explorer: ExplorerAPI = Depends(get_explorer)
):
    return explorer.get_transaction_by_id(block_id, tx_id)

@router.get("/blocks/{block_id}/transactions")
def get_block_transactions(block_id: int = Path(ge=0, le=Config.MAX_U32), explorer: ExplorerAPI = Depends(get_explorer)):
    return explorer.get_block_transactions(block_id)

@router.get("/blocks/{block_id}")
def get_block_by_id(block_id: int = Path(ge=0, le=Config.MAX_U32), explorer: ExplorerAPI = Depends(get_explorer)):
    return explorer.get_block_by_id(block_id)

@router.get("/blocks")
def get_blocks(
    max_block: Optional[int] = Query(default=None, ge=0, le=Config.MAX_U32),
    limit: Optional[int] = Query(default=None, ge=0, le=Config.MAX_U32),
    explorer: ExplorerAPI = Depends(get_explorer)
):
    return explorer.get_blocks(max_block, limit)

@router.get("/search")
def search(query: str, explorer: ExplorerAPI = Depends(get_explorer)):
    return explorer.search(query)
