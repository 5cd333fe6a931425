# File: src/ledger_gateway/storage/__init__.py
from .interface import StorageProcessor, StoredAccountState
from .pool import ConnectionPool
from .database import Database

__all__ = ['StorageProcessor', 'StoredAccountState', 'ConnectionPool', 'Database']
