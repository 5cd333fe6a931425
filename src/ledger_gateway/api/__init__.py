# File: src/ledger_gateway/api/__init__.py
from .server import create_app

__all__ = ['create_app']
