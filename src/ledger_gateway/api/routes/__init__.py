# File: src/ledger_gateway/api/routes/__init__.py
from .explorer import router as explorer_router

__all__ = ['explorer_router']
