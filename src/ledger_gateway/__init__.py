# src/ledger_gateway/__init__.py
__version__ = "0.1.0"
