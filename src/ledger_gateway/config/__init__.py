# src/ledger_gateway/config/__init__.py
from .gateway_config import GatewayConfig

__all__ = ['GatewayConfig']
