# src/ledger_gateway/monitoring/__init__.py
from .logging_config import LogConfig
from .metrics import MetricsCollector
from .supervisor import Supervisor, ThreadEvent

__all__ = ['LogConfig', 'MetricsCollector', 'Supervisor', 'ThreadEvent']
