# File: src/ledger_gateway/config/gateway_config.py

import copy
import os
from typing import Any, Dict, Optional

import yaml

from ..utils.config import Config

DEFAULT_CONFIG: Dict[str, Any] = {
    "api": {
        "host": "0.0.0.0",
        "port": 3000,
        "prefix": Config.API_PREFIX,
        "shutdown_timeout": Config.SHUTDOWN_TIMEOUT
    },
    "storage": {
        "db_path": "data/ledger.db",
        "pool_size": Config.DEFAULT_POOL_SIZE
    },
    "status": {
        "refresh_interval_ms": Config.STATUS_REFRESH_INTERVAL_MS
    },
    "testnet": {
        "contract_address": "0x" + "00" * Config.ADDRESS_SIZE
    },
    "monitoring": {
        "metrics_port": None,
        "log_dir": "logs",
        "log_level": "INFO"
    }
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class GatewayConfig:
    def __init__(self, config_path: Optional[str] = "config/gateway.yaml"):
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        if not self.config_path or not os.path.exists(self.config_path):
            return copy.deepcopy(DEFAULT_CONFIG)

        with open(self.config_path, 'r') as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {self.config_path} must contain a mapping")
        return _merge(DEFAULT_CONFIG, loaded)

    @classmethod
    def from_dict(cls, overrides: Dict[str, Any]) -> "GatewayConfig":
        """Build a config from in-memory overrides (no file access)."""
        config = cls(config_path=None)
        config.config = _merge(DEFAULT_CONFIG, overrides)
        return config

    def _section(self, path, create: bool = False) -> Optional[Dict[str, Any]]:
        """Walk the mappings named by `path`; None if one is absent or not a mapping."""
        section = self.config
        for name in path:
            child = section.get(name)
            if child is None and create:
                child = section[name] = {}
            if not isinstance(child, dict):
                return None
            section = child
        return section

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``storage.pool_size``."""
        *path, leaf = key.split('.')
        section = self._section(path)
        if section is None or leaf not in section:
            return default
        return section[leaf]

    def update(self, key: str, value: Any):
        """Set a dotted key in memory, creating missing sections on the way."""
        *path, leaf = key.split('.')
        section = self._section(path, create=True)
        if section is None:
            raise ValueError(f"Config key {key} runs through a non-mapping value")
        section[leaf] = value
