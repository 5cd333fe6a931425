# src/ledger_gateway/utils/config.py

class Config:
    # Identifier sizes
    ADDRESS_SIZE = 20  # bytes
    HASH_SIZE = 32  # bytes
    ADDRESS_PREFIX = "0x"
    SCHEME_PREFIXES = ("sync-bl:", "sync-tx:")

    # Pagination
    MAX_HISTORY_LIMIT = 100
    MAX_BLOCKS_LIMIT = 100
    DEFAULT_BLOCKS_LIMIT = 20
    MAX_BLOCK_SENTINEL = 999_999_999
    MAX_U32 = 2**32 - 1  # block numbers and operation ids

    # Network status cache
    STATUS_REFRESH_INTERVAL_MS = 1000
    STATUS_UPDATER_THREAD_NAME = "rest-state-updater"

    # HTTP surface
    API_PREFIX = "/api/v0.1"
    CORS_MAX_AGE = 3600  # seconds
    SHUTDOWN_TIMEOUT = 1  # seconds of graceful drain

    # Storage
    DEFAULT_POOL_SIZE = 10
