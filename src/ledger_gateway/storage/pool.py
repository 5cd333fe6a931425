# src/ledger_gateway/storage/pool.py
import threading
from collections import deque
from contextlib import contextmanager
from typing import Callable, Deque, Iterator, Optional

from ..exceptions import StorageError, StorageTimeoutError
from ..utils.logger import get_logger
from .interface import StorageProcessor

logger = get_logger(__name__)


class ConnectionPool:
    """Bounded pool of storage connections.

    One semaphore caps the number of connections in use. Request handlers use
    `access_storage_fragile`, which fails immediately when the pool is
    exhausted; the status updater uses `access_storage`, which waits.
    """

    def __init__(self, factory: Callable[[], StorageProcessor], max_size: int = 10):
        if max_size < 1:
            raise ValueError("Pool size must be at least 1")
        self.factory = factory
        self.max_size = max_size
        self._slots = threading.BoundedSemaphore(max_size)
        self._idle: Deque[StorageProcessor] = deque()
        self._lock = threading.Lock()

    def access_storage_fragile(self):
        """Acquire a connection without waiting.

        Raises StorageTimeoutError if every connection is in use.
        """
        if not self._slots.acquire(blocking=False):
            raise StorageTimeoutError("Connection pool exhausted")
        return self._lease()

    def access_storage(self, timeout: Optional[float] = None):
        """Acquire a connection, waiting up to `timeout` seconds (forever if None)."""
        if not self._slots.acquire(timeout=timeout):
            raise StorageTimeoutError("Timed out waiting for a storage connection")
        return self._lease()

    def _lease(self):
        # Called with a slot held; connection creation happens eagerly so a
        # failing factory is reported at acquisition time.
        try:
            storage = self._checkout()
        except Exception as e:
            self._slots.release()
            if isinstance(e, StorageError):
                raise
            raise StorageError(f"Error opening storage connection: {str(e)}") from e
        return self._hold(storage)

    @contextmanager
    def _hold(self, storage: StorageProcessor) -> Iterator[StorageProcessor]:
        try:
            yield storage
        finally:
            with self._lock:
                self._idle.append(storage)
            self._slots.release()

    def _checkout(self) -> StorageProcessor:
        with self._lock:
            if self._idle:
                return self._idle.popleft()
        return self.factory()

    @property
    def idle_connections(self) -> int:
        with self._lock:
            return len(self._idle)

    def close(self):
        """Close all idle connections"""
        with self._lock:
            while self._idle:
                storage = self._idle.popleft()
                try:
                    storage.close()
                except Exception as e:
                    logger.warning(f"Error closing storage connection: {str(e)}")
