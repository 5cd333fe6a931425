# File: src/ledger_gateway/explorer/network_status.py
import queue
import threading
from typing import Callable, Optional

from ..exceptions import StorageError
from ..monitoring.metrics import MetricsCollector
from ..monitoring.supervisor import ThreadEvent
from ..storage.pool import ConnectionPool
from ..utils.config import Config
from ..utils.logger import get_logger
from .models import NetworkStatus

logger = get_logger(__name__)

class SharedNetworkStatus:
    """Read handle on the published network status.

    The snapshot is an immutable model swapped under a lock, so a reader
    always gets one complete published value.
    """

    def __init__(self, initial: Optional[NetworkStatus] = None):
        self._lock = threading.Lock()
        self._status = initial if initial is not None else NetworkStatus()

    def read(self) -> NetworkStatus:
        with self._lock:
            return self._status

    def _publish(self, status: NetworkStatus):
        with self._lock:
            self._status = status

class NetworkStatusUpdater:
    """Owns the network status snapshot and refreshes it on a fixed cadence."""

    def __init__(
        self,
        pool: ConnectionPool,
        interval_ms: int = Config.STATUS_REFRESH_INTERVAL_MS,
        panic_notify: Optional["queue.Queue[Optional[ThreadEvent]]"] = None,
        metrics: Optional[MetricsCollector] = None
    ):
        self.pool = pool
        self.interval = interval_ms / 1000.0
        self.panic_notify = panic_notify
        self.metrics = metrics
        self.name = Config.STATUS_UPDATER_THREAD_NAME
        self._shared = SharedNetworkStatus()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._notified = False
        self.refresh_count = 0

    @property
    def status(self) -> SharedNetworkStatus:
        return self._shared

    def refresh(self) -> Optional[NetworkStatus]:
        """Recompute and publish one snapshot.

        A failed field read publishes 0 for that field. Returns None, leaving
        the previous snapshot in place, when no connection could be opened.
        """
        try:
            lease = self.pool.access_storage()
        except StorageError as e:
            logger.warning(f"Status refresh skipped, storage unavailable: {str(e)}")
            return None

        with lease as storage:
            last_verified = self._read_count("last_verified", storage.get_last_verified_block)
            status = NetworkStatus(
                next_block_eta=None,
                last_committed=self._read_count("last_committed", storage.get_last_committed_block),
                last_verified=last_verified,
                total_transactions=self._read_count(
                    "total_transactions", storage.count_total_transactions
                ),
                outstanding_txs=self._read_count(
                    "outstanding_txs", storage.count_outstanding_proofs, last_verified
                ),
            )

        self._shared._publish(status)
        self.refresh_count += 1
        if self.metrics is not None:
            self.metrics.update_status_metrics(status)
        return status

    def _read_count(self, field: str, query: Callable, *args) -> int:
        try:
            value = query(*args)
        except StorageError as e:
            logger.warning(f"Failed to read {field} for network status: {str(e)}")
            if self.metrics is not None:
                self.metrics.record_refresh_failure(field)
            return 0
        return value or 0

    def start(self):
        # At most one writer: a previous thread that has not exited yet blocks a restart
        if self._thread is not None and self._thread.is_alive():
            if self._stop_event.is_set():
                logger.warning("Network status updater is still stopping, not restarting")
            return
        self._stop_event.clear()
        self._notified = False
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        try:
            self._thread.start()
        except RuntimeError as e:
            self._thread = None
            self._notify(failed=True, error=f"could not start: {str(e)}")
            raise

    def stop(self, timeout: Optional[float] = None):
        if self._thread is None:
            return
        self._stop_event.set()
        timeout = timeout if timeout is not None else self.interval + 1.0
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning(f"Network status updater did not stop within {timeout}s")
            return
        self._thread = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self):
        logger.info(f"Network status updater started, interval {self.interval}s")
        try:
            while not self._stop_event.is_set():
                self.refresh()
                self._stop_event.wait(self.interval)
        except Exception as e:
            logger.exception("Network status updater crashed")
            self._notify(failed=True, error=str(e))
            return
        logger.info("Network status updater stopped")
        self._notify(failed=False)

    def _notify(self, failed: bool, error: Optional[str] = None):
        if self.panic_notify is None or self._notified:
            return
        self._notified = True
        self.panic_notify.put(ThreadEvent(thread_name=self.name, failed=failed, error=error))
