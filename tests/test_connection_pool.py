# tests/test_connection_pool.py
import threading
from unittest.mock import Mock

import pytest

from ledger_gateway.exceptions import StorageError, StorageTimeoutError
from ledger_gateway.storage.interface import StorageProcessor
from ledger_gateway.storage.pool import ConnectionPool

class TestConnectionPool:
    @pytest.fixture
    def factory(self):
        return Mock(side_effect=lambda: Mock(spec=StorageProcessor))

    @pytest.fixture
    def pool(self, factory):
        return ConnectionPool(factory, max_size=2)

    def test_fragile_access_fails_fast_when_exhausted(self, pool):
        with pool.access_storage_fragile():
            with pool.access_storage_fragile():
                with pytest.raises(StorageTimeoutError):
                    pool.access_storage_fragile()

    def test_slots_are_released_on_exit(self, pool):
        with pool.access_storage_fragile():
            pass
        with pool.access_storage_fragile():
            with pool.access_storage_fragile():
                pass

    def test_slots_are_released_when_body_raises(self, pool):
        with pytest.raises(RuntimeError):
            with pool.access_storage_fragile():
                raise RuntimeError("boom")
        with pool.access_storage_fragile(), pool.access_storage_fragile():
            pass

    def test_idle_connections_are_reused(self, pool, factory):
        with pool.access_storage_fragile() as first:
            pass
        with pool.access_storage_fragile() as second:
            pass
        assert first is second
        assert factory.call_count == 1
        assert pool.idle_connections == 1

    def test_blocking_access_waits_for_a_free_connection(self, factory):
        pool = ConnectionPool(factory, max_size=1)
        acquired = threading.Event()

        def waiter():
            with pool.access_storage():
                acquired.set()

        with pool.access_storage_fragile():
            thread = threading.Thread(target=waiter)
            thread.start()
            assert not acquired.wait(0.1)
        thread.join(2)
        assert acquired.is_set()

    def test_blocking_access_with_timeout(self, factory):
        pool = ConnectionPool(factory, max_size=1)
        with pool.access_storage_fragile():
            with pytest.raises(StorageTimeoutError):
                pool.access_storage(timeout=0.05)

    def test_timeout_is_a_storage_error(self):
        assert issubclass(StorageTimeoutError, StorageError)

    def test_factory_failure_releases_slot(self):
        factory = Mock(side_effect=OSError("disk gone"))
        pool = ConnectionPool(factory, max_size=1)
        with pytest.raises(StorageError):
            pool.access_storage_fragile()
        with pytest.raises(StorageError) as exc_info:
            pool.access_storage_fragile()
        assert not isinstance(exc_info.value, StorageTimeoutError)

    def test_close_closes_idle_connections(self, pool):
        with pool.access_storage_fragile() as storage:
            pass
        pool.close()
        storage.close.assert_called_once()
        assert pool.idle_connections == 0

    def test_pool_size_must_be_positive(self, factory):
        with pytest.raises(ValueError):
            ConnectionPool(factory, max_size=0)
