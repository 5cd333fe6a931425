# File: src/ledger_gateway/monitoring/metrics.py

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, start_http_server

class MetricsCollector:
    def __init__(self, port: Optional[int] = None, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        # Network status metrics
        self.last_committed = Gauge(
            'last_committed_block', 'Last committed block number', registry=self.registry
        )
        self.last_verified = Gauge(
            'last_verified_block', 'Last verified block number', registry=self.registry
        )
        self.total_transactions = Gauge(
            'total_transactions', 'Total executed transactions', registry=self.registry
        )
        self.outstanding_txs = Gauge(
            'outstanding_txs', 'Operations awaiting proof', registry=self.registry
        )

        # Error metrics
        self.refresh_failures = Counter(
            'status_refresh_failures', 'Failed status field reads',
            ['field'], registry=self.registry
        )
        self.storage_timeouts = Counter(
            'storage_timeouts', 'Requests rejected on pool exhaustion', registry=self.registry
        )

        if port is not None:
            start_http_server(port, registry=self.registry)

    def update_status_metrics(self, status):
        self.last_committed.set(status.last_committed)
        self.last_verified.set(status.last_verified)
        self.total_transactions.set(status.total_transactions)
        self.outstanding_txs.set(status.outstanding_txs)

    def record_refresh_failure(self, field: str):
        self.refresh_failures.labels(field=field).inc()

    def record_storage_timeout(self):
        self.storage_timeouts.inc()
