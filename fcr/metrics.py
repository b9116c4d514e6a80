"""
Prometheus metrics for monitoring.

Tracks transactions submitted by the client and events delivered to
subscribers.
"""

import logging
from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)


class Metrics:
    """
    Prometheus metrics collector.

    Tracks:
    - Transactions sent (by label and status)
    - Receipt wait latency
    - Contract events delivered
    """

    def __init__(
        self,
        enabled: bool = True,
        port: Optional[int] = 9090,
        registry: Optional[CollectorRegistry] = None
    ):
        """
        Initialize metrics.

        Args:
            enabled: Enable metrics collection
            port: Metrics HTTP server port (None to skip the server)
            registry: Collector registry (default: the global registry)
        """
        self.enabled = enabled

        if not self.enabled:
            return

        if registry is None:
            registry = REGISTRY

        self.transactions = Counter(
            'fcr_transactions_total',
            'Total transactions submitted',
            ['label', 'status'],
            registry=registry
        )

        self.receipt_latency = Histogram(
            'fcr_receipt_latency_seconds',
            'Time from submission to mined receipt',
            ['label'],
            registry=registry
        )

        self.events_delivered = Counter(
            'fcr_events_delivered_total',
            'Contract events delivered to subscribers',
            ['event'],
            registry=registry
        )

        if port is not None:
            try:
                start_http_server(port, registry=registry)
                logger.info(f"Metrics server started on port {port}")
            except OSError as e:
                logger.error(f"Failed to start metrics server: {e}")

    def track_transaction(self, label: str, status: str) -> None:
        """Record a submitted transaction."""
        if self.enabled:
            self.transactions.labels(label=label, status=status).inc()

    def track_receipt_latency(self, label: str, duration: float) -> None:
        """Record receipt wait time."""
        if self.enabled:
            self.receipt_latency.labels(label=label).observe(duration)

    def track_event(self, event: str) -> None:
        """Record a delivered event."""
        if self.enabled:
            self.events_delivered.labels(event=event).inc()


# Global metrics instance
_metrics: Optional[Metrics] = None


def get_metrics(enabled: bool = False, port: Optional[int] = 9090) -> Metrics:
    """Get or create metrics instance."""
    global _metrics
    if _metrics is None:
        _metrics = Metrics(enabled=enabled, port=port)
    return _metrics

