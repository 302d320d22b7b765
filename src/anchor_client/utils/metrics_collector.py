"""Prometheus metrics collection for Anchor Client."""

from typing import Optional

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)


class MetricsCollector:
    """Collects and exposes Prometheus metrics for control-plane operations."""

    def __init__(self, registry: CollectorRegistry = REGISTRY):
        """
        Initialize metrics collector with all metrics.

        Args:
            registry: Registry the metrics are registered in
        """
        self.registry = registry

        # Counter metrics
        self.fetch_total = Counter(
            "anchor_fetch_total",
            "Total number of collection fetches",
            ["resource", "outcome"],
            registry=registry,
        )

        self.mutation_total = Counter(
            "anchor_mutation_total",
            "Total number of mutating operations",
            ["resource", "operation", "outcome"],
            registry=registry,
        )

        # Histogram metrics
        self.api_request_duration_seconds = Histogram(
            "anchor_api_request_duration_seconds",
            "Control-plane API request duration in seconds",
            ["method", "outcome"],
            buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=registry,
        )

        # Gauge metrics
        self.collection_size = Gauge(
            "anchor_collection_size",
            "Number of records in the current collection snapshot",
            ["resource"],
            registry=registry,
        )

    def record_fetch(self, resource: str, success: bool) -> None:
        """
        Record a collection fetch.

        Args:
            resource: Resource kind (containers, images, volumes, system)
            success: Whether the fetch succeeded
        """
        self.fetch_total.labels(
            resource=resource, outcome="success" if success else "failure"
        ).inc()

    def record_mutation(self, resource: str, operation: str, success: bool) -> None:
        """
        Record a mutating operation.

        Args:
            resource: Resource kind
            operation: Operation name (start, stop, remove, ...)
            success: Whether the operation succeeded
        """
        self.mutation_total.labels(
            resource=resource,
            operation=operation,
            outcome="success" if success else "failure",
        ).inc()

    def record_api_request(self, method: str, outcome: str, duration_seconds: float) -> None:
        """
        Record an API request duration.

        Args:
            method: HTTP method
            outcome: success or error
            duration_seconds: Duration in seconds
        """
        self.api_request_duration_seconds.labels(method=method, outcome=outcome).observe(
            duration_seconds
        )

    def set_collection_size(self, resource: str, count: int) -> None:
        """
        Set the size of a collection snapshot.

        Args:
            resource: Resource kind
            count: Number of records
        """
        self.collection_size.labels(resource=resource).set(count)

    def get_metrics(self) -> bytes:
        """
        Get current metrics in Prometheus format.

        Returns:
            Metrics data in bytes
        """
        return generate_latest(self.registry)


# Global metrics collector instance
_metrics_collector: Optional[MetricsCollector] = None


def get_metrics_collector() -> MetricsCollector:
    """
    Get the global metrics collector instance.

    Returns:
        MetricsCollector instance
    """
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector()
    return _metrics_collector
