"""
Prometheus metrics for the notification publish pipeline
"""

from prometheus_client import Counter, Histogram, CollectorRegistry
from typing import Optional

from core.notifications.results import OutcomeKind


class NotificationMetrics:
    """Pipeline outcome and publish latency metrics for Prometheus"""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        # Throughput by outcome
        self.requests = Counter(
            'notifications_requests_total',
            'Send requests handled, by pipeline outcome',
            ['outcome'],
            registry=self.registry
        )

        self.published = Counter(
            'notifications_published_total',
            'Notifications acknowledged by the broker',
            ['topic', 'partition'],
            registry=self.registry
        )

        # Synchronous send latency, including the broker acknowledgment
        self.publish_latency = Histogram(
            'notifications_publish_latency_seconds',
            'Time from send to broker acknowledgment',
            ['topic'],
            buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=self.registry
        )

        # Pre-create outcome series so dashboards show zeros
        for kind in OutcomeKind:
            self.requests.labels(outcome=kind.value)

    def record_outcome(self, kind: OutcomeKind) -> None:
        self.requests.labels(outcome=kind.value).inc()

    def record_published(self, topic: str, partition: int) -> None:
        self.published.labels(topic=topic, partition=str(partition)).inc()

    def observe_publish_latency(self, topic: str, seconds: float) -> None:
        self.publish_latency.labels(topic=topic).observe(seconds)
