"""
In-memory stand-ins for the broker side of the pipeline.
"""
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from core.notifications.results import PublishFailure, PublishReceipt


class RecordingPublisher:
    """Stand-in for NotificationPublisher that records every publish call."""

    def __init__(self, failure_cause: Optional[str] = None, partitions: int = 3):
        self.calls: List[Dict[str, Any]] = []
        self.failure_cause = failure_cause
        self.partitions = partitions
        self.is_running = False

    async def start(self):
        self.is_running = True

    async def stop(self):
        self.is_running = False

    async def publish(self, topic: str, routing_key: str, payload: bytes):
        self.calls.append({"topic": topic, "key": routing_key, "value": payload})
        if self.failure_cause:
            return PublishFailure(topic=topic, routing_key=routing_key, cause=self.failure_cause)
        return PublishReceipt(
            topic=topic,
            partition=int(routing_key) % self.partitions,
            offset=len(self.calls) - 1,
        )


class FakeAIOKafkaProducer:
    """Mimics the parts of AIOKafkaProducer the publisher relies on.

    Class attributes control failure injection; the fake_kafka fixture hands
    out a fresh subclass per test so settings never leak between tests.
    """

    start_error: Optional[Exception] = None
    send_error: Optional[Exception] = None
    partitions: int = 3
    instances: List["FakeAIOKafkaProducer"] = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.started = False
        self.stopped = False
        self.flushed = False
        self.sent: List[Dict[str, Any]] = []
        type(self).instances.append(self)

    async def start(self):
        if self.start_error is not None:
            raise self.start_error
        self.started = True

    async def stop(self):
        self.started = False
        self.stopped = True

    async def flush(self):
        self.flushed = True

    async def send_and_wait(self, topic, value=None, key=None, partition=None,
                            timestamp_ms=None, headers=None):
        if self.send_error is not None:
            raise self.send_error
        partition = int(key.decode("utf-8")) % self.partitions
        offset = sum(1 for s in self.sent if s["partition"] == partition)
        self.sent.append({
            "topic": topic,
            "key": key,
            "value": value,
            "partition": partition,
            "offset": offset,
        })
        return SimpleNamespace(topic=topic, partition=partition, offset=offset)
