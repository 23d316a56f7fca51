# Synchronous notification publisher over a long-lived aiokafka producer
#
# One producer is opened at startup and shared by every request. Each publish
# awaits the broker acknowledgment (acks=all) before returning, so a success
# result always means the record was durably accepted.

import time
from typing import Optional, Union

from aiokafka import AIOKafkaProducer
from aiokafka.errors import KafkaError

from core.config.settings import RedpandaSettings
from core.logging import get_streaming_logger_safe
from core.monitoring.prometheus_metrics import NotificationMetrics
from core.notifications.results import PublishFailure, PublishReceipt
from core.utils.exceptions import BrokerConnectionError, PublisherNotRunningError


class NotificationPublisher:
    """Owns the broker connection and maps acknowledgments to results."""

    def __init__(self, config: RedpandaSettings, metrics: Optional[NotificationMetrics] = None):
        self.config = config
        self.metrics = metrics
        self._producer: Optional[AIOKafkaProducer] = None
        self._running = False
        self._logger = get_streaming_logger_safe("core.streaming.publisher")

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Connect to the bootstrap servers.

        Raises BrokerConnectionError when the cluster cannot be reached, so the
        process can fail fast before serving requests.
        """
        if self._running:
            return

        # aiokafka binds to the running loop, so the client is built here and not in __init__
        producer_kwargs = dict(
            bootstrap_servers=self.config.bootstrap_servers,
            client_id=f"{self.config.client_id}-producer",
            enable_idempotence=True,
            acks='all',
            request_timeout_ms=self.config.request_timeout_ms,
            linger_ms=self.config.linger_ms,
        )
        if self.config.compression_type:
            producer_kwargs["compression_type"] = self.config.compression_type

        producer = AIOKafkaProducer(**producer_kwargs)
        try:
            await producer.start()
        except KafkaError as e:
            self._logger.error(
                "Failed to connect producer",
                bootstrap_servers=self.config.bootstrap_servers,
                error=str(e),
            )
            try:
                await producer.stop()
            except KafkaError as stop_error:
                self._logger.warning("Error releasing half-open producer", error=str(stop_error))
            raise BrokerConnectionError(
                f"failed to setup producer: {e}",
                bootstrap_servers=self.config.bootstrap_servers,
            ) from e

        self._producer = producer
        self._running = True
        self._logger.info(
            "Producer connected",
            bootstrap_servers=self.config.bootstrap_servers,
            acks="all",
        )

    async def stop(self) -> None:
        """Stop the producer with flush."""
        if not self._running or not self._producer:
            return

        try:
            await self._producer.flush()
            await self._producer.stop()
            self._logger.info("Producer stopped")
        except KafkaError as e:
            # Log but don't raise to prevent shutdown issues
            self._logger.warning("Error during producer shutdown", error=str(e))
        finally:
            self._producer = None
            self._running = False

    async def publish(self, topic: str, routing_key: str, payload: bytes) -> Union[PublishReceipt, PublishFailure]:
        """Send one record and wait for the broker acknowledgment.

        No retries happen here beyond what the client itself performs.
        """
        if not self._running or self._producer is None:
            return PublishFailure(
                topic=topic,
                routing_key=routing_key,
                cause="publisher is not running",
                error_type=PublisherNotRunningError.__name__,
            )

        started = time.perf_counter()
        try:
            metadata = await self._producer.send_and_wait(
                topic,
                value=payload,
                key=routing_key.encode('utf-8'),
            )
        except KafkaError as e:
            self._logger.error(
                "Broker rejected or failed to acknowledge notification",
                topic=topic,
                key=routing_key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return PublishFailure(
                topic=topic,
                routing_key=routing_key,
                cause=str(e) or type(e).__name__,
                error_type=type(e).__name__,
            )

        if self.metrics:
            self.metrics.observe_publish_latency(topic, time.perf_counter() - started)
            self.metrics.record_published(topic, metadata.partition)

        self._logger.debug(
            "Notification acknowledged",
            topic=topic,
            key=routing_key,
            partition=metadata.partition,
            offset=metadata.offset,
        )
        return PublishReceipt(topic=metadata.topic, partition=metadata.partition, offset=metadata.offset)
