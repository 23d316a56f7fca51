# DI container for the notification producer
from dependency_injector import containers, providers
from prometheus_client import CollectorRegistry

from core.config.settings import Settings
from core.monitoring.prometheus_metrics import NotificationMetrics
from core.notifications.directory import Directory
from core.notifications.pipeline import NotificationPipeline
from core.streaming.publisher import NotificationPublisher


class AppContainer(containers.DeclarativeContainer):
    """Application dependency injection container"""

    # Configuration
    settings = providers.Singleton(Settings)

    # --- Observability: Prometheus ---
    # Shared registry used by the /metrics endpoint and the collectors
    prometheus_registry = providers.Singleton(CollectorRegistry)
    notification_metrics = providers.Singleton(
        NotificationMetrics,
        registry=prometheus_registry,
    )

    # Read-only party directory, loaded once
    directory = providers.Singleton(
        Directory.from_settings,
        settings,
    )

    # One long-lived producer shared by every request
    notification_publisher = providers.Singleton(
        NotificationPublisher,
        config=settings.provided.redpanda,
        metrics=notification_metrics,
    )

    notification_pipeline = providers.Singleton(
        NotificationPipeline,
        directory=directory,
        publisher=notification_publisher,
        topic=settings.provided.redpanda.topic,
        metrics=notification_metrics,
    )
