from fastapi import Depends
from dependency_injector.wiring import inject, Provide

from app.containers import AppContainer
from core.config.settings import Settings
from core.notifications.directory import Directory
from core.notifications.pipeline import NotificationPipeline
from core.streaming.publisher import NotificationPublisher


@inject
def get_notification_pipeline(
    pipeline: NotificationPipeline = Depends(Provide[AppContainer.notification_pipeline])
) -> NotificationPipeline:
    """Get the shared notification pipeline"""
    return pipeline


@inject
def get_notification_publisher(
    publisher: NotificationPublisher = Depends(Provide[AppContainer.notification_publisher])
) -> NotificationPublisher:
    return publisher


@inject
def get_directory(
    directory: Directory = Depends(Provide[AppContainer.directory])
) -> Directory:
    return directory


@inject
def get_settings(
    settings: Settings = Depends(Provide[AppContainer.settings])
) -> Settings:
    """Get application settings for API endpoints"""
    return settings
