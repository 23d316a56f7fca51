# Structured exception hierarchy for process-level failures.
# Request-scoped pipeline failures are returned as values, see core.notifications.results.

from typing import Dict, Any, Optional
from datetime import datetime, timezone


class NotifyException(Exception):
    """Base exception for all kafka-notify specific errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 correlation_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.correlation_id = correlation_id
        self.timestamp = datetime.now(timezone.utc)


class TransientError(NotifyException):
    """Errors that may clear up on their own (broker restarting, network blip)"""
    pass


class PermanentError(NotifyException):
    """Errors that will not go away without operator action"""
    pass


class ConfigurationError(PermanentError):
    """Invalid or inconsistent configuration detected at startup"""
    pass


class BrokerConnectionError(TransientError):
    """The producer could not connect to the broker bootstrap servers"""

    def __init__(self, message: str, bootstrap_servers: str, **kwargs):
        super().__init__(message, **kwargs)
        self.bootstrap_servers = bootstrap_servers


class PublisherNotRunningError(PermanentError):
    """A publish was attempted before start() or after stop()"""
    pass
