"""Streaming module namespace.

Import the publisher explicitly:
  - from core.streaming.publisher import NotificationPublisher
"""

__all__ = []
