"""
Monitoring and observability components
"""

from .prometheus_metrics import NotificationMetrics

__all__ = [
    "NotificationMetrics",
]
