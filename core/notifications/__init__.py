"""
Notification publish pipeline: directory lookup, resolution, encoding and the
orchestration that hands encoded notifications to the broker publisher.
"""

from .models import Party, Notification
from .directory import Directory
from .resolver import resolve
from .codec import encode, decode
from .results import (
    OutcomeKind,
    SendRequest,
    BadRequest,
    PartyNotFound,
    EncodingFailure,
    PublishFailure,
    PublishReceipt,
    Sent,
    PipelineOutcome,
)
from .pipeline import NotificationPipeline

__all__ = [
    "Party",
    "Notification",
    "Directory",
    "resolve",
    "encode",
    "decode",
    "OutcomeKind",
    "SendRequest",
    "BadRequest",
    "PartyNotFound",
    "EncodingFailure",
    "PublishFailure",
    "PublishReceipt",
    "Sent",
    "PipelineOutcome",
    "NotificationPipeline",
]
