"""
Tagged results of the publish pipeline.

Every stage returns either its value or one of the failure types below; the
HTTP boundary maps ``kind`` to a status code without catching exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union


class OutcomeKind(str, Enum):
    SENT = "sent"
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    ENCODING_FAILED = "encoding_failed"
    PUBLISH_FAILED = "publish_failed"


@dataclass(frozen=True)
class SendRequest:
    """Parsed form fields of a send request."""
    from_id: int
    to_id: int
    message: str


@dataclass(frozen=True)
class BadRequest:
    field: str
    cause: str
    kind: ClassVar[OutcomeKind] = OutcomeKind.BAD_REQUEST

    @property
    def message(self) -> str:
        return f"failed to parse ID from value {self.field}: {self.cause}"


@dataclass(frozen=True)
class PartyNotFound:
    party_id: int
    role: str = "from"
    kind: ClassVar[OutcomeKind] = OutcomeKind.NOT_FOUND

    @property
    def message(self) -> str:
        return f"party with id {self.party_id} not found in directory"


@dataclass(frozen=True)
class EncodingFailure:
    cause: str
    kind: ClassVar[OutcomeKind] = OutcomeKind.ENCODING_FAILED

    @property
    def message(self) -> str:
        return f"failed to encode notification: {self.cause}"


@dataclass(frozen=True)
class PublishFailure:
    topic: str
    routing_key: str
    cause: str
    error_type: str = "KafkaError"
    kind: ClassVar[OutcomeKind] = OutcomeKind.PUBLISH_FAILED

    @property
    def message(self) -> str:
        return f"failed to publish notification to topic {self.topic}: {self.cause}"


@dataclass(frozen=True)
class PublishReceipt:
    """Where the broker stored the message. Informational only."""
    topic: str
    partition: int
    offset: int


@dataclass(frozen=True)
class Sent:
    receipt: PublishReceipt
    kind: ClassVar[OutcomeKind] = OutcomeKind.SENT
    message: ClassVar[str] = "Notification sent successfully!"


PipelineOutcome = Union[Sent, BadRequest, PartyNotFound, EncodingFailure, PublishFailure]
