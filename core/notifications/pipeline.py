import re
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from core.logging import get_streaming_logger_safe
from .codec import encode
from .directory import Directory
from .models import Notification
from .resolver import resolve
from .results import (
    BadRequest,
    EncodingFailure,
    PartyNotFound,
    PipelineOutcome,
    PublishFailure,
    SendRequest,
    Sent,
)

if TYPE_CHECKING:
    from core.monitoring.prometheus_metrics import NotificationMetrics
    from core.streaming.publisher import NotificationPublisher

FROM_ID_FIELD = "fromID"
TO_ID_FIELD = "toID"
MESSAGE_FIELD = "message"

# Plain decimal: optional sign, digits only (no whitespace, underscores or exponents)
_DECIMAL_RE = re.compile(r"([+-]?)0*([0-9]+)")

# Ids are signed 64-bit integers
_INT64_MIN = -2 ** 63
_INT64_MAX = 2 ** 63 - 1
_INT64_MAX_DIGITS = len(str(_INT64_MAX))


def _parse_id(form: Mapping[str, Any], field: str) -> Union[int, BadRequest]:
    raw = form.get(field)
    if raw is None:
        return BadRequest(field=field, cause="missing value")
    if not isinstance(raw, str):
        return BadRequest(field=field, cause=f"expected text, got {type(raw).__name__}")
    match = _DECIMAL_RE.fullmatch(raw)
    if match is None:
        return BadRequest(field=field, cause=f"invalid integer {raw!r}")
    sign, digits = match.groups()
    if len(digits) > _INT64_MAX_DIGITS:
        return BadRequest(field=field, cause="value out of range")
    value = int(sign + digits)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return BadRequest(field=field, cause="value out of range")
    return value


class NotificationPipeline:
    """parse -> resolve -> assemble -> encode -> publish.

    Stops at the first failing stage and returns it as the outcome. The
    publisher's send is the only await point, so one slow broker call holds
    up its own request and nothing else.
    """

    def __init__(self, directory: Directory, publisher: "NotificationPublisher", topic: str,
                 metrics: Optional["NotificationMetrics"] = None):
        self.directory = directory
        self.publisher = publisher
        self.topic = topic
        self.metrics = metrics
        self._logger = get_streaming_logger_safe("core.notifications.pipeline")

    @staticmethod
    def parse_request(form: Mapping[str, Any]) -> Union[SendRequest, BadRequest]:
        """Read fromID, toID and message; fromID is validated before toID."""
        from_id = _parse_id(form, FROM_ID_FIELD)
        if isinstance(from_id, BadRequest):
            return from_id

        to_id = _parse_id(form, TO_ID_FIELD)
        if isinstance(to_id, BadRequest):
            return to_id

        message = form.get(MESSAGE_FIELD, "")
        if not isinstance(message, str):
            return BadRequest(field=MESSAGE_FIELD, cause=f"expected text, got {type(message).__name__}")

        return SendRequest(from_id=from_id, to_id=to_id, message=message)

    async def submit(self, form: Mapping[str, Any]) -> PipelineOutcome:
        """Run the whole pipeline on raw form fields."""
        parsed = self.parse_request(form)
        if isinstance(parsed, BadRequest):
            return self._finish(parsed)
        return await self.send(parsed)

    async def send(self, request: SendRequest) -> PipelineOutcome:
        """Run the pipeline from resolution onwards."""
        resolved = resolve(request.from_id, request.to_id, self.directory)
        if isinstance(resolved, PartyNotFound):
            return self._finish(resolved)
        sender, recipient = resolved

        notification = Notification(sender=sender, recipient=recipient, message=request.message)

        payload = encode(notification)
        if isinstance(payload, EncodingFailure):
            return self._finish(payload)

        published = await self.publisher.publish(self.topic, notification.routing_key, payload)
        if isinstance(published, PublishFailure):
            return self._finish(published)

        return self._finish(Sent(receipt=published), from_id=sender.id, to_id=recipient.id)

    def _finish(self, outcome: PipelineOutcome, **context: Any) -> PipelineOutcome:
        if self.metrics:
            self.metrics.record_outcome(outcome.kind)

        if isinstance(outcome, Sent):
            self._logger.info(
                "Notification sent",
                topic=outcome.receipt.topic,
                partition=outcome.receipt.partition,
                offset=outcome.receipt.offset,
                **context,
            )
        elif isinstance(outcome, (BadRequest, PartyNotFound)):
            self._logger.warning("Notification rejected", outcome=outcome.kind.value, reason=outcome.message)
        else:
            self._logger.error("Notification not sent", outcome=outcome.kind.value, reason=outcome.message)
        return outcome
