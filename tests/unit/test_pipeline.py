import pytest
from prometheus_client import CollectorRegistry

from core.monitoring.prometheus_metrics import NotificationMetrics
from core.notifications.codec import decode
from core.notifications.models import Party
from core.notifications.pipeline import NotificationPipeline
from core.notifications.results import (
    BadRequest,
    EncodingFailure,
    OutcomeKind,
    PartyNotFound,
    PublishFailure,
    SendRequest,
    Sent,
)
from tests.mocks.fake_broker import RecordingPublisher


def _pipeline(directory, publisher, metrics=None):
    return NotificationPipeline(directory=directory, publisher=publisher, topic="notifications", metrics=metrics)


@pytest.mark.asyncio
async def test_valid_request_publishes_once_keyed_by_recipient(directory, recording_publisher):
    pipeline = _pipeline(directory, recording_publisher)

    outcome = await pipeline.submit({"fromID": "1", "toID": "2", "message": "hi"})

    assert isinstance(outcome, Sent)
    assert outcome.kind is OutcomeKind.SENT
    assert outcome.message == "Notification sent successfully!"
    assert len(recording_publisher.calls) == 1
    call = recording_publisher.calls[0]
    assert call["topic"] == "notifications"
    assert call["key"] == "2"
    restored = decode(call["value"])
    assert restored.sender == Party(id=1, name="Emma")
    assert restored.recipient == Party(id=2, name="Bruno")
    assert restored.message == "hi"


@pytest.mark.asyncio
async def test_unknown_sender_short_circuits_before_publish(directory, recording_publisher):
    pipeline = _pipeline(directory, recording_publisher)

    outcome = await pipeline.submit({"fromID": "9", "toID": "2", "message": "hi"})

    assert isinstance(outcome, PartyNotFound)
    assert outcome.party_id == 9
    assert "9" in outcome.message
    assert recording_publisher.calls == []


@pytest.mark.asyncio
async def test_both_unknown_reports_sender(directory, recording_publisher):
    outcome = await _pipeline(directory, recording_publisher).submit({"fromID": "9", "toID": "10"})
    assert isinstance(outcome, PartyNotFound)
    assert outcome.party_id == 9


@pytest.mark.asyncio
async def test_unparsable_from_id_skips_resolution_and_publish(directory, recording_publisher, monkeypatch):
    calls = []

    def spy_resolve(*args):
        calls.append(args)
        raise AssertionError("resolver must not run")

    monkeypatch.setattr("core.notifications.pipeline.resolve", spy_resolve)
    pipeline = _pipeline(directory, recording_publisher)

    outcome = await pipeline.submit({"fromID": "x", "toID": "2", "message": "hi"})

    assert isinstance(outcome, BadRequest)
    assert outcome.field == "fromID"
    assert "fromID" in outcome.message
    assert calls == []
    assert recording_publisher.calls == []


@pytest.mark.parametrize(
    "form,field",
    [
        ({"fromID": "1", "toID": "two", "message": "hi"}, "toID"),
        ({"fromID": "1.5", "toID": "2"}, "fromID"),
        ({"fromID": " 1", "toID": "2"}, "fromID"),
        ({"fromID": "1_0", "toID": "2"}, "fromID"),
        ({"fromID": "", "toID": "2"}, "fromID"),
        ({"toID": "2"}, "fromID"),
        ({"fromID": "1"}, "toID"),
        ({"fromID": "x", "toID": "y"}, "fromID"),
    ],
)
def test_parse_request_rejects_non_integers(form, field):
    result = NotificationPipeline.parse_request(form)
    assert isinstance(result, BadRequest)
    assert result.field == field


def test_parse_request_accepts_signed_integers_and_missing_message():
    assert NotificationPipeline.parse_request({"fromID": "+1", "toID": "-2"}) == SendRequest(
        from_id=1, to_id=-2, message=""
    )


@pytest.mark.parametrize(
    "raw",
    ["9" * 5000, "99999999999999999999", "9223372036854775808", "-9223372036854775809"],
)
def test_parse_request_rejects_ids_outside_int64(raw):
    result = NotificationPipeline.parse_request({"fromID": raw, "toID": "2"})

    assert isinstance(result, BadRequest)
    assert result.field == "fromID"
    assert result.cause == "value out of range"


def test_parse_request_accepts_int64_bounds_and_leading_zeros():
    assert NotificationPipeline.parse_request(
        {"fromID": "9223372036854775807", "toID": "-9223372036854775808"}
    ) == SendRequest(from_id=2 ** 63 - 1, to_id=-2 ** 63, message="")
    assert NotificationPipeline.parse_request(
        {"fromID": "0" * 5000 + "1", "toID": "0"}
    ) == SendRequest(from_id=1, to_id=0, message="")


@pytest.mark.asyncio
async def test_identical_requests_publish_twice(directory, recording_publisher):
    pipeline = _pipeline(directory, recording_publisher)
    form = {"fromID": "1", "toID": "2", "message": "hi"}

    await pipeline.submit(form)
    await pipeline.submit(form)

    assert len(recording_publisher.calls) == 2


@pytest.mark.asyncio
async def test_routing_key_depends_only_on_recipient(directory, recording_publisher):
    pipeline = _pipeline(directory, recording_publisher)

    for from_id, message in [("1", "a"), ("3", "b"), ("4", "something else entirely"), ("2", "")]:
        await pipeline.submit({"fromID": from_id, "toID": "2", "message": message})

    assert {c["key"] for c in recording_publisher.calls} == {"2"}


@pytest.mark.asyncio
async def test_publish_failure_is_returned(directory):
    publisher = RecordingPublisher(failure_cause="KafkaConnectionError: broker down")
    outcome = await _pipeline(directory, publisher).send(SendRequest(from_id=1, to_id=2, message="hi"))

    assert isinstance(outcome, PublishFailure)
    assert outcome.kind is OutcomeKind.PUBLISH_FAILED
    assert "broker down" in outcome.message
    assert len(publisher.calls) == 1


@pytest.mark.asyncio
async def test_encoding_failure_prevents_publish(directory, recording_publisher, monkeypatch):
    monkeypatch.setattr(
        "core.notifications.pipeline.encode",
        lambda notification: EncodingFailure(cause="boom"),
    )
    outcome = await _pipeline(directory, recording_publisher).submit({"fromID": "1", "toID": "2"})

    assert isinstance(outcome, EncodingFailure)
    assert recording_publisher.calls == []


@pytest.mark.asyncio
async def test_outcomes_are_counted(directory, recording_publisher):
    registry = CollectorRegistry()
    pipeline = _pipeline(directory, recording_publisher, metrics=NotificationMetrics(registry))

    await pipeline.submit({"fromID": "1", "toID": "2", "message": "hi"})
    await pipeline.submit({"fromID": "9", "toID": "2"})
    await pipeline.submit({"fromID": "nope", "toID": "2"})

    def count(outcome):
        return registry.get_sample_value("notifications_requests_total", {"outcome": outcome})

    assert count("sent") == 1.0
    assert count("not_found") == 1.0
    assert count("bad_request") == 1.0
    assert count("publish_failed") == 0.0
