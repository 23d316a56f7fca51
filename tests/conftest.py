"""
Pytest configuration and shared fixtures for kafka-notify tests.
"""
import pytest
from types import SimpleNamespace

from aiokafka.errors import KafkaConnectionError, KafkaTimeoutError

from core.config.settings import (
    Settings,
    APISettings,
    RedpandaSettings,
    LoggingSettings,
    PartySettings,
)
from core.notifications.directory import Directory
from core.notifications.models import Party
from tests.mocks.fake_broker import FakeAIOKafkaProducer, RecordingPublisher


@pytest.fixture
def test_settings():
    """Test settings configuration."""
    return Settings(
        environment="testing",
        api=APISettings(host="127.0.0.1", port=18080),
        redpanda=RedpandaSettings(
            bootstrap_servers="localhost:9092",
            client_id="test-kafka-notify",
            topic="notifications",
        ),
        logging=LoggingSettings(file_enabled=False, console_enabled=False),
        directory=[
            PartySettings(id=1, name="Emma"),
            PartySettings(id=2, name="Bruno"),
            PartySettings(id=3, name="Rick"),
            PartySettings(id=4, name="Lena"),
        ],
    )


@pytest.fixture
def directory():
    return Directory([
        Party(id=1, name="Emma"),
        Party(id=2, name="Bruno"),
        Party(id=3, name="Rick"),
        Party(id=4, name="Lena"),
    ])


@pytest.fixture
def recording_publisher():
    return RecordingPublisher()


@pytest.fixture
def fake_kafka(monkeypatch):
    """Patch aiokafka's producer inside the publisher module with a fake."""
    fake_cls = type("FakeProducer", (FakeAIOKafkaProducer,), {"instances": []})
    monkeypatch.setattr("core.streaming.publisher.AIOKafkaProducer", fake_cls, raising=True)
    return fake_cls


@pytest.fixture
def broker_errors():
    """Typical transport failures surfaced by aiokafka."""
    return SimpleNamespace(
        connection=KafkaConnectionError("Unable to bootstrap from [('localhost', 9092)]"),
        timeout=KafkaTimeoutError(),
    )
