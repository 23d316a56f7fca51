# JSON wire format for notifications
from typing import Union

import orjson

from .models import Notification
from .results import EncodingFailure


def encode(notification: Notification) -> Union[bytes, EncodingFailure]:
    """Serialize to ``{"from": {...}, "to": {...}, "message": ...}`` bytes.

    Encoding is all-or-nothing: on any serializer error the caller gets an
    EncodingFailure and never a partial payload.
    """
    try:
        return orjson.dumps(notification.model_dump(mode="json", by_alias=True))
    except (TypeError, ValueError) as e:
        # orjson.JSONEncodeError subclasses TypeError
        return EncodingFailure(cause=str(e))


def decode(payload: Union[bytes, str]) -> Notification:
    """Inverse of encode(); raises on malformed input."""
    return Notification.model_validate(orjson.loads(payload))
