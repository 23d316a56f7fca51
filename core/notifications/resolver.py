from typing import Tuple, Union

from .directory import Directory
from .models import Party
from .results import PartyNotFound


def resolve(from_id: int, to_id: int, directory: Directory) -> Union[Tuple[Party, Party], PartyNotFound]:
    """Look up sender and recipient.

    The sender is checked first, so when both ids are unknown the failure
    names ``from_id``. Sending to oneself is allowed.
    """
    sender = directory.find(from_id)
    if sender is None:
        return PartyNotFound(party_id=from_id, role="from")

    recipient = directory.find(to_id)
    if recipient is None:
        return PartyNotFound(party_id=to_id, role="to")

    return sender, recipient
