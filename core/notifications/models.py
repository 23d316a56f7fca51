# Domain models for parties and the notifications exchanged between them

from pydantic import BaseModel, ConfigDict, Field


class Party(BaseModel):
    """A directory entry: a possible sender or recipient."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class Notification(BaseModel):
    """Sender, recipient and message text about to be published.

    On the wire the parties are named ``from`` and ``to``; in Python they are
    ``sender`` and ``recipient`` since ``from`` is a keyword.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sender: Party = Field(..., alias="from")
    recipient: Party = Field(..., alias="to")
    message: str

    @property
    def routing_key(self) -> str:
        """Partition key: the recipient id in decimal text."""
        return str(self.recipient.id)
