from typing import Iterable, Iterator, Optional, Tuple

from core.config.settings import Settings
from .models import Party


class Directory:
    """Fixed, read-only set of known parties.

    Built once at startup and shared by every request. Nothing mutates it
    after construction, so concurrent lookups need no locking.
    """

    __slots__ = ("_parties",)

    def __init__(self, parties: Iterable[Party]):
        self._parties: Tuple[Party, ...] = tuple(parties)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Directory":
        return cls(Party(id=p.id, name=p.name) for p in settings.directory)

    def find(self, party_id: int) -> Optional[Party]:
        """Linear scan; the first entry with a matching id wins."""
        for party in self._parties:
            if party.id == party_id:
                return party
        return None

    @property
    def parties(self) -> Tuple[Party, ...]:
        return self._parties

    def __len__(self) -> int:
        return len(self._parties)

    def __iter__(self) -> Iterator[Party]:
        return iter(self._parties)

    def __repr__(self) -> str:
        return f"Directory(size={len(self._parties)})"
