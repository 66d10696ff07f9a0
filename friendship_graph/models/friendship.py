"""Pydantic model for friendships."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

PartyId = str | int | UUID

MAX_PARTY_ID_LENGTH = 255


def party_key(party: PartyId) -> str:
    """Normalise a party identifier to the string form stored in the database.

    Integers and UUIDs map to their ``str()`` form, so ``7`` and ``"7"`` name
    the same party. Booleans are rejected even though they are ints.
    """
    if isinstance(party, UUID) or (isinstance(party, int) and not isinstance(party, bool)):
        key = str(party)
    elif isinstance(party, str) and party:
        key = party
    else:
        raise TypeError(f"Unsupported party identifier: {party!r}")
    if len(key) > MAX_PARTY_ID_LENGTH:
        raise ValueError(f"Party identifier longer than {MAX_PARTY_ID_LENGTH} characters.")
    return key


class Friendship(BaseModel):
    """A friendship record between two parties.

    The direction only records who sent the invite: ``requester_id`` created
    the friendship and ``recipient_id`` is the only party allowed to approve
    it. ``blocker_id`` names whichever of the two imposed a block.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    requester_id: str
    recipient_id: str
    pending: bool = True
    blocker_id: str | None = None
    version: int = 0
    created_time: datetime = Field(default_factory=datetime.now)
    last_edited_time: datetime = Field(default_factory=datetime.now)

    model_config = ConfigDict(from_attributes=True)

    @model_validator(mode="after")
    def _check_parties(self) -> "Friendship":
        if self.requester_id == self.recipient_id:
            raise ValueError("A friendship requires two distinct parties.")
        if self.blocker_id is not None and not self.involves(self.blocker_id):
            raise ValueError("blocker_id must be one of the two parties.")
        return self

    @property
    def is_blocked(self) -> bool:
        return self.blocker_id is not None

    def involves(self, party: PartyId) -> bool:
        key = party_key(party)
        return key in (self.requester_id, self.recipient_id)

    def other_party(self, party: PartyId) -> str:
        """Return the counterpart of ``party`` in this friendship."""
        key = party_key(party)
        if key == self.requester_id:
            return self.recipient_id
        if key == self.recipient_id:
            return self.requester_id
        raise ValueError(f"Party {key} is not part of friendship {self.id}.")

    def can_block(self, party: PartyId) -> bool:
        """A party may block unless the counterpart already holds the block."""
        return self.blocker_id is None or self.blocker_id == party_key(party)

    def can_unblock(self, party: PartyId) -> bool:
        """Only the current blocker may lift a block."""
        return self.blocker_id is not None and self.blocker_id == party_key(party)
