"""Filter primitives for friendship repository queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence
from uuid import UUID

from sqlalchemy import or_

PartyFilterValue = UUID | str


@dataclass(frozen=True, slots=True)
class FriendshipWhere:
    """Equality and null checks over friendship columns.

    ``None`` means "do not filter" for every field. ``blocked`` expresses the
    null check on ``blocker_id``: ``False`` keeps unblocked friendships,
    ``True`` keeps blocked ones. ``party_id`` matches either side of the pair,
    ``party_ids`` matches either side against a set of parties.
    """

    requester_id: PartyFilterValue | None = None
    recipient_id: PartyFilterValue | None = None
    party_id: PartyFilterValue | None = None
    party_ids: Sequence[PartyFilterValue] | None = None
    pending: bool | None = None
    blocked: bool | None = None
    blocker_id: PartyFilterValue | None = None
    exclude_blocker_id: PartyFilterValue | None = None

    def __post_init__(self) -> None:
        if self.blocked is False and (self.blocker_id is not None or self.exclude_blocker_id is not None):
            raise ValueError("blocked=False cannot be combined with blocker filters.")
        if isinstance(self.party_ids, (str, bytes)):
            raise TypeError("FriendshipWhere.party_ids expects a non-string sequence.")


def apply_where(query, model, where: FriendshipWhere):
    """Apply ``where`` to a SQLAlchemy query over ``model``."""
    if where.requester_id is not None:
        query = query.filter(model.requester_id == str(where.requester_id))

    if where.recipient_id is not None:
        query = query.filter(model.recipient_id == str(where.recipient_id))

    if where.party_id is not None:
        party = str(where.party_id)
        query = query.filter(or_(model.requester_id == party, model.recipient_id == party))

    if where.party_ids is not None:
        parties = [str(party) for party in where.party_ids]
        query = query.filter(
            or_(model.requester_id.in_(parties), model.recipient_id.in_(parties))
        )

    if where.pending is not None:
        query = query.filter(model.pending.is_(where.pending))

    if where.blocked is True:
        query = query.filter(model.blocker_id.is_not(None))
    elif where.blocked is False:
        query = query.filter(model.blocker_id.is_(None))

    if where.blocker_id is not None:
        query = query.filter(model.blocker_id == str(where.blocker_id))

    if where.exclude_blocker_id is not None:
        query = query.filter(
            model.blocker_id.is_not(None),
            model.blocker_id != str(where.exclude_blocker_id),
        )

    return query


__all__ = ["FriendshipWhere", "PartyFilterValue", "apply_where"]
