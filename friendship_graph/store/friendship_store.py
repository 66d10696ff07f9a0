"""Façade that pairs the friendship engine with graph queries."""

from __future__ import annotations

from friendship_graph.graph.engine import FriendshipEngine
from friendship_graph.graph.queries import GraphQueryService
from friendship_graph.models.friendship import Friendship, PartyId, party_key
from friendship_graph.models.results import OperationResult


class FriendshipStoreError(RuntimeError):
    """Raised when FriendshipStore is called with unusable arguments."""


class FriendshipStore:
    """Single entry point for callers; keeps the query cache in step with writes."""

    def __init__(self, engine: FriendshipEngine, queries: GraphQueryService):
        """Internal constructor; prefer ``create_friendship_store`` for public use."""
        self._engine = engine
        self._queries = queries

    @property
    def engine(self) -> FriendshipEngine:
        return self._engine

    @property
    def queries(self) -> GraphQueryService:
        return self._queries

    # ----------------------------------------------------------- Mutating ops
    def invite(self, party: PartyId, other: PartyId) -> OperationResult:
        return self._after_write(self._engine.invite, party, other)

    def approve(self, party: PartyId, other: PartyId) -> OperationResult:
        return self._after_write(self._engine.approve, party, other)

    def remove_friendship(self, party: PartyId, other: PartyId) -> OperationResult:
        return self._after_write(self._engine.remove, party, other)

    def block(self, party: PartyId, other: PartyId) -> OperationResult:
        return self._after_write(self._engine.block, party, other)

    def unblock(self, party: PartyId, other: PartyId) -> OperationResult:
        return self._after_write(self._engine.unblock, party, other)

    # ------------------------------------------------------------ Status ops
    def find_any_friendship_with(self, party: PartyId, other: PartyId) -> Friendship | None:
        return self._engine.find_any_friendship_with(party, other)

    def connected_with(self, party: PartyId, other: PartyId) -> bool:
        return self._engine.connected_with(party, other)

    def gave_invite(self, party: PartyId, other: PartyId) -> bool:
        return self._engine.gave_invite(party, other)

    def received_invite(self, party: PartyId, other: PartyId) -> bool:
        return self._engine.received_invite(party, other)

    given_invite_by = received_invite

    # --------------------------------------------------------------- Queries
    def friends(self, party: PartyId) -> set[str]:
        return self._queries.friends(party)

    def invited(self, party: PartyId) -> set[str]:
        return self._queries.invited(party)

    def invited_by(self, party: PartyId) -> set[str]:
        return self._queries.invited_by(party)

    def total_friends(self, party: PartyId) -> int:
        return self._queries.total_friends(party)

    def pending_sent(self, party: PartyId) -> set[str]:
        return self._queries.pending_sent(party)

    def pending_received(self, party: PartyId) -> set[str]:
        return self._queries.pending_received(party)

    def blockades(self, party: PartyId) -> set[str]:
        return self._queries.blockades(party)

    def blockades_by(self, party: PartyId) -> set[str]:
        return self._queries.blockades_by(party)

    def blocked(self, party: PartyId) -> set[str]:
        return self._queries.blocked(party)

    def total_blocked(self, party: PartyId) -> int:
        return self._queries.total_blocked(party)

    def is_blocked(self, party: PartyId, other: PartyId) -> bool:
        return self._queries.is_blocked(party, other)

    def is_friend_with(self, party: PartyId, other: PartyId) -> bool:
        return self._queries.is_friend_with(party, other)

    def mutual_friends(self, party: PartyId, other: PartyId) -> set[str]:
        return self._queries.mutual_friends(party, other)

    common_friends_with = mutual_friends

    def mutual_friends_count(self, party: PartyId, other: PartyId) -> int:
        return self._queries.mutual_friends_count(party, other)

    def friends_of_friends(self, party: PartyId) -> list[str]:
        return self._queries.friends_of_friends(party)

    def potential_friends(self, party: PartyId) -> set[str]:
        return self._queries.potential_friends(party)

    def _after_write(self, operation, party: PartyId, other: PartyId) -> OperationResult:
        try:
            keys = (party_key(party), party_key(other))
        except (TypeError, ValueError) as exc:
            raise FriendshipStoreError(str(exc)) from exc
        result = operation(*keys)
        if result:
            self._queries.invalidate(*keys)
        return result


__all__ = ["FriendshipStore", "FriendshipStoreError"]
