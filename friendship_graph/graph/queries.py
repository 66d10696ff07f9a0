"""Derived views over the friendship graph."""

from __future__ import annotations

from friendship_graph.graph.cache import FriendsCache
from friendship_graph.models.friendship import PartyId, party_key
from friendship_graph.repositories.filters import FriendshipWhere
from friendship_graph.repositories.friendship_repository import FriendshipRepository


class GraphQueryService:
    """Read-only queries answering "who is related to whom, and how".

    All results are sets of party ids (strings) except ``friends_of_friends``,
    which keeps duplicates so callers can rank candidates by how many paths
    lead to them. Without a cache every call reads straight from the
    repository.
    """

    def __init__(self, repository: FriendshipRepository, *, cache: FriendsCache | None = None):
        self._repository = repository
        self._cache = cache

    @property
    def cache(self) -> FriendsCache | None:
        return self._cache

    def invalidate(self, *parties: PartyId) -> None:
        """Drop cached entries for ``parties`` after a write."""
        if self._cache is not None:
            self._cache.invalidate(*(party_key(party) for party in parties))

    # --------------------------------------------------------------- Friends
    def friends(self, party: PartyId) -> set[str]:
        """Parties with an approved, unblocked friendship with ``party``."""
        key = party_key(party)
        if self._cache is not None:
            return set(self._cache.get_or_load(key, self._load_friends))
        return self._load_friends(key)

    def invited(self, party: PartyId) -> set[str]:
        """Approved friends that ``party`` originally invited."""
        return self._counterparts(
            party, FriendshipWhere(requester_id=party_key(party), pending=False, blocked=False)
        )

    def invited_by(self, party: PartyId) -> set[str]:
        """Approved friends who originally invited ``party``."""
        return self._counterparts(
            party, FriendshipWhere(recipient_id=party_key(party), pending=False, blocked=False)
        )

    def pending_sent(self, party: PartyId) -> set[str]:
        return self._counterparts(
            party, FriendshipWhere(requester_id=party_key(party), pending=True, blocked=False)
        )

    def pending_received(self, party: PartyId) -> set[str]:
        return self._counterparts(
            party, FriendshipWhere(recipient_id=party_key(party), pending=True, blocked=False)
        )

    def is_friend_with(self, party: PartyId, other: PartyId) -> bool:
        return party_key(other) in self.friends(party)

    def total_friends(self, party: PartyId) -> int:
        key = party_key(party)
        return self._repository.count(FriendshipWhere(party_id=key, pending=False, blocked=False))

    # --------------------------------------------------------------- Blocked
    def blockades(self, party: PartyId) -> set[str]:
        """Parties that ``party`` has blocked."""
        key = party_key(party)
        return self._counterparts(key, FriendshipWhere(party_id=key, blocker_id=key))

    def blockades_by(self, party: PartyId) -> set[str]:
        """Parties that have blocked ``party``."""
        key = party_key(party)
        return self._counterparts(key, FriendshipWhere(party_id=key, exclude_blocker_id=key))

    def blocked(self, party: PartyId) -> set[str]:
        return self.blockades(party) | self.blockades_by(party)

    def is_blocked(self, party: PartyId, other: PartyId) -> bool:
        return party_key(other) in self.blocked(party)

    def total_blocked(self, party: PartyId) -> int:
        return self._repository.count(FriendshipWhere(party_id=party_key(party), blocked=True))

    # ---------------------------------------------------------------- Mutual
    def mutual_friends(self, party: PartyId, other: PartyId) -> set[str]:
        """Friends shared by ``party`` and ``other``; empty when they are the same party."""
        key, other_key = party_key(party), party_key(other)
        if key == other_key:
            return set()
        return self.friends(key) & self.friends(other_key)

    common_friends_with = mutual_friends

    def mutual_friends_count(self, party: PartyId, other: PartyId) -> int:
        return len(self.mutual_friends(party, other))

    # ------------------------------------------------------------- Potential
    def friends_of_friends(self, party: PartyId) -> list[str]:
        """Friends of each direct friend, flattened with duplicates kept.

        ``party`` itself appears once per direct friend since every friend
        counts ``party`` among its own friends.
        """
        direct = self.friends(party)
        if not direct:
            return []

        if self._cache is not None:
            result: list[str] = []
            for friend in sorted(direct):
                result.extend(sorted(self.friends(friend)))
            return result

        rows = self._repository.query(
            FriendshipWhere(party_ids=sorted(direct), pending=False, blocked=False)
        )
        result = []
        for row in rows:
            if row.requester_id in direct:
                result.append(row.recipient_id)
            if row.recipient_id in direct:
                result.append(row.requester_id)
        return result

    def potential_friends(self, party: PartyId) -> set[str]:
        """Two-hop candidates that are not friends, not blocked and not ``party``."""
        key = party_key(party)
        excluded = self.friends(key) | self.blocked(key) | {key}
        return set(self.friends_of_friends(key)) - excluded

    # -------------------------------------------------------------- Helpers
    def _load_friends(self, party: str) -> set[str]:
        return self._counterparts(party, FriendshipWhere(party_id=party, pending=False, blocked=False))

    def _counterparts(self, party: PartyId, where: FriendshipWhere) -> set[str]:
        key = party_key(party)
        return {row.other_party(key) for row in self._repository.query(where)}


__all__ = ["GraphQueryService"]
