"""Friendship state machine: invite, approve, remove, block and unblock."""

from __future__ import annotations

import logging

from friendship_graph.models.friendship import Friendship, PartyId, party_key
from friendship_graph.models.results import FriendshipErrorCode, OperationResult
from friendship_graph.repositories.friendship_repository import (
    FriendshipExistsError,
    FriendshipNotFoundError,
    FriendshipRepository,
    SelfFriendshipError,
    VersionConflictError,
)

logger = logging.getLogger(__name__)


class FriendshipEngine:
    """Applies friendship transitions on behalf of an acting party.

    Every operation takes the acting party first and the counterpart second.
    Domain failures are returned as falsy ``OperationResult`` values; only
    programming errors (bad identifiers, broken storage) raise.
    """

    def __init__(self, repository: FriendshipRepository):
        self._repository = repository

    # ----------------------------------------------------------- Transitions
    def invite(self, party: PartyId, other: PartyId) -> OperationResult:
        """Create a pending friendship from ``party`` to ``other``."""
        actor, target = party_key(party), party_key(other)
        if actor == target:
            return self._reject(FriendshipErrorCode.SELF_REFERENCE, "invite", actor, target)
        if self._repository.find_between(actor, target) is not None:
            return self._reject(FriendshipErrorCode.ALREADY_EXISTS, "invite", actor, target)

        try:
            friendship = self._repository.create(actor, target)
        except FriendshipExistsError:
            # Lost the race against a concurrent invite for the same pair.
            return self._reject(FriendshipErrorCode.ALREADY_EXISTS, "invite", actor, target)
        except SelfFriendshipError:
            return self._reject(FriendshipErrorCode.SELF_REFERENCE, "invite", actor, target)

        logger.debug("Friendship %s created: %s invited %s", friendship.id, actor, target)
        return OperationResult.success(friendship)

    def approve(self, party: PartyId, other: PartyId) -> OperationResult:
        """Accept the invite ``other`` sent to ``party``."""
        actor, target = party_key(party), party_key(other)
        friendship = self._repository.find_between(actor, target)
        if friendship is None:
            return self._reject(FriendshipErrorCode.NOT_FOUND, "approve", actor, target)
        # The requester check is the only approval gate; it also rejects a
        # requester calling approve on an already approved friendship.
        if friendship.requester_id == actor:
            return self._reject(
                FriendshipErrorCode.PERMISSION_DENIED, "approve", actor, target, friendship
            )
        return self._write(friendship, "approve", actor, target, pending=False)

    def remove(self, party: PartyId, other: PartyId) -> OperationResult:
        """Delete the friendship between ``party`` and ``other`` in any state."""
        actor, target = party_key(party), party_key(other)
        friendship = self._repository.find_between(actor, target)
        if friendship is None:
            return self._reject(FriendshipErrorCode.NOT_FOUND, "remove", actor, target)
        if not self._repository.delete(friendship):
            return self._reject(FriendshipErrorCode.NOT_FOUND, "remove", actor, target)
        logger.debug("Friendship %s removed by %s", friendship.id, actor)
        return OperationResult.success(friendship)

    def block(self, party: PartyId, other: PartyId) -> OperationResult:
        """Block ``other`` unless ``other`` already holds a block on ``party``."""
        actor, target = party_key(party), party_key(other)
        friendship = self._repository.find_between(actor, target)
        if friendship is None:
            return self._reject(FriendshipErrorCode.NOT_FOUND, "block", actor, target)
        if not friendship.can_block(actor):
            return self._reject(
                FriendshipErrorCode.PERMISSION_DENIED, "block", actor, target, friendship
            )
        return self._write(friendship, "block", actor, target, blocker_id=actor)

    def unblock(self, party: PartyId, other: PartyId) -> OperationResult:
        """Lift the block ``party`` placed on ``other``."""
        actor, target = party_key(party), party_key(other)
        friendship = self._repository.find_between(actor, target)
        if friendship is None:
            return self._reject(FriendshipErrorCode.NOT_FOUND, "unblock", actor, target)
        if not friendship.can_unblock(actor):
            return self._reject(
                FriendshipErrorCode.PERMISSION_DENIED, "unblock", actor, target, friendship
            )
        return self._write(friendship, "unblock", actor, target, blocker_id=None)

    # --------------------------------------------------------------- Status
    def find_any_friendship_with(self, party: PartyId, other: PartyId) -> Friendship | None:
        return self._repository.find_between(party, other)

    def connected_with(self, party: PartyId, other: PartyId) -> bool:
        """True when any friendship record exists, whatever its state."""
        return self._repository.find_between(party, other) is not None

    def gave_invite(self, party: PartyId, other: PartyId) -> bool:
        """True when ``party`` sent the invite to ``other``."""
        friendship = self._repository.find_between(party, other)
        return friendship is not None and friendship.requester_id == party_key(party)

    def received_invite(self, party: PartyId, other: PartyId) -> bool:
        """True when ``party`` received the invite from ``other``."""
        friendship = self._repository.find_between(party, other)
        return friendship is not None and friendship.recipient_id == party_key(party)

    given_invite_by = received_invite

    # -------------------------------------------------------------- Helpers
    def _write(
        self,
        friendship: Friendship,
        action: str,
        actor: str,
        target: str,
        **fields,
    ) -> OperationResult:
        try:
            updated = self._repository.update(friendship, **fields)
        except FriendshipNotFoundError:
            return self._reject(FriendshipErrorCode.NOT_FOUND, action, actor, target)
        except VersionConflictError:
            return self._reject(
                FriendshipErrorCode.CONFLICTING_STATE, action, actor, target, friendship
            )
        logger.debug("Friendship %s: %s by %s (version %d)", updated.id, action, actor, updated.version)
        return OperationResult.success(updated)

    @staticmethod
    def _reject(
        code: FriendshipErrorCode,
        action: str,
        actor: str,
        target: str,
        friendship: Friendship | None = None,
    ) -> OperationResult:
        message = f"{action} by {actor} on {target} rejected: {code.value}"
        logger.info(message)
        return OperationResult.failure(code, message, friendship)


__all__ = ["FriendshipEngine"]
