"""SQLAlchemy-backed repository for Friendship models."""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from friendship_graph.db.schema import DbFriendship
from friendship_graph.models.friendship import Friendship, PartyId, party_key
from friendship_graph.repositories.filters import FriendshipWhere, apply_where

_UNSET: Any = object()


class RepositoryError(RuntimeError):
    """Base class for repository-level errors."""


class FriendshipNotFoundError(RepositoryError):
    """Raised when a friendship cannot be found for a requested operation."""


class FriendshipExistsError(RepositoryError):
    """Raised when a friendship already exists for the unordered pair."""


class SelfFriendshipError(RepositoryError):
    """Raised when both sides of a friendship are the same party."""


class VersionConflictError(RepositoryError):
    """Raised when optimistic concurrency checks fail."""


def _pair(a: str, b: str) -> tuple[str, str]:
    return (a, b) if a <= b else (b, a)


class FriendshipRepository:
    """Repository that persists and hydrates Friendship models.

    Every mutating call runs in its own session and commits before returning.
    Updates are compare-and-swap on ``version`` so concurrent writers never
    observe or produce a half-applied record.
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def create(self, requester_id: PartyId, recipient_id: PartyId) -> Friendship:
        """Insert a pending, unblocked friendship from ``requester_id`` to ``recipient_id``."""
        requester = party_key(requester_id)
        recipient = party_key(recipient_id)
        if requester == recipient:
            raise SelfFriendshipError(f"Party {requester} cannot befriend itself.")

        low, high = _pair(requester, recipient)
        record = DbFriendship(
            id=str(uuid4()),
            requester_id=requester,
            recipient_id=recipient,
            party_low_id=low,
            party_high_id=high,
            pending=True,
            blocker_id=None,
            version=0,
        )
        with self._session_factory() as session:
            session.add(record)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise FriendshipExistsError(
                    f"A friendship between {requester} and {recipient} already exists."
                ) from exc
            session.refresh(record)
            return self._to_model(record)

    def get(self, friendship_id: str) -> Friendship | None:
        with self._session_factory() as session:
            record = session.get(DbFriendship, friendship_id)
            return self._to_model(record) if record is not None else None

    def find_between(self, a_id: PartyId, b_id: PartyId) -> Friendship | None:
        """Return the friendship for the unordered pair ``{a_id, b_id}``, if any."""
        low, high = _pair(party_key(a_id), party_key(b_id))
        with self._session_factory() as session:
            record = (
                session.query(DbFriendship)
                .filter(
                    DbFriendship.party_low_id == low,
                    DbFriendship.party_high_id == high,
                )
                .one_or_none()
            )
            return self._to_model(record) if record is not None else None

    def update(
        self,
        friendship: Friendship,
        *,
        pending: bool = _UNSET,
        blocker_id: PartyId | None = _UNSET,
    ) -> Friendship:
        """Apply field changes if ``friendship.version`` is still current."""
        values: dict[Any, Any] = {}
        if pending is not _UNSET:
            if pending:
                raise ValueError("An approved friendship cannot return to pending.")
            values[DbFriendship.pending] = False
        if blocker_id is not _UNSET:
            blocker = None if blocker_id is None else party_key(blocker_id)
            if blocker is not None and not friendship.involves(blocker):
                raise ValueError(f"Party {blocker} is not part of friendship {friendship.id}.")
            values[DbFriendship.blocker_id] = blocker
        if not values:
            raise ValueError("update() requires at least one field to change.")

        values[DbFriendship.version] = DbFriendship.version + 1
        values[DbFriendship.last_edited_time] = func.now()

        with self._session_factory() as session:
            updated = (
                session.query(DbFriendship)
                .filter(
                    DbFriendship.id == friendship.id,
                    DbFriendship.version == friendship.version,
                )
                .update(values, synchronize_session=False)
            )
            if updated == 0:
                session.rollback()
                current = session.get(DbFriendship, friendship.id)
                if current is None:
                    raise FriendshipNotFoundError(f"Friendship {friendship.id} does not exist.")
                raise VersionConflictError(
                    f"Friendship {friendship.id} version mismatch: "
                    f"expected {friendship.version}, found {current.version}."
                )
            session.commit()
            record = session.get(DbFriendship, friendship.id)
            if record is None:
                raise FriendshipNotFoundError(f"Friendship {friendship.id} does not exist.")
            session.refresh(record)
            return self._to_model(record)

    def delete(self, friendship: Friendship) -> bool:
        """Delete ``friendship``; returns False when it was already gone."""
        with self._session_factory() as session:
            deleted = (
                session.query(DbFriendship)
                .filter(DbFriendship.id == friendship.id)
                .delete(synchronize_session=False)
            )
            session.commit()
            return deleted > 0

    def query(
        self,
        where: FriendshipWhere | None = None,
        *,
        limit: int | None = None,
    ) -> list[Friendship]:
        """Return friendships matching ``where``, oldest first."""
        with self._session_factory() as session:
            query = session.query(DbFriendship)
            if where is not None:
                query = apply_where(query, DbFriendship, where)
            query = query.order_by(DbFriendship.created_time, DbFriendship.id)
            if limit is not None:
                query = query.limit(limit)
            rows = query.all()
            return [self._to_model(row) for row in rows]

    def count(self, where: FriendshipWhere | None = None) -> int:
        with self._session_factory() as session:
            query = session.query(func.count(DbFriendship.id))
            if where is not None:
                query = apply_where(query, DbFriendship, where)
            return int(query.scalar() or 0)

    @staticmethod
    def _to_model(record: DbFriendship) -> Friendship:
        return Friendship(
            id=record.id,
            requester_id=record.requester_id,
            recipient_id=record.recipient_id,
            pending=record.pending,
            blocker_id=record.blocker_id,
            version=record.version,
            created_time=record.created_time,
            last_edited_time=record.last_edited_time,
        )


__all__ = [
    "FriendshipExistsError",
    "FriendshipNotFoundError",
    "FriendshipRepository",
    "RepositoryError",
    "SelfFriendshipError",
    "VersionConflictError",
]
