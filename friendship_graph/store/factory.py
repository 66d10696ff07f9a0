"""Factory helpers for constructing the friendship store façade."""

from __future__ import annotations

from sqlalchemy.orm import Session, sessionmaker

from friendship_graph.graph.cache import FriendsCache
from friendship_graph.graph.engine import FriendshipEngine
from friendship_graph.graph.queries import GraphQueryService
from friendship_graph.repositories.friendship_repository import FriendshipRepository

from .friendship_store import FriendshipStore


def create_friendship_store(
    session_factory: sessionmaker[Session],
    *,
    cache_enabled: bool = False,
) -> FriendshipStore:
    """Build a FriendshipStore with the default repository implementation."""
    repository = FriendshipRepository(session_factory)
    cache = FriendsCache() if cache_enabled else None
    return FriendshipStore(
        FriendshipEngine(repository),
        GraphQueryService(repository, cache=cache),
    )


__all__ = ["create_friendship_store"]
