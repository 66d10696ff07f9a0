"""Friendship state machine and graph queries."""

from .cache import FriendsCache
from .engine import FriendshipEngine
from .queries import GraphQueryService

__all__ = ["FriendsCache", "FriendshipEngine", "GraphQueryService"]
