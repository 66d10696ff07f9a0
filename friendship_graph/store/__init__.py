"""Friendship store orchestration helpers."""

from .factory import create_friendship_store
from .friendship_store import FriendshipStore, FriendshipStoreError

__all__ = ["FriendshipStore", "FriendshipStoreError", "create_friendship_store"]
