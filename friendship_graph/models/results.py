"""Result values returned by friendship operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from friendship_graph.models.friendship import Friendship


class FriendshipErrorCode(str, Enum):
    """Recoverable failure reasons for engine operations."""

    NOT_FOUND = "not_found"
    SELF_REFERENCE = "self_reference"
    ALREADY_EXISTS = "already_exists"
    PERMISSION_DENIED = "permission_denied"
    CONFLICTING_STATE = "conflicting_state"


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Outcome of an engine operation; truthy only on success."""

    ok: bool
    code: FriendshipErrorCode | None = None
    friendship: Friendship | None = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, friendship: Friendship | None = None) -> "OperationResult":
        return cls(ok=True, friendship=friendship)

    @classmethod
    def failure(
        cls,
        code: FriendshipErrorCode,
        message: str,
        friendship: Friendship | None = None,
    ) -> "OperationResult":
        return cls(ok=False, code=code, friendship=friendship, message=message)


__all__ = ["FriendshipErrorCode", "OperationResult"]
