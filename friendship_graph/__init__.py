"""Top-level package for the friendship graph."""

__version__ = "0.1.0"

from .models.results import FriendshipErrorCode, OperationResult  # noqa: E402
from .startup import build_store  # noqa: E402
from .store import FriendshipStore, create_friendship_store  # noqa: E402

__all__ = [
    "FriendshipErrorCode",
    "FriendshipStore",
    "OperationResult",
    "__version__",
    "build_store",
    "create_friendship_store",
]
