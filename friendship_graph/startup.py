"""Startup helpers for bootstrapping a ready-to-use friendship store."""

from __future__ import annotations

import logging

from friendship_graph.config import Settings, load_settings
from friendship_graph.db.engine import create_session_factory, engine_from_settings
from friendship_graph.db.schema import create_all
from friendship_graph.store.factory import create_friendship_store
from friendship_graph.store.friendship_store import FriendshipStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings | None = None) -> FriendshipStore:
    """Create the engine, ensure the schema exists and return a store.

    - When ``settings`` is omitted they are read from the environment.
    - Tables are created with ``checkfirst`` so existing databases are reused.
    """
    settings = settings or load_settings()
    engine = engine_from_settings(settings)

    create_all(engine)
    logger.info(
        "Friendship store ready on %s (cache %s)",
        engine.url.render_as_string(hide_password=True),
        "enabled" if settings.cache_enabled else "disabled",
    )
    return create_friendship_store(
        create_session_factory(engine),
        cache_enabled=settings.cache_enabled,
    )


__all__ = ["build_store"]
