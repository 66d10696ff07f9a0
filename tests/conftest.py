from __future__ import annotations

import os
from collections.abc import Iterator
from typing import Callable

import pytest
from sqlalchemy.engine import Engine

from friendship_graph.db.engine import create_engine, create_session_factory
from friendship_graph.db.schema import Base, DbFriendship, create_all
from friendship_graph.graph import FriendsCache, FriendshipEngine, GraphQueryService
from friendship_graph.repositories.friendship_repository import FriendshipRepository
from friendship_graph.store import FriendshipStore, create_friendship_store


@pytest.fixture(scope="session")
def postgres_url() -> str | None:
    """Return the Postgres test URL if provided via env."""
    return os.getenv("POSTGRES_TEST_URL") or os.getenv("DATABASE_URL")


@pytest.fixture
def engine(postgres_url: str | None) -> Iterator[Engine]:
    """Yield an engine targeting Postgres when configured; otherwise SQLite in-memory."""
    engine = create_engine(postgres_url) if postgres_url else create_engine()
    create_all(engine)
    try:
        yield engine
    finally:
        with engine.begin() as connection:
            if engine.dialect.name == "sqlite":
                Base.metadata.drop_all(bind=connection)
            else:
                connection.execute(DbFriendship.__table__.delete())


@pytest.fixture
def session_factory(engine: Engine):
    return create_session_factory(engine)


@pytest.fixture
def repository(session_factory) -> FriendshipRepository:
    return FriendshipRepository(session_factory)


@pytest.fixture
def friendship_engine(repository: FriendshipRepository) -> FriendshipEngine:
    return FriendshipEngine(repository)


@pytest.fixture
def queries(repository: FriendshipRepository) -> GraphQueryService:
    return GraphQueryService(repository)


@pytest.fixture
def cached_queries(repository: FriendshipRepository) -> GraphQueryService:
    return GraphQueryService(repository, cache=FriendsCache())


@pytest.fixture
def friendship_store(session_factory) -> FriendshipStore:
    return create_friendship_store(session_factory)


@pytest.fixture
def cached_store(session_factory) -> FriendshipStore:
    return create_friendship_store(session_factory, cache_enabled=True)


@pytest.fixture
def befriend(friendship_engine: FriendshipEngine) -> Callable[[str, str], None]:
    """Create an approved friendship where the first party sent the invite."""

    def _befriend(requester: str, recipient: str) -> None:
        assert friendship_engine.invite(requester, recipient)
        assert friendship_engine.approve(recipient, requester)

    return _befriend
