from __future__ import annotations

import threading
from pathlib import Path

import pytest
from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from friendship_graph.config import Settings
from friendship_graph.db.engine import create_engine, engine_from_settings, is_in_memory_sqlite
from friendship_graph.db.schema import create_all
from friendship_graph.startup import build_store


def test_default_engine_is_shared_in_memory_sqlite() -> None:
    engine = create_engine()

    assert engine.url.get_backend_name() == "sqlite"
    assert engine.url.database == ":memory:"
    assert isinstance(engine.pool, StaticPool)


def test_explicit_in_memory_url_also_uses_static_pool() -> None:
    engine = create_engine("sqlite://")

    assert isinstance(engine.pool, StaticPool)
    assert is_in_memory_sqlite("sqlite://")
    assert not is_in_memory_sqlite("sqlite:///friendships.db")


def test_file_engine_keeps_regular_pool(tmp_path: Path) -> None:
    db_path = tmp_path / "friendships.db"

    engine = create_engine(sqlite_path=db_path)

    assert Path(engine.url.database) == db_path.resolve()
    assert not isinstance(engine.pool, StaticPool)


def test_create_engine_rejects_path_with_url(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        create_engine(connection_string="sqlite:///ignored.db", sqlite_path=tmp_path / "friendships.db")


def test_engine_from_settings_follows_configuration(tmp_path: Path) -> None:
    file_engine = engine_from_settings(Settings(sqlite_path=tmp_path / "graph.db"))
    url_engine = engine_from_settings(Settings(database_url="sqlite://", echo=True))

    assert Path(file_engine.url.database) == (tmp_path / "graph.db").resolve()
    assert isinstance(url_engine.pool, StaticPool)
    assert url_engine.echo is True


def test_create_all_builds_friendships_table(tmp_path: Path) -> None:
    engine = create_engine(sqlite_path=tmp_path / "friendships.db")

    create_all(engine)
    create_all(engine)

    inspector = inspect(engine)
    assert "friendships" in inspector.get_table_names()
    index_names = {index["name"] for index in inspector.get_indexes("friendships")}
    assert "ix_friendships_pair_unique" in index_names


def test_in_memory_store_is_visible_from_other_threads() -> None:
    store = build_store(Settings())
    assert store.invite("alice", "bob")

    seen: dict[str, object] = {}

    def worker() -> None:
        try:
            seen["connected"] = store.connected_with("alice", "bob")
            seen["approved"] = bool(store.approve("bob", "alice"))
        except Exception as exc:  # surfaced by the assertions below
            seen["error"] = exc

    thread = threading.Thread(target=worker)
    thread.start()
    thread.join(timeout=10)

    assert "error" not in seen
    assert seen == {"connected": True, "approved": True}
    assert store.friends("alice") == {"bob"}
