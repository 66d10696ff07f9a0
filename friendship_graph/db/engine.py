"""Database engine helpers for the friendship tables."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from friendship_graph.config import Settings

DEFAULT_SQLITE_URL = "sqlite+pysqlite:///:memory:"


def is_in_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def create_engine(
    connection_string: str | None = None,
    *,
    sqlite_path: str | Path | None = None,
    echo: bool = False,
    connect_args: Mapping[str, Any] | None = None,
) -> Engine:
    """Create an engine shared by every caller of one friendship store.

    Parameters
    ----------
    connection_string:
        Full SQLAlchemy URL. Cannot be combined with ``sqlite_path``.
    sqlite_path:
        Filesystem path to a SQLite database file. Expanded to an absolute path.
    echo:
        Enable SQLAlchemy engine echo logging.
    connect_args:
        Extra DBAPI connect arguments, merged over the defaults below.

    Notes
    -----
    In-memory SQLite (the default) lives inside a single DBAPI connection, so
    the engine pins one connection with ``StaticPool`` and allows it to cross
    threads. Every thread then sees the same graph.
    """
    if connection_string and sqlite_path is not None:
        raise ValueError("Provide either 'connection_string' or 'sqlite_path', not both.")

    if connection_string:
        url = connection_string
    elif sqlite_path is not None:
        url = f"sqlite+pysqlite:///{Path(sqlite_path).expanduser().resolve().as_posix()}"
    else:
        url = DEFAULT_SQLITE_URL

    options: dict[str, Any] = {"echo": echo, "future": True}
    args: dict[str, Any] = {}
    if make_url(url).get_backend_name() == "sqlite":
        args["check_same_thread"] = False
        if is_in_memory_sqlite(url):
            options["poolclass"] = StaticPool
    args.update(connect_args or {})

    return sa_create_engine(url, connect_args=args, **options)


def engine_from_settings(settings: Settings) -> Engine:
    """Build the engine described by ``settings``."""
    if settings.database_url:
        return create_engine(settings.database_url, echo=settings.echo)
    return create_engine(sqlite_path=settings.sqlite_path, echo=settings.echo)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory used by the repositories; objects stay readable after commit."""
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False, future=True)


__all__ = [
    "DEFAULT_SQLITE_URL",
    "create_engine",
    "create_session_factory",
    "engine_from_settings",
    "is_in_memory_sqlite",
]
