"""Environment-driven settings for the friendship store."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True, slots=True)
class Settings:
    """Connection and caching options.

    ``database_url`` and ``sqlite_path`` are mutually exclusive; with neither
    set the store runs against in-memory SQLite.
    """

    database_url: str | None = None
    sqlite_path: Path | None = None
    echo: bool = False
    cache_enabled: bool = False

    def __post_init__(self) -> None:
        if self.database_url and self.sqlite_path is not None:
            raise ValueError("Provide either 'database_url' or 'sqlite_path', not both.")


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}.")


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Read settings from the process environment after loading ``.env``.

    Without ``env_file`` the nearest ``.env`` above the working directory is
    used. Variables already present in the environment win over the file.
    """
    if env_file is not None:
        load_dotenv(Path(env_file))
    else:
        load_dotenv(find_dotenv(usecwd=True))

    sqlite_path = os.getenv("FRIENDSHIP_SQLITE_PATH")
    return Settings(
        database_url=os.getenv("FRIENDSHIP_DATABASE_URL") or os.getenv("DATABASE_URL") or None,
        sqlite_path=Path(sqlite_path) if sqlite_path else None,
        echo=_env_flag("FRIENDSHIP_SQL_ECHO"),
        cache_enabled=_env_flag("FRIENDSHIP_CACHE_ENABLED"),
    )


__all__ = ["Settings", "load_settings"]
