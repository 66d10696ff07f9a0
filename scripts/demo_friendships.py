"""Walk through a small friendship scenario and print the derived views.

Three parties befriend each other in a chain (u1-u2, u2-u3), then the script
shows potential friends, the rejected block between unconnected parties, and
the effect of a block on recommendations. Output is JSON so runs can be
diffed.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

CURRENT_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = CURRENT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv

from friendship_graph.config import Settings, load_settings
from friendship_graph.db.engine import engine_from_settings
from friendship_graph.db.schema import drop_all
from friendship_graph.models.results import OperationResult
from friendship_graph.startup import build_store
from friendship_graph.store import FriendshipStore

load_dotenv(PROJECT_ROOT / ".env")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Friendship graph walkthrough")
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Optional SQLAlchemy URL (e.g. Postgres). Defaults to the environment, then in-memory SQLite.",
    )
    parser.add_argument(
        "--sqlite-path",
        type=Path,
        default=None,
        help="Optional SQLite file path (ignored if --database-url is provided).",
    )
    parser.add_argument(
        "--reset-schema",
        action="store_true",
        help="Drop the friendship tables before starting (useful for persisted DBs).",
    )
    parser.add_argument(
        "--cache",
        action="store_true",
        help="Enable the per-party friends cache.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress logs; only emit the JSON summary.",
    )
    return parser.parse_args()


def resolve_settings(args: argparse.Namespace) -> Settings:
    env_settings = load_settings()
    if args.database_url:
        return Settings(database_url=args.database_url, cache_enabled=args.cache)
    if args.sqlite_path is not None:
        return Settings(sqlite_path=args.sqlite_path, cache_enabled=args.cache)
    return Settings(
        database_url=env_settings.database_url,
        sqlite_path=env_settings.sqlite_path,
        echo=env_settings.echo,
        cache_enabled=args.cache or env_settings.cache_enabled,
    )


def describe(result: OperationResult) -> dict[str, Any]:
    return {"ok": result.ok, "code": result.code.value if result.code else None}


def snapshot(store: FriendshipStore, parties: list[str]) -> dict[str, Any]:
    return {
        party: {
            "friends": sorted(store.friends(party)),
            "pending_sent": sorted(store.pending_sent(party)),
            "pending_received": sorted(store.pending_received(party)),
            "blocked": sorted(store.blocked(party)),
            "potential_friends": sorted(store.potential_friends(party)),
        }
        for party in parties
    }


def main() -> None:
    args = parse_args()

    logging.basicConfig(
        level=logging.INFO if not args.quiet else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )
    logger = logging.getLogger("demo_friendships")

    settings = resolve_settings(args)
    if args.reset_schema and (settings.database_url or settings.sqlite_path is not None):
        drop_all(engine_from_settings(settings))
    store = build_store(settings)

    parties = ["u1", "u2", "u3"]
    steps: list[dict[str, Any]] = []

    def run(label: str, result: OperationResult) -> None:
        logger.info("%s -> %s", label, "ok" if result else result.code.value)
        steps.append({"step": label, **describe(result)})

    run("invite(u1, u2)", store.invite("u1", "u2"))
    run("approve(u2, u1)", store.approve("u2", "u1"))
    run("invite(u2, u3)", store.invite("u2", "u3"))
    run("approve(u3, u2)", store.approve("u3", "u2"))
    before_block = snapshot(store, parties)

    run("block(u1, u3)", store.block("u1", "u3"))
    run("invite(u1, u3)", store.invite("u1", "u3"))
    run("block(u1, u3)", store.block("u1", "u3"))
    after_block = snapshot(store, parties)

    payload = {
        "steps": steps,
        "before_block": before_block,
        "after_block": after_block,
    }
    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()
