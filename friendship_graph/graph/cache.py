"""Per-party cache of approved friend sets."""

from __future__ import annotations

import threading
from collections import defaultdict
from typing import Callable, Iterable


class FriendsCache:
    """Thread-safe map of party id to its friend set.

    Callers must invalidate both parties of a friendship after every write
    touching it. Each invalidation bumps the party's generation; a load that
    started before the bump is returned to its caller but never stored.
    """

    def __init__(self) -> None:
        self._entries: dict[str, frozenset[str]] = {}
        self._generations: defaultdict[str, int] = defaultdict(int)
        self._epoch = 0
        self._lock = threading.Lock()

    def get_or_load(self, party: str, loader: Callable[[str], Iterable[str]]) -> frozenset[str]:
        with self._lock:
            cached = self._entries.get(party)
            if cached is not None:
                return cached
            stamp = (self._epoch, self._generations[party])

        loaded = frozenset(loader(party))
        with self._lock:
            if (self._epoch, self._generations[party]) == stamp:
                self._entries.setdefault(party, loaded)
        return loaded

    def invalidate(self, *parties: str) -> None:
        with self._lock:
            for party in parties:
                self._generations[party] += 1
                self._entries.pop(party, None)

    def clear(self) -> None:
        with self._lock:
            self._epoch += 1
            self._entries.clear()

    def __contains__(self, party: object) -> bool:
        with self._lock:
            return party in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
