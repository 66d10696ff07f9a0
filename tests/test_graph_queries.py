"""Tests for derived friendship views."""

from __future__ import annotations

from collections import Counter


def test_friends_includes_both_directions(befriend, queries):
    befriend("alice", "bob")
    befriend("carol", "alice")

    assert queries.friends("alice") == {"bob", "carol"}
    assert queries.friends("bob") == {"alice"}
    assert queries.invited("alice") == {"bob"}
    assert queries.invited_by("alice") == {"carol"}
    assert queries.total_friends("alice") == 2


def test_friends_excludes_pending_and_blocked(friendship_engine, befriend, queries):
    befriend("alice", "bob")
    friendship_engine.invite("alice", "carol")
    befriend("dave", "alice")
    friendship_engine.block("dave", "alice")

    assert queries.friends("alice") == {"bob"}
    assert queries.is_friend_with("alice", "bob")
    assert queries.is_friend_with("bob", "alice")
    assert not queries.is_friend_with("alice", "carol")
    assert not queries.is_friend_with("alice", "dave")


def test_pending_lists_split_by_direction(friendship_engine, queries):
    friendship_engine.invite("alice", "bob")
    friendship_engine.invite("carol", "alice")
    friendship_engine.invite("alice", "dave")
    friendship_engine.block("dave", "alice")

    assert queries.pending_sent("alice") == {"bob"}
    assert queries.pending_received("alice") == {"carol"}
    assert queries.pending_received("bob") == {"alice"}


def test_blocked_unions_both_sides(friendship_engine, befriend, queries):
    befriend("alice", "bob")
    befriend("carol", "alice")
    friendship_engine.invite("dave", "alice")
    friendship_engine.block("alice", "bob")
    friendship_engine.block("alice", "carol")
    friendship_engine.block("dave", "alice")

    assert queries.blockades("alice") == {"bob", "carol"}
    assert queries.blockades_by("alice") == {"dave"}
    assert queries.blocked("alice") == {"bob", "carol", "dave"}
    assert queries.blocked("bob") == {"alice"}
    assert queries.is_blocked("alice", "dave")
    assert queries.is_blocked("dave", "alice")
    assert queries.total_blocked("alice") == 3


def test_mutual_friends_is_intersection(befriend, queries):
    befriend("alice", "carol")
    befriend("bob", "carol")
    befriend("alice", "dave")
    befriend("dave", "bob")
    befriend("alice", "erin")

    assert queries.mutual_friends("alice", "bob") == {"carol", "dave"}
    assert queries.common_friends_with("bob", "alice") == {"carol", "dave"}
    assert queries.mutual_friends_count("alice", "bob") == 2


def test_mutual_friends_empty_for_disjoint_sets_and_self(befriend, queries):
    befriend("alice", "bob")
    befriend("carol", "dave")

    assert queries.mutual_friends("alice", "carol") == set()
    assert queries.mutual_friends("alice", "alice") == set()
    assert queries.mutual_friends_count("alice", "alice") == 0


def test_friends_of_friends_keeps_duplicates(befriend, queries):
    befriend("alice", "bob")
    befriend("alice", "carol")
    befriend("bob", "dave")
    befriend("carol", "dave")
    befriend("bob", "carol")

    counts = Counter(queries.friends_of_friends("alice"))

    assert counts == Counter({"alice": 2, "dave": 2, "bob": 1, "carol": 1})


def test_friends_of_friends_empty_without_friends(friendship_engine, queries):
    friendship_engine.invite("alice", "bob")

    assert queries.friends_of_friends("alice") == []
    assert queries.potential_friends("alice") == set()


def test_potential_friends_excludes_friends_blocked_and_self(friendship_engine, befriend, queries):
    befriend("alice", "bob")
    befriend("bob", "carol")
    befriend("bob", "dave")
    befriend("bob", "erin")
    befriend("alice", "erin")
    friendship_engine.invite("alice", "dave")
    friendship_engine.block("dave", "alice")

    assert queries.potential_friends("alice") == {"carol"}


def test_potential_friends_drop_candidate_after_block(friendship_engine, befriend, queries):
    befriend("alice", "bob")
    befriend("bob", "carol")
    assert "carol" in queries.potential_friends("alice")

    friendship_engine.invite("carol", "alice")
    assert friendship_engine.block("alice", "carol")

    assert "carol" not in queries.potential_friends("alice")


def test_cached_friends_refresh_after_invalidate(friendship_engine, befriend, cached_queries):
    befriend("alice", "bob")
    assert cached_queries.friends("alice") == {"bob"}
    assert "alice" in cached_queries.cache

    befriend("alice", "carol")
    assert cached_queries.friends("alice") == {"bob"}

    cached_queries.invalidate("alice")
    assert cached_queries.friends("alice") == {"bob", "carol"}


def test_cached_friends_of_friends_matches_uncached(befriend, queries, cached_queries):
    befriend("alice", "bob")
    befriend("alice", "carol")
    befriend("bob", "dave")
    befriend("carol", "dave")

    assert Counter(cached_queries.friends_of_friends("alice")) == Counter(
        queries.friends_of_friends("alice")
    )
    assert cached_queries.potential_friends("alice") == {"dave"}


def test_invalidate_during_load_does_not_store_stale_friends(befriend, repository, cached_queries, monkeypatch):
    befriend("alice", "bob")
    real_query = repository.query
    interleaved: list[str] = []

    def query_then_write(where=None, **kwargs):
        rows = real_query(where, **kwargs)
        if not interleaved:
            # Another writer commits after the read but before the result is cached.
            interleaved.append("carol")
            befriend("alice", "carol")
            cached_queries.invalidate("alice", "carol")
        return rows

    monkeypatch.setattr(repository, "query", query_then_write)

    assert cached_queries.friends("alice") == {"bob"}
    assert "alice" not in cached_queries.cache
    assert cached_queries.friends("alice") == {"bob", "carol"}
    assert "alice" in cached_queries.cache
