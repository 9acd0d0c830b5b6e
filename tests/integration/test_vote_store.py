"""Integration tests for the SQLite vote store."""

from pathlib import Path

import pytest

from talkvote.ranking.engine import RankingEngine
from talkvote.ranking.prompts import ScriptedChannel
from talkvote.ranking.session import identity_permutation
from talkvote.store.errors import (
    StoreConnectionError,
    TopicQueryError,
    VoteWriteError,
)
from talkvote.store.identity import identity_for
from talkvote.store.metrics import StoreMetrics
from talkvote.store.migrations import CURRENT_VERSION
from talkvote.store.models import VoteEventType
from talkvote.store.store import VoteStore


class TestVoteStoreConnection:
    """Tests for store connection and setup."""

    def test_connect_creates_database(self, temp_db_path: Path) -> None:
        """Test connecting creates the database file."""
        store = VoteStore(temp_db_path)
        assert not temp_db_path.exists()

        store.connect()
        assert temp_db_path.exists()
        store.close()

    def test_connect_creates_parent_dirs(self, temp_db_path: Path) -> None:
        """Test connecting creates parent directories."""
        nested_path = temp_db_path.parent / "nested" / "votes.sqlite"
        with VoteStore(nested_path) as store:
            assert store.is_connected
        assert nested_path.exists()

    def test_context_manager(self, temp_db_path: Path) -> None:
        """Test store works as context manager."""
        with VoteStore(str(temp_db_path)) as store:
            assert store.is_connected
            assert store.get_schema_version() == CURRENT_VERSION

        assert not store.is_connected

    def test_wal_mode_enabled(self, vote_store: VoteStore) -> None:
        """Test WAL mode is enabled."""
        conn = vote_store._ensure_connected()
        mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        assert mode.lower() == "wal"

    def test_unopenable_path(self, temp_db_path: Path) -> None:
        """Test a file in place of the database directory is reported."""
        temp_db_path.write_text("not a directory")

        with pytest.raises(StoreConnectionError):
            VoteStore(temp_db_path / "votes.sqlite").connect()

    def test_operations_require_connection(self, temp_db_path: Path) -> None:
        """Test using a store that was never opened."""
        store = VoteStore(temp_db_path)

        with pytest.raises(StoreConnectionError):
            store.list_topics()
        with pytest.raises(StoreConnectionError):
            store.record_vote("alice", "Rust", 3)

    def test_reopen_keeps_votes(self, temp_db_path: Path) -> None:
        """Test votes survive closing and reopening the database."""
        with VoteStore(temp_db_path) as store:
            store.record_vote("alice", "Rust", 3)

        with VoteStore(temp_db_path) as store:
            assert store.count_votes() == 1
            assert store.get_schema_version() == CURRENT_VERSION


class TestRecordVote:
    """Tests for vote upserts."""

    def test_first_vote_is_new(self, vote_store: VoteStore) -> None:
        """Test the first vote for a pair is inserted."""
        result = vote_store.record_vote("alice", "Rust", 3)

        assert result.event_type == VoteEventType.NEW
        assert result.vote_id == identity_for("Rust", "alice")
        assert result.vote.record.points == 3
        assert vote_store.count_votes() == 1

    def test_revote_overwrites(self, vote_store: VoteStore) -> None:
        """Test a second vote on the same pair replaces the points."""
        first = vote_store.record_vote("alice", "Rust", 3)
        second = vote_store.record_vote("alice", "Rust", 1)

        assert second.event_type == VoteEventType.UPDATED
        assert vote_store.count_votes() == 1

        stored = vote_store.get_vote("Rust", "alice")
        assert stored is not None
        assert stored.record.points == 1
        assert stored.first_voted_at == first.vote.first_voted_at
        assert stored.last_voted_at >= stored.first_voted_at

    def test_same_points_unchanged(self, vote_store: VoteStore) -> None:
        """Test rewriting the same points is reported as unchanged."""
        vote_store.record_vote("alice", "Rust", 3)
        result = vote_store.record_vote("alice", "Rust", 3)

        assert result.event_type == VoteEventType.UNCHANGED
        assert vote_store.count_votes() == 1

    def test_votes_by_different_users(self, vote_store: VoteStore) -> None:
        """Test each user keeps their own vote on a topic."""
        vote_store.record_vote("alice", "Rust", 3)
        vote_store.record_vote("bob", "Rust", 0)

        assert vote_store.count_votes() == 2
        alice = vote_store.get_vote("Rust", "alice")
        bob = vote_store.get_vote("Rust", "bob")
        assert alice is not None and alice.record.points == 3
        assert bob is not None and bob.record.points == 0

    def test_missing_vote(self, vote_store: VoteStore) -> None:
        """Test looking up a pair that never voted."""
        assert vote_store.get_vote("Rust", "alice") is None

    def test_concatenation_collision_shares_row(self, vote_store: VoteStore) -> None:
        """Test pairs with the same topic+user string share one vote row."""
        vote_store.record_vote("c", "ab", 1)
        result = vote_store.record_vote("bc", "a", 2)

        assert result.event_type == VoteEventType.UPDATED
        assert vote_store.count_votes() == 1

    def test_metrics(self, vote_store: VoteStore) -> None:
        """Test upsert outcomes are counted."""
        vote_store.record_vote("alice", "Rust", 3)
        vote_store.record_vote("alice", "Rust", 2)
        vote_store.record_vote("alice", "Rust", 2)

        metrics = StoreMetrics.get_instance()
        assert metrics.votes_new_total == 1
        assert metrics.votes_updated_total == 1
        assert metrics.votes_unchanged_total == 1
        assert metrics.db_tx_count == 3
        assert metrics.avg_tx_duration_ms >= 0.0

    def test_write_failure(self, vote_store: VoteStore) -> None:
        """Test a database error is wrapped and rolled back."""
        vote_store.record_vote("alice", "Rust", 3)
        vote_store._ensure_connected().execute("DROP TABLE votes")

        with pytest.raises(VoteWriteError) as exc_info:
            vote_store.record_vote("alice", "Go", 1)

        assert exc_info.value.topic == "Go"
        assert exc_info.value.vote_id == identity_for("Go", "alice")
        assert StoreMetrics.get_instance().vote_write_failures_total == 1


class TestTopicAggregation:
    """Tests for listing topics."""

    def test_empty_store(self, vote_store: VoteStore) -> None:
        """Test no votes means no topics."""
        assert vote_store.list_topics() == []
        assert vote_store.topic_buckets() == []

    def test_buckets_ordered_by_votes_then_title(self, vote_store: VoteStore) -> None:
        """Test most voted topics come first, ties broken by title."""
        vote_store.record_vote("alice", "Zig", 5)
        vote_store.record_vote("bob", "Zig", 2)
        vote_store.record_vote("alice", "Rust", 1)
        vote_store.record_vote("alice", "Go", 4)

        buckets = vote_store.topic_buckets()

        assert [(b.title, b.vote_count, b.total_points) for b in buckets] == [
            ("Zig", 2, 7),
            ("Go", 1, 4),
            ("Rust", 1, 1),
        ]
        assert vote_store.list_topics() == ["Zig", "Go", "Rust"]

    def test_titles_are_case_sensitive(self, vote_store: VoteStore) -> None:
        """Test topics differing only in case are distinct."""
        vote_store.record_vote("alice", "rust", 1)
        vote_store.record_vote("alice", "Rust", 1)

        assert sorted(vote_store.list_topics()) == ["Rust", "rust"]

    def test_limit(self, vote_store: VoteStore) -> None:
        """Test the number of topics listed is capped."""
        for i in range(60):
            vote_store.record_vote("alice", f"topic-{i:02d}", 1)

        assert len(vote_store.list_topics()) == 50
        assert vote_store.list_topics(limit=3) == ["topic-00", "topic-01", "topic-02"]

    def test_query_failure(self, vote_store: VoteStore) -> None:
        """Test a failed aggregation is wrapped."""
        vote_store._ensure_connected().execute("DROP TABLE votes")

        with pytest.raises(TopicQueryError):
            vote_store.topic_buckets()


class TestRankingAgainstStore:
    """Tests for a full ranking session persisting to SQLite."""

    def test_session_persists_one_vote_per_topic(self, vote_store: VoteStore) -> None:
        """Test ranking stored topics writes a score for each of them."""
        for topic in ("A", "B", "C"):
            vote_store.record_vote("suggester", topic, 5)

        channel = ScriptedChannel(["2", "", "1", "y"])
        engine = RankingEngine(
            vote_store, channel, "alice", permute=identity_permutation
        )
        engine.rank(vote_store.list_topics())

        points = {
            topic: vote_store.get_vote(topic, "alice").record.points
            for topic in ("A", "B", "C")
        }
        assert points == {"B": 3, "A": 2, "C": 0}
        assert vote_store.count_votes() == 6

    def test_reranking_overwrites(self, vote_store: VoteStore) -> None:
        """Test a second session replaces the first session's scores."""
        topics = ["A", "B"]
        RankingEngine(
            vote_store,
            ScriptedChannel(["1", ""]),
            "alice",
            permute=identity_permutation,
        ).rank(topics)
        RankingEngine(
            vote_store,
            ScriptedChannel(["2", ""]),
            "alice",
            permute=identity_permutation,
        ).rank(topics)

        assert vote_store.count_votes() == 2
        assert vote_store.get_vote("B", "alice").record.points == 2
        assert vote_store.get_vote("A", "alice").record.points == 0
