"""Shared fixtures for talkvote tests."""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from talkvote.ranking.metrics import RankingMetrics
from talkvote.store.errors import VoteWriteError
from talkvote.store.identity import identity_for
from talkvote.store.metrics import StoreMetrics
from talkvote.store.models import (
    StoredVote,
    VoteEventType,
    VoteRecord,
    VoteWriteResult,
)
from talkvote.store.store import VoteStore


class RecordingStore:
    """In-memory topic store that remembers every write in order."""

    def __init__(self, topics: list[str] | None = None) -> None:
        self.topics = list(topics or [])
        self.writes: list[tuple[str, str, int]] = []
        self.votes: dict[str, VoteRecord] = {}

    def list_topics(self) -> list[str]:
        return list(self.topics)

    def record_vote(self, user: str, topic: str, points: int) -> VoteWriteResult:
        vote_id = identity_for(topic, user)
        previous = self.votes.get(vote_id)
        record = VoteRecord(user=user, topic=topic, points=points)
        self.votes[vote_id] = record
        self.writes.append((user, topic, points))
        if previous is None:
            event_type = VoteEventType.NEW
        elif previous.points == points:
            event_type = VoteEventType.UNCHANGED
        else:
            event_type = VoteEventType.UPDATED
        return VoteWriteResult(
            event_type=event_type,
            vote=StoredVote(vote_id=vote_id, record=record),
        )


class FailingStore(RecordingStore):
    """Store whose writes start failing after a number of successes."""

    def __init__(self, topics: list[str] | None = None, fail_after: int = 0) -> None:
        super().__init__(topics)
        self.fail_after = fail_after

    def record_vote(self, user: str, topic: str, points: int) -> VoteWriteResult:
        if len(self.writes) >= self.fail_after:
            raise VoteWriteError(identity_for(topic, user), topic, "disk I/O error")
        return super().record_vote(user, topic, points)


@pytest.fixture(autouse=True)
def reset_global_state() -> Generator[None]:
    """Reset metric singletons and logging configuration around each test."""
    StoreMetrics.reset()
    RankingMetrics.reset()
    yield
    StoreMetrics.reset()
    RankingMetrics.reset()
    structlog.reset_defaults()


@pytest.fixture
def temp_db_path() -> Generator[Path]:
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "votes.sqlite"


@pytest.fixture
def vote_store(temp_db_path: Path) -> Generator[VoteStore]:
    """Create a connected vote store."""
    store = VoteStore(temp_db_path, session_id="test-session-001")
    store.connect()
    yield store
    store.close()


@pytest.fixture
def recording_store() -> RecordingStore:
    """Create an empty in-memory store."""
    return RecordingStore()


@pytest.fixture
def failing_store() -> FailingStore:
    """Create a store that fails on its second write."""
    return FailingStore(fail_after=1)
