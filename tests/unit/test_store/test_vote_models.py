"""Unit tests for vote store models."""

import pytest
from pydantic import ValidationError

from talkvote.store.models import (
    StoredVote,
    TopicBucket,
    VoteEventType,
    VoteRecord,
    VoteWriteResult,
    normalize_topic,
)


class TestNormalizeTopic:
    """Tests for normalize_topic function."""

    @pytest.mark.unit
    def test_trims_whitespace(self) -> None:
        """Test surrounding whitespace and newline are removed."""
        assert normalize_topic("  Testing in prod \n") == "Testing in prod"

    @pytest.mark.unit
    def test_blank_is_none(self) -> None:
        """Test whitespace-only input is not a topic."""
        assert normalize_topic("   \t\n") is None
        assert normalize_topic("") is None

    @pytest.mark.unit
    def test_preserves_case(self) -> None:
        """Test case is kept as typed."""
        assert normalize_topic("GraphQL") == "GraphQL"


class TestVoteRecord:
    """Tests for VoteRecord model."""

    @pytest.mark.unit
    def test_valid_record(self) -> None:
        """Test a well-formed record."""
        record = VoteRecord(user="alice", topic="Rust for Pythonistas", points=3)
        assert record.points == 3

    @pytest.mark.unit
    def test_points_may_be_zero(self) -> None:
        """Test the last auto-assigned topic can score zero."""
        assert VoteRecord(user="alice", topic="C", points=0).points == 0

    @pytest.mark.unit
    def test_rejects_untrimmed_topic(self) -> None:
        """Test a label with surrounding whitespace is rejected."""
        with pytest.raises(ValidationError):
            VoteRecord(user="alice", topic=" padded ", points=1)

    @pytest.mark.unit
    def test_rejects_empty_user(self) -> None:
        """Test an empty user is rejected."""
        with pytest.raises(ValidationError):
            VoteRecord(user="", topic="Topic", points=1)

    @pytest.mark.unit
    def test_frozen(self) -> None:
        """Test records are immutable."""
        record = VoteRecord(user="alice", topic="Topic", points=1)
        with pytest.raises(ValidationError):
            record.points = 2  # type: ignore[misc]


class TestVoteWriteResult:
    """Tests for VoteWriteResult model."""

    @pytest.mark.unit
    def test_vote_id_property(self) -> None:
        """Test the result exposes the stored vote id."""
        result = VoteWriteResult(
            event_type=VoteEventType.NEW,
            vote=StoredVote(
                vote_id="0123456789",
                record=VoteRecord(user="alice", topic="Topic", points=5),
            ),
        )
        assert result.vote_id == "0123456789"


class TestTopicBucket:
    """Tests for TopicBucket model."""

    @pytest.mark.unit
    def test_requires_at_least_one_vote(self) -> None:
        """Test a bucket cannot be empty."""
        with pytest.raises(ValidationError):
            TopicBucket(title="Topic", vote_count=0)
