"""Data models for the vote store."""

from datetime import UTC, datetime
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VoteEventType(str, Enum):
    """Event type for vote upsert operations.

    - NEW: First vote by this user on this topic
    - UPDATED: Existing vote whose points changed
    - UNCHANGED: Existing vote with the same points
    """

    NEW = "NEW"
    UPDATED = "UPDATED"
    UNCHANGED = "UNCHANGED"


def normalize_topic(text: str) -> str | None:
    """Trim a raw topic label.

    Args:
        text: Label as typed by a user.

    Returns:
        The trimmed label, or None if nothing is left.
    """
    topic = text.strip()
    return topic or None


class VoteRecord(BaseModel):
    """One user's interest score for one topic."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    user: Annotated[str, Field(min_length=1, description="Voting user")]
    topic: Annotated[str, Field(min_length=1, description="Topic label")]
    points: int = Field(description="Interest points")

    @field_validator("topic")
    @classmethod
    def topic_is_trimmed(cls, v: str) -> str:
        """Reject labels with surrounding whitespace or nothing but whitespace."""
        if normalize_topic(v) != v:
            msg = f"Topic must be a non-empty trimmed label: {v!r}"
            raise ValueError(msg)
        return v


class StoredVote(BaseModel):
    """A vote row as persisted in the store."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    vote_id: Annotated[str, Field(min_length=1, description="Vote identity key")]
    record: VoteRecord
    first_voted_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the user first voted on this topic",
    )
    last_voted_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the vote was last written",
    )


class VoteWriteResult(BaseModel):
    """Result of a vote upsert operation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    event_type: VoteEventType = Field(description="What happened during upsert")
    vote: StoredVote = Field(description="The vote as stored")

    @property
    def vote_id(self) -> str:
        """Identity key the vote was stored under."""
        return self.vote.vote_id


class TopicBucket(BaseModel):
    """One row of the topic aggregation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: Annotated[str, Field(min_length=1)]
    vote_count: Annotated[int, Field(ge=1)]
    total_points: int = 0
