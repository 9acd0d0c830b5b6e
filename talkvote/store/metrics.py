"""Metrics collection for the vote store."""

from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class StoreMetrics:
    """Metrics for vote store operations.

    Attributes:
        votes_new_total: Votes written for a (user, topic) pair seen first time.
        votes_updated_total: Votes that overwrote a different score.
        votes_unchanged_total: Votes that rewrote the same score.
        vote_write_failures_total: Vote writes that raised.
        db_tx_duration_ms: Cumulative transaction duration in milliseconds.
        db_tx_count: Number of committed transactions.
    """

    votes_new_total: int = 0
    votes_updated_total: int = 0
    votes_unchanged_total: int = 0
    vote_write_failures_total: int = 0
    db_tx_duration_ms: float = 0.0
    db_tx_count: int = 0

    _instance: ClassVar["StoreMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "StoreMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_new(self) -> None:
        """Record a first-time vote."""
        self.votes_new_total += 1

    def record_update(self) -> None:
        """Record an overwritten vote."""
        self.votes_updated_total += 1

    def record_unchanged(self) -> None:
        """Record a vote rewritten with the same points."""
        self.votes_unchanged_total += 1

    def record_write_failure(self) -> None:
        """Record a failed vote write."""
        self.vote_write_failures_total += 1

    def record_tx_duration(self, duration_ms: float) -> None:
        """Record transaction duration.

        Args:
            duration_ms: Duration in milliseconds.
        """
        self.db_tx_duration_ms += duration_ms
        self.db_tx_count += 1

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "votes_new_total": self.votes_new_total,
            "votes_updated_total": self.votes_updated_total,
            "votes_unchanged_total": self.votes_unchanged_total,
            "vote_write_failures_total": self.vote_write_failures_total,
            "db_tx_duration_ms": self.db_tx_duration_ms,
            "db_tx_count": self.db_tx_count,
        }

    @property
    def avg_tx_duration_ms(self) -> float:
        """Calculate average transaction duration.

        Returns:
            Average duration in milliseconds.
        """
        if self.db_tx_count == 0:
            return 0.0
        return self.db_tx_duration_ms / self.db_tx_count


@dataclass
class TransactionContext:
    """Context for a single transaction with timing.

    Attributes:
        tx_id: Unique transaction identifier.
        start_time_ns: Start time in nanoseconds.
        operation: The operation being performed.
    """

    tx_id: str
    start_time_ns: int
    operation: str
    affected_rows: int = field(default=0)

    def add_affected_rows(self, rows: int) -> None:
        """Add to the affected row count.

        Args:
            rows: Number of rows affected.
        """
        self.affected_rows += rows
