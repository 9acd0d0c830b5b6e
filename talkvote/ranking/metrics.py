"""Metrics collection for ranking sessions."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class RankingMetrics:
    """Metrics for ranking sessions.

    Attributes:
        sessions_started: Sessions opened with at least one topic.
        sessions_completed: Sessions that reached the terminal state.
        picks_accepted: Picks confirmed by the user.
        picks_rejected: Picks the user backed out of.
        invalid_picks: Pick replies that were not a listed number.
        malformed_confirmations: Confirmation replies read as yes by default.
        auto_assigned: Topics scored without asking.
    """

    sessions_started: int = 0
    sessions_completed: int = 0
    picks_accepted: int = 0
    picks_rejected: int = 0
    invalid_picks: int = 0
    malformed_confirmations: int = 0
    auto_assigned: int = 0

    _instance: ClassVar["RankingMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "RankingMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_session_started(self) -> None:
        """Record a session opened with at least one topic."""
        self.sessions_started += 1

    def record_session_completed(self) -> None:
        """Record a session that reached the terminal state."""
        self.sessions_completed += 1

    def record_pick_accepted(self, malformed: bool = False) -> None:
        """Record a confirmed pick.

        Args:
            malformed: Whether the confirmation reply was unrecognised.
        """
        self.picks_accepted += 1
        if malformed:
            self.malformed_confirmations += 1

    def record_pick_rejected(self) -> None:
        """Record a pick the user backed out of."""
        self.picks_rejected += 1

    def record_invalid_pick(self) -> None:
        """Record a pick reply that was not a listed number."""
        self.invalid_picks += 1

    def record_auto_assigned(self) -> None:
        """Record a topic scored without asking."""
        self.auto_assigned += 1

    def to_dict(self) -> dict[str, int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "sessions_started": self.sessions_started,
            "sessions_completed": self.sessions_completed,
            "picks_accepted": self.picks_accepted,
            "picks_rejected": self.picks_rejected,
            "invalid_picks": self.invalid_picks,
            "malformed_confirmations": self.malformed_confirmations,
            "auto_assigned": self.auto_assigned,
        }
