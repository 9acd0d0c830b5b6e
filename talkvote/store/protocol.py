"""Interface the ranking core needs from a topic store."""

from typing import Protocol

from talkvote.store.models import VoteWriteResult


class TopicStore(Protocol):
    """Protocol for listing topics and persisting votes.

    VoteStore is the SQLite implementation; tests substitute in-memory
    or failing stores.
    """

    def list_topics(self) -> list[str]:
        """Return distinct topic labels. May be empty."""
        ...

    def record_vote(self, user: str, topic: str, points: int) -> VoteWriteResult:
        """Upsert the user's vote on a topic.

        Raises:
            VoteStoreError: If the vote cannot be persisted.
        """
        ...
