"""Domain exceptions for the vote store.

This module defines a hierarchy of exceptions for the storage layer. Any of
them raised while a ranking session is writing votes ends that session.
"""

from talkvote.errors import TalkvoteError


class VoteStoreError(TalkvoteError):
    """Base exception for all vote store errors."""


class StoreConnectionError(VoteStoreError):
    """Raised when the database connection fails or is not established."""

    def __init__(self, message: str = "Database not connected") -> None:
        """Initialize the connection error.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)


class TopicQueryError(VoteStoreError):
    """Raised when the list of existing topics cannot be read."""

    def __init__(self, message: str) -> None:
        """Initialize the error.

        Args:
            message: Underlying database error message.
        """
        super().__init__(f"Unable to get list of existing topics: {message}")


class VoteWriteError(VoteStoreError):
    """Raised when a vote cannot be persisted."""

    def __init__(self, vote_id: str, topic: str, message: str) -> None:
        """Initialize the error.

        Args:
            vote_id: Identifier of the vote being written.
            topic: Topic the vote was for.
            message: Underlying database error message.
        """
        self.vote_id = vote_id
        self.topic = topic
        super().__init__(f"Was unable to record vote for '{topic}': {message}")


class MigrationError(VoteStoreError):
    """Raised when a schema migration fails."""

    def __init__(self, version: int, message: str) -> None:
        """Initialize the migration error.

        Args:
            version: The migration version that failed.
            message: Human-readable error message.
        """
        self.version = version
        super().__init__(f"Migration {version} failed: {message}")
