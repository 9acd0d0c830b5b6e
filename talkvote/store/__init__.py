"""SQLite vote store.

This module provides persistent storage for:
- Votes keyed by a (topic, user) identity, upserted so re-votes overwrite
- A terms-style aggregation listing the distinct topics
"""

from talkvote.store.errors import (
    MigrationError,
    StoreConnectionError,
    TopicQueryError,
    VoteStoreError,
    VoteWriteError,
)
from talkvote.store.identity import identity_for
from talkvote.store.metrics import StoreMetrics
from talkvote.store.models import (
    StoredVote,
    TopicBucket,
    VoteEventType,
    VoteRecord,
    VoteWriteResult,
    normalize_topic,
)
from talkvote.store.protocol import TopicStore
from talkvote.store.store import VoteStore


__all__ = [
    # Errors
    "MigrationError",
    "StoreConnectionError",
    "TopicQueryError",
    "VoteStoreError",
    "VoteWriteError",
    # Identity
    "identity_for",
    # Metrics
    "StoreMetrics",
    # Models
    "StoredVote",
    "TopicBucket",
    "VoteEventType",
    "VoteRecord",
    "VoteWriteResult",
    "normalize_topic",
    # Store
    "TopicStore",
    "VoteStore",
]
