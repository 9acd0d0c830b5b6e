"""Vote identifiers for deduplicating votes per (user, topic).

The identifier is derived from the topic and the user only, so a user voting
again on the same topic overwrites the earlier score instead of adding a
second row.
"""

import hashlib

from talkvote.config.constants import VOTE_ID_BYTES


def identity_for(topic: str, user: str) -> str:
    """Compute the storage key for a user's vote on a topic.

    The digest covers ``topic + user`` with no separator, so ("ab", "c") and
    ("a", "bc") share a key. Keys keep only the first 5 bytes (40 bits) of
    SHA-256, which is fine for one team's handful of topics but will start
    colliding somewhere around a million distinct pairs.

    Args:
        topic: Topic label.
        user: Voting user.

    Returns:
        10 lowercase hex characters.

    Examples:
        >>> len(identity_for("Type hints", "alice"))
        10
    """
    digest = hashlib.sha256((topic + user).encode("utf-8")).digest()
    return digest[:VOTE_ID_BYTES].hex()
