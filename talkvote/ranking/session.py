"""Working state of one ranking pass and its scoring rules."""

import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass


Permutation = Callable[[Sequence[str]], list[str]]


def random_permutation(rng: random.Random | None = None) -> Permutation:
    """Build a permutation provider drawing uniformly from all orderings.

    Args:
        rng: Random source. A fresh, OS-seeded generator if not given.

    Returns:
        Callable that returns a shuffled copy of its input.
    """
    source = rng or random.Random()

    def permute(topics: Sequence[str]) -> list[str]:
        return source.sample(list(topics), k=len(topics))

    return permute


def identity_permutation(topics: Sequence[str]) -> list[str]:
    """Keep topics in their given order."""
    return list(topics)


@dataclass
class RankingSession:
    """Topics still to rank and the position of the next pick.

    Attributes:
        remaining: Topics not yet ranked, in display order.
        total: Number of topics when the session started.
        rank: 1-based position the next accepted pick will take.
    """

    remaining: list[str]
    total: int
    rank: int = 1

    @classmethod
    def start(
        cls, topics: Sequence[str], permute: Permutation = identity_permutation
    ) -> "RankingSession":
        """Open a session over the given topics.

        Args:
            topics: Distinct topic labels. Not deduplicated here.
            permute: Provider of the initial display order.

        Returns:
            A session at rank 1.

        Raises:
            ValueError: If the permutation is not a reordering of the topics.
        """
        ordered = permute(topics)
        if sorted(ordered) != sorted(topics):
            msg = "Permutation must return the same topics it was given"
            raise ValueError(msg)
        return cls(remaining=ordered, total=len(ordered))

    @property
    def picks(self) -> int:
        """Number of picks accepted so far."""
        return self.rank - 1

    @property
    def is_finished(self) -> bool:
        """Whether too few topics are left to ask about."""
        return len(self.remaining) < 2

    def is_valid_pick(self, number: int) -> bool:
        """Check a 1-based display number against the remaining topics."""
        return 1 <= number <= len(self.remaining)

    def pick_points(self) -> int:
        """Points for the topic accepted at the current rank.

        Rank 1 of N topics gets N points, rank 2 gets N - 1, and so on.
        """
        return self.total - (self.rank - 1)

    def survivor_points(self) -> int:
        """Points for the last topic, assigned without asking.

        One less than pick_points() at the same rank. Existing vote data was
        scored this way, so the gap stays.
        """
        return self.total - self.picks - 1

    def accept(self, index: int) -> str:
        """Remove the topic at a 0-based index and advance the rank.

        The last topic is swapped into the vacated slot, so the order of
        the remaining topics is not preserved.

        Args:
            index: 0-based position in ``remaining``.

        Returns:
            The removed topic.
        """
        topic = self.remaining[index]
        self.remaining[index] = self.remaining[-1]
        self.remaining.pop()
        self.rank += 1
        return topic
