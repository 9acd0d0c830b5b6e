"""Interactive ranking engine.

Drives a user through forced-choice picks over a set of topics and writes
one vote per topic as soon as its score is known.
"""

import uuid
from collections.abc import Sequence

import structlog

from talkvote.config.constants import COMPONENT_RANKING
from talkvote.ranking.metrics import RankingMetrics
from talkvote.ranking.prompts import (
    ANSWER_PROMPT,
    PICK_PROMPT,
    Confirmation,
    PromptChannel,
    classify_confirmation,
    parse_pick,
)
from talkvote.ranking.session import Permutation, RankingSession, random_permutation
from talkvote.ranking.state_machine import RankingState, RankingStateMachine
from talkvote.store.models import VoteRecord
from talkvote.store.protocol import TopicStore


logger = structlog.get_logger()


class RankingEngine:
    """Converts an unordered set of topics into scored votes.

    Implements a state machine flow:
        IDLE -> AWAITING_PICK <-> AWAITING_CONFIRM -> TERMINAL

    The topic picked first gets as many points as there were topics, each
    later pick one point less. Once a single topic is left it is scored
    without asking. Each score is written to the store before the next
    question; a store error ends the session and earlier votes stay written.
    """

    def __init__(
        self,
        store: TopicStore,
        channel: PromptChannel,
        user: str,
        permute: Permutation | None = None,
        metrics: RankingMetrics | None = None,
        session_id: str | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Where votes are written.
            channel: Interactive input and output.
            user: Voting user, attached to every vote.
            permute: Provider of the initial display order (random by default).
            metrics: Optional metrics instance.
            session_id: Identifier for logging.
        """
        self._store = store
        self._channel = channel
        self._user = user
        self._permute = permute or random_permutation()
        self._metrics = metrics or RankingMetrics.get_instance()
        self._session_id = session_id or str(uuid.uuid4())
        self._state_machine = RankingStateMachine(self._session_id)
        self._log = logger.bind(
            component=COMPONENT_RANKING,
            session_id=self._session_id,
            user=user,
        )

    @property
    def state(self) -> RankingState:
        """Get current engine state."""
        return self._state_machine.state

    def rank(self, topics: Sequence[str]) -> list[VoteRecord]:
        """Run one interactive ranking pass.

        Args:
            topics: Distinct topic labels, already deduplicated.

        Returns:
            The votes written, most interesting first.

        Raises:
            VoteStoreError: If a vote cannot be written.
            PromptClosedError: If input ends before the ranking is complete.
        """
        if not topics:
            self._log.info("ranking_skipped_no_topics")
            self._channel.show("No topics available")
            return []

        session = RankingSession.start(topics, self._permute)
        self._state_machine = RankingStateMachine(self._session_id)
        self._metrics.record_session_started()
        self._log.info("ranking_started", total=session.total)

        votes: list[VoteRecord] = []

        if session.is_finished:
            self._assign_survivor(session, votes)
            self._finish(session, votes)
            return votes

        self._channel.show("Starting to rank topics (to your liking, of course)")
        self._state_machine.to_awaiting_pick()

        while True:
            index = self._await_pick(session)
            self._state_machine.to_awaiting_confirm()

            candidate = session.remaining[index]
            self._channel.show()
            reply = self._channel.ask(
                f"Your #{session.rank} pick is: {candidate}, [Y/n]\n{ANSWER_PROMPT}"
            )
            confirmation = classify_confirmation(reply)

            if not confirmation.is_accepted:
                self._metrics.record_pick_rejected()
                self._log.debug("ranking_pick_rejected", rank=session.rank)
                self._channel.show("Ok, lets choose another one")
                self._state_machine.to_awaiting_pick()
                continue

            self._metrics.record_pick_accepted(
                malformed=confirmation == Confirmation.MALFORMED
            )
            self._emit(candidate, session.pick_points(), votes)
            session.accept(index)

            if session.is_finished:
                self._assign_survivor(session, votes)
                self._channel.show(
                    "Thanks for ranking all of the topics. The results are in!"
                )
                self._finish(session, votes)
                return votes

            self._state_machine.to_awaiting_pick()

    def _await_pick(self, session: RankingSession) -> int:
        """Show the remaining topics until a listed number is entered.

        Returns:
            0-based index into ``session.remaining``.
        """
        while True:
            self._channel.show(f"Lets determine your #{session.rank} pick:")
            for number, topic in enumerate(session.remaining, start=1):
                self._channel.show(f"#{number:02d} {topic}")

            reply = self._channel.ask(PICK_PROMPT)
            number = parse_pick(reply)
            if number is not None and session.is_valid_pick(number):
                return number - 1

            self._metrics.record_invalid_pick()
            self._log.debug("ranking_invalid_pick", reply=reply, rank=session.rank)
            self._channel.show("There is no item with that number!")
            self._channel.show("Lets try again")

    def _assign_survivor(
        self, session: RankingSession, votes: list[VoteRecord]
    ) -> None:
        """Score the last topic without asking."""
        if not session.remaining:
            return
        survivor = session.remaining[0]
        self._metrics.record_auto_assigned()
        self._emit(survivor, session.survivor_points(), votes)

    def _emit(self, topic: str, points: int, votes: list[VoteRecord]) -> None:
        """Write one vote and remember it."""
        vote = VoteRecord(user=self._user, topic=topic, points=points)
        self._store.record_vote(self._user, topic, points)
        votes.append(vote)
        self._log.info(
            "ranking_vote_emitted",
            topic=topic,
            points=points,
            position=len(votes),
        )

    def _finish(self, session: RankingSession, votes: list[VoteRecord]) -> None:
        self._state_machine.to_terminal()
        self._metrics.record_session_completed()
        self._log.info(
            "ranking_completed",
            total=session.total,
            votes=len(votes),
        )
