"""Topic suggestion flow.

A suggested topic has no record of its own: it exists once someone has
voted on it, so storing a suggestion means storing the suggester's vote.
"""

import uuid
from collections.abc import Sequence

import structlog

from talkvote.config.constants import COMPONENT_SUGGESTIONS, SUGGESTION_POINTS
from talkvote.ranking.prompts import ANSWER_PROMPT, PromptChannel, answered_yes
from talkvote.store.models import normalize_topic
from talkvote.store.protocol import TopicStore


logger = structlog.get_logger()


def show_existing_topics(channel: PromptChannel, topics: Sequence[str]) -> None:
    """List topics already in the store, followed by a blank line."""
    if topics:
        channel.show("Existing suggestions:")
        for number, topic in enumerate(topics, start=1):
            channel.show(f"#{number:02d} {topic}")
    else:
        channel.show("No topics available")
    channel.show()


class SuggestionFlow:
    """Asks for new topics until the user has none left."""

    def __init__(
        self,
        store: TopicStore,
        channel: PromptChannel,
        user: str,
        points: int = SUGGESTION_POINTS,
        session_id: str | None = None,
    ) -> None:
        """Initialize the flow.

        Args:
            store: Where suggestions are written.
            channel: Interactive input and output.
            user: Suggesting user.
            points: Points the suggester gives their own topic.
            session_id: Identifier for logging.
        """
        self._store = store
        self._channel = channel
        self._user = user
        self._points = points
        self._log = logger.bind(
            component=COMPONENT_SUGGESTIONS,
            session_id=session_id or str(uuid.uuid4()),
            user=user,
        )

    def run(self) -> list[str]:
        """Run the suggestion loop.

        Returns:
            Topics stored during this run, in the order they were confirmed.

        Raises:
            VoteStoreError: If a suggestion cannot be written.
            PromptClosedError: If input ends mid-question.
        """
        created: list[str] = []

        while True:
            self._channel.show("Do you have another topic in mind [y/N]?")
            if not answered_yes(self._channel.ask(ANSWER_PROMPT)):
                break

            self._channel.show("Ok, type it now:")
            topic = normalize_topic(self._channel.ask(ANSWER_PROMPT))
            if topic is None:
                continue

            self._channel.show(f"New topic: {topic}")
            self._channel.show("Looks good [y/N]?")
            if not answered_yes(self._channel.ask(ANSWER_PROMPT)):
                self._log.debug("suggestion_discarded", topic=topic)
                self._channel.show(
                    "Poof! Erased. We will pretend that you have never suggested it :)"
                )
                continue

            self._channel.show("Ok, I will create it")
            self._store.record_vote(self._user, topic, self._points)
            created.append(topic)
            self._log.info("suggestion_created", topic=topic, points=self._points)

        return created
