"""State machine for an interactive ranking session."""

from enum import Enum
from typing import ClassVar

import structlog

from talkvote.config.constants import COMPONENT_RANKING
from talkvote.errors import TalkvoteError


logger = structlog.get_logger()


class RankingState(str, Enum):
    """State of a ranking session.

    State transitions:
        IDLE -> AWAITING_PICK: At least two topics, start prompting
        IDLE -> TERMINAL: A single topic, auto-assigned without prompting
        AWAITING_PICK -> AWAITING_CONFIRM: A valid number was entered
        AWAITING_CONFIRM -> AWAITING_PICK: Pick rejected, or accepted with
            two or more topics left
        AWAITING_CONFIRM -> TERMINAL: Pick accepted and the survivor assigned
    """

    IDLE = "IDLE"
    AWAITING_PICK = "AWAITING_PICK"
    AWAITING_CONFIRM = "AWAITING_CONFIRM"
    TERMINAL = "TERMINAL"


class RankingStateError(TalkvoteError):
    """Raised when an illegal ranking state transition is attempted."""

    def __init__(
        self,
        session_id: str,
        from_state: RankingState,
        to_state: RankingState,
    ) -> None:
        """Initialize the transition error.

        Args:
            session_id: Identifier of the session.
            from_state: Current state.
            to_state: Attempted target state.
        """
        self.session_id = session_id
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal ranking state transition for session '{session_id}': "
            f"{from_state.value} -> {to_state.value}"
        )


class RankingStateMachine:
    """Manages state transitions for one ranking session.

    Enforces valid transitions and logs all state changes.
    """

    VALID_TRANSITIONS: ClassVar[dict[RankingState, set[RankingState]]] = {
        RankingState.IDLE: {RankingState.AWAITING_PICK, RankingState.TERMINAL},
        RankingState.AWAITING_PICK: {RankingState.AWAITING_CONFIRM},
        RankingState.AWAITING_CONFIRM: {
            RankingState.AWAITING_PICK,
            RankingState.TERMINAL,
        },
        RankingState.TERMINAL: set(),  # Terminal state
    }

    def __init__(self, session_id: str) -> None:
        """Initialize the state machine in IDLE state.

        Args:
            session_id: Identifier for the current session.
        """
        self._session_id = session_id
        self._state = RankingState.IDLE
        self._log = logger.bind(component=COMPONENT_RANKING, session_id=session_id)

    @property
    def session_id(self) -> str:
        """Get the session identifier."""
        return self._session_id

    @property
    def state(self) -> RankingState:
        """Get the current state."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self._state == RankingState.TERMINAL

    def can_transition(self, to_state: RankingState) -> bool:
        """Check if a transition to the given state is valid.

        Args:
            to_state: The target state.

        Returns:
            True if the transition is valid, False otherwise.
        """
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: RankingState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            RankingStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            self._log.error(
                "illegal_ranking_state_transition",
                from_state=self._state.value,
                to_state=to_state.value,
            )
            raise RankingStateError(self._session_id, self._state, to_state)

        old_state = self._state
        self._state = to_state
        self._log.debug(
            "ranking_state_transition",
            from_state=old_state.value,
            to_state=to_state.value,
        )

    def to_awaiting_pick(self) -> None:
        """Transition to AWAITING_PICK state."""
        self.transition(RankingState.AWAITING_PICK)

    def to_awaiting_confirm(self) -> None:
        """Transition to AWAITING_CONFIRM state."""
        self.transition(RankingState.AWAITING_CONFIRM)

    def to_terminal(self) -> None:
        """Transition to TERMINAL state."""
        self.transition(RankingState.TERMINAL)
