"""Interactive preference ranking.

Turns an unordered set of topics into a total order chosen one pick at a
time, and scores each topic by the position it was picked at.
"""

from talkvote.ranking.engine import RankingEngine
from talkvote.ranking.metrics import RankingMetrics
from talkvote.ranking.prompts import (
    Confirmation,
    ConsoleChannel,
    PromptChannel,
    ScriptedChannel,
    answered_yes,
    classify_confirmation,
    parse_pick,
)
from talkvote.ranking.session import (
    Permutation,
    RankingSession,
    identity_permutation,
    random_permutation,
)
from talkvote.ranking.state_machine import (
    RankingState,
    RankingStateError,
    RankingStateMachine,
)


__all__ = [
    "Confirmation",
    "ConsoleChannel",
    "Permutation",
    "PromptChannel",
    "RankingEngine",
    "RankingMetrics",
    "RankingSession",
    "RankingState",
    "RankingStateError",
    "RankingStateMachine",
    "ScriptedChannel",
    "answered_yes",
    "classify_confirmation",
    "identity_permutation",
    "parse_pick",
    "random_permutation",
]
