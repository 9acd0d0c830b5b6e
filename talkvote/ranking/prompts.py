"""Line-based prompt channel and answer parsing."""

import re
import sys
from collections.abc import Iterable
from enum import Enum
from typing import Protocol

import click

from talkvote.errors import PromptClosedError


_DECIMAL_INT = re.compile(r"[+-]?[0-9]+")

PICK_PROMPT = "[enter a number] >> "
ANSWER_PROMPT = ">> "


class PromptChannel(Protocol):
    """One interactive request/response stream."""

    def show(self, text: str = "") -> None:
        """Write one line of output."""
        ...

    def ask(self, prompt: str) -> str:
        """Write a prompt and block for one line of input.

        Returns:
            The line without its trailing newline.

        Raises:
            PromptClosedError: If input has ended.
        """
        ...


class ConsoleChannel:
    """Prompt channel on the process's stdin and stdout."""

    def show(self, text: str = "") -> None:
        """Write one line to stdout."""
        click.echo(text)

    def ask(self, prompt: str) -> str:
        """Prompt on stdout and read one line from stdin.

        Bytes that do not decode are replaced with U+FFFD, so a garbled
        reply is read as an unrecognised answer instead of failing.
        """
        click.echo(prompt, nl=False)
        raw = sys.stdin.buffer.readline()
        if not raw:
            click.echo()
            raise PromptClosedError(prompt)
        encoding = sys.stdin.encoding or "utf-8"
        return raw.decode(encoding, errors="replace").rstrip("\r\n")


class ScriptedChannel:
    """Prompt channel replaying canned answers.

    Everything shown or asked is captured in ``transcript``.
    """

    def __init__(self, answers: Iterable[str]) -> None:
        """Initialize the channel.

        Args:
            answers: Lines returned by successive ask() calls.
        """
        self._answers = list(answers)
        self.transcript: list[str] = []
        self.prompts: list[str] = []

    @property
    def unused_answers(self) -> list[str]:
        """Answers not consumed yet."""
        return list(self._answers)

    def show(self, text: str = "") -> None:
        """Record an output line."""
        self.transcript.append(text)

    def ask(self, prompt: str) -> str:
        """Record the prompt and return the next canned answer."""
        self.transcript.append(prompt)
        self.prompts.append(prompt)
        if not self._answers:
            raise PromptClosedError(prompt)
        return self._answers.pop(0)


class Confirmation(str, Enum):
    """How a reply to a ``[Y/n]`` question was read.

    - REJECT: starts with n or N
    - ACCEPT: empty, or starts with y or Y
    - MALFORMED: anything else, still counted as acceptance
    """

    REJECT = "REJECT"
    ACCEPT = "ACCEPT"
    MALFORMED = "MALFORMED"

    @property
    def is_accepted(self) -> bool:
        """Whether the reply confirms the pick."""
        return self is not Confirmation.REJECT


def classify_confirmation(text: str) -> Confirmation:
    """Read a reply to a question whose default answer is yes.

    Only the first character is inspected and leading whitespace is not
    skipped, so " no" is not a rejection.

    Args:
        text: Reply line.

    Returns:
        The classification.
    """
    first = text[:1].lower()
    if first == "n":
        return Confirmation.REJECT
    if first == "y" or not text.strip():
        return Confirmation.ACCEPT
    return Confirmation.MALFORMED


def answered_yes(text: str) -> bool:
    """Whether a reply to a ``[y/N]`` question says yes."""
    return text[:1].lower() == "y"


def parse_pick(text: str) -> int | None:
    """Parse a pick number.

    Args:
        text: Reply line; surrounding whitespace is ignored.

    Returns:
        The decimal integer typed, or None if the reply is not one.
    """
    candidate = text.strip()
    if not _DECIMAL_INT.fullmatch(candidate):
        return None
    return int(candidate)
