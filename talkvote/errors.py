"""Top-level exception hierarchy.

Store, ranking, and prompt errors all derive from TalkvoteError so the CLI
can report any of them the same way.
"""


class TalkvoteError(Exception):
    """Base exception for all talkvote errors."""


class UserDetectionError(TalkvoteError):
    """Raised when the voting user cannot be determined."""

    def __init__(self, reason: str) -> None:
        """Initialize the error.

        Args:
            reason: Why the OS lookup failed.
        """
        self.reason = reason
        super().__init__("Sorry, cannot detect your username. Bye!")


class PromptClosedError(TalkvoteError):
    """Raised when the interactive input stream reaches end of file."""

    def __init__(self, prompt: str) -> None:
        """Initialize the error.

        Args:
            prompt: The prompt that was waiting for input.
        """
        self.prompt = prompt
        super().__init__(f"Input closed while waiting for: {prompt.strip()}")


class SettingsError(TalkvoteError):
    """Raised when environment configuration fails validation."""
