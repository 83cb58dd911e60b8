"""Exceptions raised by coldguard."""

from typing import Optional


class ColdGuardError(Exception):
    """Base class for coldguard errors."""
    pass


class ComposeUrlError(ColdGuardError, ValueError):
    """Raised when a compose URL cannot be built safely."""

    def __init__(
        self,
        message: str,
        length: Optional[int] = None,
        max_length: Optional[int] = None,
    ):
        self.length = length
        self.max_length = max_length
        super().__init__(message)


class GenerationError(ColdGuardError):
    """Raised inside the generator when the LLM path fails.

    ``EmailGenerator.generate`` catches it and falls back to the template draft.
    """
    pass
