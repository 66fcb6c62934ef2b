"""
Exceptions raised by the abbreviation engine.

The engine never logs: it raises, and the completion capability decides
what the user (and the client log) gets to see.
"""
from __future__ import annotations


class EmmetError(Exception):
    """Base class for all engine errors."""


class ParseError(EmmetError):
    """
    Raised when an abbreviation violates its grammar.

    Attributes:
        offset: Index into the abbreviation where the problem was found
        abbreviation: The abbreviation being parsed
    """

    def __init__(self, message: str, offset: int, abbreviation: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.abbreviation = abbreviation

    def __str__(self) -> str:
        if self.abbreviation:
            return f"{self.message} at {self.offset} in {self.abbreviation!r}"
        return f"{self.message} at {self.offset}"


class ConfigurationError(EmmetError):
    """Raised by option validators when an override value is malformed."""

    def __init__(self, option: str, message: str) -> None:
        super().__init__(f"{option}: {message}")
        self.option = option
