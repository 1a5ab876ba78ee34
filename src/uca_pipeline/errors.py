"""Error types raised by the collation pipeline."""

from __future__ import annotations


class CollationError(Exception):
    """Base class for errors surfaced by the collation pipeline."""


class InvalidCodePointError(CollationError, ValueError):
    """Input contains an entry that is not a Unicode scalar value.

    Attributes:
        index: Position of the first offending entry in the input sequence.
        value: The offending integer value.
    """

    def __init__(self, index: int, value: int, message: str | None = None) -> None:
        self.index = index
        self.value = value
        super().__init__(message or f"Invalid code point at index {index}: {value:#x}")


class ConfigurationError(CollationError, ValueError):
    """Weighting policy or strength cannot be used to build a collator."""


class TableUnavailableError(CollationError, RuntimeError):
    """The table loader failed to produce a collation element table."""
