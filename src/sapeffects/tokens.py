"""Token values produced by the scanner."""

from dataclasses import dataclass
from typing import Any, Optional

from sapeffects.vocabulary import PunctuationType, TokenType


@dataclass(frozen=True)
class ScanState:
    """Scanner position of a lexeme.

    Attributes:
        start: Start character index of the lexeme.
        current: Index one past the last character of the lexeme.
        line: Line the lexeme starts on (1-based).
    """
    start: int = 0
    current: int = 0
    line: int = 1

    def __str__(self) -> str:
        return f"Line {self.line} ({self.start}-{self.current})"


@dataclass(frozen=True)
class Token:
    """A single tagged slice of effect text.

    `value` holds the category payload: an enum member for keyword tokens,
    an int for NUMBER, a float for PERCENT, an (attack, health) tuple for
    STATS and a NameType for IDENTIFIER.
    """
    ttype: TokenType
    text: str
    metadata: ScanState
    value: Any = None

    def __str__(self) -> str:
        return f"{self.metadata} ({self.ttype.name}:{_value_name(self.value)}) ({self.text})"

    def is_a(self, ttype: TokenType, value: Optional[Any] = None) -> bool:
        """Check category and, optionally, payload."""
        if self.ttype != ttype:
            return False
        return value is None or self.value == value

    @property
    def is_period(self) -> bool:
        return self.is_a(TokenType.PUNCTUATION, PunctuationType.PERIOD)


def _value_name(value: Any) -> str:
    return getattr(value, "name", repr(value))
