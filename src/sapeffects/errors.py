"""Scanner and parser failures.

Both stages raise instead of returning partial results. Every error keeps
the offending character or token so callers can report a line and offset.
"""

from typing import Optional

from sapeffects.tokens import Token


class SapEffectsError(ValueError):
    """Base class for all sapeffects failures."""


# =============================================================================
# LEXICAL ERRORS
# =============================================================================

class LexError(SapEffectsError):
    """Text could not be tokenized."""

    def __init__(self, message: str, line: int, offset: int):
        super().__init__(f"Line {line}, offset {offset}: {message}")
        self.line = line
        self.offset = offset


class UnexpectedCharacter(LexError):
    """A character matched no scanner rule."""

    def __init__(self, char: str, line: int, offset: int):
        super().__init__(f"Invalid character ({char!r})", line, offset)
        self.char = char


class UnterminatedName(LexError):
    """A capitalized name ran into end-of-input on a dangling joiner."""

    def __init__(self, start_line: int, offset: int, name: str = ""):
        super().__init__(f"Unterminated item name {name!r}", start_line, offset)
        self.start_line = start_line
        self.name = name


# =============================================================================
# GRAMMAR ERRORS
# =============================================================================

class ParseError(SapEffectsError):
    """Tokens did not fit the trigger or effect grammar."""

    def __init__(self, message: str, token: Optional[Token] = None):
        if token is not None:
            message = f"{token.metadata}: {message} ({token.text!r})"
        super().__init__(message)
        self.token = token


class EmptyTrigger(ParseError):
    """A trigger clause had neither an entity nor a logic keyword."""


class UnexpectedToken(ParseError):
    """A token appeared where the grammar does not permit it."""


class MissingAction(ParseError):
    """An effect body did not open with `If` or an action verb."""


class DanglingCondition(ParseError):
    """An `If` clause was not followed by an action."""


class UnresolvedEntity(ParseError):
    """A position or entity qualifier could not be attached to an action."""


# =============================================================================
# SERIALIZATION
# =============================================================================

class SerializationError(SapEffectsError):
    """A serialized payload could not be decoded."""
