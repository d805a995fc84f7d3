"""
Effect Text Scanner

Turns Super Auto Pets trigger/effect text into a flat, tagged token stream.

Strategy:
1. Single left-to-right pass with a start/current cursor and a line counter
2. Punctuation, numbers and words are recognized by local pattern
3. Capitalized words are item names unless they open a clause as a keyword
4. Two context-sensitive rules, both explicit lookahead in the word branch:
   - greedy two-word names ("Lizard Tail") with an optional `Perk` suffix
   - a name right after `with` is a food even without `Perk` ("Dog with Melon.")

The scanner does not check names against reference data; that is left to
whoever consumes the tokens.
"""

import logging
from typing import Any, Optional

from sapeffects.config import DEFAULT_CONFIG, ScannerConfig
from sapeffects.errors import UnexpectedCharacter, UnterminatedName
from sapeffects.tokens import ScanState, Token
from sapeffects.vocabulary import (
    ActionType,
    EntityKind,
    LogicType,
    NameType,
    PhaseType,
    PositionType,
    PunctuationType,
    StatType,
    TargetType,
    TokenType,
)

logger = logging.getLogger(__name__)


# =============================================================================
# KEYWORD TABLES
# =============================================================================

LOGIC_KEYWORDS = {
    "if": LogicType.IF,
    "and": LogicType.AND,
    "or": LogicType.OR,
    "not": LogicType.NOT,
    "then": LogicType.THEN,
    "until": LogicType.UNTIL,
    "start": LogicType.START,
    "end": LogicType.END,
    "with": LogicType.WITH,
    "for": LogicType.FOR,
    "each": LogicType.EACH,
    "every": LogicType.EACH,
    "is": LogicType.IS,
    "was": LogicType.IS,
    "are": LogicType.IS,
    "has": LogicType.HAVE,
    "have": LogicType.HAVE,
    "had": LogicType.HAVE,
    "before": LogicType.BEFORE,
    "after": LogicType.AFTER,
    "works": LogicType.WORKS,
    "except": LogicType.EXCEPT,
    "in": LogicType.IN,
    "to": LogicType.TO,
    "outside": LogicType.OUTSIDE,
}

POSITION_KEYWORDS = {
    "this": PositionType.ON_SELF,
    "itself": PositionType.ON_SELF,
    "other": PositionType.NON_SELF,
    "nonself": PositionType.NON_SELF,
    "ahead": PositionType.AHEAD,
    "forward": PositionType.AHEAD,
    "behind": PositionType.BEHIND,
    "adjacent": PositionType.ADJACENT,
    "nearest": PositionType.NEAREST,
    "all": PositionType.ALL,
    "random": PositionType.ANY,
    "any": PositionType.ANY,
    "highest": PositionType.HIGHEST,
    "lowest": PositionType.LOWEST,
    "left-most": PositionType.LEFT_MOST,
    "right-most": PositionType.FRONT,
    "front": PositionType.FRONT,
    "it": PositionType.TRIGGER,
    "its": PositionType.TRIGGER,
    "whoever": PositionType.TRIGGER,
    "healthiest": PositionType.HEALTHIEST,
    "strongest": PositionType.STRONGEST,
    "weakest": PositionType.WEAKEST,
    "opposite": PositionType.OPPOSITE,
}

ENTITY_KEYWORDS = {
    "pet": EntityKind.PET,
    "pets": EntityKind.PET,
    "food": EntityKind.FOOD,
    "foods": EntityKind.FOOD,
    "ability": EntityKind.ABILITY,
    "abilities": EntityKind.ABILITY,
    "perk": EntityKind.STATUS,
    "perks": EntityKind.STATUS,
    "ailment": EntityKind.STATUS,
    "ailments": EntityKind.STATUS,
    "status": EntityKind.STATUS,
}

TARGET_KEYWORDS = {
    "friend": TargetType.FRIEND,
    "friends": TargetType.FRIEND,
    "friendly": TargetType.FRIEND,
    "enemy": TargetType.ENEMY,
    "enemies": TargetType.ENEMY,
    "opponent": TargetType.ENEMY,
    "shop": TargetType.SHOP,
}

# Effect verbs, base form only.
ACTION_KEYWORDS = {
    "choose": ActionType.CHOOSE,
    "deal": ActionType.DEAL,
    "gain": ActionType.GAIN,
    "give": ActionType.GIVE,
    "push": ActionType.PUSH,
    "remove": ActionType.REMOVE,
    "set": ActionType.SET,
    "spend": ActionType.SPEND,
    "stock": ActionType.STOCK,
    "summon": ActionType.SUMMON,
    "swap": ActionType.SWAP,
    "break": ActionType.BREAK,
    "copy": ActionType.COPY,
    "make": ActionType.MAKE,
    "increase": ActionType.INCREASE,
    "resummon": ActionType.RESUMMON,
    "steal": ActionType.STEAL,
    "activate": ActionType.ACTIVATE,
    "discount": ActionType.DISCOUNT,
    "knock": ActionType.KNOCK,
    "reduce": ActionType.REDUCE,
    "swallow": ActionType.SWALLOW,
    "take": ActionType.TAKE,
    "transform": ActionType.TRANSFORM,
    "replace": ActionType.REPLACE,
    "shuffle": ActionType.SHUFFLE,
    "freeze": ActionType.FREEZE,
    "unfreeze": ActionType.UNFREEZE,
}

# Trigger verbs: inflected effect verbs plus non-effect events.
EVENT_KEYWORDS = {
    "gained": ActionType.GAIN,
    "gains": ActionType.GAIN,
    "pushed": ActionType.PUSH,
    "summoned": ActionType.SUMMON,
    "broke": ActionType.BREAK,
    "knocked": ActionType.KNOCK,
    "transformed": ActionType.TRANSFORM,
    "attacks": ActionType.ATTACK,
    "attacked": ActionType.ATTACK,
    "eat": ActionType.EAT,
    "eats": ActionType.EAT,
    "ate": ActionType.EAT,
    "buy": ActionType.BUY,
    "bought": ActionType.BUY,
    "sell": ActionType.SELL,
    "sold": ActionType.SELL,
    "upgrade": ActionType.UPGRADE,
    "upgraded": ActionType.UPGRADE,
    "level-up": ActionType.UPGRADE,
    "hurt": ActionType.HURT,
    "faint": ActionType.FAINT,
    "faints": ActionType.FAINT,
    "fainted": ActionType.FAINT,
    "fainting": ActionType.FAINT,
}

STAT_KEYWORDS = {
    "attack": StatType.ATTACK,
    "health": StatType.HEALTH,
    "damage": StatType.DAMAGE,
    "gold": StatType.GOLD,
    "trumpet": StatType.TRUMPET,
    "trumpets": StatType.TRUMPET,
    "experience": StatType.EXPERIENCE,
    "level": StatType.LEVEL,
    "tier": StatType.TIER,
    "uses": StatType.USES,
}

PHASE_KEYWORDS = {
    "turn": PhaseType.TURN,
    "turns": PhaseType.TURN,
    "battle": PhaseType.BATTLE,
    "battles": PhaseType.BATTLE,
}

NUMBER_WORDS = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "once": 1,
    "twice": 2,
}

# Fixed two-word phrases, matched before single words.
MULTI_WORD_KEYWORDS = {
    ("for", "each"): (TokenType.LOGIC, LogicType.FOR_EACH),
    ("for", "every"): (TokenType.LOGIC, LogicType.FOR_EACH),
    ("knock", "out"): (TokenType.EVENT, ActionType.KNOCK),
    ("knocked", "out"): (TokenType.EVENT, ActionType.KNOCK),
    ("level", "up"): (TokenType.EVENT, ActionType.UPGRADE),
    ("levels", "up"): (TokenType.EVENT, ActionType.UPGRADE),
    ("most", "healthy"): (TokenType.POSITION, PositionType.HEALTHIEST),
    ("least", "healthy"): (TokenType.POSITION, PositionType.ILLEST),
    ("highest", "health"): (TokenType.POSITION, PositionType.HEALTHIEST),
    ("lowest", "health"): (TokenType.POSITION, PositionType.ILLEST),
    ("highest", "attack"): (TokenType.POSITION, PositionType.STRONGEST),
    ("lowest", "attack"): (TokenType.POSITION, PositionType.WEAKEST),
}

PUNCTUATION = {
    ",": PunctuationType.COMMA,
    ".": PunctuationType.PERIOD,
    "!": PunctuationType.PERIOD,
    "&": PunctuationType.AMPERSAND,
}

# Characters allowed inside a word when followed by a letter.
WORD_JOINERS = "-'"

DIGITS = "0123456789"


def _build_keyword_table() -> dict[str, tuple[TokenType, Any]]:
    table: dict[str, tuple[TokenType, Any]] = {}
    for ttype, keywords in [
        (TokenType.LOGIC, LOGIC_KEYWORDS),
        (TokenType.POSITION, POSITION_KEYWORDS),
        (TokenType.ENTITY, ENTITY_KEYWORDS),
        (TokenType.TARGET, TARGET_KEYWORDS),
        (TokenType.ACTION, ACTION_KEYWORDS),
        (TokenType.EVENT, EVENT_KEYWORDS),
        (TokenType.STAT, STAT_KEYWORDS),
        (TokenType.PHASE, PHASE_KEYWORDS),
        (TokenType.NUMBER, NUMBER_WORDS),
    ]:
        for word, value in keywords.items():
            table[word] = (ttype, value)
    return table


KEYWORDS = _build_keyword_table()


def _is_digit(chr_: str) -> bool:
    """ASCII digits only."""
    return len(chr_) == 1 and chr_ in DIGITS


def lookup_keyword(word: str) -> Optional[tuple[TokenType, Any]]:
    """Case-insensitive keyword lookup. Falls back to dropping a possessive `'s`."""
    lower = word.lower()
    entry = KEYWORDS.get(lower)
    if entry is None and lower.endswith("'s"):
        entry = KEYWORDS.get(lower[:-2])
    return entry


# =============================================================================
# SCANNER
# =============================================================================

class Scanner:
    """Single-pass scanner over one trigger or effect text.

    Example:
        tokens = Scanner("Gain +2 attack and +2 health.").scan_tokens()
    """

    def __init__(self, source: str, config: Optional[ScannerConfig] = None) -> None:
        self.source = source
        self.config = config or DEFAULT_CONFIG
        errors = self.config.validate()
        if errors:
            raise ValueError(f"Invalid scanner config: {'; '.join(errors)}")
        self._reset()

    def _reset(self) -> None:
        self.start = 0
        self.current = 0
        self.line = 1
        self.tokens: list[Token] = []
        self._clause_start = True

    def scan_tokens(self) -> list[Token]:
        """Scan the whole source.

        Returns:
            Ordered tokens. Empty for empty input.

        Raises:
            UnexpectedCharacter: A character matched no rule.
            UnterminatedName: A name ended on a dangling joiner at end of input.
        """
        self._reset()
        while not self._is_at_end():
            self.start = self.current
            self._scan_token()

        logger.debug(f"Scanned {len(self.tokens)} tokens from {len(self.source)} chars")
        return list(self.tokens)

    def _scan_token(self) -> None:
        c = self._advance()

        if c == "\n":
            self.line += 1
        elif c in self.config.skip_chars:
            pass
        elif c in PUNCTUATION:
            self._add_token(TokenType.PUNCTUATION, PUNCTUATION[c])
            self._clause_start = True
        elif _is_digit(c) or (c in "+-" and _is_digit(self._peek())):
            self._scan_number()
            self._clause_start = False
        elif c.isalpha():
            self._scan_word()
            self._clause_start = False
        else:
            raise UnexpectedCharacter(c, self.line, self.start)

    # -------------------------------------------------------------------------
    # Numbers
    # -------------------------------------------------------------------------

    def _scan_number(self) -> None:
        self._consume_digits()
        lexeme = self._lexeme()

        # ex. 100% or +50%
        if self._peek() == "%":
            self._advance()
            self._add_token(TokenType.PERCENT, float(lexeme))
            return

        # ex. 2/3 summon stats
        if self._peek() == "/" and self._starts_number(self.current + 1):
            self._advance()
            health_start = self.current
            if self._peek() in "+-":
                self._advance()
            self._consume_digits()
            health = int(self.source[health_start:self.current])
            self._add_token(TokenType.STATS, (int(lexeme), health))
            return

        self._add_token(TokenType.NUMBER, int(lexeme))

        # ex. 1-gold
        if self._peek() == "-" and self._peek(1).isalpha():
            self._advance()

    def _starts_number(self, idx: int) -> bool:
        chr_ = self._char_at(idx)
        if chr_ in ("+", "-"):
            chr_ = self._char_at(idx + 1)
        return _is_digit(chr_)

    def _consume_digits(self) -> None:
        while _is_digit(self._peek()):
            self._advance()

    # -------------------------------------------------------------------------
    # Words
    # -------------------------------------------------------------------------

    def _scan_word(self) -> None:
        self.current = self._word_end(self.current)
        word = self._lexeme()

        # Capitalized keywords only open clauses. Mid-clause they are names.
        # ex. `End turn` vs `a Faint pet`
        if word[0].isupper() and not (self._clause_start and lookup_keyword(word)):
            self._scan_name()
        else:
            self._scan_keyword(word)

    def _scan_name(self) -> None:
        suffix = self.config.food_suffix
        is_food = False

        # Two-word item name. ex. Lizard Tail
        second = self._peek_word(self.current)
        if (
            second is not None
            and second[0][0].isupper()
            and second[0] != suffix
            and lookup_keyword(second[0]) is None
        ):
            self.current = second[1]

        # Food perk suffix. ex. Melon Perk, Fortune Cookie Perk
        following = self._peek_word(self.current)
        if following is not None and following[0] == suffix:
            self.current = following[1]
            is_food = True

        joiner = self._peek()
        if joiner and joiner in WORD_JOINERS and self._is_at_end(self.current + 1):
            raise UnterminatedName(self.line, self.start, self.source[self.start:])

        # Food named without its suffix. ex. Dog with Melon.
        if self.tokens and self.tokens[-1].is_a(TokenType.LOGIC, LogicType.WITH):
            is_food = True

        self._add_token(TokenType.IDENTIFIER, NameType.FOOD if is_food else NameType.NAME)

    def _scan_keyword(self, word: str) -> None:
        following = self._peek_word(self.current)
        if following is not None:
            phrase = (word.lower(), following[0].lower())
            if phrase in MULTI_WORD_KEYWORDS:
                self.current = following[1]
                self._add_token(*MULTI_WORD_KEYWORDS[phrase])
                return

        entry = lookup_keyword(word)
        if entry is None:
            if self.config.emit_unknown:
                self._add_token(TokenType.UNKNOWN, None)
            return
        self._add_token(*entry)

    def _word_end(self, idx: int) -> int:
        """Index one past the word starting at `idx`."""
        while True:
            chr_ = self._char_at(idx)
            if chr_.isalpha():
                idx += 1
            elif chr_ and chr_ in WORD_JOINERS and self._char_at(idx + 1).isalpha():
                idx += 1
            else:
                return idx

    def _peek_word(self, idx: int) -> Optional[tuple[str, int]]:
        """Look at the next whitespace-separated word on the same line.

        Returns:
            (word, end index) or None if no word follows directly.
        """
        word_start = idx
        while self._char_at(word_start) and self._char_at(word_start) in self.config.skip_chars:
            word_start += 1
        if word_start == idx or not self._char_at(word_start).isalpha():
            return None
        word_end = self._word_end(word_start)
        return self.source[word_start:word_end], word_end

    # -------------------------------------------------------------------------
    # Cursor helpers
    # -------------------------------------------------------------------------

    def _is_at_end(self, idx: Optional[int] = None) -> bool:
        return (self.current if idx is None else idx) >= len(self.source)

    def _char_at(self, idx: int) -> str:
        return self.source[idx] if 0 <= idx < len(self.source) else ""

    def _peek(self, offset: int = 0) -> str:
        return self._char_at(self.current + offset)

    def _advance(self) -> str:
        chr_ = self.source[self.current]
        self.current += 1
        return chr_

    def _lexeme(self) -> str:
        return self.source[self.start:self.current]

    def _add_token(self, ttype: TokenType, value: Any) -> None:
        self.tokens.append(Token(
            ttype=ttype,
            text=self._lexeme(),
            metadata=ScanState(start=self.start, current=self.current, line=self.line),
            value=value,
        ))


def tokenize(text: str, config: Optional[ScannerConfig] = None) -> list[Token]:
    """Tokenize trigger or effect text.

    Args:
        text: One trigger clause group or one effect-body sentence.
        config: Optional scanner configuration.

    Returns:
        Ordered list of tokens.
    """
    return Scanner(text, config).scan_tokens()
