"""
SAP Effect Vocabulary

The closed set of token categories and keyword meanings used to describe
Super Auto Pets triggers and effects.

Design principles:
1. Every category is a small enum - a token carries one member as its payload
2. Keyword text maps onto members through fixed tables in the scanner
3. Adding a keyword is a one-line table entry, not a new enum
"""

from enum import IntEnum, auto


class TokenType(IntEnum):
    """Token categories produced by the scanner."""

    # Quantities
    NUMBER = auto()
    PERCENT = auto()
    STATS = auto()          # 2/3 stat line

    # Words
    LOGIC = auto()
    POSITION = auto()
    ENTITY = auto()
    TARGET = auto()
    ACTION = auto()         # Effect verb (gain, deal, summon)
    EVENT = auto()          # Trigger verb (faints, summoned, hurt)
    STAT = auto()
    PHASE = auto()
    IDENTIFIER = auto()

    # Delimiters
    PUNCTUATION = auto()

    # Filler word with no keyword entry
    UNKNOWN = auto()


class LogicType(IntEnum):
    """Connectives and conditional keywords."""
    IF = auto()             # If a condition. ex. `If in battle, ...`
    AND = auto()
    OR = auto()             # `End of turn or end of battle`
    NOT = auto()
    THEN = auto()           # `If ..., then ...`
    UNTIL = auto()
    START = auto()          # `Start of battle`
    END = auto()            # `End turn`
    WITH = auto()           # `Deer with Chili`
    FOR = auto()
    EACH = auto()
    FOR_EACH = auto()       # `..., for each Strawberry friend, ...`
    IS = auto()
    HAVE = auto()
    BEFORE = auto()
    AFTER = auto()
    WORKS = auto()          # `Works 2 times per turn`
    EXCEPT = auto()         # `Except other Tapirs!`
    IN = auto()
    TO = auto()
    OUTSIDE = auto()


class PositionType(IntEnum):
    """Item positions inside/outside of battle."""
    ON_SELF = auto()        # This pet
    NON_SELF = auto()       # Not this pet
    AHEAD = auto()
    BEHIND = auto()
    NEAREST = auto()
    ADJACENT = auto()       # Directly one space ahead and behind
    ALL = auto()
    ANY = auto()
    HIGHEST = auto()
    LOWEST = auto()
    LEFT_MOST = auto()      # Last element in the set
    FRONT = auto()          # Right-most, first element in the set
    TRIGGER = auto()        # Item causing this effect to trigger
    ILLEST = auto()         # Lowest health
    HEALTHIEST = auto()     # Highest health
    STRONGEST = auto()      # Highest attack
    WEAKEST = auto()        # Lowest attack
    OPPOSITE = auto()       # Directly opposite of this pet


class ActionType(IntEnum):
    """Verbs governing an effect clause or naming a trigger event."""

    # ==========================================================================
    # EFFECT ACTIONS
    # ==========================================================================
    CHOOSE = auto()
    DEAL = auto()
    GAIN = auto()
    GIVE = auto()
    PUSH = auto()
    REMOVE = auto()
    SET = auto()
    SPEND = auto()
    STOCK = auto()
    SUMMON = auto()
    SWAP = auto()
    BREAK = auto()
    COPY = auto()
    MAKE = auto()
    INCREASE = auto()
    RESUMMON = auto()
    STEAL = auto()
    ACTIVATE = auto()
    DISCOUNT = auto()
    KNOCK = auto()
    REDUCE = auto()
    SWALLOW = auto()
    TAKE = auto()
    TRANSFORM = auto()
    REPLACE = auto()
    SHUFFLE = auto()
    FREEZE = auto()
    UNFREEZE = auto()

    # ==========================================================================
    # NON-EFFECT (trigger events only)
    # ==========================================================================
    ATTACK = auto()
    EAT = auto()
    BUY = auto()
    SELL = auto()
    UPGRADE = auto()
    HURT = auto()
    FAINT = auto()

    @property
    def is_shop_related(self) -> bool:
        return self in SHOP_ACTIONS


SHOP_ACTIONS = frozenset({
    ActionType.SPEND,
    ActionType.STOCK,
    ActionType.DISCOUNT,
    ActionType.FREEZE,
    ActionType.UNFREEZE,
    ActionType.EAT,
    ActionType.BUY,
    ActionType.SELL,
    ActionType.UPGRADE,
})


class TargetType(IntEnum):
    """Team an entity belongs to."""
    FRIEND = auto()
    ENEMY = auto()
    SHOP = auto()


class StatType(IntEnum):
    """Numeric pet/item attributes."""
    ATTACK = auto()
    HEALTH = auto()
    DAMAGE = auto()
    GOLD = auto()
    TRUMPET = auto()
    EXPERIENCE = auto()
    LEVEL = auto()
    TIER = auto()
    USES = auto()


class PhaseType(IntEnum):
    """Phases of the game loop."""
    TURN = auto()
    BATTLE = auto()


class EntityKind(IntEnum):
    """Entity marker nouns."""
    PET = auto()
    FOOD = auto()
    ABILITY = auto()
    STATUS = auto()         # Perks and ailments


class NameType(IntEnum):
    """How a capitalized item name was classified."""
    NAME = auto()           # Pet name or capitalized qualifier
    FOOD = auto()           # `Melon Perk` or `with Melon`


class PunctuationType(IntEnum):
    COMMA = auto()
    PERIOD = auto()
    AMPERSAND = auto()


# Token categories that qualify a noun inside a clause.
QUALIFIER_TYPES = frozenset({
    TokenType.IDENTIFIER,
    TokenType.STAT,
    TokenType.NUMBER,
    TokenType.STATS,
})

# Token categories naming an entity.
NOUN_TYPES = frozenset({TokenType.ENTITY, TokenType.TARGET})
