"""
sapeffects - Super Auto Pets effect text scanner and parser.

Components:
- Scanner: Turns trigger/effect text into tagged tokens
- parse_triggers: Builds EffectTrigger values from trigger tokens
- parse_effects: Builds Effect values from effect-body tokens
- parse_ability: Trigger text + effect text in one call
- dumps_effects / loads_effects: JSON encoding of parsed results
"""

__version__ = "0.1.0"

from sapeffects.config import (
    ScannerConfig,
    DEFAULT_CONFIG,
)

from sapeffects.errors import (
    SapEffectsError,
    LexError,
    UnexpectedCharacter,
    UnterminatedName,
    ParseError,
    EmptyTrigger,
    UnexpectedToken,
    MissingAction,
    DanglingCondition,
    UnresolvedEntity,
    SerializationError,
)

from sapeffects.models import (
    Pet,
    Food,
    Ability,
    Status,
    StatModifier,
    EffectTrigger,
    Effect,
)

from sapeffects.scanner import (
    Scanner,
    tokenize,
)

from sapeffects.tokens import (
    ScanState,
    Token,
)

from sapeffects.trigger_parser import (
    parse_triggers,
    parse_trigger_clause,
    parse_trigger_text,
)

from sapeffects.effect_parser import (
    parse_effects,
    parse_effect_text,
    parse_ability,
)

from sapeffects.serialize import (
    dumps_triggers,
    loads_triggers,
    dumps_effects,
    loads_effects,
)

__all__ = [
    # Config
    "ScannerConfig",
    "DEFAULT_CONFIG",
    # Errors
    "SapEffectsError",
    "LexError",
    "UnexpectedCharacter",
    "UnterminatedName",
    "ParseError",
    "EmptyTrigger",
    "UnexpectedToken",
    "MissingAction",
    "DanglingCondition",
    "UnresolvedEntity",
    "SerializationError",
    # Models
    "Pet",
    "Food",
    "Ability",
    "Status",
    "StatModifier",
    "EffectTrigger",
    "Effect",
    # Scanner
    "Scanner",
    "tokenize",
    "ScanState",
    "Token",
    # Parsers
    "parse_triggers",
    "parse_trigger_clause",
    "parse_trigger_text",
    "parse_effects",
    "parse_effect_text",
    "parse_ability",
    # Serialization
    "dumps_triggers",
    "loads_triggers",
    "dumps_effects",
    "loads_effects",
]
