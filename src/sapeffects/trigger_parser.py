"""
Effect Trigger Parser

Builds EffectTrigger values from scanned trigger text.

Grammar:
    trigger_list   := trigger_clause (('&' | 'and' | 'or') trigger_clause)*
    trigger_clause := [Logic] [Position] Entity [attribute]

Clause tokens fill fields in order of appearance. Whatever is left over when
a clause ends is resolved with a few fixed fallbacks (bare events refer to
this pet, entities with no position refer to whoever triggered the effect).

Usage:
    from sapeffects.trigger_parser import parse_trigger_text

    triggers = parse_trigger_text("Friend ahead faints")
"""

import logging
from typing import Optional, Sequence

from sapeffects.config import ScannerConfig
from sapeffects.errors import EmptyTrigger, UnexpectedToken
from sapeffects.models import Ability, EffectTrigger, EntityType, Food, Pet, Status
from sapeffects.scanner import tokenize
from sapeffects.tokens import Token
from sapeffects.vocabulary import (
    NOUN_TYPES,
    QUALIFIER_TYPES,
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


def is_connective(token: Token) -> bool:
    """`and`, `or` and `&` separate clauses."""
    return (
        token.is_a(TokenType.LOGIC, LogicType.AND)
        or token.is_a(TokenType.LOGIC, LogicType.OR)
        or token.is_a(TokenType.PUNCTUATION, PunctuationType.AMPERSAND)
    )


# =============================================================================
# ENTITY RESOLUTION
# =============================================================================

def resolve_entity(qualifiers: Sequence[Token], noun: Optional[Token]) -> Optional[EntityType]:
    """Resolve qualifier tokens and an optional noun into an entity.

    Shared by the trigger and effect parsers.

    Examples:
        [Faint] + pet            -> Pet(attr="Faint")
        [level, 3] + friend      -> Pet(attr="level 3 friend")
        [two] + friends          -> Pet(number=2)
        [Melon Perk]             -> Food(name="Melon Perk")
        [Lizard Tail]            -> Pet(name="Lizard Tail")

    Returns:
        The entity, or None when there is no noun and no item name.
    """
    names = [q for q in qualifiers if q.ttype == TokenType.IDENTIFIER]

    if noun is None:
        if not names:
            return None
        name = " ".join(q.text for q in names)
        if any(q.value == NameType.FOOD for q in names):
            return Food(name=name)
        return Pet(name=name, number=_count(qualifiers))

    if noun.ttype == TokenType.ENTITY and noun.value != EntityKind.PET:
        name = " ".join(q.text for q in names) or None
        if noun.value == EntityKind.FOOD:
            return Food(name=name)
        if noun.value == EntityKind.ABILITY:
            return Ability(name=name)
        return Status(name=name)

    # Pet or team noun.
    if qualifiers and all(q.ttype == TokenType.NUMBER for q in qualifiers):
        return Pet(number=_count(qualifiers))
    if not qualifiers:
        return Pet()

    words = [q.text for q in qualifiers]
    if noun.ttype == TokenType.TARGET:
        words.append(noun.text)
    return Pet(attr=" ".join(words))


def _count(qualifiers: Sequence[Token]) -> Optional[int]:
    for q in qualifiers:
        if q.ttype == TokenType.NUMBER:
            return q.value
    return None


# =============================================================================
# CLAUSE PARSING
# =============================================================================

class _TriggerClause:
    """Mutable field collector for one clause."""

    def __init__(self, logic: Optional[LogicType] = None):
        self.logic = logic
        self.entity: Optional[EntityType] = None
        self.sec_entity: Optional[EntityType] = None
        self.prim_pos: Optional[PositionType] = None
        self.sec_pos: Optional[PositionType] = None
        self.action: Optional[ActionType] = None
        self.target: Optional[TargetType] = None
        self.phase: Optional[PhaseType] = None
        self.qualifiers: list[Token] = []
        self.first_token: Optional[Token] = None

    def add_entity(self, entity: EntityType) -> None:
        if self.entity is None:
            self.entity = entity
        elif self.sec_entity is None:
            self.sec_entity = entity

    def add_position(self, pos: PositionType) -> None:
        if self.prim_pos is None:
            self.prim_pos = pos
        elif self.sec_pos is None:
            self.sec_pos = pos

    def feed(self, token: Token) -> None:
        if self.first_token is None:
            self.first_token = token
        ttype = token.ttype
        if ttype == TokenType.ACTION:
            raise UnexpectedToken("Effect verb in trigger text", token)
        if is_connective(token):
            raise UnexpectedToken("Connective inside a single trigger clause", token)
        if ttype == TokenType.LOGIC:
            # Later copulas (is, has) carry no meaning here.
            if self.logic is None:
                self.logic = token.value
        elif ttype == TokenType.POSITION:
            self.add_position(token.value)
        elif ttype in QUALIFIER_TYPES:
            self.qualifiers.append(token)
        elif ttype in NOUN_TYPES:
            self.add_entity(resolve_entity(self.qualifiers, token))
            self.qualifiers = []
            if ttype == TokenType.TARGET:
                self.target = token.value
        elif ttype == TokenType.EVENT:
            self.action = token.value
        elif ttype == TokenType.PHASE:
            self.phase = token.value
        else:
            raise UnexpectedToken("Token not allowed in a trigger", token)

    def finish(self, default_action: Optional[ActionType] = None) -> EffectTrigger:
        for q in self.qualifiers:
            if q.is_a(TokenType.STAT, StatType.ATTACK) and self.action is None:
                # ex. Before attack
                self.action = ActionType.ATTACK
            elif q.ttype == TokenType.IDENTIFIER:
                self.add_entity(resolve_entity([q], None))
        self.qualifiers = []

        if self.action is None:
            self.action = default_action

        # Bare event. ex. Faint
        if self.action is not None and self.entity is None and self.logic is None:
            self.entity = Pet()
            self.prim_pos = PositionType.ON_SELF

        if self.entity is not None and self.prim_pos is None:
            self.prim_pos = PositionType.TRIGGER

        if self.action is not None and self.action.is_shop_related and self.target is None:
            self.target = TargetType.SHOP

        if self.entity is None and self.logic is None:
            raise EmptyTrigger("Trigger has no entity or logic keyword", self.first_token)

        return EffectTrigger(
            entity=self.entity,
            logic=self.logic,
            prim_pos=self.prim_pos,
            action=self.action,
            target=self.target,
            phase=self.phase,
            sec_pos=self.sec_pos,
            sec_entity=self.sec_entity,
        )


def _significant(tokens: Sequence[Token]) -> list[Token]:
    return [
        t for t in tokens
        if t.ttype != TokenType.UNKNOWN
        and not t.is_a(TokenType.PUNCTUATION, PunctuationType.COMMA)
        and not t.is_period
    ]


def _build_trigger(
    tokens: Sequence[Token],
    logic: Optional[LogicType] = None,
    default_action: Optional[ActionType] = None,
) -> EffectTrigger:
    clause = _TriggerClause(logic)
    for token in _significant(tokens):
        clause.feed(token)
    return clause.finish(default_action)


def parse_trigger_clause(tokens: Sequence[Token], logic: Optional[LogicType] = None) -> EffectTrigger:
    """Parse a single trigger clause.

    Args:
        tokens: Clause tokens, without connectives.
        logic: Logic keyword already consumed by the caller (ex. IF for
            inline effect conditions). Takes precedence over any logic
            keyword in `tokens`.

    Raises:
        EmptyTrigger: Neither an entity nor a logic keyword was found.
        UnexpectedToken: An effect verb or connective appeared in the clause.
    """
    return _build_trigger(tokens, logic)


def parse_triggers(tokens: Sequence[Token]) -> list[EffectTrigger]:
    """Parse a trigger token stream into one EffectTrigger per clause.

    A clause with no event of its own reuses the event of the clause
    before it. ex. `Gains perk or ailment`
    """
    clauses: list[list[Token]] = [[]]
    last_connective: Optional[Token] = None

    for token in _significant(tokens):
        if is_connective(token):
            if not clauses[-1]:
                raise UnexpectedToken("Connective without a clause before it", token)
            clauses.append([])
            last_connective = token
        else:
            clauses[-1].append(token)

    if last_connective is not None and not clauses[-1]:
        raise UnexpectedToken("Connective without a clause after it", last_connective)

    triggers: list[EffectTrigger] = []
    for clause in clauses:
        prev_action = triggers[-1].action if triggers else None
        triggers.append(_build_trigger(clause, default_action=prev_action))

    logger.debug(f"Parsed {len(triggers)} trigger(s) from {len(tokens)} tokens")
    return triggers


def parse_trigger_text(text: str, config: Optional[ScannerConfig] = None) -> list[EffectTrigger]:
    """Tokenize and parse trigger text. ex. `End turn & Start of battle`"""
    return parse_triggers(tokenize(text, config))
