"""
Effect Parser

Builds Effect values from scanned effect-body text.

Strategy:
1. Every body opens with `If` or an action verb
2. Tokens are folded left to right into an accumulator for the current
   action clause; an action verb, `and`/`&` or `.` closes it
3. `and` without a new verb continues the previous action
   ("gain +1 attack and +2 health" -> two Gain effects)
4. An inline `If` condition becomes the cond_trigger of the effects that
   follow it, unless an external trigger was supplied

Usage:
    from sapeffects.effect_parser import parse_ability

    effects = parse_ability("Faint", "Give one random friend +2 attack.")
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence

from sapeffects.config import ScannerConfig
from sapeffects.errors import (
    DanglingCondition,
    MissingAction,
    UnexpectedToken,
    UnresolvedEntity,
)
from sapeffects.models import Effect, EffectTrigger, EntityType, Pet, StatModifier
from sapeffects.scanner import tokenize
from sapeffects.tokens import Token
from sapeffects.trigger_parser import parse_trigger_clause, parse_triggers, resolve_entity
from sapeffects.vocabulary import (
    NOUN_TYPES,
    ActionType,
    LogicType,
    PositionType,
    PunctuationType,
    StatType,
    TargetType,
    TokenType,
)

logger = logging.getLogger(__name__)


# =============================================================================
# ACCUMULATOR
# =============================================================================

class _EffectBuilder:
    """Mutable fields of the action clause being parsed."""

    def __init__(self, action: ActionType, cond_trigger: Optional[EffectTrigger] = None):
        self.action = action
        self.cond_trigger = cond_trigger
        self.entities: list[EntityType] = []
        self.position: list[PositionType] = []
        self.target: Optional[TargetType] = None
        self.number: Optional[int] = None
        self.percent: Optional[float] = None
        self.modifiers: list[StatModifier] = []
        self.temp = False
        self.qualifiers: list[Token] = []
        self.pending_count: Optional[int] = None
        # Entities/positions copied from the previous clause, replaced on first use.
        self._inherited_entities = False
        self._inherited_position = False

    def continuation(self) -> "_EffectBuilder":
        """New clause for `and` without a verb: same action, same subjects."""
        nxt = _EffectBuilder(self.action, self.cond_trigger)
        nxt.entities = list(self.entities)
        nxt.position = list(self.position)
        nxt.target = self.target
        nxt._inherited_entities = bool(self.entities)
        nxt._inherited_position = bool(self.position)
        return nxt

    def add_entity(self, entity: EntityType) -> None:
        if self._inherited_entities:
            self.entities = []
            self._inherited_entities = False
        if self.pending_count is not None and isinstance(entity, Pet) and entity.number is None:
            entity = replace(entity, number=self.pending_count)
            self.pending_count = None
        self.entities.append(entity)

    def add_position(self, pos: PositionType) -> None:
        if self._inherited_position:
            self.position = []
            self._inherited_position = False
        self.position.append(pos)

    def flush_qualifiers(self) -> None:
        """Resolve qualifiers that never met a noun."""
        if not self.qualifiers:
            return
        names = [q for q in self.qualifiers if q.ttype == TokenType.IDENTIFIER]
        if names:
            self.add_entity(resolve_entity(names, None))
        for q in self.qualifiers:
            if q.ttype == TokenType.STAT:
                # ex. `equal to its attack`
                self.modifiers.append(StatModifier(q.value))
            elif q.ttype == TokenType.NUMBER and self.pending_count is None:
                self.pending_count = q.value
        self.qualifiers = []

    def build(self) -> Effect:
        self.flush_qualifiers()
        number = self.number
        if number is None:
            number = self.pending_count
        return Effect(
            action=self.action,
            cond_trigger=self.cond_trigger,
            entities=tuple(self.entities),
            position=tuple(self.position),
            target=self.target,
            number=number,
            percent=self.percent,
            modifiers=tuple(self.modifiers),
            temp=self.temp,
        )


# =============================================================================
# PARSER
# =============================================================================

class EffectParser:
    """Single-use parser over the significant tokens of one effect body."""

    def __init__(self, tokens: Sequence[Token], trigger: Optional[EffectTrigger] = None):
        self.tokens = [t for t in tokens if t.ttype != TokenType.UNKNOWN]
        self.trigger = trigger
        self.condition = trigger
        self.current = 0
        self.builder: Optional[_EffectBuilder] = None
        self.effects: list[Effect] = []

    def parse(self) -> list[Effect]:
        if not self.tokens:
            raise MissingAction("Effect text is empty")
        first = self.tokens[0]
        if not (first.is_a(TokenType.LOGIC, LogicType.IF) or first.ttype == TokenType.ACTION):
            raise MissingAction("Effect must open with `If` or an action", first)

        while not self._is_at_end():
            self._parse_token(self._advance())
        self._close()

        logger.debug(f"Parsed {len(self.effects)} effect(s) from {len(self.tokens)} tokens")
        return list(self.effects)

    def _parse_token(self, token: Token) -> None:
        ttype = token.ttype

        if token.is_a(TokenType.LOGIC, LogicType.IF):
            self._condition(token)
        elif ttype == TokenType.ACTION:
            self._close()
            self.builder = _EffectBuilder(token.value, self.condition)
        elif token.is_a(TokenType.LOGIC, LogicType.AND) or token.is_a(
            TokenType.PUNCTUATION, PunctuationType.AMPERSAND
        ):
            self._connective(token)
        elif token.is_period:
            self._close()
        elif token.is_a(TokenType.PUNCTUATION, PunctuationType.COMMA):
            if self.builder is not None:
                self.builder.flush_qualifiers()
        elif token.is_a(TokenType.LOGIC, LogicType.WORKS):
            self._works(token)
        elif token.is_a(TokenType.LOGIC, LogicType.UNTIL):
            self._require_builder(token).temp = True
        elif ttype in (TokenType.LOGIC, TokenType.EVENT, TokenType.PHASE):
            # Connecting words with no field of their own. ex. `to`, `then`, `for each`
            pass
        else:
            self._attach(token)

    # -------------------------------------------------------------------------
    # Clause boundaries
    # -------------------------------------------------------------------------

    def _condition(self, if_token: Token) -> None:
        self._close()

        cond_tokens: list[Token] = []
        while not self._is_at_end():
            tok = self._peek()
            if tok.ttype == TokenType.ACTION or tok.is_period or tok.is_a(
                TokenType.PUNCTUATION, PunctuationType.COMMA
            ):
                break
            cond_tokens.append(self._advance())

        while not self._is_at_end() and (
            self._peek().is_a(TokenType.PUNCTUATION, PunctuationType.COMMA)
            or self._peek().is_a(TokenType.LOGIC, LogicType.THEN)
        ):
            self._advance()

        if self._is_at_end() or self._peek().ttype != TokenType.ACTION:
            raise DanglingCondition("`If` clause has no action", if_token)

        cond = parse_trigger_clause(cond_tokens, logic=LogicType.IF)
        if self.trigger is not None:
            logger.debug(f"External trigger takes precedence over inline condition {cond}")
        else:
            self.condition = cond

    def _connective(self, token: Token) -> None:
        if self.builder is None:
            raise UnexpectedToken("Connective without a clause before it", token)
        previous = self.builder
        self._close()

        if self._is_at_end():
            raise UnexpectedToken("Connective without a clause after it", token)
        nxt = self._peek()
        if nxt.ttype == TokenType.ACTION or nxt.is_a(TokenType.LOGIC, LogicType.IF):
            return
        if nxt.is_period:
            raise UnexpectedToken("Connective without a clause after it", token)
        self.builder = previous.continuation()

    def _close(self) -> None:
        if self.builder is None:
            return
        effect = self.builder.build()
        logger.debug(f"Closed {effect.action.name} clause")
        self.effects.append(effect)
        self.builder = None

    def _works(self, token: Token) -> None:
        """`Works N times per turn` sets the uses of the effect before it."""
        self._close()
        if not self.effects:
            raise UnexpectedToken("Usage limit without an effect", token)

        uses = None
        while not self._is_at_end() and not self._peek().is_period:
            tok = self._advance()
            if tok.ttype == TokenType.NUMBER and uses is None:
                uses = tok.value
        if uses is None:
            raise UnexpectedToken("Usage limit without a count", token)

        self.effects[-1] = replace(self.effects[-1], uses=uses)

    # -------------------------------------------------------------------------
    # Clause contents
    # -------------------------------------------------------------------------

    def _require_builder(self, token: Token) -> _EffectBuilder:
        if self.builder is None:
            raise UnresolvedEntity("No action to attach to", token)
        return self.builder

    def _attach(self, token: Token) -> None:
        builder = self._require_builder(token)
        ttype = token.ttype
        nxt = self._peek()

        if ttype in (TokenType.NUMBER, TokenType.PERCENT) and nxt is not None and nxt.ttype == TokenType.STAT:
            # ex. +1 attack, 50% health
            self._advance()
            builder.modifiers.append(StatModifier(
                nxt.value, int(token.value), percent=ttype == TokenType.PERCENT,
            ))
        elif ttype == TokenType.NUMBER:
            if builder.qualifiers:
                builder.qualifiers.append(token)
            else:
                builder.pending_count = token.value
        elif ttype == TokenType.PERCENT:
            builder.percent = token.value
        elif ttype == TokenType.STATS:
            attack, health = token.value
            builder.modifiers.append(StatModifier(StatType.ATTACK, attack))
            builder.modifiers.append(StatModifier(StatType.HEALTH, health))
        elif ttype in (TokenType.STAT, TokenType.IDENTIFIER):
            builder.qualifiers.append(token)
        elif ttype == TokenType.POSITION:
            builder.add_position(token.value)
        elif ttype in NOUN_TYPES:
            builder.add_entity(resolve_entity(builder.qualifiers, token))
            builder.qualifiers = []
            if ttype == TokenType.TARGET:
                builder.target = token.value
        else:
            raise UnexpectedToken("Token not allowed in an effect", token)

    # -------------------------------------------------------------------------
    # Cursor helpers
    # -------------------------------------------------------------------------

    def _is_at_end(self) -> bool:
        return self.current >= len(self.tokens)

    def _peek(self) -> Optional[Token]:
        return None if self._is_at_end() else self.tokens[self.current]

    def _advance(self) -> Token:
        token = self.tokens[self.current]
        self.current += 1
        return token


# =============================================================================
# PUBLIC API
# =============================================================================

def parse_effects(tokens: Sequence[Token], trigger: Optional[EffectTrigger] = None) -> list[Effect]:
    """Parse an effect-body token stream.

    Args:
        tokens: Scanned effect text.
        trigger: External trigger. When given it becomes the cond_trigger of
            every effect and any inline `If` condition is ignored.

    Returns:
        One Effect per action clause, in source order.

    Raises:
        MissingAction: Body is empty or opens with neither `If` nor an action.
        DanglingCondition: An `If` clause has no action after it.
        UnresolvedEntity: A qualifier appears with no open action clause.
        UnexpectedToken: A connective or usage limit has nothing to bind to.
    """
    return EffectParser(tokens, trigger).parse()


def parse_effect_text(
    text: str,
    trigger: Optional[EffectTrigger] = None,
    config: Optional[ScannerConfig] = None,
) -> list[Effect]:
    """Tokenize and parse effect-body text."""
    return parse_effects(tokenize(text, config), trigger)


def parse_ability(
    trigger_text: Optional[str],
    effect_text: str,
    config: Optional[ScannerConfig] = None,
) -> list[Effect]:
    """Parse a full ability: trigger text plus effect body.

    The first trigger clause becomes the cond_trigger of every effect.
    Without trigger text, effects keep their inline `If` condition (or None).

    Example:
        parse_ability("Start of battle", "Deal 2 damage to one random enemy.")
    """
    trigger = None
    if trigger_text:
        triggers = parse_triggers(tokenize(trigger_text, config))
        trigger = triggers[0]
        if len(triggers) > 1:
            logger.debug(f"Using first of {len(triggers)} triggers for {trigger_text!r}")
    return parse_effects(tokenize(effect_text, config), trigger)


if __name__ == "__main__":
    abilities = [
        ("Faint", "Give one random friend +2 attack and +1 health."),
        ("Start of battle", "Deal 3 damage to the enemy with the lowest health."),
        ("End turn", "If this has a level 3 friend, gain +1 attack and +2 health."),
        ("Friend summoned", "Give it +1 attack until end of battle. Works 2 times per turn."),
        ("Sell", "Stock a Melon Perk."),
    ]

    print("=" * 70)
    print("EFFECT PARSER TEST")
    print("=" * 70)

    for trigger_text, effect_text in abilities:
        print(f"\n{trigger_text}: {effect_text}")
        for effect in parse_ability(trigger_text, effect_text):
            print(f"  - {effect.action.name}")
            if effect.entities:
                print(f"    Entities: {list(effect.entities)}")
            if effect.position:
                print(f"    Position: {[p.name for p in effect.position]}")
            if effect.modifiers:
                print(f"    Modifiers: {[(m.stat.name, m.value) for m in effect.modifiers]}")
            if effect.uses:
                print(f"    Uses: {effect.uses}")
