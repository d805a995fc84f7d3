"""
Trigger Parser Tests

Test categories:
1. Single clauses - events, positions, counts, phases
2. Clause lists - `&`, `and`, `or`, event inheritance
3. Inline conditions and entity resolution
4. Errors
"""

import pytest

from sapeffects.errors import EmptyTrigger, ParseError, UnexpectedToken
from sapeffects.models import EffectTrigger, Food, Pet, Status
from sapeffects.scanner import tokenize
from sapeffects.tokens import Token
from sapeffects.trigger_parser import (
    parse_trigger_clause,
    parse_trigger_text,
    parse_triggers,
    resolve_entity,
)
from sapeffects.vocabulary import (
    ActionType,
    LogicType,
    PhaseType,
    PositionType,
    TargetType,
    TokenType,
)


# =============================================================================
# HELPERS
# =============================================================================

def parse_one(text):
    """Parse text expected to hold exactly one trigger clause."""
    triggers = parse_trigger_text(text)
    assert len(triggers) == 1, f"{text!r}: expected 1 trigger, got {triggers}"
    return triggers[0]


def significant(text):
    return [t for t in tokenize(text) if t.ttype != TokenType.UNKNOWN]


def assert_well_formed(triggers):
    for trigger in triggers:
        assert trigger.entity is not None or trigger.logic is not None


# =============================================================================
# 1. SINGLE CLAUSES
# =============================================================================

class TestSingleClause:
    """One clause, one trigger."""

    def test_positional_trigger(self):
        assert parse_one("Friend ahead faints") == EffectTrigger(
            entity=Pet(),
            prim_pos=PositionType.AHEAD,
            action=ActionType.FAINT,
            target=TargetType.FRIEND,
        )

    def test_numeric_trigger(self):
        assert parse_one("Two friends faint") == EffectTrigger(
            entity=Pet(number=2),
            prim_pos=PositionType.TRIGGER,
            action=ActionType.FAINT,
            target=TargetType.FRIEND,
        )

    def test_bare_event_refers_to_self(self, faint_trigger):
        assert parse_one("Faint") == faint_trigger

    def test_entity_without_position_uses_trigger(self, friend_summoned_trigger):
        assert parse_one("Friend summoned") == friend_summoned_trigger

    def test_enemy_trigger(self):
        trigger = parse_one("Enemy summoned")
        assert trigger.target == TargetType.ENEMY
        assert trigger.prim_pos == PositionType.TRIGGER

    def test_logic_with_attack(self):
        assert parse_one("Before attack") == EffectTrigger(
            logic=LogicType.BEFORE,
            action=ActionType.ATTACK,
        )

    def test_phase_trigger(self):
        assert parse_one("Start of battle") == EffectTrigger(
            logic=LogicType.START,
            phase=PhaseType.BATTLE,
        )

    def test_shop_event_targets_shop(self):
        assert parse_one("Sell") == EffectTrigger(
            entity=Pet(),
            prim_pos=PositionType.ON_SELF,
            action=ActionType.SELL,
            target=TargetType.SHOP,
        )

    def test_shop_food_trigger(self):
        assert parse_one("Buy food") == EffectTrigger(
            entity=Food(),
            prim_pos=PositionType.TRIGGER,
            action=ActionType.BUY,
            target=TargetType.SHOP,
        )

    def test_secondary_entity(self):
        trigger = parse_one("Friend bought a level 3 pet")
        assert trigger.entity == Pet()
        assert trigger.sec_entity == Pet(attr="level 3")
        assert trigger.target == TargetType.FRIEND
        assert trigger.action == ActionType.BUY

    def test_named_pet_trigger(self):
        assert parse_one("Ant faints") == EffectTrigger(
            entity=Pet(name="Ant"),
            prim_pos=PositionType.TRIGGER,
            action=ActionType.FAINT,
        )


# =============================================================================
# 2. CLAUSE LISTS
# =============================================================================

class TestClauseList:
    """Connective-separated clause lists."""

    def test_ampersand_triggers(self):
        """`End turn & Start of battle` - two phase triggers, no entity."""
        triggers = parse_trigger_text("End turn & Start of battle")
        assert triggers == [
            EffectTrigger(logic=LogicType.END, phase=PhaseType.TURN),
            EffectTrigger(logic=LogicType.START, phase=PhaseType.BATTLE),
        ]
        assert all(t.entity is None for t in triggers)

    def test_or_triggers(self):
        triggers = parse_trigger_text("After attack or before attack")
        assert [t.logic for t in triggers] == [LogicType.AFTER, LogicType.BEFORE]
        assert all(t.action == ActionType.ATTACK for t in triggers)

    def test_ampersand_matches_and(self):
        assert parse_trigger_text("After attack & before attack") == parse_trigger_text(
            "After attack and before attack"
        )

    def test_event_carries_to_next_clause(self):
        triggers = parse_trigger_text("Gains perk or ailment")
        expected = EffectTrigger(
            entity=Status(),
            prim_pos=PositionType.TRIGGER,
            action=ActionType.GAIN,
        )
        assert triggers == [expected, expected]

    def test_token_input(self):
        assert parse_triggers(tokenize("Faint")) == parse_trigger_text("Faint")

    def test_every_trigger_well_formed(self):
        for text in ["Faint", "End turn", "Friend ahead attacks", "Hurt or faint"]:
            assert_well_formed(parse_trigger_text(text))


# =============================================================================
# 3. INLINE CONDITIONS AND ENTITIES
# =============================================================================

class TestClauseResolution:
    """Single clauses parsed with a caller-supplied logic keyword."""

    def test_if_condition(self):
        trigger = parse_trigger_clause(tokenize("this has a level 3 friend"), logic=LogicType.IF)
        assert trigger == EffectTrigger(
            entity=Pet(attr="level 3 friend"),
            logic=LogicType.IF,
            prim_pos=PositionType.ON_SELF,
            target=TargetType.FRIEND,
        )

    def test_condition_logic_wins(self):
        trigger = parse_trigger_clause(tokenize("is a Faint pet"), logic=LogicType.IF)
        assert trigger.logic == LogicType.IF
        assert trigger.entity == Pet(attr="Faint")

    def test_resolve_attribute_pet(self):
        *quals, noun = significant("a Faint pet")
        assert resolve_entity(quals, noun) == Pet(attr="Faint")

    def test_resolve_counted_team(self):
        *quals, noun = significant("two friends")
        assert resolve_entity(quals, noun) == Pet(number=2)

    def test_resolve_named_food(self):
        assert resolve_entity(significant("Melon Perk"), None) == Food(name="Melon Perk")

    def test_resolve_named_pet(self):
        assert resolve_entity(significant("Lizard Tail"), None) == Pet(name="Lizard Tail")

    def test_resolve_named_status(self):
        *quals, noun = significant("Melon Perk perk")
        assert resolve_entity(quals, noun) == Status(name="Melon Perk")

    def test_resolve_nothing(self):
        assert resolve_entity([], None) is None


# =============================================================================
# 4. ERRORS
# =============================================================================

class TestTriggerErrors:
    """Inputs the trigger grammar rejects."""

    def test_empty_text(self):
        with pytest.raises(EmptyTrigger):
            parse_trigger_text("")

    def test_no_entity_or_logic(self):
        with pytest.raises(EmptyTrigger, match="no entity or logic"):
            parse_trigger_text("ahead")

    def test_effect_verb_rejected(self):
        with pytest.raises(UnexpectedToken, match="Effect verb") as exc:
            parse_trigger_text("Gain perk")
        assert isinstance(exc.value.token, Token)
        assert exc.value.token.text == "Gain"

    def test_trailing_connective(self):
        with pytest.raises(UnexpectedToken, match="after it"):
            parse_trigger_text("End turn &")

    def test_leading_connective(self):
        with pytest.raises(UnexpectedToken, match="before it"):
            parse_trigger_text("& End turn")

    def test_connective_inside_clause(self):
        with pytest.raises(UnexpectedToken, match="Connective"):
            parse_trigger_clause(tokenize("Faint and hurt"))

    def test_direct_construction_enforces_invariant(self):
        with pytest.raises(EmptyTrigger):
            EffectTrigger(prim_pos=PositionType.AHEAD)

    def test_parse_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            parse_trigger_text("ahead")
        with pytest.raises(ParseError):
            parse_trigger_text("ahead")
