"""
Effect Parser Tests

Test categories:
1. Stat effects - modifiers, `and` continuations, percents
2. Targeting - positions, counts, named pets and foods
3. Conditions - inline `If`, external trigger precedence
4. Usage limits and temporary effects
5. Grammar errors
"""

import pytest

from sapeffects.effect_parser import parse_ability, parse_effect_text, parse_effects
from sapeffects.errors import (
    DanglingCondition,
    MissingAction,
    ParseError,
    UnexpectedToken,
    UnresolvedEntity,
)
from sapeffects.models import Effect, EffectTrigger, Food, Pet, StatModifier
from sapeffects.scanner import tokenize
from sapeffects.vocabulary import (
    ActionType,
    LogicType,
    PhaseType,
    PositionType,
    StatType,
    TargetType,
)


# =============================================================================
# HELPERS
# =============================================================================

def assert_actions(effects, expected_actions, text=""):
    """Assert effect actions in order."""
    actions = [e.action for e in effects]
    assert actions == expected_actions, f"{text!r}: got {[a.name for a in actions]}"


def attack(value, percent=False):
    return StatModifier(StatType.ATTACK, value, percent)


def health(value):
    return StatModifier(StatType.HEALTH, value)


# =============================================================================
# 1. STAT EFFECTS
# =============================================================================

class TestStatEffects:
    """Stat modifiers and `and` continuations."""

    def test_level_condition_with_two_stats(self):
        """The two Gain effects share one inline condition."""
        effects = parse_effect_text("If this has a level 3 friend, gain +1 attack and +2 health.")
        cond = EffectTrigger(
            entity=Pet(attr="level 3 friend"),
            logic=LogicType.IF,
            prim_pos=PositionType.ON_SELF,
            target=TargetType.FRIEND,
        )
        assert effects == [
            Effect(action=ActionType.GAIN, cond_trigger=cond, modifiers=(attack(1),)),
            Effect(action=ActionType.GAIN, cond_trigger=cond, modifiers=(health(2),)),
        ]
        assert effects[0].cond_trigger is effects[1].cond_trigger

    def test_continuation_keeps_target(self):
        effects = parse_effect_text("Give one random friend +2 attack and +1 health.")
        assert_actions(effects, [ActionType.GIVE, ActionType.GIVE])
        for effect in effects:
            assert effect.entities == (Pet(number=1),)
            assert effect.position == (PositionType.ANY,)
            assert effect.target == TargetType.FRIEND
        assert effects[0].modifiers == (attack(2),)
        assert effects[1].modifiers == (health(1),)

    def test_and_with_new_action(self):
        effects = parse_effect_text("Give +1 attack to the nearest friend behind and deal 2 damage.")
        assert effects == [
            Effect(
                action=ActionType.GIVE,
                entities=(Pet(),),
                position=(PositionType.NEAREST, PositionType.BEHIND),
                target=TargetType.FRIEND,
                modifiers=(attack(1),),
            ),
            Effect(
                action=ActionType.DEAL,
                modifiers=(StatModifier(StatType.DAMAGE, 2),),
            ),
        ]

    def test_percent_modifier(self):
        effects = parse_effect_text("Gain 50% attack.")
        assert effects[0].modifiers == (attack(50, percent=True),)

    def test_bare_percent(self):
        effects = parse_effect_text("Discount 50%.")
        assert effects[0].percent == 50.0

    def test_gold(self):
        effects = parse_effect_text("Gain 1 gold.")
        assert effects == [
            Effect(action=ActionType.GAIN, modifiers=(StatModifier(StatType.GOLD, 1),)),
        ]

    def test_stat_reference_without_value(self):
        effects = parse_effect_text("Deal damage equal to its attack.")
        assert effects[0].position == (PositionType.TRIGGER,)
        assert StatModifier(StatType.ATTACK) in effects[0].modifiers


# =============================================================================
# 2. TARGETING
# =============================================================================

class TestTargeting:
    """Entities, positions and counts."""

    def test_damage_to_random_enemy(self):
        effects = parse_effect_text("Deal 3 damage to one random enemy.")
        assert effects == [
            Effect(
                action=ActionType.DEAL,
                entities=(Pet(number=1),),
                position=(PositionType.ANY,),
                target=TargetType.ENEMY,
                modifiers=(StatModifier(StatType.DAMAGE, 3),),
            ),
        ]

    def test_superlative_stat_is_a_position(self):
        """`lowest health` picks the target; it does not change health."""
        effects = parse_effect_text("Deal 3 damage to the enemy with the lowest health.")
        assert effects == [
            Effect(
                action=ActionType.DEAL,
                entities=(Pet(),),
                position=(PositionType.ILLEST,),
                target=TargetType.ENEMY,
                modifiers=(StatModifier(StatType.DAMAGE, 3),),
            ),
        ]

    @pytest.mark.parametrize("phrase,position", [
        ("highest health", PositionType.HEALTHIEST),
        ("highest attack", PositionType.STRONGEST),
        ("lowest attack", PositionType.WEAKEST),
    ])
    def test_superlative_positions(self, phrase, position):
        effects = parse_effect_text(f"Give the friend with the {phrase} +1 health.")
        assert effects[0].position == (position,)
        assert effects[0].modifiers == (health(1),)

    def test_summon_named_pet(self):
        effects = parse_effect_text("Summon one 2/2 Ram.")
        assert effects == [
            Effect(
                action=ActionType.SUMMON,
                entities=(Pet(number=1, name="Ram"),),
                modifiers=(attack(2), health(2)),
            ),
        ]

    def test_stock_food(self):
        effects = parse_effect_text("Stock a Melon Perk.")
        assert effects[0].entities == (Food(name="Melon Perk"),)

    def test_counted_friends(self):
        effects = parse_effect_text("Give two friends behind +1 health.")
        assert effects[0].entities == (Pet(number=2),)
        assert effects[0].position == (PositionType.BEHIND,)

    def test_bare_number(self):
        effects = parse_effect_text("Spend 2.")
        assert effects[0].number == 2


# =============================================================================
# 3. CONDITIONS
# =============================================================================

class TestConditions:
    """Inline `If` conditions and external triggers."""

    def test_external_trigger_applied(self, faint_trigger):
        effects = parse_ability("Faint", "Give one random friend +2 attack.")
        assert len(effects) == 1
        assert effects[0].cond_trigger == faint_trigger

    def test_external_trigger_wins(self, faint_trigger):
        effects = parse_effect_text(
            "If this has a level 3 friend, gain +1 attack.", trigger=faint_trigger,
        )
        assert effects[0].cond_trigger == faint_trigger

    def test_no_trigger(self):
        effects = parse_ability(None, "Gain 1 gold.")
        assert effects[0].cond_trigger is None

    def test_first_of_several_triggers(self):
        effects = parse_ability("End turn & Start of battle", "Gain +1 attack.")
        assert effects[0].cond_trigger == EffectTrigger(logic=LogicType.END, phase=PhaseType.TURN)

    def test_then_is_skipped(self):
        effects = parse_effect_text("If this is hurt, then gain +2 attack.")
        assert_actions(effects, [ActionType.GAIN])
        assert effects[0].cond_trigger.logic == LogicType.IF

    def test_token_input(self, start_of_battle_trigger):
        effects = parse_effects(tokenize("Deal 2 damage."), start_of_battle_trigger)
        assert effects[0].cond_trigger == start_of_battle_trigger


# =============================================================================
# 4. USAGE LIMITS AND DURATION
# =============================================================================

class TestUsesAndDuration:
    """`Works N times per turn` and `until ...`."""

    def test_works_sets_uses(self):
        effects = parse_effect_text("Give it +1 attack until end of battle. Works 2 times per turn.")
        assert effects == [
            Effect(
                action=ActionType.GIVE,
                position=(PositionType.TRIGGER,),
                modifiers=(attack(1),),
                temp=True,
                uses=2,
            ),
        ]

    def test_works_once(self):
        effects = parse_effect_text("Gain +1 health. Works once per turn.")
        assert effects[0].uses == 1

    def test_works_applies_to_last_effect(self):
        effects = parse_effect_text("Gain +1 attack. Gain +1 health. Works twice per turn.")
        assert [e.uses for e in effects] == [None, 2]


# =============================================================================
# 5. ERRORS
# =============================================================================

class TestEffectErrors:
    """Bodies the effect grammar rejects."""

    def test_missing_action(self):
        with pytest.raises(MissingAction, match="open with"):
            parse_effect_text("Banana swims.")

    def test_empty_body(self):
        with pytest.raises(MissingAction, match="empty"):
            parse_effect_text("")

    def test_dangling_condition(self):
        with pytest.raises(DanglingCondition, match="no action"):
            parse_effect_text("If it was a Faint pet.")

    def test_unresolved_entity(self):
        with pytest.raises(UnresolvedEntity):
            parse_effect_text("Gain +1 attack. Ram")

    def test_trailing_connective(self):
        with pytest.raises(UnexpectedToken):
            parse_effect_text("Gain +1 attack and")
        with pytest.raises(UnexpectedToken):
            parse_effect_text("Gain +1 attack and.")

    def test_works_without_count(self):
        with pytest.raises(UnexpectedToken, match="count"):
            parse_effect_text("Gain +1 attack. Works per turn.")

    def test_effect_requires_action(self):
        with pytest.raises(MissingAction):
            Effect(action=None)

    def test_errors_are_parse_errors(self):
        for text in ["Banana swims.", "If it was a Faint pet."]:
            with pytest.raises(ParseError):
                parse_effect_text(text)
