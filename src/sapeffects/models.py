"""
Effect data model.

Parsed triggers and effects are plain immutable values. Each carries a
`to_dict()` / `from_dict()` pair so results can be cached or diffed as JSON;
enums are written by member name and entities carry a "kind" tag.

Usage:
    from sapeffects.models import Effect, Pet, StatModifier
    from sapeffects.vocabulary import ActionType, StatType

    eff = Effect(
        action=ActionType.GAIN,
        entities=(Pet(),),
        modifiers=(StatModifier(StatType.ATTACK, 1),),
    )
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Optional, Union

from sapeffects.errors import EmptyTrigger, MissingAction, SerializationError
from sapeffects.vocabulary import (
    ActionType,
    LogicType,
    PhaseType,
    PositionType,
    StatType,
    TargetType,
)


def _enum_name(value: Optional[IntEnum]) -> Optional[str]:
    return value.name if value is not None else None


def _enum_member(enum_cls: type, name: Optional[str]) -> Any:
    if name is None:
        return None
    try:
        return enum_cls[name]
    except KeyError:
        raise SerializationError(f"Unknown {enum_cls.__name__} member: {name!r}") from None


def _require_dict(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise SerializationError(f"{what} must be an object, got {type(data).__name__}")
    return data


def _list_field(data: dict, key: str) -> list:
    values = data.get(key) or []
    if not isinstance(values, list):
        raise SerializationError(f"{key} must be a list, got {type(values).__name__}")
    if any(value is None for value in values):
        raise SerializationError(f"{key} must not contain null")
    return values


# =============================================================================
# ENTITIES
# =============================================================================

@dataclass(frozen=True)
class Pet:
    """A pet reference. All fields optional: `Pet()` is "some pet"."""
    number: Optional[int] = None
    name: Optional[str] = None
    attr: Optional[str] = None      # ex. "Faint" in `a Faint pet`

    def to_dict(self) -> dict:
        return {"kind": "pet", "number": self.number, "name": self.name, "attr": self.attr}


@dataclass(frozen=True)
class Food:
    name: Optional[str] = None

    def to_dict(self) -> dict:
        return {"kind": "food", "name": self.name}


@dataclass(frozen=True)
class Ability:
    name: Optional[str] = None

    def to_dict(self) -> dict:
        return {"kind": "ability", "name": self.name}


@dataclass(frozen=True)
class Status:
    """Perk or ailment."""
    name: Optional[str] = None

    def to_dict(self) -> dict:
        return {"kind": "status", "name": self.name}


EntityType = Union[Pet, Food, Ability, Status]

ENTITY_KINDS: dict[str, type] = {
    "pet": Pet,
    "food": Food,
    "ability": Ability,
    "status": Status,
}


def entity_from_dict(data: Optional[dict]) -> Optional[EntityType]:
    """Rebuild an entity from its tagged dict form."""
    if data is None:
        return None
    if not isinstance(data, dict):
        raise SerializationError(f"Entity must be an object, got {type(data).__name__}")
    kind = data.get("kind")
    entity_cls = ENTITY_KINDS.get(kind)
    if entity_cls is None:
        raise SerializationError(f"Unknown entity kind: {kind!r}")
    if entity_cls is Pet:
        return Pet(number=data.get("number"), name=data.get("name"), attr=data.get("attr"))
    return entity_cls(name=data.get("name"))


# =============================================================================
# MODIFIERS
# =============================================================================

@dataclass(frozen=True)
class StatModifier:
    """A stat change. `+1 attack` -> StatModifier(ATTACK, 1)."""
    stat: StatType
    value: Optional[int] = None
    percent: bool = False

    def to_dict(self) -> dict:
        return {"stat": self.stat.name, "value": self.value, "percent": self.percent}

    @classmethod
    def from_dict(cls, data: dict) -> "StatModifier":
        data = _require_dict(data, "Stat modifier")
        if data.get("stat") is None:
            raise SerializationError("Stat modifier has no stat")
        return cls(
            stat=_enum_member(StatType, data["stat"]),
            value=data.get("value"),
            percent=bool(data.get("percent", False)),
        )


# =============================================================================
# TRIGGERS AND EFFECTS
# =============================================================================

@dataclass(frozen=True)
class EffectTrigger:
    """One triggering condition.

    Attributes:
        entity: Subject of the trigger. ex. Pet() for `Friend ahead faints`
        logic: Leading logic keyword. ex. START for `Start of battle`
        prim_pos: Position of the subject.
        action: Trigger event verb.
        target: Team of the subject.
        phase: Game phase named by the trigger.
        sec_pos: Position of a second referenced entity.
        sec_entity: Second referenced entity.
    """
    entity: Optional[EntityType] = None
    logic: Optional[LogicType] = None
    prim_pos: Optional[PositionType] = None
    action: Optional[ActionType] = None
    target: Optional[TargetType] = None
    phase: Optional[PhaseType] = None
    sec_pos: Optional[PositionType] = None
    sec_entity: Optional[EntityType] = None

    def __post_init__(self):
        if self.entity is None and self.logic is None:
            raise EmptyTrigger("Trigger has no entity or logic keyword")

    def to_dict(self) -> dict:
        return {
            "entity": self.entity.to_dict() if self.entity is not None else None,
            "logic": _enum_name(self.logic),
            "prim_pos": _enum_name(self.prim_pos),
            "action": _enum_name(self.action),
            "target": _enum_name(self.target),
            "phase": _enum_name(self.phase),
            "sec_pos": _enum_name(self.sec_pos),
            "sec_entity": self.sec_entity.to_dict() if self.sec_entity is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EffectTrigger":
        data = _require_dict(data, "Trigger")
        return cls(
            entity=entity_from_dict(data.get("entity")),
            logic=_enum_member(LogicType, data.get("logic")),
            prim_pos=_enum_member(PositionType, data.get("prim_pos")),
            action=_enum_member(ActionType, data.get("action")),
            target=_enum_member(TargetType, data.get("target")),
            phase=_enum_member(PhaseType, data.get("phase")),
            sec_pos=_enum_member(PositionType, data.get("sec_pos")),
            sec_entity=entity_from_dict(data.get("sec_entity")),
        )


@dataclass(frozen=True)
class Effect:
    """One action clause of an effect body.

    Sequence fields are stored as tuples so the value stays hashable.
    """
    action: Optional[ActionType]
    cond_trigger: Optional[EffectTrigger] = None
    entities: tuple = field(default_factory=tuple)
    position: tuple = field(default_factory=tuple)
    uses: Optional[int] = None          # Works N times per turn
    target: Optional[TargetType] = None
    number: Optional[int] = None
    percent: Optional[float] = None
    modifiers: tuple = field(default_factory=tuple)
    temp: bool = False                  # Lasts until the phase ends

    def __post_init__(self):
        if self.action is None:
            raise MissingAction("Effect has no action")
        for name in ("entities", "position", "modifiers"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    def to_dict(self) -> dict:
        return {
            "action": self.action.name,
            "cond_trigger": self.cond_trigger.to_dict() if self.cond_trigger is not None else None,
            "entities": [entity.to_dict() for entity in self.entities],
            "position": [pos.name for pos in self.position],
            "uses": self.uses,
            "target": _enum_name(self.target),
            "number": self.number,
            "percent": self.percent,
            "modifiers": [mod.to_dict() for mod in self.modifiers],
            "temp": self.temp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Effect":
        data = _require_dict(data, "Effect")
        cond = data.get("cond_trigger")
        return cls(
            action=_enum_member(ActionType, data.get("action")),
            cond_trigger=EffectTrigger.from_dict(cond) if cond is not None else None,
            entities=tuple(entity_from_dict(e) for e in _list_field(data, "entities")),
            position=tuple(_enum_member(PositionType, p) for p in _list_field(data, "position")),
            uses=data.get("uses"),
            target=_enum_member(TargetType, data.get("target")),
            number=data.get("number"),
            percent=data.get("percent"),
            modifiers=tuple(StatModifier.from_dict(m) for m in _list_field(data, "modifiers")),
            temp=bool(data.get("temp", False)),
        )
