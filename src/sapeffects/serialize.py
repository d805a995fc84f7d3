"""JSON encoding of parsed triggers and effects.

Thin layer over the `to_dict()` / `from_dict()` pairs on the models. Output
is stable (sorted keys) so encoded abilities can be diffed.
"""

import json
from typing import Any, Callable, Optional, Sequence

from sapeffects.errors import SapEffectsError, SerializationError
from sapeffects.models import Effect, EffectTrigger


def dumps_triggers(triggers: Sequence[EffectTrigger], indent: Optional[int] = None) -> str:
    return json.dumps([t.to_dict() for t in triggers], indent=indent, sort_keys=True)


def dumps_effects(effects: Sequence[Effect], indent: Optional[int] = None) -> str:
    return json.dumps([e.to_dict() for e in effects], indent=indent, sort_keys=True)


def loads_triggers(payload: str) -> list[EffectTrigger]:
    """Decode a JSON list of triggers.

    Raises:
        SerializationError: Payload is not valid JSON or not a list of trigger objects.
    """
    return _loads(payload, EffectTrigger.from_dict, "trigger")


def loads_effects(payload: str) -> list[Effect]:
    """Decode a JSON list of effects.

    Raises:
        SerializationError: Payload is not valid JSON or not a list of effect objects.
    """
    return _loads(payload, Effect.from_dict, "effect")


def _loads(payload: str, from_dict: Callable[[dict], Any], kind: str) -> list:
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise SerializationError(f"Invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise SerializationError(f"Expected a list of {kind}s, got {type(data).__name__}")

    items = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise SerializationError(f"{kind.capitalize()} {i} is not an object")
        try:
            items.append(from_dict(item))
        except SerializationError:
            raise
        except SapEffectsError as e:
            # Model invariants (no action, empty trigger) surface as decode errors.
            raise SerializationError(f"{kind.capitalize()} {i}: {e}") from e
        except (TypeError, ValueError) as e:
            raise SerializationError(f"{kind.capitalize()} {i}: {e}") from e
    return items
