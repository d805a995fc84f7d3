"""Shared test fixtures."""
import os
import sys
import pytest

# Add src/ to path so tests run without an editable install
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, os.path.join(_project_root, "src"))

from sapeffects.config import ScannerConfig  # noqa: E402
from sapeffects.models import EffectTrigger, Pet  # noqa: E402
from sapeffects.vocabulary import ActionType, LogicType, PositionType, TargetType  # noqa: E402


@pytest.fixture
def quiet_config():
    """Scanner config that drops filler words."""
    return ScannerConfig(emit_unknown=False)


@pytest.fixture
def faint_trigger():
    """Trigger for a bare `Faint` ability."""
    return EffectTrigger(
        entity=Pet(),
        prim_pos=PositionType.ON_SELF,
        action=ActionType.FAINT,
    )


@pytest.fixture
def friend_summoned_trigger():
    """Trigger for `Friend summoned`."""
    return EffectTrigger(
        entity=Pet(),
        prim_pos=PositionType.TRIGGER,
        action=ActionType.SUMMON,
        target=TargetType.FRIEND,
    )


@pytest.fixture
def start_of_battle_trigger():
    return EffectTrigger(logic=LogicType.START)
