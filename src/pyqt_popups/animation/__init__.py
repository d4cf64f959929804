"""Popup animations: fade, move and interactive drag."""

from .animation_config import (
    AnimationConfig,
    get_animation_config,
    set_animation_config,
)
from .fade import FadeDriver, FadeStep, plan_fade
from .move import Direction, MoveDriver, displaced, move_bounds
from .drag import DragController

__all__ = [
    "AnimationConfig",
    "get_animation_config",
    "set_animation_config",
    "FadeDriver",
    "FadeStep",
    "plan_fade",
    "Direction",
    "MoveDriver",
    "displaced",
    "move_bounds",
    "DragController",
]
