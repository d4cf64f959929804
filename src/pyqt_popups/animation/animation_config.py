"""Declarative configuration for popup animations."""

from dataclasses import dataclass
from typing import Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class AnimationConfig:
    """Fade and move animation tuning knobs."""

    fade_step_ms: int = 10  # one blend frame
    default_fade_seconds: float = 1.0
    move_interval_ms: int = 20
    move_cells_per_step: int = 1

    def __post_init__(self):
        if self.fade_step_ms <= 0:
            logger.warning(f"[AnimationConfig] Invalid fade_step_ms {self.fade_step_ms}, using 10ms")
            self.fade_step_ms = 10
        if self.move_interval_ms < 0:
            logger.warning(f"[AnimationConfig] Invalid move_interval_ms {self.move_interval_ms}, using 20ms")
            self.move_interval_ms = 20
        if self.move_cells_per_step < 1:
            self.move_cells_per_step = 1


_config: Optional[AnimationConfig] = None


def get_animation_config() -> AnimationConfig:
    """Return singleton animation config."""
    global _config
    if _config is None:
        _config = AnimationConfig()
    return _config


def set_animation_config(config: Optional[AnimationConfig]) -> None:
    """Replace the animation config (None restores defaults)."""
    global _config
    _config = config
