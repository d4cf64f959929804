"""Fade animation driver.

A fade raises the window blend from the popup's stored level to a target in
fixed-interval steps. The stored level itself is left alone, so the next
show restores the pre-fade opacity.

The whole plan is scheduled up front on the host timer; each tick re-checks
that its InFlightToken is still current, so clearing the queue
(hide_now/destroy_now) silently disarms the remaining ticks.

Timeline for start=0, target=100, seconds=1.0, step=10ms:
    t=10ms  -> 1
    t=20ms  -> 2
    ...
    t=1000ms -> 100 (final tick: hide when fully transparent, release token)

When the popup or border highlight stands out from ``Normal``'s background,
its foreground (and, for the border, its background) is blended toward that
background as well, since blending the window alone leaves text visible.
"""

import logging
from dataclasses import dataclass
from functools import partial
from typing import List, Optional, TYPE_CHECKING

from pyqt_popups.animation.animation_config import AnimationConfig, get_animation_config
from pyqt_popups.core.error_reporting import call_reporting_errors
from pyqt_popups.geometry.engine import clamp
from pyqt_popups.theming.blend_cache import NORMAL_GROUP, BlendCache, ResolvedHighlight

if TYPE_CHECKING:
    from pyqt_popups.popup.handle import Popup
    from pyqt_popups.scheduling.scheduler import InFlightToken

logger = logging.getLogger(__name__)

POPUP_GROUP = "PopupNormal"
BORDER_GROUP = "PopupBorder"


@dataclass(frozen=True)
class FadeStep:
    """One committed blend value and its delay from the start of the fade."""

    delay_ms: int
    blend: int
    final: bool = False


def plan_fade(start: int, target: int, seconds: float, step_ms: int) -> List[FadeStep]:
    """Precompute the (delay, blend) steps of a fade.

    Values increase monotonically; a step is only committed when the running
    value crosses the next whole integer, and the last step is the target.
    """
    steps = max(1, int(round(seconds * 1000 / step_ms)))
    plan: List[FadeStep] = []
    committed = start
    for index in range(1, steps + 1):
        if index == steps:
            plan.append(FadeStep(index * step_ms, target, final=True))
            break
        # floor of start + index * (target - start) / steps, in integers
        value = start + (target - start) * index // steps
        if value > committed:
            committed = value
            plan.append(FadeStep(index * step_ms, value))
    return plan


def stands_out(highlight: ResolvedHighlight, normal: ResolvedHighlight) -> bool:
    """Whether ``highlight`` shows against Normal's background."""
    return highlight.background != normal.background or highlight.foreground != normal.background


class FadeDriver:
    """Fades one popup toward a target blend level."""

    def __init__(self, popup: "Popup", config: Optional[AnimationConfig] = None):
        self._popup = popup
        self._config = config or get_animation_config()
        self._token: Optional["InFlightToken"] = None
        self._win: Optional[int] = None
        self._hide_when_over = False
        self._blend_body = False
        self._blend_border = False
        self._body_background = ""

    @property
    def token(self) -> Optional["InFlightToken"]:
        return self._token

    def start(self, seconds: Optional[float] = None, target: Optional[int] = None,
              hide_when_over: bool = False) -> bool:
        """Schedule the fade. Returns False when there is nothing to do."""
        popup = self._popup
        host = popup.host
        if not host.current_screen_metrics().true_color:
            logger.debug("[FADE] Host has no true color, skipping fade")
            return False
        if not popup.is_visible():
            return False

        target = clamp(100 if target is None else int(target), 0, 100)
        start = popup.state.blend_level
        if target <= start:
            return False
        if seconds is None:
            seconds = self._config.default_fade_seconds

        cache = BlendCache.instance()
        normal = cache.resolve(NORMAL_GROUP)
        body = cache.resolve(POPUP_GROUP)
        border = cache.resolve(BORDER_GROUP)
        self._blend_body = stands_out(body, normal)
        self._blend_border = stands_out(border, normal)
        self._body_background = body.background_hex

        self._token = popup.scheduler.acquire("fade")
        self._win = popup.state.win
        self._hide_when_over = hide_when_over

        plan = plan_fade(start, target, seconds, self._config.fade_step_ms)
        logger.debug(f"[FADE] Popup {popup.state.id}: {start} -> {target} in {len(plan)} steps")
        for step in plan:
            host.defer_callback(partial(self._tick, step), step.delay_ms)
        return True

    def _alive(self) -> bool:
        popup = self._popup
        return (
            self._token is not None
            and self._token.current
            and not popup.state.destroyed
            and popup.state.win == self._win
            and popup.is_visible()
        )

    def _tick(self, step: FadeStep) -> None:
        if self._alive():
            ok, _ = call_reporting_errors(self._popup.host, "fade", self._commit, step.blend)
            if not ok:
                self._token.release()
                return
            if step.final and (step.blend >= 100 or self._hide_when_over):
                self._popup.run_now("hide")
        if step.final and self._token is not None:
            self._token.release()

    def _commit(self, blend: int) -> None:
        popup = self._popup
        host = popup.host
        host.set_window_option(self._win, "winblend", blend)
        popup.state.live_blend = blend

        cache = BlendCache.instance()
        if self._blend_body:
            host.define_highlight(
                POPUP_GROUP,
                foreground=cache.blend_toward(blend, POPUP_GROUP, NORMAL_GROUP, True),
                background=self._body_background,
            )
        if self._blend_border:
            host.define_highlight(
                BORDER_GROUP,
                foreground=cache.blend_toward(blend, BORDER_GROUP, NORMAL_GROUP, True),
                background=cache.blend_toward(blend, BORDER_GROUP, NORMAL_GROUP, False),
            )
