"""Virtual clock implementing the Deferrer protocol for headless hosts."""

import heapq
import itertools
import logging
from typing import Callable, List, Tuple

logger = logging.getLogger(__name__)


class ManualCall:
    """Callback scheduled on a ManualClock."""

    def __init__(self, fn: Callable[[], None], due_ms: int):
        self.fn = fn
        self.due_ms = due_ms
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self):
        self.cancelled = True


class ManualClock:
    """
    Deterministic time source: callbacks only run when the clock is advanced.

    Callbacks scheduled while advancing run in the same pass if they fall due
    before the target time, in (due time, scheduling order) order.
    """

    def __init__(self):
        self.now_ms = 0
        self._seq = itertools.count()
        self._heap: List[Tuple[int, int, ManualCall]] = []

    def call_later(self, fn: Callable[[], None], delay_ms: int) -> ManualCall:
        call = ManualCall(fn, self.now_ms + max(0, int(delay_ms)))
        heapq.heappush(self._heap, (call.due_ms, next(self._seq), call))
        return call

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, call in self._heap if call.pending)

    def advance(self, ms: int) -> int:
        """Move time forward by ``ms``, running due callbacks. Returns calls run."""
        target = self.now_ms + ms
        ran = 0
        while self._heap and self._heap[0][0] <= target:
            due, _, call = heapq.heappop(self._heap)
            self.now_ms = due
            if call.pending:
                call.fired = True
                call.fn()
                ran += 1
        self.now_ms = target
        return ran

    def run_pending(self, limit_ms: int = 60_000) -> int:
        """Advance until nothing is scheduled (bounded by ``limit_ms``)."""
        ran = 0
        deadline = self.now_ms + limit_ms
        while self._heap and self.now_ms < deadline:
            next_due = self._heap[0][0]
            ran += self.advance(max(0, next_due - self.now_ms))
        return ran
