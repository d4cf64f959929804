"""Per-popup operation queue.

Chained popup operations are appended here and executed strictly in order,
one at a time, even when some of them complete asynchronously.

Concurrency model:
- Single-threaded and cooperative, driven by host timers.
- The scheduler owns one permit (InFlightToken). A Wait item or an animation
  driver takes it; nothing else runs until it is released. It behaves like a
  semaphore with a single permit.
- Every holder must release the token exactly once. Releasing a token that
  was invalidated by clear() is a no-op, which is how late timer ticks of a
  cancelled driver are neutralised.
"""

import logging
from collections import deque
from typing import Any, Callable, Deque, Optional, Tuple

from pyqt_popups.exceptions import OperationFailure, PopupError
from pyqt_popups.scheduling.queue_items import Block, Noop, Operation, QueueItem, Wait

logger = logging.getLogger(__name__)


class InFlightToken:
    """The scheduler's single permit, held by one Wait or driver at a time."""

    def __init__(self, scheduler: "Scheduler", owner: str):
        self._scheduler = scheduler
        self.owner = owner
        self.released = False

    @property
    def current(self) -> bool:
        """False once released or invalidated by Scheduler.clear()."""
        return not self.released and self._scheduler._token is self

    def release(self) -> None:
        """Hand the permit back and let the queue proceed."""
        if self.released:
            return
        self.released = True
        self._scheduler._release(self)

    def __repr__(self):
        return f"InFlightToken(owner={self.owner!r}, current={self.current})"


class Scheduler:
    """
    Ordered queue of pending operations for one popup.

    Args:
        invoke: Executes an Operation synchronously
        defer: ``defer(fn, delay_ms)`` schedules a callback on the host timer
        on_error: Receives failures of invoked operations
        name: Label used in log messages
    """

    def __init__(
        self,
        invoke: Callable[[Operation], Any],
        defer: Callable[[Callable[[], None], int], Any],
        on_error: Optional[Callable[[BaseException], None]] = None,
        name: str = "",
    ):
        self._invoke = invoke
        self._defer = defer
        self._on_error = on_error
        self.name = name
        self._items: Deque[QueueItem] = deque()
        self._token: Optional[InFlightToken] = None
        self._draining = False
        self.stopped = False

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> Tuple[QueueItem, ...]:
        return tuple(self._items)

    @property
    def waiting(self) -> bool:
        return self._token is not None

    @property
    def token(self) -> Optional[InFlightToken]:
        return self._token

    # ========== QUEUEING ==========

    def enqueue(self, item: QueueItem, priority: bool = False) -> None:
        """Append ``item`` (or put it at the head when ``priority``).

        Enqueueing re-arms a scheduler stopped by clear().
        """
        if self.stopped:
            self.stopped = False
            logger.debug(f"[SCHEDULER] {self.name} re-armed")
        if priority:
            self._items.appendleft(item)
        else:
            self._items.append(item)

    def clear(self) -> None:
        """Drop all pending items and invalidate the in-flight token."""
        if self._items or self._token is not None:
            logger.debug(f"[SCHEDULER] {self.name} cleared {len(self._items)} items")
        self.stopped = True
        self._items.clear()
        self._token = None

    # ========== PERMIT ==========

    def acquire(self, owner: str) -> InFlightToken:
        """Take the single permit. The queue stays blocked until it's released.

        Raises:
            RuntimeError: if another holder has it
        """
        if self._token is not None:
            raise RuntimeError(f"Scheduler permit already held by {self._token.owner}")
        self._token = InFlightToken(self, owner)
        logger.debug(f"[SCHEDULER] {self.name} permit -> {owner}")
        return self._token

    def _release(self, token: InFlightToken) -> None:
        if self._token is not token:
            logger.debug(f"[SCHEDULER] {self.name} ignoring stale release from {token.owner}")
            return
        self._token = None
        logger.debug(f"[SCHEDULER] {self.name} permit <- {token.owner}")
        self.advance()

    # ========== DRAINING ==========

    def advance(self) -> None:
        """Run queued items until the queue is empty, stopped or waiting."""
        if self._draining:
            # re-entrant call from an operation: the outer loop continues
            return
        self._draining = True
        try:
            while self._items and not self.stopped:
                item = self._items.popleft()
                if isinstance(item, Noop):
                    continue
                if self.waiting:
                    self._items.appendleft(item)
                    break
                if isinstance(item, Wait):
                    token = self.acquire("wait")
                    self._defer(token.release, item.duration_ms)
                elif isinstance(item, Block):
                    # unroll on top, in the same order as in the block
                    self._items.extendleft(reversed(item.items))
                else:
                    self._run(item)
        finally:
            self._draining = False

    def _run(self, operation: Operation) -> None:
        held_before = self._token
        try:
            self._invoke(operation)
        except Exception as e:
            if self._token is not None and self._token is not held_before:
                # a driver took the permit and then failed: don't jam the queue
                self._token.released = True
                self._token = None
            failure = e if isinstance(e, PopupError) else OperationFailure(operation.name, e)
            logger.warning(f"[SCHEDULER] {self.name} operation '{operation.name}' failed: {e}")
            if self._on_error is not None:
                self._on_error(failure)
