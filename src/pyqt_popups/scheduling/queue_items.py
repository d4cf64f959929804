"""Items held by a popup's operation queue."""

from dataclasses import dataclass
from typing import Any, Tuple, Union


@dataclass(frozen=True)
class Operation:
    """Named popup operation with its captured (immutable) arguments."""

    name: str
    args: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class Wait:
    """Pause the queue for ``duration_ms``."""

    duration_ms: int


@dataclass(frozen=True)
class Block:
    """Ordered sub-sequence unrolled in place the next time the queue advances."""

    items: Tuple["QueueItem", ...]


@dataclass(frozen=True)
class Noop:
    """Empty item, skipped immediately."""


NOOP = Noop()

QueueItem = Union[Operation, Wait, Block, Noop]
