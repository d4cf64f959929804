"""
Operation scheduling.

Per-popup queue of chained operations with a single in-flight permit.
"""

from .queue_items import Operation, Wait, Block, Noop, NOOP, QueueItem
from .scheduler import Scheduler, InFlightToken

__all__ = [
    "Operation",
    "Wait",
    "Block",
    "Noop",
    "NOOP",
    "QueueItem",
    "Scheduler",
    "InFlightToken",
]
