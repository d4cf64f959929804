"""
Ready-made host surfaces.
"""

from .memory_host import InMemoryHost, MAIN_WINDOW

__all__ = [
    "InMemoryHost",
    "MAIN_WINDOW",
]
