"""Pure merge helpers for option mappings.

Both helpers return a new dict and never mutate their arguments, so values
captured by queued operations stay untouched.
"""

from typing import Any, Dict, Mapping, Optional


def merge_overwrite(base: Optional[Mapping[str, Any]], patch: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return ``base`` updated with every key of ``patch``."""
    merged = dict(base or {})
    if patch:
        merged.update(patch)
    return merged


def merge_defaults(base: Optional[Mapping[str, Any]], patch: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return ``base`` with keys from ``patch`` filled in where ``base`` has none (or None)."""
    merged = dict(base or {})
    for key, value in (patch or {}).items():
        if merged.get(key) is None:
            merged[key] = value
    return merged
