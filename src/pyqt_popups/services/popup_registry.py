"""Global popup registry.

Popups are grouped by namespace so related popups can be destroyed together.
Ids are unique for the life of the process and never reused.

Example Usage:

    popup = PopupRegistry.instance().get(3)
    PopupRegistry.instance().destroy_namespace("diagnostics")
"""

import logging
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from pyqt_popups.popup.handle import Popup

logger = logging.getLogger(__name__)


class PopupRegistry:
    """Namespace -> id -> popup."""

    _instance: Optional["PopupRegistry"] = None

    @classmethod
    def instance(cls) -> "PopupRegistry":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        cls._instance = None

    def __init__(self):
        self._next_id = 0
        self._namespaces: Dict[str, Dict[int, "Popup"]] = {}

    def __len__(self) -> int:
        return sum(len(popups) for popups in self._namespaces.values())

    def __contains__(self, popup: "Popup") -> bool:
        return self.get(popup.id) is popup

    @property
    def namespaces(self) -> List[str]:
        return list(self._namespaces)

    def register(self, popup: "Popup") -> int:
        """Assign the next id to ``popup`` and file it under its namespace."""
        self._next_id += 1
        popup_id = self._next_id
        popup.assign_id(popup_id)
        self._namespaces.setdefault(popup.options.namespace, {})[popup_id] = popup
        logger.debug(f"[REGISTRY] Registered popup {popup_id} in namespace {popup.options.namespace!r}")
        return popup_id

    def unregister(self, popup: "Popup") -> bool:
        popups = self._namespaces.get(popup.options.namespace)
        if not popups or popups.get(popup.id) is not popup:
            return False
        del popups[popup.id]
        if not popups:
            del self._namespaces[popup.options.namespace]
        logger.debug(f"[REGISTRY] Unregistered popup {popup.id}")
        return True

    def get(self, popup_id: int) -> Optional["Popup"]:
        for popups in self._namespaces.values():
            if popup_id in popups:
                return popups[popup_id]
        return None

    def in_namespace(self, namespace: str) -> List["Popup"]:
        return list(self._namespaces.get(namespace, {}).values())

    def for_each_in_namespace(self, namespace: str, fn: Callable[["Popup"], None]) -> None:
        """Call ``fn`` on every popup of ``namespace``, safe against unregistering."""
        for popup in self.in_namespace(namespace):
            fn(popup)

    def destroy_namespace(self, namespace: str) -> None:
        """Destroy every popup in ``namespace`` (queued like any destroy) and drop it."""
        self.for_each_in_namespace(namespace, lambda popup: popup.destroy())
        self._namespaces.pop(namespace, None)
        logger.info(f"[REGISTRY] Destroyed namespace {namespace!r}")

    def clear(self) -> None:
        self._namespaces.clear()
