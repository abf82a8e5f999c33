# backend/inventory_service/inventory/notifications.py

import logging
import threading
from typing import Callable, List, Tuple

from .router import Address, Collection, Item

logger = logging.getLogger(__name__)

Observer = Callable[[Address], None]


class ChangeNotifier:
    """
    Delivers change notifications to observers registered per address.

    A change on the collection reaches every observer of the table. A change
    on one item reaches that item's observers and the collection observers
    that asked for descendant changes. Observers are called synchronously;
    an observer that raises is logged and skipped.
    """

    def __init__(self):
        self._observers: List[Tuple[Address, Observer, bool]] = []
        self._lock = threading.Lock()

    def register(self, address: Address, callback: Observer, notify_for_descendants: bool = True):
        with self._lock:
            self._observers.append((address, callback, notify_for_descendants))

    def unregister(self, callback: Observer) -> int:
        with self._lock:
            before = len(self._observers)
            self._observers = [o for o in self._observers if o[1] is not callback]
            return before - len(self._observers)

    @staticmethod
    def _reaches(changed: Address, watched: Address, descendants: bool) -> bool:
        if changed == watched:
            return True
        if isinstance(changed, Collection):
            # Every item lives under its collection
            return isinstance(watched, Item) and watched.collection == changed
        return descendants and isinstance(watched, Collection) and changed.collection == watched

    def notify(self, address: Address) -> int:
        with self._lock:
            targets = [
                callback
                for watched, callback, descendants in self._observers
                if self._reaches(address, watched, descendants)
            ]

        for callback in targets:
            try:
                callback(address)
            except Exception as e:
                logger.error(
                    f"Inventory Provider: Observer {callback!r} failed for {address}: {e}",
                    exc_info=True,
                )
        return len(targets)
