from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

Listener = Callable[[str, Any], None]
Predicate = Callable[[Any], bool]


@dataclass(frozen=True)
class _Subscription:
    listener: Listener
    where: Optional[Predicate]


class ChangeFeed:
    """Observer registry for document changes, keyed by collection name.

    Services publish after every write; views subscribe for the lifetime of a
    screen and call the returned function to unsubscribe.
    """

    def __init__(self):
        self._subs: dict[str, dict[int, _Subscription]] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def subscribe(self, collection: str, listener: Listener, *, where: Optional[Predicate] = None) -> Callable[[], None]:
        sub_id = next(self._ids)
        with self._lock:
            self._subs.setdefault(collection, {})[sub_id] = _Subscription(listener=listener, where=where)

        def unsubscribe() -> None:
            with self._lock:
                self._subs.get(collection, {}).pop(sub_id, None)

        return unsubscribe

    def publish(self, collection: str, document: Any) -> None:
        with self._lock:
            subs = list(self._subs.get(collection, {}).values())

        for sub in subs:
            try:
                if sub.where is not None and not sub.where(document):
                    continue
                sub.listener(collection, document)
            except Exception:
                logger.exception("Change listener failed for collection %s", collection)

    def listener_count(self, collection: str) -> int:
        with self._lock:
            return len(self._subs.get(collection, {}))
