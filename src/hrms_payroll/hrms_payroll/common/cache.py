from __future__ import annotations

import threading
import time
from typing import Any, Callable, Hashable

from ..core.constants import DEFAULT_CACHE_TTL_SECONDS

_MISSING = object()


class EntityCache:
    """Small TTL cache partitioned by entity namespace.

    Each service owns the namespace it reads through and invalidates it on its
    own writes; nothing is shared implicitly between instances.
    """

    def __init__(self, *, ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._entries: dict[str, dict[Hashable, tuple[float, Any]]] = {}
        self._lock = threading.Lock()

    def get(self, namespace: str, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(namespace, {}).get(key)
            if entry is None:
                return default
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[namespace][key]
                return default
            return value

    def set(self, namespace: str, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries.setdefault(namespace, {})[key] = (self._clock() + self._ttl, value)

    def get_or_load(self, namespace: str, key: Hashable, loader: Callable[[], Any]) -> Any:
        value = self.get(namespace, key, _MISSING)
        if value is not _MISSING:
            return value
        value = loader()
        self.set(namespace, key, value)
        return value

    def invalidate(self, namespace: str, key: Hashable = _MISSING) -> None:
        """Drop one key, or the whole namespace when no key is given."""
        with self._lock:
            if key is _MISSING:
                self._entries.pop(namespace, None)
            else:
                self._entries.get(namespace, {}).pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
