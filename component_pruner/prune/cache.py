"""Per-component cache of owned object hashes."""

from __future__ import annotations

import threading
from typing import Dict, FrozenSet, Iterable, Set


class ObjectCache:
    """Tracks which object hashes each component owns.

    Writes are serialized with a lock so the cache stays consistent if
    deletions are ever issued from several threads.
    """

    def __init__(self) -> None:
        self._objects: Dict[str, Set[str]] = {}
        self._lock = threading.Lock()

    def add(self, component: str, hashes: Iterable[str]) -> None:
        with self._lock:
            self._objects.setdefault(component, set()).update(hashes)

    def remove(self, component: str, object_hash: str) -> None:
        with self._lock:
            owned = self._objects.get(component)
            if owned is not None:
                owned.discard(object_hash)

    def objects(self, component: str) -> FrozenSet[str]:
        with self._lock:
            return frozenset(self._objects.get(component, ()))

    def __contains__(self, item: object) -> bool:
        # (component, hash) pairs
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        component, object_hash = item
        with self._lock:
            return object_hash in self._objects.get(component, ())
