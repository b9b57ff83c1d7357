"""Per-thread cache of lazily built default instances."""

from __future__ import annotations

import threading
from typing import Callable, Dict, Generic, Hashable, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar("T")


def current_context() -> Hashable:
    return threading.get_ident()


def _close_all(instances: Iterable[object]) -> None:
    for instance in instances:
        close = getattr(instance, "close", None)
        if callable(close):
            close()


class InstanceCache(Generic[T]):
    """Holds one instance per execution context.

    Each context builds its instance at most once through ``factory``; the
    lock serializes construction, eviction and ``reset``. Entries remember the
    thread that built them and are closed and dropped once that thread has
    exited, so a thread reusing a dead thread's identifier gets a fresh
    instance.
    """

    def __init__(
        self,
        factory: Callable[[], T],
        *,
        context: Callable[[], Hashable] = current_context,
    ) -> None:
        self.factory = factory
        self.context = context
        self._instances: Dict[Hashable, Tuple[threading.Thread, T]] = {}
        self._lock = threading.Lock()

    def get(self) -> T:
        key = self.context()
        entry = self._instances.get(key)
        if entry is not None and entry[0].is_alive():
            return entry[1]
        with self._lock:
            stale = self._evict_dead()
            entry = self._instances.get(key)
            if entry is None:
                entry = (threading.current_thread(), self.factory())
                self._instances[key] = entry
        _close_all(stale)
        return entry[1]

    def peek(self) -> Optional[T]:
        entry = self._instances.get(self.context())
        if entry is None or not entry[0].is_alive():
            return None
        return entry[1]

    def prune(self) -> int:
        """Close and drop the instances of threads that have exited."""

        with self._lock:
            stale = self._evict_dead()
        _close_all(stale)
        return len(stale)

    def reset(self) -> None:
        """Forget every cached instance, closing those that support it."""

        with self._lock:
            instances = [instance for _, instance in self._instances.values()]
            self._instances.clear()
        _close_all(instances)

    def _evict_dead(self) -> List[T]:
        dead = [key for key, (owner, _) in self._instances.items() if not owner.is_alive()]
        return [self._instances.pop(key)[1] for key in dead]

    def __len__(self) -> int:
        return len(self._instances)


__all__ = ["InstanceCache", "current_context"]
