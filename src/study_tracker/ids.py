"""Monotonic, timestamp-derived id allocation."""
import threading
import time


class IdAllocator:
    """Hands out epoch-millisecond ids that never repeat.

    Two calls inside the same millisecond get consecutive values instead
    of the same one.
    """

    def __init__(self, clock=None):
        self._clock = clock or (lambda: int(time.time() * 1000))
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            value = max(int(self._clock()), self._last + 1)
            self._last = value
        return str(value)


_allocator = IdAllocator()


def new_id() -> str:
    return _allocator.next_id()
