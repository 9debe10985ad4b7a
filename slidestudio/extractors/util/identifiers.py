import threading
import time
import uuid
from typing import Callable

IdFactory = Callable[[], str]
Clock = Callable[[], int]


def random_id() -> str:
    return str(uuid.uuid4())


class MonotonicTimestamp:
    """
    Millisecond wall-clock timestamps that never repeat or go backwards.

    Decks uploaded in the same millisecond still get distinct, ordered
    ``uploaded_at`` values.
    """

    def __init__(self, source: Callable[[], float] = time.time):
        self._source = source
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            now = int(self._source() * 1000)
            self._last = max(now, self._last + 1)
            return self._last


class SequentialIds:
    """Deterministic ``{prefix}-{n}`` identifiers, mostly useful in tests."""

    def __init__(self, prefix: str = "id"):
        self._prefix = prefix
        self._counter = 0

    def __call__(self) -> str:
        self._counter += 1
        return f"{self._prefix}-{self._counter}"


upload_clock = MonotonicTimestamp()
