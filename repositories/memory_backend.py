"""
In-memory backend - nothing touches disk. Used by tests and one-off CLI runs.
"""

import threading

from models import StoredCapture
from .base import Repository, CounterRepository, CaptureRepository


class MemoryCounterRepository(CounterRepository):

    def __init__(self, initial: dict = None):
        self._values = dict(initial or {})
        self._lock = threading.Lock()

    def peek(self, name: str, floor: int = 0) -> int:
        return max(int(self._values.get(name, floor)), floor)

    def next_value(self, name: str, floor: int = 0) -> int:
        with self._lock:
            value = self.peek(name, floor)
            self._values[name] = value + 1
        return value


class MemoryCaptureRepository(CaptureRepository):

    def __init__(self):
        self._audits: dict[str, dict[str, StoredCapture]] = {}

    def get_for_audit(self, audit_id: str) -> dict[str, StoredCapture]:
        return dict(self._audits.get(audit_id, {}))

    def save_for_audit(self, audit_id: str, captures: dict[str, StoredCapture]) -> None:
        self._audits[audit_id] = dict(captures)


class MemoryRepository(Repository):

    def __init__(self, counters: dict = None):
        self._counters = MemoryCounterRepository(counters)
        self._captures = MemoryCaptureRepository()

    @property
    def counters(self) -> CounterRepository:
        return self._counters

    @property
    def captures(self) -> CaptureRepository:
        return self._captures
