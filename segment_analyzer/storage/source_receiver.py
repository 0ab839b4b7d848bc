"""
Record sinks.
"""

import threading
from abc import ABC, abstractmethod
from typing import Any, List


class SourceReceiver(ABC):
    """Accepts emitted records one at a time, in emission order."""

    @abstractmethod
    def receive(self, record: Any) -> None:
        """Accept one record. Failures propagate to the emitting listener."""


class InMemorySourceReceiver(SourceReceiver):
    """Collects records in arrival order; safe to share between workers."""

    def __init__(self):
        self._lock = threading.Lock()
        self.records: List[Any] = []

    def receive(self, record: Any) -> None:
        with self._lock:
            self.records.append(record)

    def by_scope(self, scope: str) -> List[Any]:
        return [r for r in self.records if r.scope == scope]
