"""
In-process telemetry

Download activity is recorded here so callers (and tests) can see what a
manager did without parsing logs. Nothing leaves the process.
"""
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, Iterator, List, Optional

from .constants import TELEMETRY_MAX_RECORDS


@dataclass
class Metric:
    name: str
    value: float
    tags: Dict[str, str] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)


@dataclass
class Event:
    name: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)


class Telemetry:
    """Bounded collector of metrics and events; the oldest records are dropped first"""

    def __init__(self, max_records: int = TELEMETRY_MAX_RECORDS):
        self._metrics: Deque[Metric] = deque(maxlen=max_records)
        self._events: Deque[Event] = deque(maxlen=max_records)

    def record_metric(self, name: str, value: float, tags: Optional[Dict[str, str]] = None) -> None:
        self._metrics.append(Metric(name, value, dict(tags or {})))

    def record_event(self, name: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._events.append(Event(name, dict(metadata or {})))

    @contextmanager
    def timed(self, name: str, tags: Optional[Dict[str, str]] = None) -> Iterator[None]:
        """Record the wall time of the block in seconds, even if it raises"""
        started = time.monotonic()
        try:
            yield
        finally:
            self.record_metric(name, time.monotonic() - started, tags)

    def get_metrics(self, name: Optional[str] = None) -> List[Metric]:
        return [m for m in self._metrics if name is None or m.name == name]

    def get_events(self, name: Optional[str] = None) -> List[Event]:
        return [e for e in self._events if name is None or e.name == name]

    def total(self, name: str) -> float:
        """Sum of every recorded value of a metric"""
        return sum(m.value for m in self.get_metrics(name))

    def clear(self) -> None:
        self._metrics.clear()
        self._events.clear()


_telemetry = Telemetry()


def get_telemetry() -> Telemetry:
    """Process-wide collector"""
    return _telemetry
