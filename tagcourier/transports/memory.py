"""In-memory transport that records delivered events."""

import threading
from typing import Any, Dict, List, Optional

from ..tracking.config import TrackingConfig
from ..tracking.models import PAGE_VIEW_EVENT, TrackingEvent
from .base import BaseTransport, register_transport


@register_transport("memory")
class RecordingTransport(BaseTransport):
    """Keeps every delivered event in memory, for tests and local debugging."""

    def __init__(self, config: Optional[TrackingConfig] = None):
        super().__init__(config or TrackingConfig())
        self._lock = threading.Lock()
        self._events: List[TrackingEvent] = []

    def page(self, properties: Dict[str, Any]) -> None:
        self._record(PAGE_VIEW_EVENT, properties)

    def track(self, event_name: str, properties: Dict[str, Any]) -> None:
        self._record(event_name, properties)

    def _record(self, name: str, properties: Dict[str, Any]) -> None:
        event = TrackingEvent(name=name, properties=dict(properties))
        with self._lock:
            self._events.append(event)

    @property
    def events(self) -> List[TrackingEvent]:
        with self._lock:
            return list(self._events)

    @property
    def last_event(self) -> Optional[TrackingEvent]:
        with self._lock:
            return self._events[-1] if self._events else None

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
