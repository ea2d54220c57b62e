"""Diagnostic reporting for non-fatal tracking failures.

Reporters receive ``(tag, error)`` pairs from the safe-invocation boundary.
They must never raise: a reporter failure is itself swallowed so that analytics
can never break the host application.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)


class DiagnosticReporter(Protocol):
    """Logging collaborator for tracking failures."""

    def report(self, tag: str, error: BaseException) -> None:
        ...


@dataclass
class DiagnosticEntry:
    """A single reported tracking failure."""
    tag: str
    error_type: str
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'tag': self.tag,
            'error_type': self.error_type,
            'message': self.message,
            'timestamp': self.timestamp.isoformat()
        }


class LoggingReporter:
    """Reports tracking failures through the standard logging system.

    Failures are logged at WARNING outside production and at DEBUG in
    production. The most recent failures are kept in a bounded history for
    inspection.
    """

    def __init__(
        self,
        environment: str = "production",
        max_history: int = 100,
        log: Optional[logging.Logger] = None
    ):
        """Initialize reporter.

        Args:
            environment: Environment name; "production" quiets failure logs
            max_history: Maximum number of entries kept in history
            log: Logger to write to (defaults to this module's logger)
        """
        self.environment = environment
        self.log = log or logger
        self._lock = threading.Lock()
        self._history: Deque[DiagnosticEntry] = deque(maxlen=max_history)
        self._counts: Dict[str, int] = {}

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def report(self, tag: str, error: BaseException) -> None:
        """Record and log a tracking failure. Never raises."""
        try:
            entry = DiagnosticEntry(
                tag=tag,
                error_type=type(error).__name__,
                message=str(error)
            )
            with self._lock:
                self._history.append(entry)
                key = f"{tag}:{entry.error_type}"
                self._counts[key] = self._counts.get(key, 0) + 1

            level = logging.DEBUG if self.is_production else logging.WARNING
            self.log.log(level, f"{tag} {entry.error_type}: {entry.message}", exc_info=error)
        except Exception:  # noqa: BLE001
            pass

    def __call__(self, tag: str, error: BaseException) -> None:
        self.report(tag, error)

    @property
    def history(self) -> List[DiagnosticEntry]:
        with self._lock:
            return list(self._history)

    def get_statistics(self) -> Dict[str, Any]:
        """Get failure statistics.

        Returns:
            Dictionary with total failures and counts per tag and error type
        """
        with self._lock:
            return {
                "total_failures": sum(self._counts.values()),
                "failure_counts": dict(self._counts),
                "recent": [entry.to_dict() for entry in self._history]
            }

    def clear(self) -> None:
        with self._lock:
            self._history.clear()
            self._counts.clear()


class CallbackReporter:
    """Adapts a plain ``(tag, error)`` callable into a reporter that never raises."""

    def __init__(self, callback: Callable[[str, BaseException], Any]):
        self.callback = callback

    def report(self, tag: str, error: BaseException) -> None:
        try:
            self.callback(tag, error)
        except Exception as callback_error:  # noqa: BLE001
            logger.debug(f"Diagnostic callback failed: {callback_error}")


def as_reporter(reporter: Any) -> DiagnosticReporter:
    """Coerce a reporter object or ``(tag, error)`` callable into a reporter."""
    if reporter is None:
        return LoggingReporter()
    if hasattr(reporter, "report"):
        return reporter
    if callable(reporter):
        return CallbackReporter(reporter)
    raise TypeError(f"Reporter must define report() or be callable: {reporter!r}")
