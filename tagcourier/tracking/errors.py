"""Exception types for the event-tracking pipeline.

None of these ever reach host code from a facade operation: transport errors
are absorbed at the safe-invocation boundary, and configuration errors are only
raised while a client is being built.
"""

from typing import List, Tuple


class TrackingError(Exception):
    """Base class for event-tracking errors."""
    pass


class TrackingConfigurationError(TrackingError):
    """Raised when tracking configuration cannot be loaded or validated."""
    pass


class TransportError(TrackingError):
    """One or more transports failed to accept an event."""

    def __init__(self, event_name: str, failures: List[Tuple[str, Exception]]):
        self.event_name = event_name
        self.failures = failures
        names = ", ".join(name for name, _ in failures)
        super().__init__(f"Transport failure for '{event_name}' in: {names}")

    @property
    def errors(self) -> List[Exception]:
        return [error for _, error in self.failures]
