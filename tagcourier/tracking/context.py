"""Global context store merged into every outgoing event."""

import logging
import threading
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


class ContextStore:
    """Owns the global key/value context shared by all events.

    Updates are copy-on-write: the stored mapping is never mutated in place,
    only replaced under the lock, so readers always see a complete merge.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._lock = threading.RLock()
        self._context: Dict[str, Any] = dict(initial or {})

    def set_context(self, partial: Optional[Mapping[str, Any]] = None) -> None:
        """Shallow-merge partial into the stored context.

        Keys in partial overwrite same-named keys; nested values are replaced
        wholesale, never deep-merged.

        Args:
            partial: Context values to merge (defaults to empty)
        """
        partial = dict(partial or {})
        with self._lock:
            self._context = {**self._context, **partial}
        logger.debug(f"Context updated with keys: {sorted(partial)}")

    def clear_context(self) -> None:
        """Reset the stored context to an empty mapping."""
        with self._lock:
            self._context = {}

    def get_context(self) -> Dict[str, Any]:
        """Return a snapshot of the current context."""
        with self._lock:
            return dict(self._context)

    def __len__(self) -> int:
        with self._lock:
            return len(self._context)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._context
