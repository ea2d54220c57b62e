"""Consent gate controlling whether events may leave the process."""

import logging
import threading
from typing import Any, Mapping, Union

from .models import ConsentState

logger = logging.getLogger(__name__)


ConsentInput = Union[ConsentState, Mapping[str, Any], bool, None]


class ConsentGate:
    """Holds the current consent state.

    The gate is read at call time by the safe-invocation pipeline, so a change
    takes effect immediately for every tracking function already bound to it.
    """

    def __init__(self, analytics: bool = True):
        """Initialize consent gate.

        Args:
            analytics: Initial analytics consent
        """
        self._lock = threading.RLock()
        self._state = ConsentState(analytics=analytics)
        self._explicit = False

    def set_consent(self, state: ConsentInput = None) -> None:
        """Replace the consent state wholesale.

        Absent or falsy state resolves to disabled instead of raising.

        Args:
            state: ConsentState, mapping like {"analytics": True}, bool, or None
        """
        resolved = self._resolve(state)
        with self._lock:
            self._state = resolved
            self._explicit = True
        logger.info(f"Analytics consent set to {resolved.analytics}")

    def get_consent(self) -> ConsentState:
        """Return a snapshot of the current consent state."""
        with self._lock:
            return self._state.model_copy()

    def enable(self) -> None:
        with self._lock:
            self._state.analytics = True
            self._explicit = True

    def disable(self) -> None:
        with self._lock:
            self._state.analytics = False
            self._explicit = True

    def apply_default(self, analytics: bool) -> bool:
        """Apply a configured default unless consent was already chosen.

        Args:
            analytics: Configured initial analytics consent

        Returns:
            True if the default was applied
        """
        with self._lock:
            if self._explicit:
                return False
            self._state = ConsentState(analytics=analytics)
        logger.debug(f"Analytics consent defaulted to {analytics}")
        return True

    def reset(self, analytics: bool = True) -> None:
        """Forget any explicit choice and restore the initial state."""
        with self._lock:
            self._state = ConsentState(analytics=analytics)
            self._explicit = False

    @property
    def is_explicit(self) -> bool:
        with self._lock:
            return self._explicit

    @property
    def is_enabled(self) -> bool:
        with self._lock:
            return self._state.analytics

    @staticmethod
    def _resolve(state: ConsentInput) -> ConsentState:
        if not state:
            return ConsentState(analytics=False)
        if isinstance(state, ConsentState):
            return state.model_copy()
        if isinstance(state, bool):
            return ConsentState(analytics=state)
        if isinstance(state, Mapping):
            return ConsentState(analytics=bool(state.get("analytics", False)))

        logger.debug(f"Unrecognized consent value {state!r}, reading 'analytics' attribute")
        return ConsentState(analytics=bool(getattr(state, "analytics", False)))
