"""Sensitive field removal for outgoing event properties.

The sanitizer works on a deny-list of top-level property names. Any field that
is not on the list is assumed safe, so callers must not invent new sensitive
field names outside the configured set.
"""

from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional

from .models import DEFAULT_SENSITIVE_FIELDS


class Sanitizer:
    """Strips deny-listed keys from event property bags."""

    def __init__(self, sensitive_fields: Optional[Iterable[str]] = None):
        """Initialize sanitizer.

        Args:
            sensitive_fields: Property names to remove. Defaults to
                DEFAULT_SENSITIVE_FIELDS.
        """
        if sensitive_fields is None:
            sensitive_fields = DEFAULT_SENSITIVE_FIELDS
        self._sensitive_fields: FrozenSet[str] = frozenset(sensitive_fields)

    @property
    def sensitive_fields(self) -> FrozenSet[str]:
        return self._sensitive_fields

    def sanitize(self, properties: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Return a copy of properties without sensitive fields.

        Args:
            properties: Caller-supplied event properties (not mutated)

        Returns:
            New dictionary with deny-listed keys removed
        """
        if not properties:
            return {}

        return {
            key: value
            for key, value in properties.items()
            if key not in self._sensitive_fields
        }

    def is_sensitive(self, field_name: str) -> bool:
        return field_name in self._sensitive_fields

    def __call__(self, properties: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        return self.sanitize(properties)


_default_sanitizer = Sanitizer()


def sanitize(properties: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Sanitize properties with the default deny-list."""
    return _default_sanitizer.sanitize(properties)
