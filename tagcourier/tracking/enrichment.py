"""Property enrichment with global context."""

from typing import Any, Dict, Mapping, Optional

from .context import ContextStore
from .sanitizer import Sanitizer


class Enricher:
    """Builds the final property bag for an event.

    Caller properties are sanitized before they are merged, and the context is
    never sanitized. Context keys take precedence on collision.
    """

    def __init__(self, context_store: ContextStore, sanitizer: Optional[Sanitizer] = None):
        self.context_store = context_store
        self.sanitizer = sanitizer or Sanitizer()

    def enrich(self, properties: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Merge the current context with sanitized caller properties.

        Args:
            properties: Caller-supplied event properties

        Returns:
            New dictionary with context keys first, followed by the remaining
            sanitized caller keys
        """
        sanitized = self.sanitizer.sanitize(properties)
        enriched = self.context_store.get_context()

        for key, value in sanitized.items():
            enriched.setdefault(key, value)

        return enriched

    def __call__(self, properties: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        return self.enrich(properties)
