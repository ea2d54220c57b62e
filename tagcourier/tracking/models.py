"""Pydantic models and constants for the event-tracking pipeline.

This module defines the data shapes that flow through the pipeline: the
consent state read by the gate, the canonical event every facade operation
converges to, and the reserved event names and sensitive-field deny-list.
"""

from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field


# Reserved canonical event names
PAGE_VIEW_EVENT = "pageview"
SEARCH_EVENT = "Search"
ITEM_OPENED_EVENT = "ItemOpened"

# Hard character cutoffs applied to generated labels
SEARCH_LABEL_LIMIT = 256
ITEM_LABEL_LIMIT = 128

DEFAULT_SENSITIVE_FIELDS: Tuple[str, ...] = (
    "email",
    "phone",
    "password",
    "ssn",
    "credit_card",
    "sensitive_data",
)


class ConsentState(BaseModel):
    """User consent for analytics collection."""

    analytics: bool = Field(
        default=False,
        description="Whether analytics events may leave the process"
    )

    @property
    def analytics_enabled(self) -> bool:
        return self.analytics


class TrackingEvent(BaseModel):
    """Canonical form of an outgoing analytics event."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Event name sent to transports")
    properties: Dict[str, Any] = Field(
        default_factory=dict,
        description="Enriched and sanitized event properties"
    )

    @property
    def is_page_view(self) -> bool:
        return self.name == PAGE_VIEW_EVENT
