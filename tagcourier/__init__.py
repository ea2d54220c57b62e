"""Tag Courier: client-side analytics event tracking.

Consent-gated, context-enriched and sanitized event tracking with pluggable
transports.
"""

from .client import (
    AnalyticsClient,
    NoopAnalyticsClient,
    create_analytics_client,
    get_default_client,
    reset_default_client,
    default_consent,
    default_context,
    set_consent,
    get_consent,
    enable_analytics,
    disable_analytics,
    set_context,
    clear_context,
    get_context,
    page,
    track,
    track_search,
    track_item_opened,
)

__all__ = [
    # Client
    'AnalyticsClient',
    'NoopAnalyticsClient',
    'create_analytics_client',
    'get_default_client',
    'reset_default_client',

    # Process-wide state
    'default_consent',
    'default_context',
    'set_consent',
    'get_consent',
    'enable_analytics',
    'disable_analytics',
    'set_context',
    'clear_context',
    'get_context',

    # Tracking on the default client
    'page',
    'track',
    'track_search',
    'track_item_opened',
]

__version__ = "0.1.0"
