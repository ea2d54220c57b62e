"""Event-processing pipeline for Tag Courier.

This package decides, for every analytics event, whether it may leave the
process, which shared context is merged into it and which fields are stripped
before it is handed to a transport.

Key Components:
- ConsentGate: Live analytics consent read on every call
- ContextStore: Global context merged into every event
- Sanitizer: Sensitive field deny-list
- Enricher: Context merge over sanitized properties
- SafeInvoker: Consent gating and failure isolation middleware pipeline
- TrackingConfig: Pydantic configuration with YAML and environment loading
"""

from .models import (
    ConsentState,
    TrackingEvent,
    PAGE_VIEW_EVENT,
    SEARCH_EVENT,
    ITEM_OPENED_EVENT,
    DEFAULT_SENSITIVE_FIELDS
)

from .config import (
    TrackingConfig,
    PlausibleConfig,
    TrackingConfigManager,
    load_tracking_config
)

from .consent import ConsentGate
from .context import ContextStore
from .sanitizer import Sanitizer, sanitize
from .enrichment import Enricher
from .diagnostics import DiagnosticReporter, LoggingReporter, CallbackReporter
from .pipeline import SafeInvoker, compose, consent_gate, failure_isolation
from .errors import TrackingError, TrackingConfigurationError, TransportError

__all__ = [
    # State
    "ConsentGate",
    "ContextStore",

    # Pipeline
    "Sanitizer",
    "sanitize",
    "Enricher",
    "SafeInvoker",
    "compose",
    "consent_gate",
    "failure_isolation",

    # Diagnostics
    "DiagnosticReporter",
    "LoggingReporter",
    "CallbackReporter",

    # Data models
    "ConsentState",
    "TrackingEvent",
    "PAGE_VIEW_EVENT",
    "SEARCH_EVENT",
    "ITEM_OPENED_EVENT",
    "DEFAULT_SENSITIVE_FIELDS",

    # Configuration
    "TrackingConfig",
    "PlausibleConfig",
    "TrackingConfigManager",
    "load_tracking_config",

    # Errors
    "TrackingError",
    "TrackingConfigurationError",
    "TransportError"
]
