"""Event transports for Tag Courier.

Importing this package registers the built-in transports:
- plausible: Plausible-compatible HTTP collector (httpx)
- memory: In-memory recorder for tests and local debugging
"""

from .base import (
    Transport,
    BaseTransport,
    TransportRegistry,
    AnalyticsCore,
    transport_registry,
    register_transport,
    build_transports
)
from .memory import RecordingTransport
from .plausible import PlausibleTransport

__all__ = [
    'Transport',
    'BaseTransport',
    'TransportRegistry',
    'AnalyticsCore',
    'transport_registry',
    'register_transport',
    'build_transports',
    'RecordingTransport',
    'PlausibleTransport',
]
