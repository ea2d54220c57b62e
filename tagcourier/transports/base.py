"""Base classes and registry for event transports.

A transport delivers already-enriched events to a collector. The pipeline is
agnostic to how that happens; it only requires ``page(properties)`` and
``track(event_name, properties)``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple, runtime_checkable

from ..tracking.config import TrackingConfig
from ..tracking.errors import TransportError
from ..tracking.models import PAGE_VIEW_EVENT

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Minimal interface the pipeline needs from a transport."""

    def page(self, properties: Dict[str, Any]) -> Any:
        ...

    def track(self, event_name: str, properties: Dict[str, Any]) -> Any:
        ...


class BaseTransport(ABC):
    """Abstract base class for registered transports."""

    transport_type: str = "base"

    def __init__(self, config: TrackingConfig):
        self.config = config

    def page(self, properties: Dict[str, Any]) -> Any:
        """Deliver a page view."""
        return self.track(PAGE_VIEW_EVENT, properties)

    @abstractmethod
    def track(self, event_name: str, properties: Dict[str, Any]) -> Any:
        """Deliver a named event."""
        pass

    def close(self) -> None:
        """Release transport resources."""
        pass


class TransportRegistry:
    """Registry for managing transport types."""

    def __init__(self):
        self._transports: Dict[str, type] = {}

    def register(self, transport_type: str, transport_class: type) -> None:
        """Register a transport class.

        Args:
            transport_type: Type identifier for the transport
            transport_class: Transport class to register
        """
        if not issubclass(transport_class, BaseTransport):
            raise ValueError(f"Transport class must inherit from BaseTransport: {transport_class}")

        transport_class.transport_type = transport_type
        self._transports[transport_type] = transport_class

    def get_transport_class(self, transport_type: str) -> Optional[type]:
        return self._transports.get(transport_type)

    def create_transport(self, transport_type: str, config: TrackingConfig) -> BaseTransport:
        """Create transport instance.

        Args:
            transport_type: Type of transport to create
            config: Tracking configuration

        Returns:
            Transport instance

        Raises:
            ValueError: If transport type is not registered
        """
        transport_class = self.get_transport_class(transport_type)
        if not transport_class:
            raise ValueError(f"Unknown transport type: {transport_type}")

        return transport_class(config)

    def list_transport_types(self) -> List[str]:
        """List all registered transport types."""
        return list(self._transports.keys())


# Global transport registry
transport_registry = TransportRegistry()


def register_transport(transport_type: str):
    """Decorator to register a transport class.

    Args:
        transport_type: Type identifier for the transport
    """
    def decorator(transport_class: type) -> type:
        transport_registry.register(transport_type, transport_class)
        return transport_class

    return decorator


def build_transports(
    config: TrackingConfig,
    plugins: Optional[Iterable[Any]] = None,
    registry: Optional[TransportRegistry] = None
) -> List[Any]:
    """Create configured transports followed by extra plugin instances.

    Unknown transport names are logged and skipped.
    """
    registry = registry or transport_registry
    transports: List[Any] = []

    for transport_type in config.transports:
        try:
            transports.append(registry.create_transport(transport_type, config))
        except ValueError as e:
            logger.warning(f"Skipping transport '{transport_type}': {e}")

    for plugin in plugins or []:
        if not isinstance(plugin, Transport):
            logger.warning(f"Skipping plugin without page()/track(): {plugin!r}")
            continue
        transports.append(plugin)

    return transports


def _transport_name(transport: Any) -> str:
    name = getattr(transport, "transport_type", None)
    return name if isinstance(name, str) else type(transport).__name__


class AnalyticsCore:
    """Fans each event out to every transport in order.

    Every transport is attempted even if an earlier one fails; failures are
    raised together afterwards as a TransportError.
    """

    def __init__(self, transports: Iterable[Any]):
        self.transports: List[Any] = list(transports)

    def page(self, properties: Dict[str, Any]) -> None:
        self._dispatch(PAGE_VIEW_EVENT, lambda t: t.page(properties))

    def track(self, event_name: str, properties: Dict[str, Any]) -> None:
        self._dispatch(event_name, lambda t: t.track(event_name, properties))

    def _dispatch(self, event_name: str, send) -> None:
        failures: List[Tuple[str, Exception]] = []

        for transport in self.transports:
            try:
                send(transport)
            except Exception as e:
                failures.append((_transport_name(transport), e))

        if failures:
            raise TransportError(event_name, failures)

    def close(self) -> None:
        for transport in self.transports:
            close = getattr(transport, "close", None)
            if close is None:
                continue
            try:
                close()
            except Exception as e:
                logger.warning(f"Failed to close transport {_transport_name(transport)}: {e}")
