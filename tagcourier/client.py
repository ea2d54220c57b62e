"""Analytics client facade.

The client exposes four tracking operations that normalize their arguments
into a canonical event and route it through enrichment and the safe-invocation
pipeline to the configured transports:

    page(data)                            -> "pageview"
    track(name, props)                    -> name
    track_search(feature, term)           -> "Search"
    track_item_opened(feature, id, name)  -> "ItemOpened"

None of them ever raise. When tracking is disabled by configuration, or no
transport is available, ``create_analytics_client`` returns a
``NoopAnalyticsClient`` with the same callables, so host code never has to
branch on whether tracking is active.

Example Usage:
    from tagcourier import create_analytics_client, set_context

    analytics = create_analytics_client({"enabled": True, "site_domain": "example.com"})
    set_context({"user_id": "u1"})
    analytics.track_item_opened("product", "prod_001", "MacBook Pro")
"""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .transports.base import AnalyticsCore, build_transports
from .tracking.config import TrackingConfig, TrackingConfigManager
from .tracking.consent import ConsentGate, ConsentInput
from .tracking.context import ContextStore
from .tracking.diagnostics import LoggingReporter, as_reporter
from .tracking.enrichment import Enricher
from .tracking.errors import TrackingConfigurationError
from .tracking.models import (
    ConsentState,
    ITEM_OPENED_EVENT,
    SEARCH_EVENT,
)
from .tracking.pipeline import Middleware, SafeInvoker
from .tracking.sanitizer import Sanitizer

logger = logging.getLogger(__name__)


class AnalyticsClient:
    """Tracking client bound to a consent gate, context store and transports."""

    enabled = True

    def __init__(
        self,
        core: AnalyticsCore,
        config: TrackingConfig,
        consent: ConsentGate,
        context: ContextStore,
        reporter: Any = None,
        middlewares: Optional[Iterable[Middleware]] = None
    ):
        """Initialize analytics client.

        Args:
            core: Transport fan-out dispatcher
            config: Tracking configuration
            consent: Consent gate read on every call
            context: Global context store merged into every event
            reporter: Diagnostic reporter or ``(tag, error)`` callable
            middlewares: Extra middlewares run inside the failure boundary
        """
        self.core = core
        self.config = config
        self.consent = consent
        self.context = context
        self.reporter = as_reporter(reporter) if reporter is not None else LoggingReporter(config.environment)
        self.enricher = Enricher(context, Sanitizer(config.sensitive_fields))
        self.invoker = SafeInvoker(consent, self.reporter, middlewares)

        self._page = self.invoker.safe(self._send_page)
        self._track = self.invoker.safe(self._send_track)
        self._track_search = self.invoker.safe(self._send_search)
        self._track_item_opened = self.invoker.safe(self._send_item_opened)

    def page(self, data: Optional[Mapping[str, Any]] = None) -> None:
        """Track a page view."""
        self._page(data)

    def track(self, name: str, props: Optional[Mapping[str, Any]] = None) -> None:
        """Track a custom event."""
        self._track(name, props)

    def track_search(self, feature: str, term: Any) -> None:
        """Track a search, truncating the term label."""
        self._track_search(feature, term)

    def track_item_opened(self, feature: str, id: Union[str, int], name: Any) -> None:
        """Track an opened item, truncating the item name label."""
        self._track_item_opened(feature, id, name)

    trackSearch = track_search
    trackItemOpened = track_item_opened

    def _send_page(self, data: Optional[Mapping[str, Any]]) -> None:
        self.core.page(self.enricher.enrich(data))

    def _send_track(self, name: str, props: Optional[Mapping[str, Any]]) -> None:
        self.core.track(name, self.enricher.enrich(props))

    def _send_search(self, feature: str, term: Any) -> None:
        self._send_track(SEARCH_EVENT, {
            "feature": feature,
            "label": str(term)[:self.config.search_label_limit]
        })

    def _send_item_opened(self, feature: str, id: Union[str, int], name: Any) -> None:
        self._send_track(ITEM_OPENED_EVENT, {
            "feature": feature,
            "id": str(id),
            "label": str(name)[:self.config.item_label_limit]
        })

    def close(self) -> None:
        """Close every transport."""
        self.core.close()

    def __enter__(self) -> "AnalyticsClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


class NoopAnalyticsClient:
    """Client returned when tracking is disabled; every operation does nothing."""

    enabled = False

    def page(self, data: Optional[Mapping[str, Any]] = None) -> None:
        return None

    def track(self, name: str, props: Optional[Mapping[str, Any]] = None) -> None:
        return None

    def track_search(self, feature: str, term: Any) -> None:
        return None

    def track_item_opened(self, feature: str, id: Union[str, int], name: Any) -> None:
        return None

    trackSearch = track_search
    trackItemOpened = track_item_opened

    def close(self) -> None:
        return None

    def __enter__(self) -> "NoopAnalyticsClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        return None


# Process-wide default state shared by clients built without explicit state
default_consent = ConsentGate(analytics=True)
default_context = ContextStore()


def create_analytics_client(
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    config: Optional[TrackingConfig] = None,
    config_path: Union[str, Path, None] = None,
    consent: Optional[ConsentGate] = None,
    context: Optional[ContextStore] = None,
    shared_state: bool = True,
    reporter: Any = None,
    middlewares: Optional[Iterable[Middleware]] = None
) -> Union[AnalyticsClient, NoopAnalyticsClient]:
    """Create an analytics client.

    Args:
        overrides: Configuration overrides (``enabled``, ``site_domain``,
            ``api_host``, ``plugins`` and any other TrackingConfig field);
            values set to None fall back to file/environment configuration
        config: Fully built configuration; skips loading when given. Non-None
            overrides are still applied on top of it
        config_path: YAML configuration file
        consent: Consent gate to bind; defaults to the process-wide gate
        context: Context store to bind; defaults to the process-wide store
        shared_state: When False, missing consent/context are created fresh
            for this client instead of using the process-wide defaults. The
            process-wide gate takes the configured ``default_consent`` until
            consent is set, enabled or disabled explicitly
        reporter: Diagnostic reporter or ``(tag, error)`` callable
        middlewares: Extra middlewares run inside the failure boundary

    Returns:
        AnalyticsClient, or NoopAnalyticsClient when tracking is disabled or
        no transport is available

    Raises:
        TrackingConfigurationError: If configuration is invalid
    """
    overrides = dict(overrides or {})
    plugins: List[Any] = list(overrides.pop("plugins", None) or [])

    manager = TrackingConfigManager(config_path)
    if config is None:
        config = manager.load_config(overrides=overrides)
    else:
        config = manager.apply_overrides(config, overrides)

    if not config.enabled:
        logger.debug("Tracking disabled by configuration, using no-op client")
        return NoopAnalyticsClient()

    transports = build_transports(config, plugins)
    if not transports:
        logger.info("No transports available to dispatch events, using no-op client")
        return NoopAnalyticsClient()

    if consent is None:
        if shared_state:
            consent = default_consent
            # The configured default holds until the host chooses consent
            consent.apply_default(config.default_consent)
        else:
            consent = ConsentGate(config.default_consent)
    if context is None:
        context = default_context if shared_state else ContextStore()

    logger.info(
        f"Analytics client created for {config.site_domain} via {config.api_host} "
        f"with {len(transports)} transport(s)"
    )

    return AnalyticsClient(
        core=AnalyticsCore(transports),
        config=config,
        consent=consent,
        context=context,
        reporter=reporter,
        middlewares=middlewares
    )


_default_client: Optional[Union[AnalyticsClient, NoopAnalyticsClient]] = None
_default_client_lock = threading.Lock()


def get_default_client() -> Union[AnalyticsClient, NoopAnalyticsClient]:
    """Get the process-wide client, creating it from configuration on first use.

    Invalid configuration degrades to a no-op client instead of raising, so
    the module-level tracking functions never fail.
    """
    global _default_client
    with _default_client_lock:
        if _default_client is None:
            try:
                _default_client = create_analytics_client()
            except TrackingConfigurationError as e:
                logger.warning(f"Analytics disabled, invalid configuration: {e}")
                _default_client = NoopAnalyticsClient()
        return _default_client


def reset_default_client() -> None:
    """Close and forget the process-wide client."""
    global _default_client
    with _default_client_lock:
        client, _default_client = _default_client, None
    if client is not None:
        client.close()


# Module-level API bound to the process-wide state

def set_consent(state: ConsentInput = None) -> None:
    default_consent.set_consent(state)


def get_consent() -> ConsentState:
    return default_consent.get_consent()


def enable_analytics() -> None:
    default_consent.enable()


def disable_analytics() -> None:
    default_consent.disable()


def set_context(partial: Optional[Mapping[str, Any]] = None) -> None:
    default_context.set_context(partial)


def clear_context() -> None:
    default_context.clear_context()


def get_context() -> Dict[str, Any]:
    return default_context.get_context()


def page(data: Optional[Mapping[str, Any]] = None) -> None:
    get_default_client().page(data)


def track(name: str, props: Optional[Mapping[str, Any]] = None) -> None:
    get_default_client().track(name, props)


def track_search(feature: str, term: Any) -> None:
    get_default_client().track_search(feature, term)


def track_item_opened(feature: str, id: Union[str, int], name: Any) -> None:
    get_default_client().track_item_opened(feature, id, name)
